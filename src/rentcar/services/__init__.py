from .payment_service import process_payment, create_payment, get_payments_by_booking, get_payments_by_user
from .registration_service import register_user, load_existing_images
from .webhook_service import handle_webhook, get_chat_history
from .chatbot_service import chatbot_service

__all__ = [
    "process_payment",
    "create_payment",
    "get_payments_by_booking",
    "get_payments_by_user",
    "register_user",
    "load_existing_images",
    "handle_webhook",
    "get_chat_history",
    "chatbot_service",
]
