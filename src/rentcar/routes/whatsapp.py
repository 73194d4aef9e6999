from flask import Blueprint, request, jsonify, current_app

from rentcar.services import handle_webhook, get_chat_history
from rentcar.services.chatbot_service import ChatbotService
from rentcar.services.whatsapp_service import get_fonnte_service

whatsapp_bp = Blueprint("whatsapp", __name__)


@whatsapp_bp.route("/whatsapp-webhook", methods=["POST"])
def whatsapp_webhook():
    """
    Endpoint for Fonnte inbound messages.

    Logs the message, replies with the rental assistant and logs the reply.
    Returns:
        200 with the message, reply and Fonnte response; 400 on invalid data;
        500 when the API keys are not configured.
    """
    fonnte_key = current_app.config.get("FONNTE_API_KEY")
    openai_key = current_app.config.get("OPENAI_API_KEY")
    if not fonnte_key or not openai_key:
        return jsonify({"status": "error", "message": "API keys not set in environment"}), 500

    data = request.get_json(silent=True)
    if data is None and request.form:
        data = request.form.to_dict(flat=True)

    result = handle_webhook(
        data,
        current_app.db,
        get_fonnte_service(fonnte_key),
        ChatbotService(openai_key),
    )
    return jsonify(result), 200 if result["status"] == "success" else 400


@whatsapp_bp.route("/chat-logs/<phone>", methods=["GET"])
def chat_logs(phone):
    result = get_chat_history(current_app.db, phone)
    return jsonify(result), 200 if result["status"] == "success" else 502
