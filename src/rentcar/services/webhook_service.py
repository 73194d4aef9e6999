import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from dateutil import parser

from rentcar.models.chat import DIRECTION_OUTGOING, WhatsAppMessage
from rentcar.services.database import BackendError

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


def _normalize_timestamp(value: Any) -> str:
    """Fonnte sends epoch seconds; test tools send ISO strings."""
    if value in (None, ""):
        return datetime.now(timezone.utc).isoformat()
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return datetime.fromtimestamp(value, tz=timezone.utc).isoformat()
    text = str(value).strip()
    if text.isdigit():
        return datetime.fromtimestamp(int(text), tz=timezone.utc).isoformat()
    try:
        parsed = parser.parse(text)
    except (ValueError, OverflowError):
        logger.warning("Unparseable webhook timestamp %r, using now", value)
        return datetime.now(timezone.utc).isoformat()
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.isoformat()


def parse_webhook_message(data: Optional[Dict[str, Any]]) -> Optional[WhatsAppMessage]:
    """Build the inbound message, or None if phone or message is missing."""
    if not data or not isinstance(data, dict):
        return None
    phone = data.get("phone") or data.get("sender")
    message = data.get("message")
    if not phone or not message:
        return None

    is_group = bool(data.get("isGroup", data.get("is_group", False)))
    group = data.get("group") if is_group and isinstance(data.get("group"), dict) else None
    return WhatsAppMessage(
        id=str(data.get("id") or f"msg_{_now_ms()}"),
        phone=str(phone),
        name=data.get("name") or data.get("pushName") or "Unknown",
        message=str(message),
        timestamp=_normalize_timestamp(data.get("timestamp")),
        is_group=is_group,
        group=group,
    )


def process_incoming_message(data: Optional[Dict[str, Any]], backend) -> dict:
    """
    Validate and log an inbound WhatsApp message.

    Returns:
        dict: {"status": "success", "message": ..., "data": message} or
        {"status": "error", "message": ...}. Invalid data creates no row.
    """
    msg = parse_webhook_message(data)
    if msg is None:
        return {"status": "error", "message": "Invalid webhook data"}

    try:
        backend.insert("chat_logs", msg.to_chat_log())
    except BackendError as e:
        logger.error("Error logging incoming message from %s: %s", msg.phone, e)
        return {"status": "error", "message": "Failed to log message"}

    return {"status": "success", "message": "Webhook processed successfully", "data": msg.to_dict()}


def log_outgoing_message(backend, phone: str, message: str) -> Dict[str, Any]:
    return backend.insert("chat_logs", {
        "message_id": f"outgoing_{_now_ms()}",
        "sender_phone": "system",
        "sender_name": "System",
        "recipient_phone": phone,
        "message_content": message,
        "is_group": False,
        "created_at": datetime.now(timezone.utc).isoformat(),
        "direction": DIRECTION_OUTGOING,
    })


def handle_webhook(data: Optional[Dict[str, Any]], backend, messenger, chatbot) -> dict:
    """
    Full inbound flow: log the message, ask the chatbot, reply over WhatsApp
    and log the reply.

    Args:
        data (dict): Webhook payload {phone|sender, message, name, timestamp, isGroup, group}.
        backend: Persistence backend.
        messenger (FonnteService): WhatsApp sender.
        chatbot (ChatbotService): Reply generator.
    """
    result = process_incoming_message(data, backend)
    if result["status"] != "success":
        return result

    incoming = result["data"]
    reply = chatbot.generate_reply(incoming["message"])
    sent = messenger.send_message(incoming["phone"], reply)
    if not sent.get("status"):
        logger.warning("Fonnte did not accept reply to %s: %s", incoming["phone"], sent.get("reason"))

    try:
        log_outgoing_message(backend, incoming["phone"], reply)
    except BackendError as e:
        logger.error("Error logging outgoing message to %s: %s", incoming["phone"], e)

    return {"status": "success", "data": incoming, "reply": reply, "fonnte": sent}


def get_chat_history(backend, phone: str) -> dict:
    """Messages sent by or to a phone number, oldest first."""
    try:
        rows = backend.select("chat_logs", "*", match={"sender_phone": phone})
        rows += backend.select("chat_logs", "*", match={"recipient_phone": phone})
    except BackendError as e:
        logger.error("Error fetching chat logs for %s: %s", phone, e)
        return {"status": "error", "message": str(e)}
    rows.sort(key=lambda r: r.get("created_at") or "")
    return {"status": "success", "data": rows}
