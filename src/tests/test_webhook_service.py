from unittest import mock

from rentcar.services.database import BackendError
from rentcar.services.webhook_service import (
    get_chat_history,
    handle_webhook,
    parse_webhook_message,
    process_incoming_message,
)


def test_missing_message_creates_no_row(backend):
    result = process_incoming_message({"phone": "628111"}, backend)

    assert result == {"status": "error", "message": "Invalid webhook data"}
    assert backend.tables.get("chat_logs", []) == []


def test_missing_phone_creates_no_row(backend):
    result = process_incoming_message({"message": "Halo"}, backend)

    assert result["status"] == "error"
    assert backend.tables.get("chat_logs", []) == []


def test_empty_payload_is_invalid(backend):
    assert process_incoming_message(None, backend)["status"] == "error"


def test_incoming_message_is_logged(backend):
    result = process_incoming_message({
        "id": "abc",
        "sender": "628111",
        "pushName": "Rina",
        "message": "Mobil tersedia?",
        "timestamp": 1700000000,
    }, backend)

    assert result["status"] == "success"
    assert result["message"] == "Webhook processed successfully"
    row = backend.tables["chat_logs"][0]
    assert row["message_id"] == "abc"
    assert row["sender_phone"] == "628111"
    assert row["sender_name"] == "Rina"
    assert row["message_content"] == "Mobil tersedia?"
    assert row["direction"] == "incoming"
    assert row["created_at"] == "2023-11-14T22:13:20+00:00"
    assert row["group_id"] is None


def test_parse_defaults_and_group():
    msg = parse_webhook_message({
        "phone": "628222",
        "message": "hi",
        "isGroup": True,
        "group": {"id": "g1", "name": "Rental"},
        "timestamp": "2024-05-01T10:00:00",
    })

    assert msg.name == "Unknown"
    assert msg.id.startswith("msg_")
    assert msg.timestamp == "2024-05-01T10:00:00+00:00"
    assert msg.to_chat_log()["group_name"] == "Rental"


def test_group_ignored_for_direct_message():
    msg = parse_webhook_message({"phone": "628222", "message": "hi", "group": {"id": "g1"}})
    assert msg.group is None


def test_insert_failure_reported(backend):
    with mock.patch.object(backend, "insert", side_effect=BackendError("down")):
        result = process_incoming_message({"phone": "628111", "message": "hi"}, backend)
    assert result == {"status": "error", "message": "Failed to log message"}


def test_handle_webhook_replies_and_logs_both_directions(backend):
    messenger = mock.Mock()
    messenger.send_message.return_value = {"status": True, "id": ["1"]}
    chatbot = mock.Mock()
    chatbot.generate_reply.return_value = "Ya, tersedia."

    result = handle_webhook({"phone": "628111", "message": "Mobil tersedia?"}, backend, messenger, chatbot)

    assert result["status"] == "success"
    assert result["reply"] == "Ya, tersedia."
    assert result["fonnte"] == {"status": True, "id": ["1"]}
    chatbot.generate_reply.assert_called_once_with("Mobil tersedia?")
    messenger.send_message.assert_called_once_with("628111", "Ya, tersedia.")

    incoming, outgoing = backend.tables["chat_logs"]
    assert incoming["direction"] == "incoming"
    assert outgoing["direction"] == "outgoing"
    assert outgoing["sender_phone"] == "system"
    assert outgoing["recipient_phone"] == "628111"
    assert outgoing["message_id"].startswith("outgoing_")


def test_handle_webhook_invalid_data_skips_reply(backend):
    messenger, chatbot = mock.Mock(), mock.Mock()

    result = handle_webhook({"phone": "628111"}, backend, messenger, chatbot)

    assert result["status"] == "error"
    chatbot.generate_reply.assert_not_called()
    messenger.send_message.assert_not_called()


def test_handle_webhook_send_failure_still_succeeds(backend):
    messenger = mock.Mock()
    messenger.send_message.return_value = {"status": False, "reason": "device disconnected"}
    chatbot = mock.Mock()
    chatbot.generate_reply.return_value = "Halo"

    result = handle_webhook({"phone": "628111", "message": "hi"}, backend, messenger, chatbot)

    assert result["status"] == "success"
    assert result["fonnte"]["status"] is False


def test_chat_history_orders_both_directions(backend):
    backend.seed("chat_logs", [
        {"sender_phone": "system", "recipient_phone": "628111", "created_at": "2024-01-01T10:00:05+00:00"},
        {"sender_phone": "628111", "created_at": "2024-01-01T10:00:00+00:00"},
        {"sender_phone": "628999", "created_at": "2024-01-01T09:00:00+00:00"},
    ])

    result = get_chat_history(backend, "628111")

    assert result["status"] == "success"
    assert [r["created_at"] for r in result["data"]] == [
        "2024-01-01T10:00:00+00:00",
        "2024-01-01T10:00:05+00:00",
    ]


def test_non_dict_payload_is_invalid(backend):
    assert process_incoming_message(["628111", "hi"], backend) == {
        "status": "error", "message": "Invalid webhook data",
    }
