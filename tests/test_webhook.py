"""Tests for webhook envelope parsing and dispatch."""

import logging

import pytest

from dialog360.modules.webhook.dispatcher import WebhookDispatcher
from dialog360.modules.webhook.parser import parse_envelope


def _envelope(value: dict) -> dict:
    return {
        "object": "whatsapp_business_account",
        "entry": [{"id": "102290129340398", "changes": [{"field": "messages", "value": value}]}],
    }


TEXT = {"from": "5491100000000", "id": "wamid.1", "timestamp": "1700000000", "type": "text", "text": {"body": "hello"}}
IMAGE = {
    "from": "5491100000000", "id": "wamid.2", "timestamp": "1700000001", "type": "image",
    "image": {"id": "img-1", "mime_type": "image/jpeg", "sha256": "abc", "caption": "look"},
}
DOCUMENT = {
    "from": "5491100000000", "id": "wamid.3", "timestamp": "1700000002", "type": "document",
    "document": {"id": "doc-1", "mime_type": "application/pdf", "filename": "plan.pdf"},
}
LOCATION = {
    "from": "5491100000000", "id": "wamid.4", "timestamp": "1700000003", "type": "location",
    "location": {"latitude": -34.6, "longitude": "-58.38", "name": "Office"},
}
BUTTON_REPLY = {
    "from": "5491100000000", "id": "wamid.5", "timestamp": "1700000004", "type": "interactive",
    "interactive": {"type": "button_reply", "button_reply": {"id": "btn_help", "title": "Help"}},
}
CONTACTS = {
    "from": "5491100000000", "id": "wamid.6", "timestamp": "1700000005", "type": "contacts",
    "contacts": [{"name": {"formatted_name": "Jane"}}],
}
STATUS_DELIVERED = {"id": "wamid.out1", "status": "delivered", "timestamp": "1700000010", "recipient_id": "5491100000000"}
STATUS_FAILED = {
    "id": "wamid.out2", "status": "failed", "timestamp": "1700000011",
    "errors": [{"code": 131047, "title": "Re-engagement message"}],
}


class TestParseEnvelope:
    def test_extracts_messages_and_statuses_in_order(self):
        payload = _envelope({
            "messaging_product": "whatsapp",
            "messages": [TEXT, IMAGE, DOCUMENT, LOCATION, BUTTON_REPLY, CONTACTS],
            "statuses": [STATUS_DELIVERED, STATUS_FAILED],
        })

        envelope = parse_envelope(payload)

        assert [m.message_id for m in envelope.messages] == ["wamid.1", "wamid.2", "wamid.3", "wamid.4", "wamid.5", "wamid.6"]
        text, image, document, location, button, contacts = envelope.messages
        assert text.text == "hello"
        assert text.sender == "5491100000000"
        assert text.timestamp == "1700000000"
        assert image.media_id == "img-1"
        assert image.caption == "look"
        assert document.filename == "plan.pdf"
        assert location.latitude == -34.6
        assert location.longitude == -58.38
        assert button.interactive_type == "button_reply"
        assert button.reply_id == "btn_help"
        assert button.reply_title == "Help"
        assert contacts.contacts == [{"name": {"formatted_name": "Jane"}}]

        delivered, failed = envelope.statuses
        assert delivered.status == "delivered"
        assert delivered.recipient_id == "5491100000000"
        assert failed.errors[0]["code"] == 131047

    @pytest.mark.parametrize("payload", [
        {},
        None,
        "text",
        {"entry": []},
        {"entry": [{}]},
        {"entry": [{"changes": []}]},
        {"entry": [{"changes": [{"value": None}]}]},
        _envelope({"messages": "nope", "statuses": {"id": "x"}}),
    ])
    def test_missing_levels_yield_empty(self, payload):
        envelope = parse_envelope(payload)

        assert envelope.messages == []
        assert envelope.statuses == []
        assert envelope.is_empty

    def test_message_without_type(self):
        envelope = parse_envelope(_envelope({"messages": [{"from": "1", "id": "w"}]}))

        assert envelope.messages[0].type == "unknown"


class TestDispatcher:
    def test_routes_by_type(self):
        dispatcher = WebhookDispatcher()
        seen = []

        @dispatcher.on_message("text")
        def handle_text(msg):
            seen.append(("text", msg.text))

        @dispatcher.on_status("failed")
        def handle_failed(status):
            seen.append(("failed", status.message_id))

        envelope = parse_envelope(_envelope({"messages": [TEXT, IMAGE], "statuses": [STATUS_FAILED]}))
        handled = dispatcher.dispatch(envelope)

        assert handled == 3
        assert seen == [("text", "hello"), ("failed", "wamid.out2")]

    def test_unknown_type_is_only_logged(self, caplog):
        dispatcher = WebhookDispatcher()
        reaction = {"from": "1", "id": "wamid.r", "timestamp": "1", "type": "reaction", "reaction": {"emoji": "x"}}

        with caplog.at_level(logging.INFO, logger="dialog360.modules.webhook.dispatcher"):
            handled = dispatcher.dispatch(parse_envelope(_envelope({"messages": [reaction]})))

        assert handled == 0
        assert "Unhandled message type 'reaction'" in caplog.text

    def test_default_handlers_log(self, caplog):
        dispatcher = WebhookDispatcher()

        with caplog.at_level(logging.INFO, logger="dialog360.modules.webhook.dispatcher"):
            dispatcher.dispatch(parse_envelope(_envelope({"messages": [LOCATION], "statuses": [STATUS_FAILED]})))

        assert "Incoming location" in caplog.text
        assert "Message wamid.out2 failed" in caplog.text
