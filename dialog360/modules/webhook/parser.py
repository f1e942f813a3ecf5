"""Extract inbound messages and status updates from a provider webhook envelope."""

import logging
from typing import Any

from dialog360.models.webhook import InboundMessage, StatusUpdate, WebhookEnvelope
from dialog360.modules.normalizer import dig

logger = logging.getLogger(__name__)

MEDIA_MESSAGE_TYPES = ("image", "audio", "video", "document", "sticker")


def _dicts(value: Any) -> list[dict]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def _str(value: Any) -> str:
    return "" if value is None else str(value)


def _float(value: Any) -> float | None:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def parse_message(msg: dict) -> InboundMessage:
    message_type = _str(msg.get("type")) or "unknown"
    incoming = InboundMessage(
        sender=_str(msg.get("from")),
        message_id=_str(msg.get("id")),
        timestamp=_str(msg.get("timestamp")),
        type=message_type,
        raw=msg,
    )

    if message_type == "text":
        incoming.text = dig(msg, "text", "body")
    elif message_type in MEDIA_MESSAGE_TYPES:
        media = msg.get(message_type)
        media = media if isinstance(media, dict) else {}
        incoming.media_id = media.get("id")
        incoming.media_mime_type = media.get("mime_type")
        incoming.media_sha256 = media.get("sha256")
        incoming.caption = media.get("caption")
        incoming.filename = media.get("filename")
    elif message_type == "location":
        incoming.latitude = _float(dig(msg, "location", "latitude"))
        incoming.longitude = _float(dig(msg, "location", "longitude"))
        incoming.location_name = dig(msg, "location", "name")
    elif message_type == "contacts":
        incoming.contacts = _dicts(msg.get("contacts"))
    elif message_type == "interactive":
        interactive_type = dig(msg, "interactive", "type")
        incoming.interactive_type = interactive_type
        if interactive_type in ("button_reply", "list_reply"):
            incoming.reply_id = dig(msg, "interactive", interactive_type, "id")
            incoming.reply_title = dig(msg, "interactive", interactive_type, "title")

    return incoming


def parse_status(status: dict) -> StatusUpdate:
    return StatusUpdate(
        message_id=_str(status.get("id")),
        status=_str(status.get("status")),
        timestamp=_str(status.get("timestamp")),
        recipient_id=status.get("recipient_id"),
        errors=_dicts(status.get("errors")),
        raw=status,
    )


def parse_envelope(payload: Any) -> WebhookEnvelope:
    """
    Read entry[0].changes[0].value.messages[] and .statuses[].
    Any missing or mistyped level yields empty lists instead of an error.
    """
    value = dig(payload, "entry", 0, "changes", 0, "value")
    if not isinstance(value, dict):
        logger.debug("Webhook payload has no entry[0].changes[0].value")
        return WebhookEnvelope()

    return WebhookEnvelope(
        messages=[parse_message(m) for m in _dicts(value.get("messages"))],
        statuses=[parse_status(s) for s in _dicts(value.get("statuses"))],
    )
