"""
Routes parsed webhook events to handlers by their type discriminator.

Every known message type and status has a default handler that only logs,
so a receiver registers just the handlers it cares about.
"""

import logging
from typing import Callable

from dialog360.models.webhook import InboundMessage, StatusUpdate, WebhookEnvelope

logger = logging.getLogger(__name__)

MessageHandler = Callable[[InboundMessage], None]
StatusHandler = Callable[[StatusUpdate], None]

MESSAGE_TYPES = ("text", "image", "audio", "video", "document", "location", "contacts", "interactive")
STATUS_TYPES = ("sent", "delivered", "read", "failed")


def _log_message(msg: InboundMessage) -> None:
    if msg.type == "text":
        detail = (msg.text or "")[:80]
    elif msg.type == "location":
        detail = f"{msg.latitude}, {msg.longitude}"
    elif msg.type == "contacts":
        detail = f"{len(msg.contacts)} contact(s)"
    elif msg.type == "interactive":
        detail = f"{msg.interactive_type}: {msg.reply_title} ({msg.reply_id})"
    else:
        detail = f"{msg.filename or msg.media_id} {msg.media_mime_type or ''}".strip()
    logger.info("Incoming %s from %s: %s", msg.type, msg.sender, detail)


def _log_status(status: StatusUpdate) -> None:
    if status.status == "failed":
        logger.error("Message %s failed: %s", status.message_id, status.errors)
    else:
        logger.info("Message %s -> %s", status.message_id, status.status)


class WebhookDispatcher:
    def __init__(self):
        self._message_handlers: dict[str, MessageHandler] = {t: _log_message for t in MESSAGE_TYPES}
        self._status_handlers: dict[str, StatusHandler] = {s: _log_status for s in STATUS_TYPES}

    def on_message(self, message_type: str) -> Callable[[MessageHandler], MessageHandler]:
        """Decorator registering a handler for one inbound message type."""
        def register(handler: MessageHandler) -> MessageHandler:
            self._message_handlers[message_type] = handler
            return handler
        return register

    def on_status(self, status: str) -> Callable[[StatusHandler], StatusHandler]:
        def register(handler: StatusHandler) -> StatusHandler:
            self._status_handlers[status] = handler
            return handler
        return register

    def dispatch_message(self, msg: InboundMessage) -> bool:
        handler = self._message_handlers.get(msg.type)
        if handler is None:
            logger.info("Unhandled message type %r from %s (id=%s)", msg.type, msg.sender, msg.message_id)
            return False
        handler(msg)
        return True

    def dispatch_status(self, status: StatusUpdate) -> bool:
        handler = self._status_handlers.get(status.status)
        if handler is None:
            logger.info("Unhandled status %r for message %s", status.status, status.message_id)
            return False
        handler(status)
        return True

    def dispatch(self, envelope: WebhookEnvelope) -> int:
        """Dispatch messages then statuses, in payload order. Returns how many events were handled."""
        handled = 0
        for msg in envelope.messages:
            handled += self.dispatch_message(msg)
        for status in envelope.statuses:
            handled += self.dispatch_status(status)
        return handled
