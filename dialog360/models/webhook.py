"""
Inbound webhook events.
The rest of a receiver works with these; it never touches the provider's nested envelope.
"""

from dataclasses import dataclass, field


@dataclass
class InboundMessage:
    """One entry of value.messages[]."""
    sender: str
    message_id: str
    timestamp: str
    type: str  # "text", "image", "audio", "video", "document", "location", "contacts", "interactive", ...
    text: str | None = None
    media_id: str | None = None
    media_mime_type: str | None = None
    media_sha256: str | None = None
    caption: str | None = None
    filename: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    location_name: str | None = None
    contacts: list[dict] = field(default_factory=list)
    interactive_type: str | None = None  # "button_reply", "list_reply"
    reply_id: str | None = None
    reply_title: str | None = None
    raw: dict = field(default_factory=dict)


@dataclass
class StatusUpdate:
    """One entry of value.statuses[]: delivery state transition of a message we sent."""
    message_id: str
    status: str  # "sent", "delivered", "read", "failed"
    timestamp: str
    recipient_id: str | None = None
    errors: list[dict] = field(default_factory=list)
    raw: dict = field(default_factory=dict)


@dataclass
class WebhookEnvelope:
    messages: list[InboundMessage] = field(default_factory=list)
    statuses: list[StatusUpdate] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.messages and not self.statuses
