"""
Outbound message variants.

Each variant is an immutable value object whose to_payload() builds the
type-specific part of a provider request body. The envelope fields
(messaging_product, recipient_type, to) are added by the client.
"""

from dataclasses import dataclass, field, replace
from typing import Any, ClassVar, Union

from dialog360.errors import ConfigurationError

MEDIA_TYPES = ("image", "audio", "video", "document", "sticker")
INTERACTIVE_KINDS = ("button", "list", "product", "product_list")


@dataclass(frozen=True)
class TextMessage:
    type: ClassVar[str] = "text"

    to: str
    text: str
    preview_url: bool = False

    def to_payload(self) -> dict[str, Any]:
        return {
            "type": "text",
            "text": {"body": self.text, "preview_url": self.preview_url},
        }


@dataclass(frozen=True)
class MediaMessage:
    """Image, audio, video, document or sticker, referenced by public URL or uploaded media id."""

    to: str
    type: str
    url: str | None = None
    media_id: str | None = None
    caption: str | None = None
    filename: str | None = None

    def __post_init__(self):
        if self.type not in MEDIA_TYPES:
            raise ConfigurationError(f"Unknown media type {self.type!r}, expected one of {MEDIA_TYPES}")
        if not self.url and not self.media_id:
            raise ConfigurationError("Either url or media_id must be provided")
        if self.url and self.media_id:
            raise ConfigurationError("Provide url or media_id, not both")

    def to_payload(self) -> dict[str, Any]:
        media: dict[str, Any] = {"id": self.media_id} if self.media_id else {"link": self.url}
        if self.caption:
            media["caption"] = self.caption
        if self.filename and self.type == "document":
            media["filename"] = self.filename
        return {"type": self.type, self.type: media}

    @classmethod
    def image(cls, to: str, url: str, caption: str | None = None) -> "MediaMessage":
        return cls(to, "image", url=url, caption=caption)

    @classmethod
    def image_by_id(cls, to: str, media_id: str, caption: str | None = None) -> "MediaMessage":
        return cls(to, "image", media_id=media_id, caption=caption)

    @classmethod
    def audio(cls, to: str, url: str) -> "MediaMessage":
        return cls(to, "audio", url=url)

    @classmethod
    def audio_by_id(cls, to: str, media_id: str) -> "MediaMessage":
        return cls(to, "audio", media_id=media_id)

    @classmethod
    def video(cls, to: str, url: str, caption: str | None = None) -> "MediaMessage":
        return cls(to, "video", url=url, caption=caption)

    @classmethod
    def video_by_id(cls, to: str, media_id: str, caption: str | None = None) -> "MediaMessage":
        return cls(to, "video", media_id=media_id, caption=caption)

    @classmethod
    def document(
        cls, to: str, url: str, caption: str | None = None, filename: str | None = None
    ) -> "MediaMessage":
        return cls(to, "document", url=url, caption=caption, filename=filename)

    @classmethod
    def document_by_id(
        cls, to: str, media_id: str, caption: str | None = None, filename: str | None = None
    ) -> "MediaMessage":
        return cls(to, "document", media_id=media_id, caption=caption, filename=filename)

    @classmethod
    def sticker_by_id(cls, to: str, media_id: str) -> "MediaMessage":
        return cls(to, "sticker", media_id=media_id)


@dataclass(frozen=True)
class TemplateMessage:
    """Pre-approved template. components holds header/body/button parameter overrides."""

    type: ClassVar[str] = "template"

    to: str
    name: str
    language: str = "en_US"
    components: tuple[dict[str, Any], ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "components", tuple(self.components or ()))

    def to_payload(self) -> dict[str, Any]:
        template: dict[str, Any] = {
            "name": self.name,
            "language": {"code": self.language},
        }
        # Provider expects the key to be absent, not an empty list
        if self.components:
            template["components"] = list(self.components)
        return {"type": "template", "template": template}

    def with_component(self, component: dict[str, Any]) -> "TemplateMessage":
        return replace(self, components=(*self.components, component))

    def with_components(self, components: list[dict[str, Any]]) -> "TemplateMessage":
        return replace(self, components=tuple(components))


@dataclass(frozen=True)
class InteractiveMessage:
    type: ClassVar[str] = "interactive"

    to: str
    kind: str
    body: str
    action: dict[str, Any]
    footer: str | None = None

    def __post_init__(self):
        if self.kind not in INTERACTIVE_KINDS:
            raise ConfigurationError(
                f"Unknown interactive kind {self.kind!r}, expected one of {INTERACTIVE_KINDS}"
            )

    def to_payload(self) -> dict[str, Any]:
        interactive: dict[str, Any] = {
            "type": self.kind,
            "body": {"text": self.body},
            "action": self.action,
        }
        if self.footer:
            interactive["footer"] = {"text": self.footer}
        return {"type": "interactive", "interactive": interactive}

    @classmethod
    def button(
        cls, to: str, body: str, buttons: list[dict[str, Any]], footer: str | None = None
    ) -> "InteractiveMessage":
        return cls(to, "button", body, {"buttons": buttons}, footer)

    @classmethod
    def list_message(
        cls, to: str, body: str, action: dict[str, Any], footer: str | None = None
    ) -> "InteractiveMessage":
        return cls(to, "list", body, action, footer)

    @classmethod
    def product(
        cls, to: str, body: str, action: dict[str, Any], footer: str | None = None
    ) -> "InteractiveMessage":
        return cls(to, "product", body, action, footer)

    @classmethod
    def product_list(
        cls, to: str, body: str, action: dict[str, Any], footer: str | None = None
    ) -> "InteractiveMessage":
        return cls(to, "product_list", body, action, footer)


@dataclass(frozen=True)
class ContactMessage:
    type: ClassVar[str] = "contacts"

    to: str
    contacts: tuple[dict[str, Any], ...]

    def __post_init__(self):
        if not self.contacts:
            raise ConfigurationError("At least one contact is required")
        object.__setattr__(self, "contacts", tuple(self.contacts))

    def to_payload(self) -> dict[str, Any]:
        return {"type": "contacts", "contacts": list(self.contacts)}


Message = Union[TextMessage, MediaMessage, TemplateMessage, InteractiveMessage, ContactMessage]
