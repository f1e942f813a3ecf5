"""Typed, read-only results built by dialog360.modules.normalizer from provider responses."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

MIME_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
    "audio/aac": "aac",
    "audio/amr": "amr",
    "audio/mpeg": "mp3",
    "audio/mp4": "m4a",
    "audio/ogg": "ogg",
    "audio/wav": "wav",
    "video/mp4": "mp4",
    "video/3gp": "3gp",
    "application/pdf": "pdf",
    "application/msword": "doc",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": "docx",
    "application/vnd.ms-excel": "xls",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet": "xlsx",
    "application/vnd.ms-powerpoint": "ppt",
    "application/vnd.openxmlformats-officedocument.presentationml.presentation": "pptx",
    "text/plain": "txt",
}


class ProviderResult(BaseModel):
    """Common shape: success flag, provider error fields on failure, and the raw body."""

    model_config = ConfigDict(frozen=True)

    success: bool
    error_code: str | None = None
    error_message: str | None = None
    http_status: int | None = None
    raw: dict[str, Any] = Field(default_factory=dict)

    def is_success(self) -> bool:
        return self.success


class SendResult(ProviderResult):
    message_id: str | None = None
    status: str | None = None  # legacy API only
    timestamp: str | None = None  # legacy API only

    def is_sent(self) -> bool:
        return self.status == "sent"

    def is_delivered(self) -> bool:
        return self.status == "delivered"

    def is_read(self) -> bool:
        return self.status == "read"

    def is_failed(self) -> bool:
        return self.status == "failed"


class UploadResult(ProviderResult):
    media_id: str | None = None


class DeleteResult(ProviderResult):
    pass


class MediaDescriptor(ProviderResult):
    media_id: str = ""
    url: str = ""  # expires shortly after being issued
    mime_type: str = ""
    sha256: str = ""
    file_size: int = 0

    @property
    def base_mime_type(self) -> str:
        return self.mime_type.split(";", 1)[0].strip().lower()

    @property
    def is_image(self) -> bool:
        return self.base_mime_type.startswith("image/")

    @property
    def is_audio(self) -> bool:
        return self.base_mime_type.startswith("audio/")

    @property
    def is_video(self) -> bool:
        return self.base_mime_type.startswith("video/")

    @property
    def is_document(self) -> bool:
        return self.base_mime_type.startswith(("application/", "text/"))

    @property
    def file_extension(self) -> str:
        return MIME_EXTENSIONS.get(self.base_mime_type, "bin")


class WebhookConfig(ProviderResult):
    """Phone-number level webhook (/v1/configs/webhook)."""

    url: str = ""
    headers: dict[str, str] = Field(default_factory=dict)


class WabaWebhookConfig(ProviderResult):
    """Account level webhook (/waba_webhook)."""

    waba_id: str = ""
    phone_numbers: list[Any] = Field(default_factory=list)
    url: str = ""
    headers: dict[str, str] = Field(default_factory=dict)


class SetWabaWebhookResult(ProviderResult):
    # The provider applies the new URL asynchronously (15-20s); re-fetch before relying on it
    message: str = ""


class TemplateList(ProviderResult):
    count: int = 0
    filters: dict[str, Any] = Field(default_factory=dict)
    limit: int = 0
    offset: int = 0
    sort: list[str] = Field(default_factory=list)
    total: int = 0
    waba_templates: list[dict[str, Any]] = Field(default_factory=list)


class HealthStatus(ProviderResult):
    can_send_message: str | None = None
    entities: list[dict[str, Any]] = Field(default_factory=list)
