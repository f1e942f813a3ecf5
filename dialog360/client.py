"""
360dialog WhatsApp Business API client.

Every operation runs through the same RetryPolicy: network-layer errors are
retried with backoff, while any HTTP response (including 4xx/5xx) is decoded
and handed to the normalizer, so provider-reported failures come back as
results with success=False instead of exceptions.
"""

import json
import logging
import os
import time
from pathlib import Path
from typing import Any, Callable
from urllib.parse import urlsplit

import httpx

from dialog360.config import ClientConfig
from dialog360.errors import ProviderError, ValidationError
from dialog360.models.messages import Message
from dialog360.models.responses import (
    DeleteResult,
    HealthStatus,
    MediaDescriptor,
    SendResult,
    SetWabaWebhookResult,
    TemplateList,
    UploadResult,
    WabaWebhookConfig,
    WebhookConfig,
)
from dialog360.modules import normalizer
from dialog360.modules.media import validate_media, validate_media_file
from dialog360.modules.retry import RetryPolicy, exponential_backoff

logger = logging.getLogger(__name__)

API_KEY_HEADER = "D360-API-KEY"


class Dialog360Client:
    def __init__(
        self,
        config: ClientConfig,
        transport: httpx.BaseTransport | None = None,
        retry_policy: RetryPolicy | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.config = config
        self.retry_policy = retry_policy or RetryPolicy(
            max_attempts=config.max_retries,
            backoff=exponential_backoff(config.backoff_base, config.backoff_cap, config.backoff_jitter),
            sleep=sleep,
        )
        self._http = httpx.Client(
            base_url=config.base_url,
            timeout=config.timeout,
            headers={API_KEY_HEADER: config.api_key},
            transport=transport,
        )

    def __enter__(self) -> "Dialog360Client":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._http.close()

    def _request(self, method: str, path: str, description: str, **kwargs: Any) -> httpx.Response:
        return self.retry_policy.run(
            lambda: self._http.request(method, path, **kwargs),
            description=description,
        )

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError:
            logger.warning(
                "Non-JSON response (HTTP %d) from %s", response.status_code, response.request.url.path,
            )
            return {}

    # --- Messages ---

    def send_message(self, message: Message) -> SendResult:
        payload = {
            "messaging_product": "whatsapp",
            "recipient_type": "individual",
            "to": message.to,
            **message.to_payload(),
        }
        response = self._request("POST", self.config.messages_path, f"send {message.type} message", json=payload)
        result = normalizer.parse_send_result(self._decode(response), response.status_code)

        if result.success:
            logger.info("Sent %s message: id=%s", message.type, result.message_id)
        else:
            logger.warning(
                "Provider rejected %s message (HTTP %d): code=%s message=%s",
                message.type, response.status_code, result.error_code, result.error_message,
            )
        return result

    # --- Media ---

    def upload_media(self, file_path: str | os.PathLike, mime_type: str) -> UploadResult:
        """Validate and upload a local file. Local problems raise before any request is made."""
        validate_media_file(file_path, mime_type)
        path = Path(file_path)
        return self.upload_media_content(path.read_bytes(), path.name, mime_type)

    def upload_media_content(self, content: bytes, filename: str, mime_type: str) -> UploadResult:
        validate_media(len(content), mime_type)
        response = self._request(
            "POST",
            "/media",
            "upload media",
            data={"messaging_product": "whatsapp"},
            files={"file": (filename, content, mime_type)},
        )
        result = normalizer.parse_upload_result(self._decode(response), response.status_code)
        if result.success:
            logger.info("Uploaded %s (%d bytes, %s): media_id=%s", filename, len(content), mime_type, result.media_id)
        else:
            logger.warning("Media upload of %s failed: %s", filename, result.error_message)
        return result

    def get_media_info(self, media_id: str) -> MediaDescriptor:
        response = self._request("GET", f"/{media_id}", "get media info")
        return normalizer.parse_media_descriptor(self._decode(response), response.status_code)

    def download_media_url(self, download_url: str) -> bytes:
        """
        Download from a provider media URL. The lookaside host is swapped for the
        configured base URL (path and query kept) so the API key header applies.
        """
        parts = urlsplit(download_url)
        if not parts.path:
            raise ValidationError(f"Invalid media download URL: {download_url!r}")
        path = parts.path + (f"?{parts.query}" if parts.query else "")

        response = self._request("GET", path, "download media")
        if response.status_code != 200:
            raise ProviderError(
                f"Media download failed with HTTP {response.status_code}",
                status_code=response.status_code,
                body=response.content,
            )
        return response.content

    def download_media(self, media_id: str, save_path: str | os.PathLike | None = None) -> bytes:
        """Resolve the media URL, download it, and optionally write it to save_path."""
        info = self.get_media_info(media_id)
        if not info.success or not info.url:
            raise ProviderError(
                f"Could not resolve media {media_id}: {info.error_message or 'no download url'}",
                status_code=info.http_status or 0,
            )

        content = self.download_media_url(info.url)
        if save_path is not None:
            Path(save_path).write_bytes(content)
            logger.info("Saved media %s (%d bytes) to %s", media_id, len(content), save_path)
        return content

    def delete_media(self, media_id: str) -> DeleteResult:
        response = self._request("DELETE", f"/{media_id}", "delete media")
        return normalizer.parse_delete_result(self._decode(response), response.status_code)

    # --- Webhook configuration ---

    def get_webhook_url(self) -> WebhookConfig:
        response = self._request("GET", "/v1/configs/webhook", "get webhook url")
        return normalizer.parse_webhook_config(self._decode(response), response.status_code)

    def set_webhook_url(self, webhook_url: str) -> WebhookConfig:
        response = self._request("POST", "/v1/configs/webhook", "set webhook url", json={"url": webhook_url})
        return normalizer.parse_webhook_config(self._decode(response), response.status_code)

    def get_waba_webhook_url(self) -> WabaWebhookConfig:
        response = self._request("GET", "/waba_webhook", "get waba webhook url")
        return normalizer.parse_waba_webhook_config(self._decode(response), response.status_code)

    def set_waba_webhook_url(
        self,
        webhook_url: str,
        headers: dict[str, str] | None = None,
        override_all: bool = False,
    ) -> SetWabaWebhookResult:
        """Set the account-level webhook. override_all also replaces every phone-number webhook."""
        payload = {"url": webhook_url, "headers": headers or {}, "override_all": override_all}
        response = self._request("POST", "/waba_webhook", "set waba webhook url", json=payload)
        return normalizer.parse_set_waba_webhook_result(self._decode(response), response.status_code)

    # --- Account ---

    def get_health_status(self) -> HealthStatus:
        response = self._request("GET", "/health_status", "get health status")
        return normalizer.parse_health_status(self._decode(response), response.status_code)

    def get_templates(
        self,
        filters: dict[str, Any] | None = None,
        sort: str | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> TemplateList:
        params: dict[str, Any] = {}
        if filters:
            params["filters"] = json.dumps(filters)
        if sort:
            params["sort"] = sort
        if limit is not None:
            params["limit"] = limit
        if offset is not None:
            params["offset"] = offset
        response = self._request("GET", "/v1/configs/templates", "get templates", params=params)
        return normalizer.parse_template_list(self._decode(response), response.status_code)
