"""
Response normalizer: turns decoded provider JSON into typed results.

The provider exposes two API generations with incompatible response shapes.
Send results are recognised by an ordered tuple of strategies, each returning
a SendResult on match or None; the first match wins and anything unmatched is
a failure described by extract_error(). Nothing here raises on odd input:
missing or mistyped fields simply default to None / empty values.
"""

import logging
from typing import Any, Callable

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

logger = logging.getLogger(__name__)

SendStrategy = Callable[[dict, int | None], SendResult | None]


def dig(data: Any, *path: str | int) -> Any:
    """Walk nested dicts/lists, returning None as soon as a step is missing."""
    current = data
    for key in path:
        if isinstance(key, int):
            if not isinstance(current, list) or not -len(current) <= key < len(current):
                return None
            current = current[key]
        else:
            if not isinstance(current, dict):
                return None
            current = current.get(key)
        if current is None:
            return None
    return current


def _as_str(value: Any) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


def _as_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def _as_dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _as_list(value: Any) -> list:
    return value if isinstance(value, list) else []


def _as_headers(value: Any) -> dict[str, str]:
    return {str(k): str(v) for k, v in _as_dict(value).items()}


def _ensure_body(body: Any) -> dict:
    if isinstance(body, dict):
        return body
    if body is not None:
        logger.debug("Non-object response body of type %s treated as empty", type(body).__name__)
    return {}


def extract_error(body: dict) -> tuple[str | None, str | None]:
    """Return (code, message) from either error shape, or (None, None)."""
    first = dig(body, "errors", 0)
    if isinstance(first, dict):
        message = first.get("message") or first.get("title") or first.get("details")
        return _as_str(first.get("code")), _as_str(message)

    error = body.get("error")
    if isinstance(error, dict):
        return _as_str(error.get("code")), _as_str(error.get("message"))
    if isinstance(error, str):
        return None, error

    return None, None


def _is_failure(body: dict, http_status: int | None) -> bool:
    if http_status is not None and http_status >= 400:
        return True
    return extract_error(body) != (None, None)


def _common(body: dict, http_status: int | None, success: bool) -> dict[str, Any]:
    fields: dict[str, Any] = {"success": success, "http_status": http_status, "raw": body}
    if not success:
        fields["error_code"], fields["error_message"] = extract_error(body)
    return fields


# --- Send results ---

def _cloud_send_result(body: dict, http_status: int | None) -> SendResult | None:
    """Cloud API: {"messages": [{"id": "wamid..."}], ...}"""
    message_id = _as_str(dig(body, "messages", 0, "id"))
    if message_id is None:
        return None
    return SendResult(success=True, message_id=message_id, http_status=http_status, raw=body)


def _legacy_send_result(body: dict, http_status: int | None) -> SendResult | None:
    """Legacy v1 API: top-level {"id": ..., "status": ..., "timestamp": ...} and no messages array."""
    if "messages" in body or "errors" in body:
        return None
    message_id = _as_str(body.get("id"))
    if message_id is None:
        return None
    return SendResult(
        success=True,
        message_id=message_id,
        status=_as_str(body.get("status")),
        timestamp=_as_str(body.get("timestamp")),
        http_status=http_status,
        raw=body,
    )


SEND_STRATEGIES: tuple[SendStrategy, ...] = (_cloud_send_result, _legacy_send_result)


def parse_send_result(body: Any, http_status: int | None = None) -> SendResult:
    body = _ensure_body(body)
    for strategy in SEND_STRATEGIES:
        result = strategy(body, http_status)
        if result is not None:
            return result
    return SendResult(**_common(body, http_status, success=False))


# --- Media ---

def parse_upload_result(body: Any, http_status: int | None = None) -> UploadResult:
    body = _ensure_body(body)
    media_id = _as_str(body.get("id"))
    if media_id is None:
        return UploadResult(**_common(body, http_status, success=False))
    return UploadResult(media_id=media_id, **_common(body, http_status, success=True))


def parse_media_descriptor(body: Any, http_status: int | None = None) -> MediaDescriptor:
    body = _ensure_body(body)
    success = _as_str(body.get("id")) is not None and not _is_failure(body, http_status)
    return MediaDescriptor(
        media_id=_as_str(body.get("id")) or "",
        url=_as_str(body.get("url")) or "",
        mime_type=_as_str(body.get("mime_type")) or "",
        sha256=_as_str(body.get("sha256")) or "",
        file_size=_as_int(body.get("file_size")),
        **_common(body, http_status, success),
    )


def parse_delete_result(body: Any, http_status: int | None = None) -> DeleteResult:
    body = _ensure_body(body)
    if http_status is None:
        success = body.get("success") is True
    else:
        success = http_status == 200
    return DeleteResult(**_common(body, http_status, success))


# --- Webhook configuration ---

def parse_webhook_config(body: Any, http_status: int | None = None) -> WebhookConfig:
    body = _ensure_body(body)
    return WebhookConfig(
        url=_as_str(body.get("url")) or "",
        headers=_as_headers(body.get("headers")),
        **_common(body, http_status, not _is_failure(body, http_status)),
    )


def parse_waba_webhook_config(body: Any, http_status: int | None = None) -> WabaWebhookConfig:
    body = _ensure_body(body)
    return WabaWebhookConfig(
        waba_id=_as_str(body.get("waba_id")) or "",
        phone_numbers=_as_list(body.get("phone_numbers")),
        url=_as_str(body.get("url")) or "",
        headers=_as_headers(body.get("headers")),
        **_common(body, http_status, not _is_failure(body, http_status)),
    )


def parse_set_waba_webhook_result(body: Any, http_status: int | None = None) -> SetWabaWebhookResult:
    body = _ensure_body(body)
    return SetWabaWebhookResult(
        message=_as_str(body.get("message")) or "",
        **_common(body, http_status, not _is_failure(body, http_status)),
    )


# --- Account ---

def parse_template_list(body: Any, http_status: int | None = None) -> TemplateList:
    body = _ensure_body(body)
    sort = body.get("sort")
    if isinstance(sort, str):
        sort = [sort]
    return TemplateList(
        count=_as_int(body.get("count")),
        filters=_as_dict(body.get("filters")),
        limit=_as_int(body.get("limit")),
        offset=_as_int(body.get("offset")),
        sort=[str(s) for s in _as_list(sort)],
        total=_as_int(body.get("total")),
        waba_templates=[t for t in _as_list(body.get("waba_templates")) if isinstance(t, dict)],
        **_common(body, http_status, not _is_failure(body, http_status)),
    )


def parse_health_status(body: Any, http_status: int | None = None) -> HealthStatus:
    body = _ensure_body(body)
    health = _as_dict(body.get("health_status"))
    return HealthStatus(
        can_send_message=_as_str(health.get("can_send_message")),
        entities=[e for e in _as_list(health.get("entities")) if isinstance(e, dict)],
        **_common(body, http_status, not _is_failure(body, http_status)),
    )
