"""
Exception hierarchy for the 360dialog client.

Local problems (bad arguments, invalid media) fail fast before any network I/O.
Network failures are retried and only surface as TransportError once the retry
budget is spent. Errors reported by the provider are NOT exceptions: they come
back as failed result objects (see dialog360.models.responses).
"""


class Dialog360Error(Exception):
    """Base class for every error raised by this package."""


class ConfigurationError(Dialog360Error, ValueError):
    """Invalid constructor arguments or client configuration."""


class ValidationError(Dialog360Error, ValueError):
    """Pre-flight validation failed (e.g. media file checks)."""


class MediaTooLarge(ValidationError):
    def __init__(self, limit: str, limit_bytes: int, size: int):
        self.limit = limit
        self.limit_bytes = limit_bytes
        self.size = size
        super().__init__(
            f"Media file is {size} bytes, exceeds the {limit} limit of {limit_bytes} bytes"
        )


class UnsupportedMediaType(ValidationError):
    def __init__(self, mime_type: str):
        self.mime_type = mime_type
        super().__init__(f"Unsupported media type: {mime_type}")


class TransportError(Dialog360Error):
    """Network-layer failure that persisted through every retry attempt."""

    def __init__(self, message: str, attempts: int, last_error: Exception | None = None):
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(message)


class ProviderError(Dialog360Error):
    """Provider answered with an error where no result object can carry it (raw downloads)."""

    def __init__(self, message: str, status_code: int, body: bytes = b""):
        self.status_code = status_code
        self.body = body
        super().__init__(message)
