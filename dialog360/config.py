from dataclasses import asdict, dataclass
from typing import Literal

from pydantic_settings import BaseSettings

from dialog360.errors import ConfigurationError

DEFAULT_BASE_URL = "https://waba-v2.360dialog.io"
LEGACY_BASE_URL = "https://waba.360dialog.io"

ApiGeneration = Literal["cloud", "legacy"]


class Settings(BaseSettings):
    """Environment settings for the webhook app and scripts. The client itself never reads these."""

    environment: str = "development"

    # 360dialog
    dialog360_api_key: str = ""
    dialog360_phone_number_id: str = ""
    dialog360_base_url: str = ""  # empty picks the host for dialog360_api_generation
    dialog360_timeout: float = 30
    dialog360_retry_attempts: int = 3
    dialog360_api_generation: ApiGeneration = "cloud"  # "legacy" for the v1 endpoints

    # Webhook subscription verification
    dialog360_verify_token: str = ""

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reload_settings() -> Settings:
    """Force reload settings from .env."""
    global _settings
    _settings = None
    return get_settings()


@dataclass(frozen=True)
class ClientConfig:
    """Immutable client configuration, created once and passed to Dialog360Client."""

    api_key: str
    phone_number_id: str
    base_url: str | None = None  # None picks the host for api_generation
    timeout: float = 30
    max_retries: int = 3
    api_generation: ApiGeneration = "cloud"
    # Backoff sleeps backoff_base ** attempt seconds; cap and jitter are opt-in
    backoff_base: float = 2.0
    backoff_cap: float | None = None
    backoff_jitter: float = 0.0

    def __post_init__(self):
        if not self.api_key:
            raise ConfigurationError("api_key is required")
        if self.timeout <= 0:
            raise ConfigurationError(f"timeout must be positive, got {self.timeout}")
        if self.max_retries < 1:
            raise ConfigurationError(f"max_retries must be at least 1, got {self.max_retries}")
        if self.api_generation not in ("cloud", "legacy"):
            raise ConfigurationError(f"Unknown api_generation: {self.api_generation!r}")
        if self.backoff_base <= 0:
            raise ConfigurationError(f"backoff_base must be positive, got {self.backoff_base}")
        if self.backoff_cap is not None and self.backoff_cap < 0:
            raise ConfigurationError(f"backoff_cap must not be negative, got {self.backoff_cap}")
        if self.backoff_jitter < 0:
            raise ConfigurationError(f"backoff_jitter must not be negative, got {self.backoff_jitter}")
        base_url = self.base_url or (LEGACY_BASE_URL if self.api_generation == "legacy" else DEFAULT_BASE_URL)
        object.__setattr__(self, "base_url", base_url.rstrip("/"))

    @property
    def messages_path(self) -> str:
        return "/v1/messages" if self.api_generation == "legacy" else "/messages"

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "ClientConfig":
        settings = settings or get_settings()
        return cls(
            api_key=settings.dialog360_api_key,
            phone_number_id=settings.dialog360_phone_number_id,
            base_url=settings.dialog360_base_url or None,
            timeout=settings.dialog360_timeout,
            max_retries=settings.dialog360_retry_attempts,
            api_generation=settings.dialog360_api_generation,
        )

    def as_dict(self) -> dict:
        return asdict(self)

    def __repr__(self) -> str:
        # Keep the API key out of logs and tracebacks
        return (
            f"ClientConfig(phone_number_id={self.phone_number_id!r}, base_url={self.base_url!r}, "
            f"timeout={self.timeout}, max_retries={self.max_retries}, "
            f"api_generation={self.api_generation!r})"
        )
