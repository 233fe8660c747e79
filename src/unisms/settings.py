import logging
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SenderSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="UNISMS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    timeout_seconds: float = Field(default=10.0, gt=0, description="HTTP request timeout")
    verify_ssl: bool = Field(default=True, description="Verify vendor TLS certificates")
    user_agent: str = Field(default="unisms/0.1", description="User-Agent sent to vendors")
    log_level: str | None = Field(default=None, description="Level for the unisms logger")


@lru_cache
def get_settings() -> SenderSettings:
    """Load settings once; applies ``log_level`` to the unisms logger when set."""
    settings = SenderSettings()
    if settings.log_level:
        logging.getLogger("unisms").setLevel(settings.log_level.upper())
    return settings
