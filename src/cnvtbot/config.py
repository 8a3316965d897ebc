"""
CNVTBOT Configuration Management

🔒 Tokens and access keys come from the environment (or a local .env file),
never from the repository.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # === Telegram Transport ===
    telegram_token: str = Field(default="", description="Bot API token")
    telegram_api_url: str = Field(default="https://api.telegram.org")
    telegram_mode: Literal["polling", "webhook"] = Field(
        default="polling",
        description="How updates are received: getUpdates long polling or a webhook"
    )
    telegram_webhook_url: str = Field(
        default="",
        description="Public URL Telegram posts updates to (webhook mode)"
    )
    telegram_webhook_secret: str = Field(
        default="",
        description="Value expected in X-Telegram-Bot-Api-Secret-Token"
    )
    telegram_poll_timeout: int = Field(default=30, description="getUpdates long-poll seconds")

    # === Rate Provider Configuration ===
    rate_provider: Literal["fixer", "frankfurter"] = Field(default="fixer")
    fixer_base_url: str = Field(default="http://data.fixer.io/api")
    fixer_access_key: str = Field(default="")
    frankfurter_base_url: str = Field(
        default="https://api.frankfurter.dev",
        description="Frankfurter API base URL (keyless ECB rates)"
    )
    http_timeout: float = Field(default=10.0)

    # === Database Configuration ===
    database_host: str = Field(default="localhost")
    database_port: int = Field(default=5432)
    database_name: str = Field(default="cnvtbot")
    database_user: str = Field(default="cnvtbot")
    database_password: str = Field(default="")
    database_ssl_mode: str = Field(default="prefer")

    # === API Configuration ===
    api_host: str = Field(default="0.0.0.0")
    api_port: int = Field(default=8000)

    # === Scheduler Configuration ===
    scheduler_enabled: bool = Field(default=True, description="Warm the cache after midnight")
    scheduler_cron_hour: int = Field(default=0)
    scheduler_cron_minute: int = Field(default=5)
    scheduler_timezone: str = Field(
        default="",
        description="Empty means the local zone, matching how 'today' is computed"
    )

    # === Logging ===
    log_level: str = Field(default="INFO")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
