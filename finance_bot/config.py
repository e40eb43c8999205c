from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import AnyHttpUrl, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .services.ledger import IdStrategy
from .utils import DEFAULT_TIMEZONE


class Settings(BaseSettings):
    """Centralised application settings, sourced from environment variables or .env."""

    app_name: str = Field(default="FinanceBot")
    environment: str = Field(default="development", alias="ENVIRONMENT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    telegram_bot_token: Optional[str] = Field(default=None, alias="TELEGRAM_BOT_TOKEN")
    telegram_webhook_secret: Optional[str] = Field(
        default=None, alias="TELEGRAM_WEBHOOK_SECRET"
    )
    backend_base_url: Optional[AnyHttpUrl] = Field(
        default=None,
        alias="BACKEND_BASE_URL",
        description="The public URL where FastAPI is reachable (used by Telegram webhooks).",
    )
    telegram_register_webhook_on_start: bool = Field(
        default=False, alias="TELEGRAM_REGISTER_WEBHOOK_ON_START"
    )
    ledger_path: Path = Field(
        default=Path("finances.json"),
        alias="LEDGER_PATH",
        description="JSON snapshot file holding every transaction.",
    )
    ledger_id_strategy: IdStrategy = Field(
        default=IdStrategy.MONOTONIC,
        alias="LEDGER_ID_STRATEGY",
        description="`monotonic` uses max id+1; `length` numbers new entries count+1 like older ledgers, so ids can repeat after deletes.",
    )
    bot_locale: Literal["en", "pt_BR"] = Field(default="en", alias="BOT_LOCALE")
    bot_timezone: str = Field(
        default=DEFAULT_TIMEZONE,
        alias="BOT_TIMEZONE",
        description="IANA zone used for the created_at timestamp of new entries.",
    )

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached accessor so imports share a single settings instance."""
    return Settings()
