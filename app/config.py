# app/config.py
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    ENV: str = "dev"
    APP_NAME: str = "Convention Schedule Service"

    # DB URL, SQLite file by default
    DATABASE_URL: str = "sqlite:///./app.db"
    SQL_ECHO: bool = False

    LOG_LEVEL: str = "INFO"

    # Which user name is matched against purchased_events.recipient.
    # "badge_name" is the convention display name, "full_name" is first + last.
    PURCHASE_RECIPIENT_FIELD: Literal["badge_name", "full_name"] = "badge_name"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

_settings: Optional[Settings] = None

def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
