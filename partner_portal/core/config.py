from functools import lru_cache
import json
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


def parse_cors_origins(value: str) -> list[str]:
    if not value:
        return []

    parsed: list[str]
    raw = value.strip()
    if raw.startswith("["):
        try:
            items = json.loads(raw)
            parsed = [str(item).strip() for item in items if str(item).strip()]
        except (TypeError, ValueError):
            parsed = []
    else:
        parsed = [origin.strip() for origin in raw.split(",") if origin.strip()]

    # Preserve order and remove duplicates.
    return list(dict.fromkeys(parsed))


def normalize_database_url(url: str) -> str:
    # Heroku / Railway style
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql://", 1)
    return url


class Settings(BaseSettings):
    app_name: str = "Partner Portal"
    environment: str = "development"
    api_v1_prefix: str = "/api/v1"
    log_level: str = "INFO"

    # Security
    password_bcrypt_rounds: int = 10
    session_ttl_minutes: int = 120
    rate_limit_enabled: bool = True

    # Database
    database_url: str
    db_pool_size: int = 5
    db_max_overflow: int = 5
    db_pool_timeout: int = 15
    db_pool_recycle: int = 1200
    db_pool_pre_ping: bool = True

    # Campaign defaults
    default_whatsapp_number: str = "+254104010203"

    # Frontend URLs (used for email links)
    frontend_base_url: str = "https://sqooli.org"

    # Email (partner credentials)
    email_provider: str = "console"  # console|resend|smtp
    email_from: str = "Sqooli Partners <partners@sqooli.org>"
    send_credentials_email: bool = True

    # Resend
    resend_api_key: Optional[str] = None

    # SMTP
    smtp_host: Optional[str] = None
    smtp_port: int = 587
    smtp_username: Optional[str] = None
    smtp_password: Optional[str] = None
    smtp_use_tls: bool = True

    # CORS
    cors_origins: str = "http://localhost:5173,http://localhost:3000"
    auto_create_tables: bool = False
    # Seed the permission catalog and default roles on startup.
    seed_on_startup: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
