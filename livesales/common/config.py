import logging
import os
from dataclasses import dataclass, field

_logger = logging.getLogger(__name__)

DEFAULT_JWT_SECRET = "change-me-in-production"


def _get_bool(env_name: str, default: bool = False) -> bool:
    val = os.getenv(env_name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "y", "on"}


@dataclass
class Settings:
    # App
    APP_HOST: str = field(default_factory=lambda: os.getenv("APP_HOST", "0.0.0.0"))
    APP_PORT: int = field(default_factory=lambda: int(os.getenv("APP_PORT", "3001")))
    APP_ENV: str = field(default_factory=lambda: os.getenv("APP_ENV", "development"))
    INSTANCE_ID: str = field(default_factory=lambda: os.getenv("INSTANCE_ID", "unknown"))
    CORS_ORIGIN: str = field(default_factory=lambda: os.getenv("CORS_ORIGIN", "*"))

    # Database (SQLite file next to the app by default)
    DB_URL: str = field(default_factory=lambda: os.getenv("DB_URL", "sqlite+aiosqlite:///./livesales.db"))

    # Auth
    JWT_SECRET: str = field(default_factory=lambda: os.getenv("JWT_SECRET", DEFAULT_JWT_SECRET))
    JWT_EXPIRES_SECONDS: int = field(
        default_factory=lambda: int(os.getenv("JWT_EXPIRES_SECONDS", str(7 * 24 * 3600)))
    )

    # Uploads
    UPLOAD_DIR: str = field(default_factory=lambda: os.getenv("UPLOAD_DIR", "uploads"))
    MAX_IMAGE_BYTES: int = field(default_factory=lambda: int(os.getenv("MAX_IMAGE_BYTES", str(5 * 1024 * 1024))))

    # Redis
    REDIS_ENABLED: bool = field(default_factory=lambda: _get_bool("REDIS_ENABLED", True))
    REDIS_HOST: str = field(default_factory=lambda: os.getenv("REDIS_HOST", "localhost"))
    REDIS_PORT: int = field(default_factory=lambda: int(os.getenv("REDIS_PORT", "6379")))
    REDIS_DB: int = field(default_factory=lambda: int(os.getenv("REDIS_DB", "0")))
    REDIS_USERNAME: str = field(default_factory=lambda: os.getenv("REDIS_USERNAME", ""))
    REDIS_PASSWORD: str = field(default_factory=lambda: os.getenv("REDIS_PASSWORD", ""))
    REDIS_SSL: bool = field(default_factory=lambda: _get_bool("REDIS_SSL", False))
    REDIS_STOCK_CHANNEL: str = field(default_factory=lambda: os.getenv("REDIS_STOCK_CHANNEL", "stock-updates"))

    @property
    def is_production(self) -> bool:
        return self.APP_ENV.strip().lower() == "production"

    def warn_insecure_defaults(self) -> None:
        if self.JWT_SECRET == DEFAULT_JWT_SECRET:
            _logger.warning("JWT_SECRET not set, using the built-in default (NOT SECURE FOR PRODUCTION)")


settings = Settings()
