"""Runtime configuration, built once at startup and handed to the app factory."""
import logging
import os
from typing import NamedTuple, Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_JWT_SECRET = "dev-secret"
ONE_DAY_SECONDS = 60 * 60 * 24


class Settings(NamedTuple):
    database_url: str = "sqlite:///./storefront.db"
    jwt_secret: str = DEFAULT_JWT_SECRET
    jwt_algorithm: str = "HS256"
    token_expires_seconds: int = ONE_DAY_SECONDS
    password_pepper: str = ""
    log_level: str = "INFO"
    log_file: Optional[str] = None
    environment: str = "development"

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()
        settings = cls(
            database_url=os.getenv("DATABASE_URL", cls._field_defaults["database_url"]),
            jwt_secret=os.getenv("JWT_SECRET", DEFAULT_JWT_SECRET),
            jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
            token_expires_seconds=_int_env("TOKEN_EXPIRES_SECONDS", ONE_DAY_SECONDS),
            password_pepper=os.getenv("PASSWORD_PEPPER", ""),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            log_file=os.getenv("LOG_FILE") or None,
            environment=os.getenv("APP_ENV", "development").strip().lower(),
        )
        settings.check()
        return settings

    def check(self) -> None:
        if self.token_expires_seconds <= 0:
            raise ValueError("TOKEN_EXPIRES_SECONDS must be a positive number of seconds")
        if self.jwt_secret == DEFAULT_JWT_SECRET:
            if self.environment == "production":
                raise ValueError("JWT_SECRET must be configured in production")
            logger.warning("JWT_SECRET is not set, using the development secret")


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
