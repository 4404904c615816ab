# backend/config.py
import os
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional

from dotenv import load_dotenv

DEFAULT_TOKEN_EXPIRES_HOURS = 168
DEFAULT_CORS_ORIGINS = "http://localhost:8501,http://localhost:8502"


class ConfigError(RuntimeError):
    """Raised at startup when required configuration is missing or invalid."""


@dataclass(frozen=True)
class Settings:
    jwt_secret_key: str
    db_path: str
    token_expires_hours: int = DEFAULT_TOKEN_EXPIRES_HOURS
    cors_origins: List[str] = field(default_factory=list)
    log_level: str = "INFO"


def _lookup(name: str, overrides: Mapping[str, Any]) -> Optional[str]:
    if name in overrides and overrides[name] is not None:
        return str(overrides[name])
    return os.environ.get(name)


def load_settings(overrides: Optional[Mapping[str, Any]] = None) -> Settings:
    """
    Build the process-wide settings from the environment (and .env file).

    Values in `overrides` win over the environment. The signing secret and
    the database path are mandatory: the app refuses to start without them.
    """
    load_dotenv()
    overrides = overrides or {}

    secret = (_lookup("JWT_SECRET_KEY", overrides) or "").strip()
    if not secret:
        raise ConfigError("JWT_SECRET_KEY not set")

    db_path = (_lookup("DB_PATH", overrides) or "").strip()
    if not db_path:
        raise ConfigError("DB_PATH not set")

    raw_hours = _lookup("TOKEN_EXPIRES_HOURS", overrides)
    try:
        hours = int(raw_hours) if raw_hours not in (None, "") else DEFAULT_TOKEN_EXPIRES_HOURS
    except ValueError:
        raise ConfigError(f"TOKEN_EXPIRES_HOURS must be an integer, got {raw_hours!r}")
    if hours < 0:
        raise ConfigError("TOKEN_EXPIRES_HOURS cannot be negative")

    cors = _lookup("CORS_ORIGINS", overrides) or DEFAULT_CORS_ORIGINS
    origins = [o.strip() for o in cors.split(",") if o.strip()]

    log_level = (_lookup("LOG_LEVEL", overrides) or "INFO").upper()

    return Settings(
        jwt_secret_key=secret,
        db_path=db_path,
        token_expires_hours=hours,
        cors_origins=origins,
        log_level=log_level,
    )
