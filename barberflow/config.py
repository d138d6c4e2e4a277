"""Environment-driven settings for the BarberFlow API."""
from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)


def _int_env(name: str, default: int) -> int:
    return int(os.getenv(name, str(default)))


class Config:
    """Default settings. Values can be overridden through ``APP_SETTINGS`` or ``create_app``."""

    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-change-me")
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///barberflow.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    PORT = _int_env("PORT", 3000)
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")

    # Session tokens expire 24 hours after issue; there is no refresh.
    TOKEN_MAX_AGE = _int_env("TOKEN_MAX_AGE", 86400)

    REQUEST_TIMEOUT_SECONDS = _int_env("REQUEST_TIMEOUT_SECONDS", 30)
    DB_POOL_SIZE = _int_env("DB_POOL_SIZE", 10)
    DB_MAX_OVERFLOW = _int_env("DB_MAX_OVERFLOW", 5)
    DB_POOL_TIMEOUT = _int_env("DB_POOL_TIMEOUT", 10)

    # Legacy master password accepted for any account. Unset disables it.
    LOGIN_BYPASS_PASSWORD = os.getenv("LOGIN_BYPASS_PASSWORD") or None


def engine_options(config) -> dict[str, object]:
    """Pool and statement-timeout options for server databases.

    SQLite (used by the test suite) keeps Flask-SQLAlchemy's defaults since its
    static in-memory pool rejects sizing arguments.
    """
    uri = config["SQLALCHEMY_DATABASE_URI"]
    if uri.startswith("sqlite"):
        return {}

    options: dict[str, object] = {
        "pool_pre_ping": True,
        "pool_size": config["DB_POOL_SIZE"],
        "max_overflow": config["DB_MAX_OVERFLOW"],
        "pool_timeout": config["DB_POOL_TIMEOUT"],
    }
    if uri.startswith("postgresql"):
        timeout_ms = config["REQUEST_TIMEOUT_SECONDS"] * 1000
        options["connect_args"] = {"options": f"-c statement_timeout={timeout_ms}"}
    return options
