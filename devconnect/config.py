"""
Configuration for the devconnect API.

Everything is read from environment variables so the same code runs in
development and behind gunicorn. Tests pass overrides to ``create_app``.
"""

import os
from pathlib import Path

BASE_DIR = Path(__file__).parent.parent.resolve()


def _env_bool(name: str, default: str = "0") -> bool:
    return os.environ.get(name, default).lower() in ("1", "true", "yes")


class Config:
    DATABASE = os.environ.get("DEVCONNECT_DATABASE", str(BASE_DIR / "devconnect.db"))

    SECRET_KEY = os.environ.get("DEVCONNECT_JWT_SECRET", None)
    if not SECRET_KEY:
        # In production this MUST be set. For dev only fallback:
        SECRET_KEY = "please_set_DEVCONNECT_JWT_SECRET_in_env"
    JWT_ALGORITHM = os.environ.get("DEVCONNECT_JWT_ALGORITHM", "HS256")
    JWT_EXP_SECONDS = int(os.environ.get("DEVCONNECT_JWT_EXP_SECONDS", 60 * 60 * 3))  # 3 hours

    AUTH_COOKIE_NAME = "auth-token"
    COOKIE_SECURE = _env_bool("DEVCONNECT_COOKIE_SECURE")

    CORS_ORIGINS = os.environ.get("DEVCONNECT_CORS_ORIGINS", "http://localhost:5173")
    MAX_CONTENT_LENGTH = int(os.environ.get("DEVCONNECT_MAX_CONTENT_LENGTH", 10 * 1024 * 1024))

    LOG_LEVEL = os.environ.get("DEVCONNECT_LOG_LEVEL", "INFO")

    DEFAULT_AVATAR = "./assets/avatar.png"
