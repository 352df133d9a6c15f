# backend/tuldokbenta/config.py
from __future__ import annotations
import os


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # SQLite DB stored in backend/instance/tuldokbenta.sqlite3
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional alternative location
        "sqlite:///tuldokbenta.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Invoice numbering: INV-0001, INV-0002, ...
    INVOICE_PREFIX = os.environ.get("INVOICE_PREFIX", "INV-")
    INVOICE_NUMBER_WIDTH = int(os.environ.get("INVOICE_NUMBER_WIDTH", "4"))
    INVOICE_FIRST_NUMBER = int(os.environ.get("INVOICE_FIRST_NUMBER", "1"))

    # Comma separated list of browser origins allowed to call the API
    CORS_ALLOWED_ORIGINS = [
        origin.strip()
        for origin in os.environ.get(
            "CORS_ALLOWED_ORIGINS",
            "http://localhost:5173,http://127.0.0.1:5173,http://localhost:4173,http://127.0.0.1:4173",
        ).split(",")
        if origin.strip()
    ]

    # Operator login; disable only for local development and tests
    AUTH_REQUIRED = _env_bool("AUTH_REQUIRED", True)
    SESSION_HOURS = int(os.environ.get("SESSION_HOURS", "12"))

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
