"""
Runtime configuration.

Every value comes from the environment. A `.env` file at the repository
root is loaded first when it exists, so local setups don't need exports.
"""
from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parents[3]
env_path = BASE_DIR / ".env"
if env_path.exists():
    load_dotenv(dotenv_path=env_path)


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


# ---------- DATABASE ----------
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./bloodbank.db")

# ---------- HTTP ----------
PORT = int(os.getenv("PORT", "5002"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
CORS_ORIGINS: list[str] = [
    o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()
]

# ---------- EMAIL ----------
# smtp | api | none
EMAIL_BACKEND = os.getenv("EMAIL_BACKEND", "none").lower()
EMAIL_FROM = os.getenv("EMAIL_FROM", "no-reply@bloodbank.local")
EMAIL_TIMEOUT_SECONDS = float(os.getenv("EMAIL_TIMEOUT_SECONDS", "10"))

SMTP_HOST = os.getenv("SMTP_HOST", "localhost")
SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
SMTP_USER = os.getenv("SMTP_USER", "")
SMTP_PASSWORD = os.getenv("SMTP_PASSWORD", "")
SMTP_USE_TLS = _env_bool("SMTP_USE_TLS", "1")

EMAIL_API_URL = os.getenv("EMAIL_API_URL", "https://api.brevo.com/v3/smtp/email")
EMAIL_API_KEY = os.getenv("EMAIL_API_KEY", "")

# ---------- NOTIFICATIONS ----------
# how long a request waits for its own notification outcome
NOTIFY_WAIT_SECONDS = float(os.getenv("NOTIFY_WAIT_SECONDS", "5"))
NOTIFY_QUEUE_SIZE = int(os.getenv("NOTIFY_QUEUE_SIZE", "100"))
NOTIFY_WORKERS = int(os.getenv("NOTIFY_WORKERS", "2"))
