# petspa/config.py

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)


def _as_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./petspa.db")

# Security - no default secret key in production
SECRET_KEY = os.getenv("SECRET_KEY")
if not SECRET_KEY:
    import warnings

    warnings.warn("SECRET_KEY not set! Using insecure default - DO NOT USE IN PRODUCTION", RuntimeWarning, stacklevel=2)
    SECRET_KEY = "INSECURE-DEV-KEY-CHANGE-IN-PRODUCTION"  # noqa: S105

ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "30"))

# Comma separated list of e-mails allowed into the admin console
ADMIN_EMAILS = [
    e.strip().lower()
    for e in os.getenv("ADMIN_EMAILS", "admin@princesaspetshop.com").split(",")
    if e.strip()
]

SHOP_TIMEZONE = os.getenv("SHOP_TIMEZONE", "America/Sao_Paulo")

# true: blocked appointments show up in the agenda as their own entry kind
# false: blocking is done with recurrence rules and blocked rows are ignored
LEGACY_BLOCKED_APPOINTMENTS = _as_bool(os.getenv("LEGACY_BLOCKED_APPOINTMENTS", "true"))

SLOT_MINUTES = int(os.getenv("SLOT_MINUTES", "30"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
