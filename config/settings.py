"""
MERIT – Django Settings (Infrastructure Only)
==============================================
Django serves as the framework container for the MERIT ledger.
The ledger architecture is the authority — Django does not dictate structure.

Ledger-specific settings are prefixed MERIT_ and read from the
environment with development defaults.
"""

import os
from pathlib import Path

# ── Paths ─────────────────────────────────────────────────────
BASE_DIR = Path(__file__).resolve().parent.parent

# ── Security ──────────────────────────────────────────────────
SECRET_KEY = os.environ.get("MERIT_SECRET_KEY", "merit-dev-key-replace-before-deployment")

DEBUG = os.environ.get("MERIT_DEBUG", "1") == "1"

ALLOWED_HOSTS = ["testserver", "localhost", "127.0.0.1"]

# ── Installed Apps ────────────────────────────────────────────
# Django infrastructure only. The ledger keeps no Django models.
INSTALLED_APPS = [
    "django.contrib.auth",
    "django.contrib.contenttypes",
]

# ── Middleware ────────────────────────────────────────────────
MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
]

# ── URL ───────────────────────────────────────────────────────
ROOT_URLCONF = "config.urls"

# ── Database ──────────────────────────────────────────────────
# Required by contrib apps only; ledger state is in memory.
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": BASE_DIR / "db.sqlite3",
    }
}

# ── Internationalization ──────────────────────────────────────
LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# ── Ledger ────────────────────────────────────────────────────
MERIT_ADMINISTRATOR_ID = os.environ.get("MERIT_ADMINISTRATOR_ID", "merit-admin")

# DROP: full collections ignore new entries. REJECT: admission is refused.
MERIT_OVERFLOW_POLICY = os.environ.get("MERIT_OVERFLOW_POLICY", "DROP")

MERIT_DEV_ADMIN_API_KEY = "dev-admin-key"
MERIT_DEV_PARTICIPANT_API_KEY = "dev-participant-key"

# API key → actor id.
MERIT_API_KEYS = {
    MERIT_DEV_ADMIN_API_KEY: MERIT_ADMINISTRATOR_ID,
    MERIT_DEV_PARTICIPANT_API_KEY: "dev-participant",
}

# ── Logging ───────────────────────────────────────────────────
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "plain": {
            "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "plain",
        },
    },
    "loggers": {
        "merit": {
            "handlers": ["console"],
            "level": os.environ.get("MERIT_LOG_LEVEL", "INFO"),
            "propagate": True,
        },
    },
}
