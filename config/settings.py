"""
Stockbook - Django Settings (Infrastructure Only)
==================================================
Django serves as the framework container for Stockbook.
The valuation engine does not depend on Django; only the stock history
store and the HTTP adapter do.
"""

import os
from pathlib import Path

# ── Paths ─────────────────────────────────────────────────────
BASE_DIR = Path(__file__).resolve().parent.parent

# ── Security ──────────────────────────────────────────────────
SECRET_KEY = os.environ.get("STOCKBOOK_SECRET_KEY", "stockbook-dev-key-replace-before-deployment")

DEBUG = os.environ.get("STOCKBOOK_DEBUG", "1") == "1"

ALLOWED_HOSTS = [
    host for host in os.environ.get("STOCKBOOK_ALLOWED_HOSTS", "").split(",") if host
]

# ── Installed Apps ────────────────────────────────────────────
INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "core.stock_history",
]

# ── Middleware ────────────────────────────────────────────────
MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
]

# ── URL ───────────────────────────────────────────────────────
ROOT_URLCONF = "config.urls"

# ── Database ──────────────────────────────────────────────────
# SQLite for development. Production DB configured separately.
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": os.environ.get("STOCKBOOK_DB_PATH", BASE_DIR / "db.sqlite3"),
    }
}

# ── Internationalization ──────────────────────────────────────
LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# ── Valuation ─────────────────────────────────────────────────
# Read by adapters.django_api.wiring into ValuationConfig.
STOCKBOOK_VALUATION = {
    "COST_PLACES": 4,
    "CURRENCY_PLACES": 2,
    "IDENTITY_TOLERANCE": "0.01",
    "TIME_ZONE": TIME_ZONE,
}

# ── Logging ───────────────────────────────────────────────────
LOG_LEVEL = os.environ.get("STOCKBOOK_LOG_LEVEL", "INFO")

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {
            "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "standard",
        },
    },
    "loggers": {
        "stockbook": {
            "handlers": ["console"],
            "level": LOG_LEVEL,
            "propagate": True,
        },
    },
}
