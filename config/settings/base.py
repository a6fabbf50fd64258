"""
Base Django settings shared by every environment.

Environment-specific modules (dev, prod, test) import everything from here and
override what differs. Connection details for the warehouse come from the
POSTGRES_* environment variables.
"""

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent.parent

SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", "insecure-dev-key-change-me")

DEBUG = False

ALLOWED_HOSTS = [
    host.strip()
    for host in os.environ.get("DJANGO_ALLOWED_HOSTS", "localhost,127.0.0.1").split(",")
    if host.strip()
]

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "djmoney",
    "apps.universe",
    "apps.ledger",
    "apps.quality",
    "apps.soi",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "config.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [BASE_DIR / "templates"],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

WSGI_APPLICATION = "config.wsgi.application"

DEFAULT_SEARCH_PATH = "at_tables,tbv_db,public"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.postgresql",
        "HOST": os.environ.get("POSTGRES_HOST", "localhost"),
        "PORT": os.environ.get("POSTGRES_PORT", "5432"),
        "NAME": os.environ.get("POSTGRES_DB", "ledgerlens"),
        "USER": os.environ.get("POSTGRES_USER", "ledgerlens"),
        "PASSWORD": os.environ.get("POSTGRES_PASSWORD", ""),
        "CONN_MAX_AGE": int(os.environ.get("POSTGRES_CONN_MAX_AGE", "20")),
        "OPTIONS": {
            "sslmode": os.environ.get("POSTGRES_SSLMODE", "require"),
            "connect_timeout": int(os.environ.get("POSTGRES_CONNECT_TIMEOUT", "10")),
            # Warehouse tables live in the at_tables and tbv_db schemas
            "options": f"-c search_path={os.environ.get('POSTGRES_SEARCH_PATH', DEFAULT_SEARCH_PATH)}",
        },
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

AUTH_PASSWORD_VALIDATORS = [
    {"NAME": "django.contrib.auth.password_validation.MinimumLengthValidator"},
]

LOGIN_URL = "login"
LOGIN_REDIRECT_URL = "quality:stats"

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"
STATIC_ROOT = BASE_DIR / "staticfiles"

# Money
DEFAULT_CURRENCY = os.environ.get("DEFAULT_CURRENCY", "USD")
CURRENCIES = ("USD", "EUR", "GBP", "SGD", "HKD", "CHF")

# Warehouse tables are owned upstream; only tests let Django create them.
LEDGER_TABLES_MANAGED = os.environ.get("LEDGER_TABLES_MANAGED", "0") == "1"

# Reporting engine
QUALITY_DEFAULT_PAGE_SIZE = int(os.environ.get("QUALITY_DEFAULT_PAGE_SIZE", "50"))
QUALITY_MAX_PAGE_SIZE = int(os.environ.get("QUALITY_MAX_PAGE_SIZE", "500"))
SOI_DEFAULT_TOP_N = int(os.environ.get("SOI_DEFAULT_TOP_N", "50"))

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "{asctime} {levelname} {name} {message}",
            "style": "{",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": "WARNING",
    },
    "loggers": {
        "apps": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
        "libs": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
    },
}
