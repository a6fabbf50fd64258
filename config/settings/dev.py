# config/settings/dev.py
import os

from .base import *  # noqa: F403

DEBUG = True

ALLOWED_HOSTS = ["*"]

# Local runs can point at a plain Postgres without TLS.
DATABASES["default"]["OPTIONS"]["sslmode"] = os.environ.get(  # noqa: F405
    "POSTGRES_SSLMODE", "prefer"
)
