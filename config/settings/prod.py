"""
Production settings: the dashboard runs behind TLS with a real secret key.
"""

import os

from .base import *  # noqa: F403

DEBUG = False

SECRET_KEY = os.environ["DJANGO_SECRET_KEY"]

# The dashboard is read-heavy; keep warehouse connections open longer
DATABASES["default"]["CONN_MAX_AGE"] = int(  # noqa: F405
    os.environ.get("POSTGRES_CONN_MAX_AGE", "60")
)

SECURE_SSL_REDIRECT = os.environ.get("SECURE_SSL_REDIRECT", "1") == "1"
SECURE_PROXY_SSL_HEADER = ("HTTP_X_FORWARDED_PROTO", "https")
SESSION_COOKIE_SECURE = True
CSRF_COOKIE_SECURE = True
SECURE_HSTS_SECONDS = int(os.environ.get("SECURE_HSTS_SECONDS", "31536000"))
SECURE_HSTS_INCLUDE_SUBDOMAINS = True
