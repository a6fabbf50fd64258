"""
Settings for the pytest suite.

Runs against an in-memory SQLite database. The warehouse tables are normally
owned upstream; here Django creates them straight from the models.
"""

from .base import *  # noqa: F403

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}


# No app ships migrations; build every table with syncdb.
class DisableMigrations:
    def __contains__(self, item):
        return True

    def __getitem__(self, item):
        return None


MIGRATION_MODULES = DisableMigrations()

LEDGER_TABLES_MANAGED = True

PASSWORD_HASHERS = [
    "django.contrib.auth.hashers.MD5PasswordHasher",
]

# Leave logging unconfigured so pytest's caplog sees every record
LOGGING_CONFIG = None

QUALITY_DEFAULT_PAGE_SIZE = 50
SOI_DEFAULT_TOP_N = 50
