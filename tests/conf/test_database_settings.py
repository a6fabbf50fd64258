"""
Tests for the shared settings module.
"""

import importlib

import pytest

from config.settings import base


@pytest.fixture
def reload_base():
    """Reload the base settings module, restoring it afterwards."""
    yield lambda: importlib.reload(base)
    importlib.reload(base)


class TestDatabaseSettings:
    def test_search_path_covers_warehouse_schemas(self, monkeypatch, reload_base):
        monkeypatch.delenv("POSTGRES_SEARCH_PATH", raising=False)
        options = reload_base().DATABASES["default"]["OPTIONS"]
        assert options["options"] == "-c search_path=at_tables,tbv_db,public"

    def test_search_path_from_environment(self, monkeypatch, reload_base):
        monkeypatch.setenv("POSTGRES_SEARCH_PATH", "staging,public")
        options = reload_base().DATABASES["default"]["OPTIONS"]
        assert options["options"] == "-c search_path=staging,public"
