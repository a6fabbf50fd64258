"""
Shared pytest fixtures for all tests.
"""

# Ensure Django is configured before importing anything that uses Django settings
pytest_plugins = ["pytest_django"]

from datetime import date  # noqa: E402

import pytest  # noqa: E402
from django.test import RequestFactory  # noqa: E402

from tests.factories import ClosingFactory, UserFactory, VehicleFactory  # noqa: E402


@pytest.fixture
def rf():
    """Request factory for testing views."""
    return RequestFactory()


@pytest.fixture
def user():
    """Fixture to create a User instance."""
    return UserFactory()


@pytest.fixture
def logged_in_client(client, user):
    """Django test client authenticated as the shared dashboard user."""
    client.force_login(user)
    return client


@pytest.fixture
def vehicle():
    """Fixture to create a reporting Vehicle closed into the TBV2 fund family."""
    ClosingFactory(vehicle_id="recFund2", tbv_fund="TBV2")
    return VehicleFactory(vehicle_id="recFund2")


@pytest.fixture
def portfolio_date():
    """Quarter-end portfolio date used across reporting tests."""
    return date(2025, 9, 30)


@pytest.fixture(autouse=True)
def enable_db_access_for_all_tests(db):
    """
    Give all tests access to the database.
    This is equivalent to @pytest.mark.django_db on every test.
    """
    pass
