"""
Base factories for creating test data using Factory Boy.
"""

from datetime import date
from decimal import Decimal

import factory
from django.conf import settings
from django.contrib.auth import get_user_model

from apps.ledger.models import LedgerEntry, MarketValueEntry
from apps.universe.models import Closing, Project, ProjectUpdate, Vehicle

User = get_user_model()


class UserFactory(factory.django.DjangoModelFactory):
    """Factory for creating User test instances."""

    class Meta:
        model = User

    username = factory.Sequence(lambda n: f"user{n}")
    email = factory.LazyAttribute(lambda obj: f"{obj.username}@example.com")
    first_name = factory.Faker("first_name")
    last_name = factory.Faker("last_name")
    is_active = True


# Universe Factories


class VehicleFactory(factory.django.DjangoModelFactory):
    """Factory for creating Vehicle test instances."""

    class Meta:
        model = Vehicle
        django_get_or_create = ("vehicle_id",)

    vehicle_id = factory.Sequence(lambda n: f"recVehicle{n}")
    full_investment_name = factory.Sequence(lambda n: f"Fund {n} LP")
    fund_manager = "Acme Capital"
    vintage = 2021
    base_currency = settings.DEFAULT_CURRENCY


class ClosingFactory(factory.django.DjangoModelFactory):
    """Factory for creating Closing (fund family) test instances."""

    class Meta:
        model = Closing

    vehicle_id = factory.Sequence(lambda n: f"recVehicle{n}")
    tbv_fund = "TBV1"
    tbv_vehicle_id = factory.Sequence(lambda n: f"recTbv{n}")


class ProjectFactory(factory.django.DjangoModelFactory):
    """
    Factory for creating Project test instances.

    Every enrichment field is filled by default; pass None or "" to blank one.
    """

    class Meta:
        model = Project

    project_id = factory.Sequence(lambda n: f"Project {n:03d}")
    coingecko_id = factory.Sequence(lambda n: f"project-{n}")
    project_stack = "Ethereum"
    project_tag = "DeFi"
    project_sub_tag = "DEX"
    website = factory.Sequence(lambda n: f"https://project{n}.example.com")
    description = factory.Faker("sentence")
    project_logo_url = None


class ProjectUpdateFactory(factory.django.DjangoModelFactory):
    """Factory for creating ProjectUpdate test instances."""

    class Meta:
        model = ProjectUpdate

    project_id = "Polymarket"
    summary = factory.Faker("paragraph")
    source_document_date = date(2025, 6, 30)
    source_document_name = factory.Sequence(lambda n: f"Q2 update {n}.pdf")
    note_tags = '["Fundraise", "Product"]'


# Ledger Factories


class LedgerEntryFactory(factory.django.DjangoModelFactory):
    """Factory for creating LedgerEntry (ownership ledger) test instances."""

    class Meta:
        model = LedgerEntry

    ownership_id = factory.Sequence(lambda n: f"recOwn{n:05d}")
    vehicle = factory.SubFactory(VehicleFactory)
    project_id = "Polymarket"
    delta_cost = Decimal("100")
    outcome_type = "Token"
    asset_class = "Tokens"
    established_type = "Established"
    rounds_id = factory.Sequence(lambda n: f"recRound{n}")
    entry_valuation_token = Decimal("1000000")
    entry_valuation_equity = None
    date_reported = date(2025, 3, 31)


class MarketValueEntryFactory(factory.django.DjangoModelFactory):
    """Factory for creating MarketValueEntry test instances."""

    class Meta:
        model = MarketValueEntry

    vehicle = factory.SubFactory(VehicleFactory)
    project_id = "Polymarket"
    asset_class = "Tokens"
    portfolio_date = date(2025, 9, 30)
    unrealized_market_value = Decimal("150")
    realized_market_value = Decimal("0")
