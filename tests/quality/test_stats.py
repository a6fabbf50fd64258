"""
Tests for corpus completeness statistics.
"""

from decimal import Decimal
from unittest.mock import patch

import pytest
from django.db import OperationalError

from apps.quality.engine.completeness import ENRICHMENT_FIELDS
from apps.quality.engine.stats import CorpusStats, fill_rate, get_completeness_stats
from tests.factories import LedgerEntryFactory, ProjectFactory, VehicleFactory


def make_project(project_id, filled):
    """Project with the first `filled` enrichment fields set and the rest blank."""
    values = {
        field: (f"{field}-value" if index < filled else None)
        for index, field in enumerate(ENRICHMENT_FIELDS)
    }
    return ProjectFactory(project_id=project_id, **values)


class TestGetCompletenessStats:
    """Test cases for get_completeness_stats."""

    def test_end_to_end_scenario(self):
        """Filled counts {6, 5, 2, 0}."""
        for project_id, filled in (("A", 6), ("B", 5), ("C", 2), ("D", 0)):
            make_project(project_id, filled)

        stats = get_completeness_stats()

        assert stats.total_projects == 4
        assert stats.avg_completeness == pytest.approx((100 + 500 / 6 + 200 / 6 + 0) / 4)
        assert round(stats.avg_completeness) == 54
        assert stats.fully_enriched == 1
        assert stats.needs_attention == 2
        # coingecko_id is filled on A, B and C; description only on A
        assert stats.field_fill_rates["coingecko_id"] == pytest.approx(75.0)
        assert stats.field_fill_rates["description"] == pytest.approx(25.0)

    def test_blank_strings_do_not_count(self):
        ProjectFactory(project_id="A", website="   ", description="")

        stats = get_completeness_stats()

        assert stats.field_fill_rates["website"] == 0
        assert stats.field_fill_rates["description"] == 0
        assert stats.field_fill_rates["coingecko_id"] == 100

    def test_empty_universe(self):
        stats = get_completeness_stats()

        assert stats == CorpusStats()
        assert stats.to_dict() == {
            "total_projects": 0,
            "avg_completeness": 0.0,
            "fully_enriched": 0,
            "needs_attention": 0,
            "field_fill_rates": {field: 0.0 for field in ENRICHMENT_FIELDS},
        }

    def test_vehicle_scope(self):
        fund = VehicleFactory(vehicle_id="recFund2")
        other = VehicleFactory(vehicle_id="recFund3")
        make_project("Held", 6)
        make_project("Elsewhere", 0)
        make_project("Unheld", 1)
        LedgerEntryFactory(vehicle=fund, project_id="Held", outcome_type="Cash", delta_cost=Decimal("5"))
        LedgerEntryFactory(vehicle=other, project_id="Elsewhere")

        stats = get_completeness_stats("recFund2")

        assert stats.total_projects == 1
        assert stats.fully_enriched == 1
        assert stats.avg_completeness == pytest.approx(100.0)

    def test_store_failure_degrades_to_zero_stats(self):
        make_project("A", 6)
        with patch("apps.quality.engine.stats.scoped_projects") as scoped:
            scoped.side_effect = OperationalError("connection refused")
            stats = get_completeness_stats()

        assert stats == CorpusStats()


class TestFillRate:
    def test_zero_total(self):
        assert fill_rate(0, 0) == 0.0

    def test_rate(self):
        assert fill_rate(1, 3) == pytest.approx(33.333, rel=1e-3)
