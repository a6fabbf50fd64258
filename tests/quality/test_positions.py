"""
Tests for position-level data quality.
"""

from decimal import Decimal

import pytest

from apps.quality.engine.positions import (
    PositionQualityStats,
    field_rate,
    get_position_quality_summary,
    get_positions_by_vehicle,
)
from tests.factories import ClosingFactory, LedgerEntryFactory, VehicleFactory


def incomplete_entry(vehicle, **missing):
    """Ledger row with every position field present except those overridden."""
    return LedgerEntryFactory(vehicle=vehicle, **missing)


class TestFieldRate:
    @pytest.mark.parametrize(
        "missing,total,expected",
        [(0, 0, 0.0), (0, 4, 100.0), (1, 4, 75.0), (1, 3, 66.7), (2, 3, 33.3), (3, 3, 0.0)],
    )
    def test_one_decimal_percentage(self, missing, total, expected):
        assert field_rate(missing, total) == expected


class TestPositionQualitySummary:
    """Test cases for get_position_quality_summary."""

    def test_counts_per_vehicle_and_global_rates(self, vehicle):
        LedgerEntryFactory(vehicle=vehicle)
        incomplete_entry(vehicle, outcome_type="")
        incomplete_entry(vehicle, rounds_id=None, entry_valuation_token=None)
        incomplete_entry(vehicle, entry_valuation_token=None, entry_valuation_equity=Decimal("5"))

        summary = get_position_quality_summary()

        assert len(summary.vehicles) == 1
        row = summary.vehicles[0]
        assert (row.vehicle_id, row.tbv_fund, row.total, row.complete) == ("recFund2", "TBV2", 4, 2)
        assert row.missing_outcome == 1
        assert row.missing_established == 0
        assert row.missing_rounds == 1
        assert row.missing_valuation == 1
        assert summary.stats == PositionQualityStats(
            total=4,
            fully_complete=2,
            needs_attention=2,
            field_rates={
                "outcome_type": 75.0,
                "established_type": 100.0,
                "rounds_id": 75.0,
                "entry_valuation": 75.0,
            },
        )

    @pytest.mark.parametrize("label", [None, "", "TBV0"])
    def test_vehicles_without_fund_label_are_skipped(self, label):
        ClosingFactory(vehicle_id="recUnreported", tbv_fund=label)
        LedgerEntryFactory(vehicle=VehicleFactory(vehicle_id="recUnreported"))

        summary = get_position_quality_summary()

        assert summary.vehicles == []
        assert summary.stats == PositionQualityStats()

    def test_vehicle_without_closing_is_skipped(self):
        LedgerEntryFactory(vehicle=VehicleFactory(vehicle_id="recNoClosing"))
        assert get_position_quality_summary().vehicles == []

    def test_several_closings_label_with_smallest_fund_and_count_rows_once(self):
        ClosingFactory(vehicle_id="recFund3", tbv_fund="TBV3")
        ClosingFactory(vehicle_id="recFund3", tbv_fund="TBV2")
        ClosingFactory(vehicle_id="recFund3", tbv_fund="TBV0")
        fund = VehicleFactory(vehicle_id="recFund3")
        LedgerEntryFactory(vehicle=fund)
        incomplete_entry(fund, rounds_id=None)

        summary = get_position_quality_summary()

        assert [(v.vehicle_id, v.tbv_fund, v.total, v.complete) for v in summary.vehicles] == [
            ("recFund3", "TBV2", 2, 1)
        ]
        assert summary.stats.total == 2

    def test_ordered_by_fund_label_then_vehicle(self):
        for vehicle_id, label in (("recB", "TBV1"), ("recA", "TBV3"), ("recC", "TBV1")):
            ClosingFactory(vehicle_id=vehicle_id, tbv_fund=label)
            LedgerEntryFactory(vehicle=VehicleFactory(vehicle_id=vehicle_id))

        summary = get_position_quality_summary()

        assert [v.vehicle_id for v in summary.vehicles] == ["recB", "recC", "recA"]


class TestPositionsByVehicle:
    """Test cases for get_positions_by_vehicle."""

    def test_least_complete_first_then_ownership_id(self, vehicle):
        LedgerEntryFactory(ownership_id="rec3", vehicle=vehicle)
        LedgerEntryFactory(
            ownership_id="rec2",
            vehicle=vehicle,
            outcome_type=None,
            established_type="",
            rounds_id=None,
            entry_valuation_token=None,
        )
        LedgerEntryFactory(ownership_id="rec1", vehicle=vehicle, rounds_id="")
        LedgerEntryFactory(ownership_id="rec0", vehicle=vehicle, established_type=None)

        rows = get_positions_by_vehicle("recFund2")

        assert [(r.ownership_id, r.filled_count) for r in rows] == [
            ("rec2", 0),
            ("rec0", 3),
            ("rec1", 3),
            ("rec3", 4),
        ]
        assert rows[1].has_established_type is False
        assert rows[1].has_outcome_type is True
        assert rows[1].has_entry_valuation is True

    def test_blank_project_id_reported_as_none(self, vehicle):
        LedgerEntryFactory(vehicle=vehicle, project_id="")
        assert get_positions_by_vehicle("recFund2")[0].project_id is None

    def test_unknown_vehicle(self):
        assert get_positions_by_vehicle("recNope") == []
