"""
Tests for MOIC buckets and the per-bucket project drill-down.
"""

from datetime import date
from decimal import Decimal
from unittest.mock import patch

import pytest
from django.db import OperationalError

from apps.soi.choices import MoicBucket
from apps.soi.engine.buckets import get_moic_bucket_projects, get_moic_buckets
from apps.soi.engine.holdings import AssetSplit
from apps.soi.engine.schedule import get_schedule_of_investments
from tests.factories import LedgerEntryFactory, MarketValueEntryFactory


def add_position(vehicle, project_id, cost, unrealized, asset_class="Tokens", realized="0"):
    if cost is not None:
        LedgerEntryFactory(
            vehicle=vehicle, project_id=project_id, asset_class=asset_class, delta_cost=Decimal(cost)
        )
    if unrealized is not None:
        MarketValueEntryFactory(
            vehicle=vehicle,
            project_id=project_id,
            asset_class=asset_class,
            unrealized_market_value=Decimal(unrealized),
            realized_market_value=Decimal(realized),
        )


@pytest.fixture
def bucketed_ledger(vehicle):
    add_position(vehicle, "Alpha", "100", "250")
    add_position(vehicle, "Beta", "100", "1100", asset_class="Equity", realized="100")
    add_position(vehicle, "Gamma", "200", None)
    add_position(vehicle, "Delta", "100", "100", asset_class="SAFT")
    add_position(vehicle, "Epsilon", "150", "300")
    # Cash is an excluded position, never bucketed
    LedgerEntryFactory(vehicle=vehicle, project_id="USDC", outcome_type="Cash", delta_cost=Decimal("900"))


@pytest.mark.usefixtures("bucketed_ledger")
class TestGetMoicBuckets:
    """Test cases for get_moic_buckets."""

    def test_buckets_in_order_without_empty_ones(self, portfolio_date):
        buckets = get_moic_buckets("recFund2", portfolio_date)

        assert [(row.bucket, row.project_count, row.project_percentage) for row in buckets] == [
            (MoicBucket.GRAND_SLAM, 1, 20.0),
            (MoicBucket.DOUBLES, 2, 40.0),
            (MoicBucket.COST, 1, 20.0),
            (MoicBucket.WRITE_OFF, 1, 20.0),
        ]

    def test_bucket_amounts_keep_asset_split(self, portfolio_date):
        buckets = {row.bucket: row for row in get_moic_buckets("recFund2", portfolio_date)}

        doubles = buckets[MoicBucket.DOUBLES]
        assert doubles.cost == AssetSplit(tokens=Decimal("250"))
        assert doubles.unrealized_mv == AssetSplit(tokens=Decimal("550"))
        assert doubles.moic == 2.2

        grand_slam = buckets[MoicBucket.GRAND_SLAM]
        assert grand_slam.cost == AssetSplit(equity=Decimal("100"))
        assert grand_slam.total_mv == AssetSplit(equity=Decimal("1200"))
        assert buckets[MoicBucket.COST].cost == AssetSplit(others=Decimal("100"))

    def test_buckets_add_up_to_schedule_summary(self, portfolio_date):
        buckets = get_moic_buckets("recFund2", portfolio_date)
        summary = get_schedule_of_investments("recFund2", portfolio_date).summary

        assert sum(row.project_count for row in buckets) == summary.total_positions
        assert sum((row.cost for row in buckets), AssetSplit()) == summary.cost_by_asset
        assert sum((row.cost.total for row in buckets), Decimal("0")) == summary.total_cost
        assert sum((row.total_mv.total for row in buckets), Decimal("0")) == summary.total_mv

    def test_to_dict(self, portfolio_date):
        data = get_moic_buckets("recFund2", portfolio_date)[0].to_dict()

        assert data["bucket"] == "grand_slam"
        assert data["label"] == "Grand Slam (10x+)"
        assert data["cost"] == {"equity": 100.0, "tokens": 0.0, "others": 0.0, "total": 100.0}
        assert data["total_mv"]["total"] == 1200.0
        assert data["moic"] == 12.0
        assert data["moic_display"] == "12.00x"


class TestGetMoicBucketsEdgeCases:
    def test_market_value_without_cost_is_grand_slam(self, vehicle, portfolio_date):
        add_position(vehicle, "Airdrop", None, "75")

        row = get_moic_buckets("recFund2", portfolio_date)[0]

        assert (row.bucket, row.project_count) == (MoicBucket.GRAND_SLAM, 1)
        assert row.to_dict()["moic"] is None
        assert row.to_dict()["moic_display"] == "∞"

    @pytest.mark.parametrize("vehicle_id,when", [(None, date(2025, 9, 30)), ("recFund2", None)])
    def test_missing_scope_is_empty(self, vehicle_id, when):
        assert get_moic_buckets(vehicle_id, when) == []

    def test_vehicle_without_positions(self, vehicle, portfolio_date):
        assert get_moic_buckets("recFund2", portfolio_date) == []

    def test_store_failure_returns_empty(self, portfolio_date):
        with patch("apps.soi.engine.buckets.position_totals") as totals:
            totals.side_effect = OperationalError("server closed the connection")
            assert get_moic_buckets("recFund2", portfolio_date) == []


@pytest.mark.usefixtures("bucketed_ledger")
class TestGetMoicBucketProjects:
    """Test cases for get_moic_bucket_projects."""

    def test_projects_by_cost_desc(self, portfolio_date):
        projects = get_moic_bucket_projects("recFund2", portfolio_date, "doubles")

        assert [(p.project_id, p.cost, p.total_mv, p.moic) for p in projects] == [
            ("Epsilon", Decimal("150"), Decimal("300"), 2.0),
            ("Alpha", Decimal("100"), Decimal("250"), 2.5),
        ]

    def test_ties_fall_back_to_project_id(self, vehicle, portfolio_date):
        add_position(vehicle, "Aardvark", "150", "450")

        projects = get_moic_bucket_projects("recFund2", portfolio_date, "doubles")

        assert [p.project_id for p in projects] == ["Aardvark", "Epsilon", "Alpha"]

    @pytest.mark.parametrize("bucket", ["grand_slam", "doubles", "cost", "write_off"])
    def test_projects_sum_to_bucket(self, bucket, portfolio_date):
        row = next(r for r in get_moic_buckets("recFund2", portfolio_date) if r.bucket == bucket)
        projects = get_moic_bucket_projects("recFund2", portfolio_date, bucket)

        assert len(projects) == row.project_count
        assert sum((p.cost for p in projects), Decimal("0")) == row.cost.total
        assert sum((p.total_mv for p in projects), Decimal("0")) == row.total_mv.total

    @pytest.mark.parametrize("bucket", [None, "", "Grand Slams", "loss"])
    def test_unknown_or_empty_bucket(self, bucket, portfolio_date):
        assert get_moic_bucket_projects("recFund2", portfolio_date, bucket) == []

    def test_to_dict(self, portfolio_date):
        data = get_moic_bucket_projects("recFund2", portfolio_date, "write_off")[0].to_dict()

        assert data == {
            "project_id": "Gamma",
            "cost": 200.0,
            "unrealized_mv": 0.0,
            "realized_mv": 0.0,
            "total_mv": 0.0,
            "moic": 0.0,
            "moic_display": "0.00x",
        }
