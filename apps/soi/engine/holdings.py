"""
Normal positions of a vehicle, split by asset class.

A normal position is what the excluded-position categories leave out. Cost is
the attributed cost (no cash rows, no Other Assets placeholder) cumulatively up
to the portfolio date; market value comes from rows on the portfolio date
outside the Cash, Flows and NAV Adjustment asset classes. Both sides are
grouped per (project, asset class) and folded into an AssetSplit, so the
schedule of investments and the MOIC buckets read the same figures.

Key functions:
- position_totals: Cost, unrealized and realized value per project
- AssetSplit: Equity / tokens / others amounts with their total
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date
from decimal import Decimal

from django.db.models import Sum

from apps.ledger.models import MarketValueEntry
from apps.ledger.services.cost_attribution import investment_entries
from libs.choices import OTHER_ASSETS_PROJECT_ID, AssetClass
from libs.numeric import ZERO, to_number

EXCLUDED_ASSET_CLASSES = (AssetClass.CASH, AssetClass.NAV_ADJUSTMENT, AssetClass.FLOWS)

SPLIT_FIELDS = {AssetClass.EQUITY: "equity", AssetClass.TOKENS: "tokens"}


@dataclass(frozen=True)
class AssetSplit:
    """
    An amount broken down into equity, tokens and everything else.

    Any asset class other than Equity and Tokens, including a missing one,
    lands in others.
    """

    equity: Decimal = ZERO
    tokens: Decimal = ZERO
    others: Decimal = ZERO

    @property
    def total(self) -> Decimal:
        return self.equity + self.tokens + self.others

    def with_amount(self, asset_class: str | None, amount: Decimal) -> AssetSplit:
        name = SPLIT_FIELDS.get(asset_class, "others")
        return replace(self, **{name: getattr(self, name) + amount})

    def __add__(self, other: AssetSplit) -> AssetSplit:
        return AssetSplit(
            equity=self.equity + other.equity,
            tokens=self.tokens + other.tokens,
            others=self.others + other.others,
        )

    def to_dict(self) -> dict:
        return {
            "equity": float(self.equity),
            "tokens": float(self.tokens),
            "others": float(self.others),
            "total": float(self.total),
        }


@dataclass(frozen=True)
class Position:
    project_id: str
    cost: AssetSplit = field(default_factory=AssetSplit)
    unrealized: AssetSplit = field(default_factory=AssetSplit)
    realized: AssetSplit = field(default_factory=AssetSplit)

    @property
    def total_mv(self) -> AssetSplit:
        return self.unrealized + self.realized


def position_totals(vehicle_id: str, portfolio_date: date) -> dict[str, Position]:
    """Cost and market value per normal position, keyed by project id."""
    positions: dict[str, Position] = {}

    def position(project_id: str) -> Position:
        return positions.get(project_id) or Position(project_id=project_id)

    cost_groups = (
        investment_entries(vehicle_id)
        .filter(date_reported__lte=portfolio_date)
        .exclude(project_id__isnull=True)
        .values("project_id", "asset_class")
        .annotate(cost=Sum("delta_cost"))
        .order_by()
    )
    for row in cost_groups:
        current = position(row["project_id"])
        positions[current.project_id] = replace(
            current,
            cost=current.cost.with_amount(row["asset_class"], to_number(row["cost"])),
        )

    mv_groups = (
        MarketValueEntry.objects.filter(
            vehicle_id=vehicle_id, portfolio_date=portfolio_date
        )
        .exclude(asset_class__in=EXCLUDED_ASSET_CLASSES)
        .exclude(project_id=OTHER_ASSETS_PROJECT_ID)
        .exclude(project_id__isnull=True)
        .values("project_id", "asset_class")
        .annotate(
            realized=Sum("realized_market_value"),
            unrealized=Sum("unrealized_market_value"),
        )
        .order_by()
    )
    for row in mv_groups:
        current = position(row["project_id"])
        asset_class = row["asset_class"]
        positions[current.project_id] = replace(
            current,
            unrealized=current.unrealized.with_amount(asset_class, to_number(row["unrealized"])),
            realized=current.realized.with_amount(asset_class, to_number(row["realized"])),
        )

    return positions
