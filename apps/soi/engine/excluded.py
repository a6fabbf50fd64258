"""
Excluded positions: ledger rows reported outside the normal investment set.

Rows are sorted into four categories (Other Assets, Cash & Cash Equivalents,
NAV Adjustment, Flows) by the predicates in COST_PREDICATES and MV_PREDICATES.
Those predicates are the single definition of every category: the category
aggregates, the line-item drill-down and the independent grand total in
reconciliation all filter with them. Within each side the predicates are
mutually exclusive, so every ledger row lands in at most one category.

Cost comes from the ownership ledger (cumulative up to the portfolio date, or
within an explicit reported-date range); market value comes from the fund
market-value table on the portfolio date. The two are full-outer-joined per
(category, project), and category aggregates are folds over exactly those
line items, so drill-down rows always sum to their category.

Key functions:
- get_excluded_positions: Category aggregates in display order
- get_excluded_position_details: Line items composing one category
- build_line_items: The shared (category, project) join
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from datetime import date
from decimal import Decimal

from django.db.models import Q, QuerySet, Sum

from apps.ledger.models import LedgerEntry, MarketValueEntry
from apps.soi.choices import ExcludedCategory
from libs.choices import OTHER_ASSETS_PROJECT_ID, AssetClass, OutcomeType
from libs.errors import degrade_on_store_error
from libs.numeric import ZERO, to_number

logger = logging.getLogger(__name__)

UNKNOWN_DESCRIPTION = "Unknown"

IS_OTHER_ASSETS = Q(project_id=OTHER_ASSETS_PROJECT_ID)

# Flows and NAV Adjustment never carry cost rows.
COST_PREDICATES: dict[str, Q] = {
    ExcludedCategory.OTHER_ASSETS: IS_OTHER_ASSETS,
    ExcludedCategory.CASH: Q(outcome_type=OutcomeType.CASH) & ~IS_OTHER_ASSETS,
}

MV_PREDICATES: dict[str, Q] = {
    ExcludedCategory.OTHER_ASSETS: IS_OTHER_ASSETS,
    ExcludedCategory.CASH: Q(asset_class=AssetClass.CASH) & ~IS_OTHER_ASSETS,
    ExcludedCategory.NAV_ADJUSTMENT: Q(asset_class=AssetClass.NAV_ADJUSTMENT)
    & ~IS_OTHER_ASSETS,
    ExcludedCategory.FLOWS: Q(asset_class=AssetClass.FLOWS) & ~IS_OTHER_ASSETS,
}


@dataclass(frozen=True)
class ExcludedScope:
    """
    Vehicle and date window the excluded positions are computed for.

    Cost rows fall in scope when date_reported is within [reported_start,
    reported_end] if both bounds are given, otherwise on or before
    portfolio_date. Market-value rows must sit exactly on portfolio_date.
    """

    vehicle_id: str | None
    portfolio_date: date | None
    reported_start: date | None = None
    reported_end: date | None = None

    @property
    def is_empty(self) -> bool:
        return not self.vehicle_id or self.portfolio_date is None

    @property
    def uses_reported_range(self) -> bool:
        return self.reported_start is not None and self.reported_end is not None

    def cost_rows(self) -> QuerySet:
        queryset = LedgerEntry.objects.filter(vehicle_id=self.vehicle_id)
        if self.uses_reported_range:
            return queryset.filter(
                date_reported__gte=self.reported_start,
                date_reported__lte=self.reported_end,
            )
        return queryset.filter(date_reported__lte=self.portfolio_date)

    def mv_rows(self) -> QuerySet:
        return MarketValueEntry.objects.filter(
            vehicle_id=self.vehicle_id, portfolio_date=self.portfolio_date
        )


@dataclass(frozen=True)
class ExcludedPositionDetail:
    project_id: str | None
    description: str
    cost: Decimal
    unrealized_mv: Decimal
    realized_mv: Decimal
    total_mv: Decimal

    def to_dict(self) -> dict:
        data = asdict(self)
        for key in ("cost", "unrealized_mv", "realized_mv", "total_mv"):
            data[key] = float(data[key])
        return data


@dataclass(frozen=True)
class ExcludedPositionCategory:
    category: str
    project_count: int
    cost: Decimal
    unrealized_mv: Decimal
    realized_mv: Decimal
    total_mv: Decimal

    def to_dict(self) -> dict:
        return {
            "category": self.category,
            "project_count": self.project_count,
            "cost": float(self.cost),
            "unrealized_mv": float(self.unrealized_mv),
            "realized_mv": float(self.realized_mv),
            "total_mv": float(self.total_mv),
        }


def detail_sort_key(item: ExcludedPositionDetail) -> tuple:
    """abs(total_mv) desc, abs(cost) desc, then project id with nulls last."""
    return (
        -abs(item.total_mv),
        -abs(item.cost),
        item.project_id is None,
        item.project_id or "",
    )


def build_line_items(scope: ExcludedScope, category: str) -> list[ExcludedPositionDetail]:
    """
    Full outer join of cost and market-value groups for one category.

    One line item per distinct project id found on either side; a missing
    side contributes zero.
    """
    cost_predicate = COST_PREDICATES.get(category)
    mv_predicate = MV_PREDICATES.get(category)
    if scope.is_empty or mv_predicate is None:
        return []

    costs: dict[str | None, Decimal] = {}
    if cost_predicate is not None:
        cost_groups = (
            scope.cost_rows()
            .filter(cost_predicate)
            .values("project_id")
            .annotate(cost=Sum("delta_cost"))
            .order_by()
        )
        costs = {row["project_id"]: to_number(row["cost"]) for row in cost_groups}

    mv_groups = (
        scope.mv_rows()
        .filter(mv_predicate)
        .values("project_id")
        .annotate(
            unrealized=Sum("unrealized_market_value"),
            realized=Sum("realized_market_value"),
        )
        .order_by()
    )
    market_values = {
        row["project_id"]: (to_number(row["unrealized"]), to_number(row["realized"]))
        for row in mv_groups
    }

    items = []
    for project_id in costs.keys() | market_values.keys():
        unrealized, realized = market_values.get(project_id, (ZERO, ZERO))
        items.append(
            ExcludedPositionDetail(
                project_id=project_id,
                description=UNKNOWN_DESCRIPTION if project_id is None else project_id,
                cost=costs.get(project_id, ZERO),
                unrealized_mv=unrealized,
                realized_mv=realized,
                total_mv=unrealized + realized,
            )
        )
    return sorted(items, key=detail_sort_key)


def fold_line_items(
    category: str, items: list[ExcludedPositionDetail]
) -> ExcludedPositionCategory:
    """Aggregate a category's line items; project_count ignores null ids."""
    unrealized = sum((item.unrealized_mv for item in items), ZERO)
    realized = sum((item.realized_mv for item in items), ZERO)
    return ExcludedPositionCategory(
        category=category,
        project_count=len({item.project_id for item in items if item.project_id is not None}),
        cost=sum((item.cost for item in items), ZERO),
        unrealized_mv=unrealized,
        realized_mv=realized,
        total_mv=unrealized + realized,
    )


@degrade_on_store_error(list, "fetching excluded positions")
def get_excluded_positions(
    vehicle_id: str | None,
    portfolio_date: date | None,
    reported_start: date | None = None,
    reported_end: date | None = None,
) -> list[ExcludedPositionCategory]:
    """
    Aggregate excluded positions by category.

    Args:
        vehicle_id: Vehicle to report on.
        portfolio_date: As-of date for market values (and the cumulative cost
            cut-off when no reported-date range is given).
        reported_start: Optional start of the cost reported-date range.
        reported_end: Optional end of the cost reported-date range.

    Returns:
        One ExcludedPositionCategory per category with rows, in display order
        (Other Assets, Cash & Cash Equivalents, NAV Adjustment, Flows). Empty
        when vehicle_id or portfolio_date is missing.

    Example:
        >>> [c.category for c in get_excluded_positions("recFund2", date(2025, 9, 30))]
        ['Other Assets', 'Cash & Cash Equivalents']
    """
    scope = ExcludedScope(vehicle_id, portfolio_date, reported_start, reported_end)
    if scope.is_empty:
        return []

    categories = []
    for category in ExcludedCategory.values:
        items = build_line_items(scope, category)
        if items:
            categories.append(fold_line_items(category, items))
    logger.info(
        f"Excluded positions for {vehicle_id} on {portfolio_date}: "
        f"{len(categories)} categories"
    )
    return categories


@degrade_on_store_error(list, "fetching excluded position details")
def get_excluded_position_details(
    vehicle_id: str | None,
    portfolio_date: date | None,
    category: str | None,
    reported_start: date | None = None,
    reported_end: date | None = None,
) -> list[ExcludedPositionDetail]:
    """
    Line items composing one excluded category.

    Rows are ordered by abs(total_mv) desc, then abs(cost) desc, then project
    id. An unknown category, or a missing vehicle or date, yields [].
    """
    if category not in ExcludedCategory.values:
        return []
    scope = ExcludedScope(vehicle_id, portfolio_date, reported_start, reported_end)
    return build_line_items(scope, category)
