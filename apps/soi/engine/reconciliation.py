"""
Reconciliation of excluded-position category totals.

The category aggregates from `get_excluded_positions` must add up to a grand
total computed without partitioning: one SUM over every cost row matching any
category predicate and one over every market-value row matching any category
predicate. Because both sides filter with the same mutually exclusive
predicates, the two figures agree by construction; `verify_reconciliation`
checks it and logs any imbalance.

Key functions:
- sum_categories: Fold category aggregates into ExcludedTotals
- get_excluded_totals: Independent grand total for a scope
- verify_reconciliation: Compare both and report discrepancies
"""

from __future__ import annotations

import functools
import logging
import operator
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Iterable

from django.db.models import Case, CharField, Q, Sum, Value, When

from apps.soi.engine.excluded import (
    COST_PREDICATES,
    MV_PREDICATES,
    ExcludedPositionCategory,
    ExcludedScope,
    get_excluded_positions,
)
from libs.errors import degrade_on_store_error
from libs.numeric import ZERO, to_number

logger = logging.getLogger(__name__)

TOTAL_FIELDS = ("project_count", "cost", "unrealized_mv", "realized_mv", "total_mv")


@dataclass(frozen=True)
class ExcludedTotals:
    project_count: int = 0
    cost: Decimal = ZERO
    unrealized_mv: Decimal = ZERO
    realized_mv: Decimal = ZERO
    total_mv: Decimal = ZERO

    def to_dict(self) -> dict:
        return {
            "project_count": self.project_count,
            "cost": float(self.cost),
            "unrealized_mv": float(self.unrealized_mv),
            "realized_mv": float(self.realized_mv),
            "total_mv": float(self.total_mv),
        }


@dataclass(frozen=True)
class ReconciliationReport:
    category_total: ExcludedTotals = field(default_factory=ExcludedTotals)
    grand_total: ExcludedTotals = field(default_factory=ExcludedTotals)

    @property
    def discrepancies(self) -> dict[str, Decimal]:
        """category_total - grand_total for every field that differs."""
        differences = {}
        for name in TOTAL_FIELDS:
            delta = getattr(self.category_total, name) - getattr(self.grand_total, name)
            if delta:
                differences[name] = delta
        return differences

    @property
    def is_balanced(self) -> bool:
        return not self.discrepancies

    def to_dict(self) -> dict:
        return {
            "category_total": self.category_total.to_dict(),
            "grand_total": self.grand_total.to_dict(),
            "is_balanced": self.is_balanced,
            "discrepancies": {
                name: float(delta) for name, delta in self.discrepancies.items()
            },
        }


def sum_categories(categories: Iterable[ExcludedPositionCategory]) -> ExcludedTotals:
    """Add up category aggregates field by field."""
    totals = ExcludedTotals()
    for category in categories:
        totals = ExcludedTotals(
            project_count=totals.project_count + category.project_count,
            cost=totals.cost + category.cost,
            unrealized_mv=totals.unrealized_mv + category.unrealized_mv,
            realized_mv=totals.realized_mv + category.realized_mv,
            total_mv=totals.total_mv + category.total_mv,
        )
    return totals


def any_of(predicates: dict[str, Q]) -> Q:
    return functools.reduce(operator.or_, predicates.values())


def category_expression(predicates: dict[str, Q]) -> Case:
    """Annotation labelling each row with the category whose predicate it matches."""
    return Case(
        *[When(predicate, then=Value(label)) for label, predicate in predicates.items()],
        default=Value(""),
        output_field=CharField(),
    )


def distinct_category_projects(scope: ExcludedScope) -> set[tuple[str, str]]:
    """(category, project_id) pairs with a non-null project id on either side."""
    pairs: set[tuple[str, str]] = set()
    for queryset, predicates in (
        (scope.cost_rows(), COST_PREDICATES),
        (scope.mv_rows(), MV_PREDICATES),
    ):
        pairs.update(
            queryset.filter(any_of(predicates))
            .exclude(project_id__isnull=True)
            .annotate(excluded_category=category_expression(predicates))
            .values_list("excluded_category", "project_id")
            .distinct()
            .order_by()
        )
    return pairs


@degrade_on_store_error(ExcludedTotals, "fetching excluded position totals")
def get_excluded_totals(scope: ExcludedScope) -> ExcludedTotals:
    """
    Grand total of excluded positions, computed without the category partition.

    Returns:
        ExcludedTotals; all zero for an empty scope.
    """
    if scope.is_empty:
        return ExcludedTotals()

    cost = scope.cost_rows().filter(any_of(COST_PREDICATES)).aggregate(
        cost=Sum("delta_cost")
    )["cost"]
    market_values = scope.mv_rows().filter(any_of(MV_PREDICATES)).aggregate(
        unrealized=Sum("unrealized_market_value"),
        realized=Sum("realized_market_value"),
    )
    unrealized = to_number(market_values["unrealized"])
    realized = to_number(market_values["realized"])
    return ExcludedTotals(
        project_count=len(distinct_category_projects(scope)),
        cost=to_number(cost),
        unrealized_mv=unrealized,
        realized_mv=realized,
        total_mv=unrealized + realized,
    )


@degrade_on_store_error(ReconciliationReport, "verifying excluded position reconciliation")
def verify_reconciliation(
    vehicle_id: str | None,
    portfolio_date: date | None,
    reported_start: date | None = None,
    reported_end: date | None = None,
) -> ReconciliationReport:
    """
    Check that excluded category aggregates add up to the grand total.

    Example:
        >>> report = verify_reconciliation("recFund2", date(2025, 9, 30))
        >>> report.is_balanced
        True
    """
    scope = ExcludedScope(vehicle_id, portfolio_date, reported_start, reported_end)
    report = ReconciliationReport(
        category_total=sum_categories(
            get_excluded_positions(
                vehicle_id, portfolio_date, reported_start, reported_end
            )
        ),
        grand_total=get_excluded_totals(scope),
    )
    if not report.is_balanced:
        logger.error(
            f"Excluded positions for {vehicle_id} on {portfolio_date} do not "
            f"reconcile: {report.discrepancies}"
        )
    return report
