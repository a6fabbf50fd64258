"""
Cost attribution from the ownership ledger.

A project's attributed cost is the sum of its signed cost deltas, leaving out
cash rows and the "Other Assets" placeholder. Without a vehicle the sum runs
across every vehicle; with one it is restricted to that vehicle. A project
with no qualifying rows has cost 0.

Key functions:
- investment_entries: The qualifying-row queryset shared by every cost figure
- attributed_costs: Cost per project as a dict
- get_attributed_cost: Cost for a single project
- attributed_cost_expression: Correlated subquery for annotating projects
"""

from __future__ import annotations

from decimal import Decimal

from django.db.models import DecimalField, OuterRef, QuerySet, Subquery, Sum, Value
from django.db.models.functions import Coalesce

from apps.ledger.models import LedgerEntry
from libs.choices import OTHER_ASSETS_PROJECT_ID, OutcomeType
from libs.numeric import ZERO, to_number

COST_OUTPUT_FIELD = DecimalField(max_digits=24, decimal_places=6)


def investment_entries(vehicle_id: str | None = None) -> QuerySet:
    """
    Ledger rows that count towards project cost.

    Rows with outcome_type "Cash" and rows booked against the "Other Assets"
    placeholder are excluded. A null outcome_type is treated as non-cash
    (Django's exclude() keeps NULLs).

    Args:
        vehicle_id: Restrict to one vehicle; None means all vehicles.

    Returns:
        QuerySet of LedgerEntry rows.
    """
    queryset = LedgerEntry.objects.exclude(outcome_type=OutcomeType.CASH).exclude(
        project_id=OTHER_ASSETS_PROJECT_ID
    )
    if vehicle_id:
        queryset = queryset.filter(vehicle_id=vehicle_id)
    return queryset


def attributed_costs(vehicle_id: str | None = None) -> dict[str, Decimal]:
    """
    Sum cost deltas per project.

    Args:
        vehicle_id: Restrict to one vehicle; None means all vehicles.

    Returns:
        Mapping of project_id to attributed cost. Projects without qualifying
        rows are absent; use get_attributed_cost() for a 0 default.

    Example:
        >>> attributed_costs("recFund2")
        {'Polymarket': Decimal('300.000000'), ...}
    """
    rows = (
        investment_entries(vehicle_id)
        .exclude(project_id__isnull=True)
        .values("project_id")
        .annotate(cost=Sum("delta_cost"))
        .order_by("project_id")
    )
    return {row["project_id"]: to_number(row["cost"]) for row in rows}


def get_attributed_cost(project_id: str, vehicle_id: str | None = None) -> Decimal:
    """Attributed cost for one project, 0 when it has no qualifying rows."""
    total = (
        investment_entries(vehicle_id)
        .filter(project_id=project_id)
        .aggregate(cost=Sum("delta_cost"))["cost"]
    )
    return to_number(total) if total is not None else ZERO


def attributed_cost_expression(
    vehicle_id: str | None = None, outer_ref: str = "project_id"
) -> Coalesce:
    """
    Build an annotation expression carrying each outer row's attributed cost.

    The subquery is correlated on `outer_ref` and coalesced to 0, so projects
    without ledger rows sort and display as zero cost.

    Example:
        >>> Project.objects.annotate(cost=attributed_cost_expression("recFund2"))
    """
    per_project = (
        investment_entries(vehicle_id)
        .filter(project_id=OuterRef(outer_ref))
        .order_by()
        .values("project_id")
        .annotate(total=Sum("delta_cost"))
        .values("total")
    )
    return Coalesce(
        Subquery(per_project, output_field=COST_OUTPUT_FIELD),
        Value(ZERO, output_field=COST_OUTPUT_FIELD),
        output_field=COST_OUTPUT_FIELD,
    )
