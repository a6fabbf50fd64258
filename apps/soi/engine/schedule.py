"""
Schedule of investments: the normal positions of a vehicle on a portfolio date.

Normal positions come from holdings.position_totals: cost and market value
full-outer-joined per project and ordered by cost. The summary also splits
total cost into equity, tokens and others.

A top-N view keeps the N largest positions plus any smaller position with a
MOIC of at least 5x (high MOIC exception); everything else folds into one
long-tail row.

Key functions:
- get_schedule_of_investments: Main entry point returning a Schedule
- apply_top_n: Split rows into displayed rows and a long-tail row
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from apps.soi.choices import MoicBucket
from apps.soi.engine.holdings import AssetSplit, position_totals
from apps.soi.engine.moic import (
    HIGH_MOIC_THRESHOLD,
    calculate_moic,
    classify_moic,
    format_moic,
)
from libs.errors import degrade_on_store_error
from libs.numeric import ZERO

logger = logging.getLogger(__name__)


def percentage(part: Decimal, whole: Decimal) -> float:
    """part / whole * 100, 0 when whole is not positive."""
    if whole <= 0:
        return 0.0
    return float(part / whole * 100)


def json_moic(moic: float) -> float | None:
    # JSON has no infinity; the display string carries it instead.
    return moic if math.isfinite(moic) else None


@dataclass(frozen=True)
class ScheduleRow:
    project_id: str
    cost: Decimal
    cost_percentage: float
    realized_mv: Decimal
    realized_mv_percentage: float
    unrealized_mv: Decimal
    unrealized_mv_percentage: float
    total_mv: Decimal
    moic: float
    bucket: MoicBucket
    is_long_tail: bool = False
    is_high_moic_exception: bool = False

    def to_dict(self) -> dict:
        return {
            "project_id": self.project_id,
            "cost": float(self.cost),
            "cost_percentage": self.cost_percentage,
            "realized_mv": float(self.realized_mv),
            "realized_mv_percentage": self.realized_mv_percentage,
            "unrealized_mv": float(self.unrealized_mv),
            "unrealized_mv_percentage": self.unrealized_mv_percentage,
            "total_mv": float(self.total_mv),
            "moic": json_moic(self.moic),
            "moic_display": format_moic(self.moic),
            "bucket": self.bucket.value,
            "is_long_tail": self.is_long_tail,
            "is_high_moic_exception": self.is_high_moic_exception,
        }


@dataclass(frozen=True)
class ScheduleSummary:
    total_positions: int = 0
    total_cost: Decimal = ZERO
    total_realized_mv: Decimal = ZERO
    total_unrealized_mv: Decimal = ZERO
    total_mv: Decimal = ZERO
    portfolio_moic: float = 0.0
    cost_by_asset: AssetSplit = field(default_factory=AssetSplit)

    def to_dict(self) -> dict:
        return {
            "total_positions": self.total_positions,
            "total_cost": float(self.total_cost),
            "total_realized_mv": float(self.total_realized_mv),
            "total_unrealized_mv": float(self.total_unrealized_mv),
            "total_mv": float(self.total_mv),
            "portfolio_moic": json_moic(self.portfolio_moic),
            "portfolio_moic_display": format_moic(self.portfolio_moic),
            **self.asset_breakdown(),
        }

    def asset_breakdown(self) -> dict:
        """Cost per asset split with its share of total cost."""
        breakdown = {}
        for name in ("equity", "tokens", "others"):
            amount = getattr(self.cost_by_asset, name)
            breakdown[f"{name}_cost"] = float(amount)
            breakdown[f"{name}_cost_percentage"] = percentage(amount, self.total_cost)
        return breakdown


@dataclass(frozen=True)
class Schedule:
    rows: list[ScheduleRow] = field(default_factory=list)
    long_tail: ScheduleRow | None = None
    summary: ScheduleSummary = field(default_factory=ScheduleSummary)

    def to_dict(self) -> dict:
        return {
            "rows": [row.to_dict() for row in self.rows],
            "long_tail": self.long_tail.to_dict() if self.long_tail else None,
            "summary": self.summary.to_dict(),
        }


def build_row(
    project_id: str,
    cost: Decimal,
    realized: Decimal,
    unrealized: Decimal,
    summary: ScheduleSummary,
    is_long_tail: bool = False,
) -> ScheduleRow:
    total_mv = realized + unrealized
    moic = calculate_moic(total_mv, cost)
    return ScheduleRow(
        project_id=project_id,
        cost=cost,
        cost_percentage=percentage(cost, summary.total_cost),
        realized_mv=realized,
        realized_mv_percentage=percentage(realized, summary.total_realized_mv),
        unrealized_mv=unrealized,
        unrealized_mv_percentage=percentage(unrealized, summary.total_unrealized_mv),
        total_mv=total_mv,
        moic=moic,
        bucket=classify_moic(moic),
        is_long_tail=is_long_tail,
        is_high_moic_exception=not is_long_tail and moic >= HIGH_MOIC_THRESHOLD,
    )


def apply_top_n(
    rows: list[ScheduleRow], top_n: int, summary: ScheduleSummary
) -> tuple[list[ScheduleRow], ScheduleRow | None]:
    """
    Keep the first top_n rows plus later high-MOIC rows; fold the rest.

    Rows must already be in display order. top_n <= 0 keeps everything.
    """
    if top_n <= 0:
        return rows, None

    displayed = list(rows[:top_n])
    tail = []
    for row in rows[top_n:]:
        if row.is_high_moic_exception:
            displayed.append(row)
        else:
            tail.append(row)
    if not tail:
        return displayed, None

    long_tail = build_row(
        project_id=f"Long Tail ({len(tail)} positions)",
        cost=sum((row.cost for row in tail), ZERO),
        realized=sum((row.realized_mv for row in tail), ZERO),
        unrealized=sum((row.unrealized_mv for row in tail), ZERO),
        summary=summary,
        is_long_tail=True,
    )
    return displayed, long_tail


@degrade_on_store_error(Schedule, "fetching schedule of investments")
def get_schedule_of_investments(
    vehicle_id: str | None, portfolio_date: date | None, top_n: int = 50
) -> Schedule:
    """
    Build the schedule of investments for a vehicle on a portfolio date.

    Args:
        vehicle_id: Vehicle to report on.
        portfolio_date: As-of date for market values and the cost cut-off.
        top_n: Number of largest positions to show individually; 0 shows all.

    Returns:
        Schedule with display rows (cost desc, then project id), an optional
        long-tail row, and portfolio totals. Empty when vehicle_id or
        portfolio_date is missing.
    """
    if not vehicle_id or portfolio_date is None:
        return Schedule()

    positions = position_totals(vehicle_id, portfolio_date)
    values = {
        project_id: (
            position.cost.total,
            position.realized.total,
            position.unrealized.total,
        )
        for project_id, position in positions.items()
    }

    total_cost = sum((cost for cost, _, _ in values.values()), ZERO)
    total_realized = sum((realized for _, realized, _ in values.values()), ZERO)
    total_unrealized = sum((unrealized for _, _, unrealized in values.values()), ZERO)
    summary = ScheduleSummary(
        total_positions=len(values),
        total_cost=total_cost,
        total_realized_mv=total_realized,
        total_unrealized_mv=total_unrealized,
        total_mv=total_realized + total_unrealized,
        portfolio_moic=calculate_moic(total_realized + total_unrealized, total_cost),
        cost_by_asset=sum(
            (position.cost for position in positions.values()), AssetSplit()
        ),
    )

    ordered = sorted(values.items(), key=lambda item: (-item[1][0], item[0]))
    rows = [
        build_row(project_id, cost, realized, unrealized, summary)
        for project_id, (cost, realized, unrealized) in ordered
    ]
    displayed, long_tail = apply_top_n(rows, top_n, summary)
    logger.info(
        f"Schedule for {vehicle_id} on {portfolio_date}: {len(rows)} positions, "
        f"{len(displayed)} displayed"
    )
    return Schedule(rows=displayed, long_tail=long_tail, summary=summary)
