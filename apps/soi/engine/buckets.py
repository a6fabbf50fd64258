"""
MOIC buckets: normal positions grouped by performance bucket.

Each position is bucketed on its own project-level MOIC, the same way the
schedule of investments labels its rows, so bucket counts and totals add up
to the schedule summary. Cost and market value stay split by asset class.

Key functions:
- get_moic_buckets: One row per non-empty bucket, best bucket first
- get_moic_bucket_projects: Positions inside one bucket, largest cost first
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from apps.soi.choices import MoicBucket
from apps.soi.engine.holdings import AssetSplit, Position, position_totals
from apps.soi.engine.moic import calculate_moic, classify_moic, format_moic
from apps.soi.engine.schedule import json_moic, percentage
from libs.errors import degrade_on_store_error

logger = logging.getLogger(__name__)


def position_bucket(position: Position) -> MoicBucket:
    return classify_moic(calculate_moic(position.total_mv.total, position.cost.total))


@dataclass(frozen=True)
class MoicBucketRow:
    bucket: MoicBucket
    project_count: int = 0
    project_percentage: float = 0.0
    cost: AssetSplit = field(default_factory=AssetSplit)
    unrealized_mv: AssetSplit = field(default_factory=AssetSplit)
    realized_mv: AssetSplit = field(default_factory=AssetSplit)

    @property
    def total_mv(self) -> AssetSplit:
        return self.unrealized_mv + self.realized_mv

    @property
    def moic(self) -> float:
        return calculate_moic(self.total_mv.total, self.cost.total)

    def to_dict(self) -> dict:
        return {
            "bucket": self.bucket.value,
            "label": str(self.bucket.label),
            "project_count": self.project_count,
            "project_percentage": self.project_percentage,
            "cost": self.cost.to_dict(),
            "unrealized_mv": self.unrealized_mv.to_dict(),
            "realized_mv": self.realized_mv.to_dict(),
            "total_mv": self.total_mv.to_dict(),
            "moic": json_moic(self.moic),
            "moic_display": format_moic(self.moic),
        }


@dataclass(frozen=True)
class MoicBucketProject:
    project_id: str
    cost: Decimal
    unrealized_mv: Decimal
    realized_mv: Decimal

    @property
    def total_mv(self) -> Decimal:
        return self.unrealized_mv + self.realized_mv

    @property
    def moic(self) -> float:
        return calculate_moic(self.total_mv, self.cost)

    def to_dict(self) -> dict:
        return {
            "project_id": self.project_id,
            "cost": float(self.cost),
            "unrealized_mv": float(self.unrealized_mv),
            "realized_mv": float(self.realized_mv),
            "total_mv": float(self.total_mv),
            "moic": json_moic(self.moic),
            "moic_display": format_moic(self.moic),
        }


@degrade_on_store_error(list, "fetching MOIC buckets")
def get_moic_buckets(
    vehicle_id: str | None, portfolio_date: date | None
) -> list[MoicBucketRow]:
    """
    Group a vehicle's normal positions by MOIC bucket.

    Args:
        vehicle_id: Vehicle to report on.
        portfolio_date: As-of date for market values and the cost cut-off.

    Returns:
        One MoicBucketRow per bucket holding at least one position, in
        MoicBucket declaration order. project_percentage is the bucket's share
        of all positions. Empty when vehicle_id or portfolio_date is missing.

    Example:
        >>> [row.bucket for row in get_moic_buckets("recFund2", date(2025, 9, 30))]
        [<MoicBucket.DOUBLES: 'doubles'>, <MoicBucket.WRITE_OFF: 'write_off'>]
    """
    if not vehicle_id or portfolio_date is None:
        return []

    positions = position_totals(vehicle_id, portfolio_date)
    grouped: dict[MoicBucket, list[Position]] = {}
    for position in positions.values():
        grouped.setdefault(position_bucket(position), []).append(position)

    total_projects = len(positions)
    rows = []
    for bucket in MoicBucket:
        members = grouped.get(bucket)
        if not members:
            continue
        rows.append(
            MoicBucketRow(
                bucket=bucket,
                project_count=len(members),
                project_percentage=percentage(Decimal(len(members)), Decimal(total_projects)),
                cost=sum((p.cost for p in members), AssetSplit()),
                unrealized_mv=sum((p.unrealized for p in members), AssetSplit()),
                realized_mv=sum((p.realized for p in members), AssetSplit()),
            )
        )
    logger.info(f"MOIC buckets for {vehicle_id} on {portfolio_date}: {len(rows)} buckets")
    return rows


@degrade_on_store_error(list, "fetching MOIC bucket projects")
def get_moic_bucket_projects(
    vehicle_id: str | None, portfolio_date: date | None, bucket: str | None
) -> list[MoicBucketProject]:
    """Positions in one bucket by cost desc, then project id; [] for unknown buckets."""
    if not vehicle_id or portfolio_date is None or bucket not in MoicBucket.values:
        return []

    projects = [
        MoicBucketProject(
            project_id=position.project_id,
            cost=position.cost.total,
            unrealized_mv=position.unrealized.total,
            realized_mv=position.realized.total,
        )
        for position in position_totals(vehicle_id, portfolio_date).values()
        if position_bucket(position) == bucket
    ]
    return sorted(projects, key=lambda project: (-project.cost, project.project_id))
