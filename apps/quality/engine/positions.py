"""
Position-level data quality for ownership ledger rows.

A ledger row is complete when it carries an outcome type, an established type,
a funding round and at least one entry valuation (token or equity). The
summary covers vehicles that report under a real fund family label; the
drill-down lists every row of one vehicle, least complete first.

Key functions:
- get_position_quality_summary: Per-vehicle counts plus global field rates
- get_positions_by_vehicle: Row-level completeness for one vehicle
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field

from django.db.models import Case, Count, IntegerField, Min, Q, QuerySet, Value, When

from apps.ledger.models import LedgerEntry
from apps.universe.models import Closing
from libs.errors import degrade_on_store_error
from libs.numeric import to_int

UNREPORTED_FUND_LABEL = "TBV0"

POSITION_FIELDS = ("outcome_type", "established_type", "rounds_id", "entry_valuation")


def present(field_name: str) -> Q:
    """Text column is non-null and not the empty string."""
    return ~Q(**{f"{field_name}__isnull": True}) & ~Q(**{field_name: ""})


def has_entry_valuation() -> Q:
    return Q(entry_valuation_token__isnull=False) | Q(
        entry_valuation_equity__isnull=False
    )


def position_conditions() -> dict[str, Q]:
    """Presence condition per position field, in POSITION_FIELDS order."""
    return {
        "outcome_type": present("outcome_type"),
        "established_type": present("established_type"),
        "rounds_id": present("rounds_id"),
        "entry_valuation": has_entry_valuation(),
    }


def field_rate(missing: int, total: int) -> float:
    """Share of rows with the field present, as a percentage with one decimal."""
    if total <= 0:
        return 0.0
    return round((1 - missing / total) * 1000) / 10


@dataclass(frozen=True)
class VehiclePositionSummary:
    vehicle_id: str
    tbv_fund: str
    total: int
    complete: int
    missing_outcome: int
    missing_established: int
    missing_rounds: int
    missing_valuation: int

    def to_dict(self) -> dict:
        return asdict(self)


def _zero_field_rates() -> dict[str, float]:
    return {name: 0.0 for name in POSITION_FIELDS}


@dataclass(frozen=True)
class PositionQualityStats:
    total: int = 0
    fully_complete: int = 0
    needs_attention: int = 0
    field_rates: dict[str, float] = field(default_factory=_zero_field_rates)

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "fully_complete": self.fully_complete,
            "needs_attention": self.needs_attention,
            "field_rates": dict(self.field_rates),
        }


@dataclass(frozen=True)
class PositionQualitySummary:
    vehicles: list[VehiclePositionSummary] = field(default_factory=list)
    stats: PositionQualityStats = field(default_factory=PositionQualityStats)

    def to_dict(self) -> dict:
        return {
            "vehicles": [vehicle.to_dict() for vehicle in self.vehicles],
            "stats": self.stats.to_dict(),
        }


@dataclass(frozen=True)
class PositionQualityRow:
    ownership_id: str
    project_id: str | None
    has_outcome_type: bool
    has_established_type: bool
    has_rounds_id: bool
    has_entry_valuation: bool
    filled_count: int

    def to_dict(self) -> dict:
        return asdict(self)


def summarize(vehicles: list[VehiclePositionSummary]) -> PositionQualityStats:
    """Fold per-vehicle summaries into global position quality stats."""
    total = sum(vehicle.total for vehicle in vehicles)
    complete = sum(vehicle.complete for vehicle in vehicles)
    missing = {
        "outcome_type": sum(vehicle.missing_outcome for vehicle in vehicles),
        "established_type": sum(vehicle.missing_established for vehicle in vehicles),
        "rounds_id": sum(vehicle.missing_rounds for vehicle in vehicles),
        "entry_valuation": sum(vehicle.missing_valuation for vehicle in vehicles),
    }
    return PositionQualityStats(
        total=total,
        fully_complete=complete,
        needs_attention=total - complete,
        field_rates={name: field_rate(missing[name], total) for name in POSITION_FIELDS},
    )


def reported_closings() -> QuerySet:
    """Closings under a real fund family label; blank or TBV0 means unreported."""
    return (
        Closing.objects.exclude(vehicle_id="")
        .exclude(tbv_fund__isnull=True)
        .exclude(tbv_fund="")
        .exclude(tbv_fund=UNREPORTED_FUND_LABEL)
    )


@degrade_on_store_error(PositionQualitySummary, "fetching position quality summary")
def get_position_quality_summary() -> PositionQualitySummary:
    """
    Summarize ledger row completeness per reporting vehicle.

    Only vehicles with at least one reported closing are included; a vehicle
    closing into several fund families is labelled with the smallest label
    and its rows are still counted once. Vehicles are ordered by fund label,
    then vehicle id.

    Returns:
        PositionQualitySummary with per-vehicle rows and global stats. Field
        rates are percentages rounded to one decimal, 0 when there are no rows.
    """
    conditions = position_conditions()
    complete = conditions["outcome_type"]
    for name in POSITION_FIELDS[1:]:
        complete &= conditions[name]

    fund_labels = dict(
        reported_closings()
        .values("vehicle_id")
        .annotate(label=Min("tbv_fund"))
        .values_list("vehicle_id", "label")
        .order_by()
    )
    rows = (
        LedgerEntry.objects.filter(
            vehicle_id__in=reported_closings().values("vehicle_id")
        )
        .values("vehicle_id")
        .annotate(
            total=Count("pk"),
            complete=Count("pk", filter=complete),
            missing_outcome=Count("pk", filter=~conditions["outcome_type"]),
            missing_established=Count("pk", filter=~conditions["established_type"]),
            missing_rounds=Count("pk", filter=~conditions["rounds_id"]),
            missing_valuation=Count("pk", filter=~conditions["entry_valuation"]),
        )
        .order_by()
    )

    vehicles = [
        VehiclePositionSummary(
            vehicle_id=row["vehicle_id"],
            tbv_fund=fund_labels.get(row["vehicle_id"]) or "Unknown",
            total=to_int(row["total"]),
            complete=to_int(row["complete"]),
            missing_outcome=to_int(row["missing_outcome"]),
            missing_established=to_int(row["missing_established"]),
            missing_rounds=to_int(row["missing_rounds"]),
            missing_valuation=to_int(row["missing_valuation"]),
        )
        for row in rows
    ]
    vehicles.sort(key=lambda vehicle: (vehicle.tbv_fund, vehicle.vehicle_id))
    return PositionQualitySummary(vehicles=vehicles, stats=summarize(vehicles))


def _flag(condition: Q) -> Case:
    return Case(When(condition, then=Value(1)), default=Value(0), output_field=IntegerField())


@degrade_on_store_error(list, "fetching positions for vehicle")
def get_positions_by_vehicle(vehicle_id: str) -> list[PositionQualityRow]:
    """Ledger rows of one vehicle with per-field presence, least complete first."""
    conditions = position_conditions()
    flags = {f"has_{name}": _flag(conditions[name]) for name in POSITION_FIELDS}
    filled_count = _flag(conditions[POSITION_FIELDS[0]])
    for name in POSITION_FIELDS[1:]:
        filled_count = filled_count + _flag(conditions[name])

    rows = (
        LedgerEntry.objects.filter(vehicle_id=vehicle_id)
        .annotate(filled_count=filled_count, **flags)
        .order_by("filled_count", "ownership_id")
        .values("ownership_id", "project_id", "filled_count", *flags)
    )
    return [
        PositionQualityRow(
            ownership_id=row["ownership_id"],
            project_id=row["project_id"] or None,
            has_outcome_type=bool(row["has_outcome_type"]),
            has_established_type=bool(row["has_established_type"]),
            has_rounds_id=bool(row["has_rounds_id"]),
            has_entry_valuation=bool(row["has_entry_valuation"]),
            filled_count=to_int(row["filled_count"]),
        )
        for row in rows
    ]
