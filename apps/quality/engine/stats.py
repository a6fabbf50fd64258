"""
Corpus-wide completeness statistics.

Computes, in one aggregate query over the (optionally vehicle-scoped) project
universe: project count, average completeness, fully-enriched and
needs-attention counts, and the filled count of every enrichment field. The
average is taken in the database over unrounded per-project percentages, so
it never drifts from averaging rounded values.

Key functions:
- get_completeness_stats: Main entry point returning CorpusStats
- scoped_projects: Project queryset for a vehicle scope
"""

from __future__ import annotations

from dataclasses import dataclass, field

from django.db.models import Avg, Count, ExpressionWrapper, FloatField, QuerySet
from django.db.models.lookups import Exact, LessThan

from apps.ledger.models import LedgerEntry
from apps.quality.engine.completeness import (
    ENRICHMENT_FIELDS,
    FIELD_COUNT,
    FULLY_ENRICHED_COUNT,
    NEEDS_ATTENTION_BELOW,
    filled_condition,
    filled_count_expression,
)
from apps.universe.models import Project
from libs.errors import degrade_on_store_error
from libs.numeric import to_float, to_int


def _zero_fill_rates() -> dict[str, float]:
    return {name: 0.0 for name in ENRICHMENT_FIELDS}


@dataclass(frozen=True)
class CorpusStats:
    total_projects: int = 0
    avg_completeness: float = 0.0
    fully_enriched: int = 0
    needs_attention: int = 0
    field_fill_rates: dict[str, float] = field(default_factory=_zero_fill_rates)

    def to_dict(self) -> dict:
        return {
            "total_projects": self.total_projects,
            "avg_completeness": self.avg_completeness,
            "fully_enriched": self.fully_enriched,
            "needs_attention": self.needs_attention,
            "field_fill_rates": dict(self.field_fill_rates),
        }


def scoped_projects(vehicle_id: str | None = None) -> QuerySet:
    """
    Projects in scope for a vehicle.

    With a vehicle, only projects that have at least one ledger row in it are
    included (any row, cash or not); without one, the whole universe.
    """
    queryset = Project.objects.all()
    if vehicle_id:
        queryset = queryset.filter(
            project_id__in=LedgerEntry.objects.filter(vehicle_id=vehicle_id)
            .exclude(project_id__isnull=True)
            .values("project_id")
        )
    return queryset


def fill_rate(filled: int, total: int) -> float:
    """Percentage of `total` that is `filled`, 0 when total is 0."""
    if total <= 0:
        return 0.0
    return filled * 100.0 / total


@degrade_on_store_error(CorpusStats, "fetching data quality stats")
def get_completeness_stats(vehicle_id: str | None = None) -> CorpusStats:
    """
    Compute completeness statistics over the project universe.

    Args:
        vehicle_id: Restrict to projects held by one vehicle; None for all.

    Returns:
        CorpusStats. An empty universe is a valid result with every figure 0.

    Example:
        >>> stats = get_completeness_stats()
        >>> stats.fully_enriched <= stats.total_projects
        True
    """
    aggregates = {
        "total_projects": Count("pk"),
        "avg_completeness": Avg(
            ExpressionWrapper(
                filled_count_expression() * 100.0 / FIELD_COUNT,
                output_field=FloatField(),
            )
        ),
        "fully_enriched": Count(
            "pk", filter=Exact(filled_count_expression(), FULLY_ENRICHED_COUNT)
        ),
        "needs_attention": Count(
            "pk", filter=LessThan(filled_count_expression(), NEEDS_ATTENTION_BELOW)
        ),
    }
    for name in ENRICHMENT_FIELDS:
        aggregates[f"fill_{name}"] = Count("pk", filter=filled_condition(name))

    row = scoped_projects(vehicle_id).aggregate(**aggregates)
    total = to_int(row["total_projects"])
    return CorpusStats(
        total_projects=total,
        avg_completeness=to_float(row["avg_completeness"]),
        fully_enriched=to_int(row["fully_enriched"]),
        needs_attention=to_int(row["needs_attention"]),
        field_fill_rates={
            name: fill_rate(to_int(row[f"fill_{name}"]), total)
            for name in ENRICHMENT_FIELDS
        },
    )
