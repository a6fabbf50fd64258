"""
Completeness scoring for project enrichment metadata.

A field counts as filled when it is non-null and still non-empty after
trimming. The rule exists twice, once as plain Python (`is_filled`) for
in-memory scoring and once as an ORM expression (`filled_expression`) for
database aggregation. Both trim only the space character, which is what SQL
TRIM removes, so the two always agree.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from django.db.models import Case, IntegerField, Value, When
from django.db.models.functions import Length, Trim
from django.db.models.lookups import GreaterThan

from libs.choices import EnrichmentField

ENRICHMENT_FIELDS: tuple[str, ...] = tuple(EnrichmentField.values)
FIELD_COUNT = len(ENRICHMENT_FIELDS)

FULLY_ENRICHED_COUNT = FIELD_COUNT
NEEDS_ATTENTION_BELOW = 3


@dataclass(frozen=True)
class CompletenessScore:
    filled_count: int
    completeness: int

    @property
    def is_fully_enriched(self) -> bool:
        return self.filled_count == FULLY_ENRICHED_COUNT

    @property
    def needs_attention(self) -> bool:
        return self.filled_count < NEEDS_ATTENTION_BELOW


def is_filled(value: object) -> bool:
    """True when value is non-null and non-empty after trimming spaces."""
    if value is None:
        return False
    return str(value).strip(" ") != ""


def completeness_percent(filled_count: int) -> int:
    """Round filled_count / 6 * 100 to the nearest whole percent."""
    return round(filled_count / FIELD_COUNT * 100)


def score_fields(values: Mapping[str, object]) -> CompletenessScore:
    """
    Score one project's enrichment fields.

    Only the six enrichment fields are looked at; other keys are ignored and
    missing keys count as empty.

    Example:
        >>> score_fields({"coingecko_id": "bitcoin", "website": "  "})
        CompletenessScore(filled_count=1, completeness=17)
    """
    filled = sum(1 for field in ENRICHMENT_FIELDS if is_filled(values.get(field)))
    return CompletenessScore(
        filled_count=filled, completeness=completeness_percent(filled)
    )


def filled_condition(field: str) -> GreaterThan:
    """Boolean ORM expression: `field` is non-null and non-blank after TRIM."""
    return GreaterThan(Length(Trim(field)), 0)


def filled_expression(field: str) -> Case:
    """ORM expression evaluating to 1 when `field` is filled, else 0."""
    return Case(
        When(filled_condition(field), then=Value(1)),
        default=Value(0),
        output_field=IntegerField(),
    )


def filled_count_expression():
    """ORM expression for the number of filled enrichment fields (0 to 6)."""
    expression = filled_expression(ENRICHMENT_FIELDS[0])
    for field in ENRICHMENT_FIELDS[1:]:
        expression = expression + filled_expression(field)
    return expression
