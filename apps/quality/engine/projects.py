"""
Filtered, sorted and paginated project quality listing.

Composes search, a missing-field filter, sorting with fixed tie-breaks and
offset pagination over the project universe joined with attributed cost.

Pagination issues two independent queries, a COUNT and a windowed fetch, with
no shared snapshot between them. Writes landing between the two can make
`total_pages` disagree with the rows returned (offset-pagination drift); this
is accepted for a read-mostly reporting surface.

Key functions:
- get_project_page: Main entry point returning a ProjectListPage
- build_project_queryset: Filtered, annotated and ordered queryset (no window)
- resolve_missing_field: Closed dispatch from request value to EnrichmentField
- total_pages: Page count for a total and page size
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Callable

from django.conf import settings
from django.db.models import F, OrderBy, QuerySet

from apps.ledger.services.cost_attribution import attributed_cost_expression
from apps.quality.engine.completeness import (
    ENRICHMENT_FIELDS,
    completeness_percent,
    filled_count_expression,
    filled_expression,
)
from apps.quality.engine.stats import scoped_projects
from libs.choices import EnrichmentField
from libs.errors import ValidationIgnored, degrade_on_store_error
from libs.numeric import to_int, to_number

logger = logging.getLogger(__name__)

SORT_COMPLETENESS = "completeness"
SORT_PROJECT_ID = "project_id"
SORT_COST = "cost"
SORT_ASC = "asc"
SORT_DESC = "desc"


@dataclass(frozen=True)
class ProjectQualityRow:
    project_id: str
    filled_count: int
    completeness: int
    cost: Decimal
    coingecko_id: str | None
    project_stack: str | None
    project_tag: str | None
    project_sub_tag: str | None
    website: str | None
    description: str | None
    project_logo_url: str | None

    def to_dict(self) -> dict:
        data = {
            "project_id": self.project_id,
            "filled_count": self.filled_count,
            "completeness": self.completeness,
            "cost": float(self.cost),
        }
        for name in ENRICHMENT_FIELDS:
            data[name] = getattr(self, name)
        data["project_logo_url"] = self.project_logo_url
        return data


@dataclass(frozen=True)
class ProjectListPage:
    projects: list[ProjectQualityRow] = field(default_factory=list)
    total_count: int = 0
    page: int = 1
    page_size: int = 50
    total_pages: int = 1

    def to_dict(self) -> dict:
        return {
            "projects": [row.to_dict() for row in self.projects],
            "total_count": self.total_count,
            "page": self.page,
            "page_size": self.page_size,
            "total_pages": self.total_pages,
        }


def total_pages(total_count: int, page_size: int) -> int:
    """max(1, ceil(total_count / page_size)); an empty listing still has one page."""
    return max(1, math.ceil(total_count / page_size))


def resolve_missing_field(value: str | None) -> EnrichmentField | None:
    """
    Map a request value onto one of the six enrichment fields.

    Returns:
        The matching EnrichmentField, or None when no filter was requested.

    Raises:
        ValidationIgnored: If value names anything else.
    """
    if not value:
        return None
    try:
        return EnrichmentField(value)
    except ValueError:
        raise ValidationIgnored("missing_field", value) from None


def _order_by_completeness(descending: bool) -> list[OrderBy]:
    primary = F("filled_count").desc() if descending else F("filled_count").asc()
    return [primary, F("project_id").asc()]


def _order_by_project_id(descending: bool) -> list[OrderBy]:
    return [F("project_id").desc() if descending else F("project_id").asc()]


def _order_by_cost(descending: bool) -> list[OrderBy]:
    primary = F("cost").desc() if descending else F("cost").asc()
    return [primary, F("project_id").asc()]


ORDERINGS: dict[str, Callable[[bool], list[OrderBy]]] = {
    SORT_COMPLETENESS: _order_by_completeness,
    SORT_PROJECT_ID: _order_by_project_id,
    SORT_COST: _order_by_cost,
}


def build_project_queryset(
    vehicle_id: str | None = None,
    search: str | None = None,
    missing_field: str | None = None,
    sort_by: str = SORT_COMPLETENESS,
    sort_dir: str = SORT_ASC,
) -> QuerySet:
    """
    Build the filtered, annotated and ordered project queryset.

    Annotations: `filled_count` (0 to 6) and `cost` (attributed cost, 0 when
    the project has no qualifying ledger rows, scoped to vehicle_id if given).

    An unrecognised missing_field is logged and ignored, leaving the listing
    unfiltered. Unknown sort_by falls back to completeness, unknown sort_dir
    to ascending.
    """
    queryset = scoped_projects(vehicle_id).annotate(
        filled_count=filled_count_expression(),
        cost=attributed_cost_expression(vehicle_id),
    )

    if search:
        queryset = queryset.filter(project_id__icontains=search)

    try:
        missing = resolve_missing_field(missing_field)
    except ValidationIgnored as exc:
        logger.info(str(exc))
        missing = None
    if missing is not None:
        queryset = queryset.alias(
            missing_field_filled=filled_expression(missing.value)
        ).filter(missing_field_filled=0)

    ordering = ORDERINGS.get(sort_by, _order_by_completeness)
    return queryset.order_by(*ordering(sort_dir == SORT_DESC))


def to_row(project) -> ProjectQualityRow:
    """Convert an annotated Project into a listing row."""
    filled = to_int(project.filled_count)
    values = {name: getattr(project, name) or None for name in ENRICHMENT_FIELDS}
    return ProjectQualityRow(
        project_id=project.project_id,
        filled_count=filled,
        completeness=completeness_percent(filled),
        cost=to_number(project.cost),
        project_logo_url=project.project_logo_url or None,
        **values,
    )


def _empty_page() -> ProjectListPage:
    return ProjectListPage(page_size=settings.QUALITY_DEFAULT_PAGE_SIZE)


@degrade_on_store_error(_empty_page, "fetching data quality projects")
def get_project_page(
    vehicle_id: str | None = None,
    search: str | None = None,
    missing_field: str | None = None,
    sort_by: str = SORT_COMPLETENESS,
    sort_dir: str = SORT_ASC,
    page: int = 1,
    page_size: int | None = None,
) -> ProjectListPage:
    """
    Fetch one page of the project quality listing.

    Args:
        vehicle_id: Restrict to projects held by one vehicle and attribute
            cost from that vehicle only.
        search: Case-insensitive substring of project_id.
        missing_field: Enrichment field that must be null or blank.
        sort_by: "completeness" (default), "project_id" or "cost".
        sort_dir: "asc" (default) or "desc".
        page: 1-indexed page number; values below 1 are treated as 1.
        page_size: Rows per page, clamped to 1..QUALITY_MAX_PAGE_SIZE.

    Returns:
        ProjectListPage. Store failures return an empty page with total_pages 1.

    Example:
        >>> page = get_project_page(missing_field="website", sort_by="cost", sort_dir="desc")
        >>> page.total_pages >= 1
        True
    """
    page = max(1, page)
    if page_size is None:
        page_size = settings.QUALITY_DEFAULT_PAGE_SIZE
    page_size = min(max(1, page_size), settings.QUALITY_MAX_PAGE_SIZE)
    offset = (page - 1) * page_size

    queryset = build_project_queryset(
        vehicle_id=vehicle_id,
        search=search,
        missing_field=missing_field,
        sort_by=sort_by,
        sort_dir=sort_dir,
    )

    # Separate COUNT and window queries; see module docstring on drift.
    total_count = to_int(queryset.count())
    projects = [to_row(project) for project in queryset[offset : offset + page_size]]

    return ProjectListPage(
        projects=projects,
        total_count=total_count,
        page=page,
        page_size=page_size,
        total_pages=total_pages(total_count, page_size),
    )
