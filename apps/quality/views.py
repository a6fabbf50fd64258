"""
Views for data quality reporting.

JSON endpoints behind the shared login for corpus statistics, the paginated
project listing (and its export), and position-level quality.
"""

from __future__ import annotations

import logging

from django.conf import settings
from django.contrib.auth.decorators import login_required
from django.db import DatabaseError
from django.http import HttpResponse, JsonResponse
from django.views.decorators.http import require_http_methods

from apps.quality.engine.positions import (
    get_position_quality_summary,
    get_positions_by_vehicle,
)
from apps.quality.engine.projects import SORT_ASC, SORT_COMPLETENESS, get_project_page
from apps.quality.engine.stats import get_completeness_stats
from apps.quality.services.export import (
    XLSX_CONTENT_TYPE,
    export_project_quality_csv,
    export_project_quality_xlsx,
)
from libs.params import param_int, param_str

logger = logging.getLogger(__name__)


def listing_filters(params) -> dict:
    """Filter, search and sort parameters shared by the listing and its export."""
    return {
        "vehicle_id": param_str(params, "vehicle_id"),
        "search": param_str(params, "search"),
        "missing_field": param_str(params, "missing_field"),
        "sort_by": param_str(params, "sort_by") or SORT_COMPLETENESS,
        "sort_dir": param_str(params, "sort_dir") or SORT_ASC,
    }


@login_required
@require_http_methods(["GET"])
def completeness_stats(request):
    """Corpus completeness statistics, optionally scoped by ?vehicle_id=."""
    stats = get_completeness_stats(param_str(request.GET, "vehicle_id"))
    return JsonResponse(stats.to_dict())


@login_required
@require_http_methods(["GET"])
def project_list(request):
    """
    One page of the project quality listing.

    Query parameters: vehicle_id, search, missing_field, sort_by, sort_dir,
    page, page_size. Unparseable values fall back to their defaults.
    """
    page = get_project_page(
        **listing_filters(request.GET),
        page=param_int(request.GET, "page", 1),
        page_size=param_int(
            request.GET, "page_size", settings.QUALITY_DEFAULT_PAGE_SIZE
        ),
    )
    return JsonResponse(page.to_dict())


@login_required
@require_http_methods(["GET"])
def project_export(request):
    """
    Download the full filtered listing; ?format=xlsx for Excel, CSV otherwise.
    """
    filters = listing_filters(request.GET)
    try:
        if param_str(request.GET, "format") == "xlsx":
            content, filename = export_project_quality_xlsx(**filters)
            response = HttpResponse(content, content_type=XLSX_CONTENT_TYPE)
        else:
            csv_content, filename = export_project_quality_csv(**filters)
            content = csv_content.encode("utf-8-sig")
            response = HttpResponse(content, content_type="text/csv; charset=utf-8-sig")
    except DatabaseError as e:
        logger.error(f"Data quality export failed: {e}", exc_info=True)
        return JsonResponse({"error": "Export unavailable"}, status=503)

    response["Content-Disposition"] = f'attachment; filename="{filename}"'
    response["Content-Length"] = len(content)
    return response


@login_required
@require_http_methods(["GET"])
def position_summary(request):
    """Per-vehicle ledger row completeness with global field rates."""
    return JsonResponse(get_position_quality_summary().to_dict())


@login_required
@require_http_methods(["GET"])
def vehicle_positions(request, vehicle_id: str):
    """Ledger rows of one vehicle, least complete first."""
    positions = get_positions_by_vehicle(vehicle_id)
    return JsonResponse(
        {
            "vehicle_id": vehicle_id,
            "positions": [position.to_dict() for position in positions],
        }
    )
