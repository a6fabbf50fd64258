"""
Views for the schedule of investments.

Every endpoint is scoped to one vehicle and a portfolio date. When
?portfolio_date= is missing or malformed the vehicle's latest portfolio date
is used. ?reported_start= and ?reported_end= restrict excluded-position cost
to a reported-date range.
"""

from __future__ import annotations

from django.conf import settings
from django.contrib.auth.decorators import login_required
from django.http import JsonResponse
from django.views.decorators.http import require_http_methods

from apps.ledger.services.periods import get_latest_portfolio_date
from apps.soi.engine.buckets import get_moic_bucket_projects, get_moic_buckets
from apps.soi.engine.excluded import (
    get_excluded_position_details,
    get_excluded_positions,
)
from apps.soi.engine.reconciliation import verify_reconciliation
from apps.soi.engine.schedule import get_schedule_of_investments
from libs.params import param_date, param_int, param_str


def resolve_scope(request, vehicle_id: str) -> dict:
    portfolio_date = param_date(request.GET, "portfolio_date")
    if portfolio_date is None:
        portfolio_date = get_latest_portfolio_date(vehicle_id)
    return {
        "vehicle_id": vehicle_id,
        "portfolio_date": portfolio_date,
        "reported_start": param_date(request.GET, "reported_start"),
        "reported_end": param_date(request.GET, "reported_end"),
    }


def scope_payload(scope: dict) -> dict:
    return {
        key: value.isoformat() if hasattr(value, "isoformat") else value
        for key, value in scope.items()
    }


@login_required
@require_http_methods(["GET"])
def schedule_of_investments(request, vehicle_id: str):
    """Normal positions with MOIC buckets; ?top_n=0 shows every position."""
    scope = resolve_scope(request, vehicle_id)
    top_n = max(0, param_int(request.GET, "top_n", settings.SOI_DEFAULT_TOP_N))
    schedule = get_schedule_of_investments(
        vehicle_id, scope["portfolio_date"], top_n=top_n
    )
    return JsonResponse({**scope_payload(scope), "top_n": top_n, **schedule.to_dict()})


@login_required
@require_http_methods(["GET"])
def excluded_positions(request, vehicle_id: str):
    """Excluded-position category aggregates in display order."""
    scope = resolve_scope(request, vehicle_id)
    categories = get_excluded_positions(**scope)
    return JsonResponse(
        {
            **scope_payload(scope),
            "categories": [category.to_dict() for category in categories],
        }
    )


@login_required
@require_http_methods(["GET"])
def excluded_position_details(request, vehicle_id: str):
    """Line items composing the ?category= aggregate."""
    scope = resolve_scope(request, vehicle_id)
    category = param_str(request.GET, "category")
    details = get_excluded_position_details(category=category, **scope)
    return JsonResponse(
        {
            **scope_payload(scope),
            "category": category,
            "positions": [detail.to_dict() for detail in details],
        }
    )


@login_required
@require_http_methods(["GET"])
def excluded_reconciliation(request, vehicle_id: str):
    """Category totals against the independently computed grand total."""
    scope = resolve_scope(request, vehicle_id)
    report = verify_reconciliation(**scope)
    return JsonResponse({**scope_payload(scope), **report.to_dict()})


@login_required
@require_http_methods(["GET"])
def moic_buckets(request, vehicle_id: str):
    """Normal positions grouped by MOIC bucket, split by asset class."""
    scope = resolve_scope(request, vehicle_id)
    buckets = get_moic_buckets(vehicle_id, scope["portfolio_date"])
    return JsonResponse(
        {**scope_payload(scope), "buckets": [row.to_dict() for row in buckets]}
    )


@login_required
@require_http_methods(["GET"])
def moic_bucket_projects(request, vehicle_id: str):
    """Positions inside the ?bucket= MOIC bucket."""
    scope = resolve_scope(request, vehicle_id)
    bucket = param_str(request.GET, "bucket")
    projects = get_moic_bucket_projects(vehicle_id, scope["portfolio_date"], bucket)
    return JsonResponse(
        {
            **scope_payload(scope),
            "bucket": bucket,
            "positions": [project.to_dict() for project in projects],
        }
    )
