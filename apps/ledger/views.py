"""
Views for reporting-period filters.

Feed the dashboard's vehicle picker and, per vehicle, the portfolio-date and
reported-date pickers.
"""

from __future__ import annotations

from django.contrib.auth.decorators import login_required
from django.http import JsonResponse
from django.views.decorators.http import require_http_methods

from apps.ledger.services.periods import (
    get_date_reported_dates,
    get_investment_period_range,
    get_portfolio_dates,
    get_vehicles,
)
from libs.params import param_date, param_str


@login_required
@require_http_methods(["GET"])
def vehicle_list(request):
    """Vehicles, newest vintage first; ?fund_manager= narrows the list."""
    vehicles = get_vehicles(param_str(request.GET, "fund_manager"))
    return JsonResponse({"vehicles": [vehicle.to_dict() for vehicle in vehicles]})


@login_required
@require_http_methods(["GET"])
def vehicle_periods(request, vehicle_id: str):
    """
    Portfolio dates and ownership reporting dates for one vehicle.

    With ?until= the reported dates are limited to that date and returned
    newest first, for the end-date picker.
    """
    until = param_date(request.GET, "until")
    return JsonResponse(
        {
            "vehicle_id": vehicle_id,
            "portfolio_dates": [d.isoformat() for d in get_portfolio_dates(vehicle_id)],
            "date_reported": [
                d.isoformat() for d in get_date_reported_dates(vehicle_id, until=until)
            ],
            "investment_period": get_investment_period_range(vehicle_id).to_dict(),
        }
    )
