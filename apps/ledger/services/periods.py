"""
Reporting-period lookups for the dashboard filters.

Lists the vehicles that can be reported on and, per vehicle, the portfolio
dates with market values and the dates on which ownership was reported. All
lookups degrade to an empty answer when the warehouse is unreachable.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from datetime import date

from django.db.models import F, Max, Min

from apps.ledger.models import LedgerEntry, MarketValueEntry
from apps.universe.models import Vehicle
from libs.errors import degrade_on_store_error

logger = logging.getLogger(__name__)

VEHICLE_LIST_LIMIT = 100


@dataclass(frozen=True)
class VehicleOption:
    vehicle_id: str
    investment_name: str
    fund_manager: str | None
    vintage: int
    base_currency: str

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class InvestmentPeriod:
    min_date: date | None = None
    max_date: date | None = None

    def to_dict(self) -> dict:
        return {
            "min_date": self.min_date.isoformat() if self.min_date else None,
            "max_date": self.max_date.isoformat() if self.max_date else None,
        }


@degrade_on_store_error(list, "fetching vehicles")
def get_vehicles(fund_manager: str | None = None) -> list[VehicleOption]:
    """
    Vehicles with a display name, newest vintage first.

    Without a fund manager the list is capped at VEHICLE_LIST_LIMIT entries.
    """
    queryset = Vehicle.objects.exclude(full_investment_name__isnull=True).order_by(
        F("vintage").desc(nulls_last=True), "full_investment_name"
    )
    if fund_manager:
        queryset = queryset.filter(fund_manager=fund_manager)
    else:
        queryset = queryset[:VEHICLE_LIST_LIMIT]

    vehicles = [
        VehicleOption(
            vehicle_id=vehicle.vehicle_id,
            investment_name=vehicle.full_investment_name,
            fund_manager=vehicle.fund_manager,
            vintage=vehicle.vintage or 0,
            base_currency=str(vehicle.base_currency),
        )
        for vehicle in queryset
    ]
    logger.info(f"Fetched {len(vehicles)} vehicles (fund_manager={fund_manager!r})")
    return vehicles


@degrade_on_store_error(list, "fetching portfolio dates")
def get_portfolio_dates(vehicle_id: str) -> list[date]:
    """Distinct portfolio dates with market values for a vehicle, newest first."""
    return list(
        MarketValueEntry.objects.filter(vehicle_id=vehicle_id)
        .order_by("-portfolio_date")
        .values_list("portfolio_date", flat=True)
        .distinct()
    )


@degrade_on_store_error(lambda: None, "fetching latest portfolio date")
def get_latest_portfolio_date(vehicle_id: str) -> date | None:
    """Most recent portfolio date for a vehicle, or None."""
    return MarketValueEntry.objects.filter(vehicle_id=vehicle_id).aggregate(
        latest=Max("portfolio_date")
    )["latest"]


@degrade_on_store_error(list, "fetching date reported dates")
def get_date_reported_dates(vehicle_id: str, until: date | None = None) -> list[date]:
    """
    Distinct ownership reporting dates for a vehicle.

    Without `until` the dates come back ascending (start-date picker). With
    `until` only dates on or before it are returned, descending (end-date picker).
    """
    queryset = LedgerEntry.objects.filter(
        vehicle_id=vehicle_id, date_reported__isnull=False
    )
    if until is not None:
        queryset = queryset.filter(date_reported__lte=until).order_by("-date_reported")
    else:
        queryset = queryset.order_by("date_reported")
    return list(queryset.values_list("date_reported", flat=True).distinct())


@degrade_on_store_error(InvestmentPeriod, "fetching investment period range")
def get_investment_period_range(vehicle_id: str) -> InvestmentPeriod:
    """Earliest and latest ownership reporting dates for a vehicle."""
    bounds = LedgerEntry.objects.filter(vehicle_id=vehicle_id).aggregate(
        min_date=Min("date_reported"), max_date=Max("date_reported")
    )
    return InvestmentPeriod(min_date=bounds["min_date"], max_date=bounds["max_date"])
