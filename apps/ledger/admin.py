"""
Admin interfaces for ledger models.
"""

from __future__ import annotations

from django.contrib import admin

from apps.ledger.models import LedgerEntry, MarketValueEntry
from libs.admin import WarehouseReadOnlyAdmin


@admin.register(LedgerEntry)
class LedgerEntryAdmin(WarehouseReadOnlyAdmin):
    """Read-only admin for ownership ledger rows."""

    list_display = [
        "ownership_id",
        "vehicle",
        "project_id",
        "delta_cost",
        "outcome_type",
        "asset_class",
        "established_type",
        "date_reported",
    ]
    list_filter = ["outcome_type", "asset_class", "established_type", "date_reported"]
    search_fields = ["ownership_id", "project_id", "vehicle__vehicle_id"]
    list_select_related = ["vehicle"]


@admin.register(MarketValueEntry)
class MarketValueEntryAdmin(WarehouseReadOnlyAdmin):
    """Read-only admin for fund market-value rows."""

    list_display = [
        "vehicle",
        "project_id",
        "asset_class",
        "portfolio_date",
        "unrealized_market_value",
        "realized_market_value",
    ]
    list_filter = ["asset_class", "portfolio_date"]
    search_fields = ["project_id", "vehicle__vehicle_id"]
    list_select_related = ["vehicle"]
    date_hierarchy = "portfolio_date"
