"""
Django app configuration for the ledger app.

This app maps the ownership ledger and fund market-value tables and provides:
- Cost attribution per project
- Reporting-period lookups (portfolio dates, reported-date ranges)
"""

from __future__ import annotations

from django.apps import AppConfig


class LedgerConfig(AppConfig):
    """App configuration for the ledger tables."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.ledger"
