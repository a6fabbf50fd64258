"""
Shared choices/constants used across multiple Django apps.

This module provides common TextChoices and constants that are used
by multiple apps to ensure consistency and avoid duplication.

Key principles:
- Only include choices that are used by 2+ apps
- Values mirror the literal strings stored in the upstream warehouse tables
- Document which apps read each choice
"""

from __future__ import annotations

from django.db import models
from django.utils.translation import gettext_lazy as _

# Placeholder project id used by the ledger for non-investment holdings.
OTHER_ASSETS_PROJECT_ID = "Other Assets"


class EnrichmentField(models.TextChoices):
    """
    The six project enrichment fields that define metadata completeness.

    Used by:
    - Project (universe app)
    - Completeness scoring, stats and listing filters (quality app)

    Declaration order is the canonical field order for fill rates and exports.
    """

    COINGECKO_ID = "coingecko_id", _("CoinGecko ID")
    PROJECT_STACK = "project_stack", _("Project Stack")
    PROJECT_TAG = "project_tag", _("Project Tag")
    PROJECT_SUB_TAG = "project_sub_tag", _("Project Sub-Tag")
    WEBSITE = "website", _("Website")
    DESCRIPTION = "description", _("Description")


class OutcomeType(models.TextChoices):
    """
    Outcome types recorded on ownership ledger rows.

    Used by:
    - LedgerEntry (ledger app)
    - Cost attribution (ledger app) and excluded-position categories (soi app)

    Only CASH carries engine semantics; other outcome values pass through as-is.
    """

    CASH = "Cash", _("Cash")


class AssetClass(models.TextChoices):
    """
    Asset classes on ledger and fund market-value rows.

    Used by:
    - LedgerEntry and MarketValueEntry (ledger app)
    - Excluded-position categories, the schedule of investments and MOIC
      buckets (soi app)

    CASH, NAV_ADJUSTMENT and FLOWS mark non-investment positions; EQUITY and
    TOKENS split investment cost and value. Any other class counts as "others".
    """

    EQUITY = "Equity", _("Equity")
    TOKENS = "Tokens", _("Tokens")

    CASH = "Cash", _("Cash")
    NAV_ADJUSTMENT = "NAV Adjustment", _("NAV Adjustment")
    FLOWS = "Flows", _("Flows")
