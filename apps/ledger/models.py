"""
Ledger models: ownership transactions and fund market-value snapshots.

Both tables are owned by the upstream warehouse and read-only here. Together
they form the ledger the reporting engine aggregates: the ownership table
carries signed cost deltas, the market-value table carries unrealized and
realized market values per portfolio date.

Key components:
- LedgerEntry: One ownership transaction (cost delta) for a project in a vehicle
- MarketValueEntry: Market value of a project holding in a vehicle on a portfolio date
"""

from __future__ import annotations

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _

from apps.universe.models import Vehicle


class LedgerEntry(models.Model):
    """
    Ownership ledger row.

    A row belongs to exactly one vehicle and one project id. The project id is a
    plain string rather than a foreign key because the ledger also holds the
    "Other Assets" placeholder, which is not a real project.

    Attributes:
        ownership_id (str): Warehouse identifier, primary key.
        vehicle (Vehicle): Vehicle the row is booked in.
        project_id (str, optional): Project identifier or "Other Assets".
        delta_cost (Decimal, optional): Signed cost change booked by this row.
        outcome_type (str, optional): Outcome tag; "Cash" marks cash rows.
        asset_class (str, optional): Instrument class, "Equity" or "Tokens" for
            investments.
        established_type (str, optional): How the position was established.
        rounds_id (str, optional): Funding round reference.
        entry_valuation_token (Decimal, optional): Token valuation at entry.
        entry_valuation_equity (Decimal, optional): Equity valuation at entry.
        date_reported (date, optional): When the transaction was reported.
    """

    ownership_id = models.CharField(_("Ownership ID"), max_length=64, primary_key=True)
    vehicle = models.ForeignKey(
        Vehicle,
        on_delete=models.DO_NOTHING,
        db_constraint=False,
        db_column="vehicle_id",
        related_name="ledger_entries",
        blank=True,
        null=True,
    )
    project_id = models.CharField(
        _("Project ID"), max_length=255, blank=True, null=True, db_index=True
    )
    delta_cost = models.DecimalField(
        _("Delta Cost"), max_digits=20, decimal_places=6, blank=True, null=True
    )
    outcome_type = models.CharField(
        _("Outcome Type"), max_length=64, blank=True, null=True
    )
    asset_class = models.CharField(_("Asset Class"), max_length=64, blank=True, null=True)
    established_type = models.CharField(
        _("Established Type"), max_length=64, blank=True, null=True
    )
    rounds_id = models.CharField(_("Rounds ID"), max_length=64, blank=True, null=True)
    entry_valuation_token = models.DecimalField(
        _("Entry Valuation (Token)"),
        max_digits=24,
        decimal_places=6,
        blank=True,
        null=True,
    )
    entry_valuation_equity = models.DecimalField(
        _("Entry Valuation (Equity)"),
        max_digits=24,
        decimal_places=6,
        blank=True,
        null=True,
    )
    date_reported = models.DateField(_("Date Reported"), blank=True, null=True)

    class Meta:
        managed = settings.LEDGER_TABLES_MANAGED
        db_table = "at_ownership_db_v2"
        verbose_name = _("Ledger Entry")
        verbose_name_plural = _("Ledger Entries")
        indexes = [
            models.Index(fields=["vehicle", "project_id"]),
            models.Index(fields=["vehicle", "date_reported"]),
        ]

    def __str__(self) -> str:
        return f"{self.ownership_id}: {self.project_id} ({self.delta_cost})"


class MarketValueEntry(models.Model):
    """
    Market value of a holding on a portfolio date.

    Attributes:
        vehicle (Vehicle): Vehicle holding the position.
        project_id (str, optional): Project identifier or "Other Assets".
        asset_class (str, optional): Asset class; Cash, Flows and NAV Adjustment
            mark non-investment rows.
        portfolio_date (date): As-of date of the valuation.
        unrealized_market_value (Decimal, optional): Unrealized market value.
        realized_market_value (Decimal, optional): Realized market value.
    """

    vehicle = models.ForeignKey(
        Vehicle,
        on_delete=models.DO_NOTHING,
        db_constraint=False,
        db_column="vehicle_id",
        related_name="market_values",
    )
    project_id = models.CharField(
        _("Project ID"), max_length=255, blank=True, null=True, db_index=True
    )
    asset_class = models.CharField(
        _("Asset Class"), max_length=64, blank=True, null=True
    )
    portfolio_date = models.DateField(_("Portfolio Date"))
    unrealized_market_value = models.DecimalField(
        _("Unrealized Market Value"),
        max_digits=20,
        decimal_places=6,
        blank=True,
        null=True,
    )
    realized_market_value = models.DecimalField(
        _("Realized Market Value"),
        max_digits=20,
        decimal_places=6,
        blank=True,
        null=True,
    )

    class Meta:
        managed = settings.LEDGER_TABLES_MANAGED
        db_table = "fund_mv_db"
        verbose_name = _("Market Value Entry")
        verbose_name_plural = _("Market Value Entries")
        indexes = [
            models.Index(fields=["vehicle", "portfolio_date"]),
        ]

    def __str__(self) -> str:
        return f"{self.vehicle_id} {self.project_id} ({self.portfolio_date})"
