"""
Models for the project and vehicle universe.

These models map tables owned by the upstream warehouse. Django only reads
them; `Meta.managed` follows the LEDGER_TABLES_MANAGED setting so the test
database can create them while production never touches their schema.

Key components:
- Vehicle: Fund or feeder entity whose positions are tracked
- Project: Investment target with the six enrichment fields scored for completeness
- ProjectUpdate: Processed research note attached to a project
"""

from __future__ import annotations

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _
from djmoney.models.fields import CurrencyField

from libs.choices import EnrichmentField


class Vehicle(models.Model):
    """
    Investment vehicle (fund or feeder) whose ledger rows are reported on.

    Attributes:
        vehicle_id (str): Warehouse identifier, primary key.
        full_investment_name (str, optional): Display name of the vehicle.
        fund_manager (str, optional): Name of the fund manager running it.
        vintage (int, optional): Vintage year.
        base_currency (str): Reporting currency for cost and market values.

    Fund family labels live on the closing table; see Closing.
    """

    vehicle_id = models.CharField(_("Vehicle ID"), max_length=64, primary_key=True)
    full_investment_name = models.TextField(
        _("Full Investment Name"), blank=True, null=True
    )
    fund_manager = models.CharField(
        _("Fund Manager"), max_length=255, blank=True, null=True
    )
    vintage = models.IntegerField(_("Vintage"), blank=True, null=True)
    base_currency = CurrencyField(
        _("Base Currency"), max_length=3, default=settings.DEFAULT_CURRENCY
    )

    class Meta:
        managed = settings.LEDGER_TABLES_MANAGED
        db_table = "at_vehicle_universe_db"
        verbose_name = _("Vehicle")
        verbose_name_plural = _("Vehicles")
        ordering = ["vehicle_id"]

    def __str__(self) -> str:
        return self.full_investment_name or self.vehicle_id


class Closing(models.Model):
    """
    Closing of a vehicle into a fund family.

    A vehicle can close into several fund families, so one vehicle may carry
    several rows. Labels that are blank or "TBV0" mean the closing is not
    reported under a fund family.

    Attributes:
        vehicle_id (str): Vehicle the closing belongs to (`closing_id` upstream).
        tbv_fund (str, optional): Fund family label, e.g. "TBV2".
        tbv_vehicle_id (str, optional): Fund-family vehicle the closing feeds.
    """

    vehicle_id = models.CharField(
        _("Vehicle ID"), max_length=64, db_column="closing_id", db_index=True
    )
    tbv_fund = models.CharField(_("TBV Fund"), max_length=32, blank=True, null=True)
    tbv_vehicle_id = models.CharField(
        _("TBV Vehicle ID"), max_length=64, blank=True, null=True
    )

    class Meta:
        managed = settings.LEDGER_TABLES_MANAGED
        db_table = "at_closing_db"
        verbose_name = _("Closing")
        verbose_name_plural = _("Closings")
        ordering = ["vehicle_id", "tbv_fund"]

    def __str__(self) -> str:
        return f"{self.vehicle_id} -> {self.tbv_fund or '-'}"


class Project(models.Model):
    """
    Project in the investment universe.

    Completeness is defined only over the six enrichment fields listed in
    `ENRICHMENT_FIELDS`; the logo and any other column never contribute.

    Attributes:
        project_id (str): Human-readable project identifier, primary key.
        coingecko_id (str, optional): External market-data reference.
        project_stack (str, optional): Stack tag.
        project_tag (str, optional): Primary tag.
        project_sub_tag (str, optional): Sub-tag.
        website (str, optional): Project website URL.
        description (str, optional): Free-text description.
        project_logo_url (str, optional): Logo reference.
    """

    ENRICHMENT_FIELDS = tuple(EnrichmentField.values)

    project_id = models.CharField(_("Project ID"), max_length=255, primary_key=True)
    coingecko_id = models.CharField(
        _("CoinGecko ID"), max_length=255, blank=True, null=True
    )
    project_stack = models.CharField(
        _("Project Stack"), max_length=255, blank=True, null=True
    )
    project_tag = models.CharField(
        _("Project Tag"), max_length=255, blank=True, null=True
    )
    project_sub_tag = models.CharField(
        _("Project Sub-Tag"), max_length=255, blank=True, null=True
    )
    website = models.CharField(_("Website"), max_length=500, blank=True, null=True)
    description = models.TextField(_("Description"), blank=True, null=True)
    project_logo_url = models.CharField(
        _("Logo URL"), max_length=500, blank=True, null=True
    )

    class Meta:
        managed = settings.LEDGER_TABLES_MANAGED
        db_table = "at_project_universe_db"
        verbose_name = _("Project")
        verbose_name_plural = _("Projects")
        ordering = ["project_id"]

    def __str__(self) -> str:
        return self.project_id

    def enrichment_values(self) -> dict[str, str | None]:
        """Return the six enrichment fields keyed by field name."""
        return {field: getattr(self, field) for field in self.ENRICHMENT_FIELDS}


class ProjectUpdate(models.Model):
    """
    Processed research note about a project.

    `note_tags` is stored as raw text by the upstream pipeline: sometimes a JSON
    array, sometimes a comma-separated list. Use libs.tags.parse_tags to read it.
    """

    project_id = models.CharField(_("Project ID"), max_length=255, db_index=True)
    summary = models.TextField(_("Summary"), blank=True, null=True)
    source_document_date = models.DateField(_("Source Document Date"))
    source_document_name = models.CharField(
        _("Source Document Name"), max_length=500, blank=True, null=True
    )
    note_tags = models.TextField(_("Note Tags"), blank=True, null=True)

    class Meta:
        managed = settings.LEDGER_TABLES_MANAGED
        db_table = "at_processed_notes"
        verbose_name = _("Project Update")
        verbose_name_plural = _("Project Updates")
        ordering = ["-source_document_date", "id"]

    def __str__(self) -> str:
        return f"{self.project_id} ({self.source_document_date})"
