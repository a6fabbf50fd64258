"""
Tests for the data quality export service and management command.
"""

import csv
from decimal import Decimal
from io import BytesIO, StringIO
from unittest.mock import patch

import pandas as pd
import pytest
from django.core.management import call_command
from django.core.management.base import CommandError
from django.db import OperationalError

from apps.quality.services.export import (
    EXPORT_COLUMNS,
    export_filename,
    export_project_quality_csv,
    export_project_quality_xlsx,
    project_quality_records,
)
from tests.factories import LedgerEntryFactory, ProjectFactory


@pytest.fixture
def projects(vehicle):
    ProjectFactory(project_id="Polymarket", description="Prediction markets, on-chain")
    ProjectFactory(project_id="Uniswap", website=None)
    ProjectFactory(project_id="Obscure", coingecko_id=None, project_stack=None, project_tag=None)
    LedgerEntryFactory(vehicle=vehicle, project_id="Polymarket", delta_cost=Decimal("300"))


class TestProjectQualityRecords:
    """Test cases for project_quality_records."""

    @pytest.mark.usefixtures("projects")
    def test_records_follow_listing_order(self):
        records = project_quality_records()

        assert [r["project_id"] for r in records] == ["Obscure", "Uniswap", "Polymarket"]
        assert list(records[0]) == EXPORT_COLUMNS
        assert records[2]["cost"] == 300.0

    @pytest.mark.usefixtures("projects")
    def test_filters_apply(self):
        records = project_quality_records(missing_field="website")

        assert [r["project_id"] for r in records] == ["Uniswap"]

    def test_export_filename(self):
        assert export_filename("csv").startswith("data_quality_all_")
        assert export_filename("xlsx", "recFund2").endswith(".xlsx")


@pytest.mark.usefixtures("projects")
class TestExportFormats:
    """Test cases for the CSV and Excel exports."""

    def test_csv(self):
        content, filename = export_project_quality_csv(sort_by="project_id")

        rows = list(csv.DictReader(StringIO(content)))
        assert [row["project_id"] for row in rows] == ["Obscure", "Polymarket", "Uniswap"]
        assert rows[1]["description"] == "Prediction markets, on-chain"
        assert rows[2]["website"] == ""
        assert filename.endswith(".csv")

    def test_xlsx(self):
        content, filename = export_project_quality_xlsx(vehicle_id="recFund2")

        df = pd.read_excel(BytesIO(content), sheet_name="Data Quality")
        assert list(df.columns) == EXPORT_COLUMNS
        assert list(df["project_id"]) == ["Polymarket"]
        assert filename.startswith("data_quality_recFund2_")


@pytest.mark.usefixtures("projects")
class TestExportDataQualityCommand:
    """Test cases for the export_data_quality management command."""

    def test_csv_output(self, tmp_path):
        output_file = tmp_path / "quality.csv"
        out = StringIO()

        call_command("export_data_quality", output_file=str(output_file), missing_field="website", stdout=out)

        text = output_file.read_text(encoding="utf-8-sig")
        assert text.splitlines()[1].startswith("Uniswap,")
        assert "Exported data quality listing" in out.getvalue()

    def test_xlsx_output(self, tmp_path):
        output_file = tmp_path / "quality.xlsx"

        call_command("export_data_quality", output_file=str(output_file), sort_by="cost", sort_dir="desc", stdout=StringIO())

        df = pd.read_excel(output_file, sheet_name="Data Quality")
        assert df["project_id"].iloc[0] == "Polymarket"

    def test_unsupported_extension(self, tmp_path):
        with pytest.raises(CommandError, match="Unsupported output format"):
            call_command("export_data_quality", output_file=str(tmp_path / "quality.json"))

    def test_database_failure(self, tmp_path):
        with patch(
            "apps.quality.management.commands.export_data_quality.export_project_quality_csv",
            side_effect=OperationalError("connection refused"),
        ):
            with pytest.raises(CommandError, match="Failed to query data quality"):
                call_command("export_data_quality", output_file=str(tmp_path / "quality.csv"))

    def test_unwritable_path(self, tmp_path):
        with pytest.raises(CommandError, match="Failed to write output file"):
            call_command("export_data_quality", output_file=str(tmp_path / "missing" / "quality.csv"))
