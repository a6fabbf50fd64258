"""
Management command to export the project data quality listing.

Writes CSV or Excel depending on the output file extension (.csv or .xlsx),
applying the same filters and ordering as the dashboard listing.

Usage:
    python manage.py export_data_quality --output-file quality.csv
    python manage.py export_data_quality --output-file quality.xlsx --vehicle-id recFund2 --missing-field website
"""

from __future__ import annotations

from pathlib import Path

from django.core.management.base import BaseCommand, CommandError
from django.db import DatabaseError

from apps.quality.engine.projects import SORT_ASC, SORT_COMPLETENESS
from apps.quality.services.export import (
    export_project_quality_csv,
    export_project_quality_xlsx,
)
from libs.choices import EnrichmentField


class Command(BaseCommand):
    """
    Export the project data quality listing to a file.

    Unlike the dashboard, the command surfaces database failures as a
    CommandError instead of writing an empty file.
    """

    help = "Export project data quality (completeness and attributed cost) as CSV or Excel"

    def add_arguments(self, parser):
        """Add command-line arguments."""
        parser.add_argument(
            "--output-file",
            type=str,
            required=True,
            help="Output file path; .csv or .xlsx",
        )
        parser.add_argument(
            "--vehicle-id",
            type=str,
            help="Restrict to projects held by this vehicle",
        )
        parser.add_argument(
            "--missing-field",
            type=str,
            choices=EnrichmentField.values,
            help="Only projects missing this enrichment field",
        )
        parser.add_argument(
            "--search",
            type=str,
            help="Case-insensitive substring of the project id",
        )
        parser.add_argument(
            "--sort-by",
            type=str,
            default=SORT_COMPLETENESS,
            choices=["completeness", "project_id", "cost"],
        )
        parser.add_argument(
            "--sort-dir",
            type=str,
            default=SORT_ASC,
            choices=["asc", "desc"],
        )

    def handle(self, *args, **options):
        """Execute the command."""
        output_file = Path(options["output_file"])
        suffix = output_file.suffix.lower()
        if suffix not in (".csv", ".xlsx"):
            raise CommandError(
                f"Unsupported output format {suffix or '(none)'!r}; use .csv or .xlsx"
            )

        filters = {
            "vehicle_id": options.get("vehicle_id"),
            "search": options.get("search"),
            "missing_field": options.get("missing_field"),
            "sort_by": options["sort_by"],
            "sort_dir": options["sort_dir"],
        }

        try:
            if suffix == ".csv":
                content, _ = export_project_quality_csv(**filters)
                # utf-8-sig (UTF-8 with BOM) for Excel compatibility
                output_file.write_text(content, encoding="utf-8-sig")
            else:
                content, _ = export_project_quality_xlsx(**filters)
                output_file.write_bytes(content)
        except DatabaseError as e:
            raise CommandError(f"Failed to query data quality: {e}")
        except OSError as e:
            raise CommandError(f"Failed to write output file: {e}")

        self.stdout.write(
            self.style.SUCCESS(f"✓ Exported data quality listing to {output_file}")
        )
