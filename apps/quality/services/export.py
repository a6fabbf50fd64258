"""
Export the project quality listing as CSV or Excel.

Both formats apply the same filters and ordering as the paginated listing but
export every matching project, not one page.

Key functions:
- export_project_quality_csv: CSV string plus suggested filename
- export_project_quality_xlsx: Excel workbook bytes plus suggested filename
- project_quality_records: Row dicts shared by both formats
"""

from __future__ import annotations

import csv
from io import BytesIO, StringIO

import pandas as pd
from django.utils import timezone

from apps.quality.engine.completeness import ENRICHMENT_FIELDS
from apps.quality.engine.projects import build_project_queryset, to_row

EXPORT_COLUMNS = [
    "project_id",
    "filled_count",
    "completeness",
    "cost",
    *ENRICHMENT_FIELDS,
    "project_logo_url",
]

XLSX_CONTENT_TYPE = (
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
)


def project_quality_records(**filters) -> list[dict]:
    """
    Every project matching the listing filters, as export-ready dicts.

    Args:
        **filters: vehicle_id, search, missing_field, sort_by, sort_dir; the
            same keywords build_project_queryset accepts.
    """
    records = []
    for project in build_project_queryset(**filters):
        row = to_row(project).to_dict()
        records.append({column: row[column] for column in EXPORT_COLUMNS})
    return records


def export_filename(extension: str, vehicle_id: str | None = None) -> str:
    stamp = timezone.now().strftime("%Y%m%d")
    scope = vehicle_id or "all"
    return f"data_quality_{scope}_{stamp}.{extension}"


def export_project_quality_csv(**filters) -> tuple[str, str]:
    """
    Export the filtered project quality listing as CSV.

    Returns:
        tuple: (csv_content, filename). Null fields are written as empty cells.
    """
    output = StringIO()
    writer = csv.DictWriter(output, fieldnames=EXPORT_COLUMNS)
    writer.writeheader()
    for record in project_quality_records(**filters):
        writer.writerow({key: "" if value is None else value for key, value in record.items()})

    csv_content = output.getvalue()
    output.close()
    return csv_content, export_filename("csv", filters.get("vehicle_id"))


def export_project_quality_xlsx(**filters) -> tuple[bytes, str]:
    """
    Export the filtered project quality listing as an Excel workbook.

    Returns:
        tuple: (xlsx_bytes, filename). The workbook has a single
        "Data Quality" sheet with one row per project.
    """
    df = pd.DataFrame(project_quality_records(**filters), columns=EXPORT_COLUMNS)

    output = BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name="Data Quality", index=False)

    return output.getvalue(), export_filename("xlsx", filters.get("vehicle_id"))
