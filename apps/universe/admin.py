"""
Admin interfaces for the project and vehicle universe.
"""

from __future__ import annotations

from io import BytesIO

import pandas as pd
from django.contrib import admin
from django.http import HttpResponse

from apps.quality.engine.completeness import score_fields
from apps.universe.models import Closing, Project, ProjectUpdate, Vehicle
from libs.admin import WarehouseReadOnlyAdmin


@admin.register(Vehicle)
class VehicleAdmin(WarehouseReadOnlyAdmin):
    """Read-only admin for vehicles."""

    list_display = [
        "vehicle_id",
        "full_investment_name",
        "fund_manager",
        "vintage",
        "base_currency",
    ]
    list_filter = ["vintage", "base_currency"]
    search_fields = ["vehicle_id", "full_investment_name", "fund_manager"]


@admin.register(Closing)
class ClosingAdmin(WarehouseReadOnlyAdmin):
    """Read-only admin for vehicle closings into fund families."""

    list_display = ["vehicle_id", "tbv_fund", "tbv_vehicle_id"]
    list_filter = ["tbv_fund"]
    search_fields = ["vehicle_id", "tbv_vehicle_id"]


@admin.register(Project)
class ProjectAdmin(WarehouseReadOnlyAdmin):
    """
    Read-only admin for projects.

    Shows the completeness score next to each project and supports exporting
    the selected projects with their scores to Excel.
    """

    list_display = [
        "project_id",
        "completeness",
        "coingecko_id",
        "project_stack",
        "project_tag",
        "project_sub_tag",
        "website",
    ]
    list_filter = ["project_stack", "project_tag"]
    search_fields = ["project_id", "coingecko_id", "website"]
    actions = ["export_to_excel"]

    @admin.display(description="Completeness")
    def completeness(self, obj):
        return f"{score_fields(obj.enrichment_values()).completeness}%"

    @admin.action(description="Export selected projects to Excel")
    def export_to_excel(self, request, queryset):
        data = []
        for project in queryset:
            values = project.enrichment_values()
            score = score_fields(values)
            data.append(
                {
                    "project_id": project.project_id,
                    "filled_count": score.filled_count,
                    "completeness": score.completeness,
                    **{field: value or "" for field, value in values.items()},
                }
            )

        df = pd.DataFrame(data)

        output = BytesIO()
        with pd.ExcelWriter(output, engine="openpyxl") as writer:
            df.to_excel(writer, sheet_name="Projects", index=False)

        response = HttpResponse(
            output.getvalue(),
            content_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        )
        response["Content-Disposition"] = 'attachment; filename="projects_export.xlsx"'
        return response


@admin.register(ProjectUpdate)
class ProjectUpdateAdmin(WarehouseReadOnlyAdmin):
    """Read-only admin for processed project notes."""

    list_display = ["project_id", "source_document_date", "source_document_name"]
    list_filter = ["source_document_date"]
    search_fields = ["project_id", "source_document_name", "summary"]
    date_hierarchy = "source_document_date"
