"""
Tests for the read-only universe admin.
"""

from io import BytesIO

import pandas as pd
from django.contrib.admin.sites import AdminSite

from apps.universe.admin import ClosingAdmin, ProjectAdmin
from apps.universe.models import Closing, Project
from tests.factories import ClosingFactory, ProjectFactory


class TestProjectAdmin:
    """Test cases for ProjectAdmin."""

    def setup_method(self):
        self.admin = ProjectAdmin(Project, AdminSite())

    def test_is_read_only(self, rf, user):
        request = rf.get("/admin/universe/project/")
        request.user = user

        assert not self.admin.has_add_permission(request)
        assert not self.admin.has_change_permission(request)
        assert not self.admin.has_delete_permission(request)

    def test_completeness_column(self):
        project = ProjectFactory(website=None, description="")

        assert self.admin.completeness(project) == "67%"

    def test_export_to_excel(self, rf):
        ProjectFactory(project_id="Polymarket")
        ProjectFactory(project_id="Obscure", coingecko_id=None)

        response = self.admin.export_to_excel(rf.get("/"), Project.objects.order_by("project_id"))

        assert response["Content-Disposition"] == 'attachment; filename="projects_export.xlsx"'
        df = pd.read_excel(BytesIO(response.content), sheet_name="Projects")
        assert list(df["project_id"]) == ["Obscure", "Polymarket"]
        assert list(df["filled_count"]) == [5, 6]


class TestClosingAdmin:
    """Test cases for ClosingAdmin."""

    def test_is_read_only(self, rf, user):
        admin = ClosingAdmin(Closing, AdminSite())
        request = rf.get("/admin/universe/closing/")
        request.user = user

        assert not admin.has_add_permission(request)
        assert not admin.has_delete_permission(request)

    def test_str(self):
        assert str(ClosingFactory(vehicle_id="recFund2", tbv_fund="TBV2")) == "recFund2 -> TBV2"
        assert str(ClosingFactory(vehicle_id="recFund3", tbv_fund=None)) == "recFund3 -> -"
