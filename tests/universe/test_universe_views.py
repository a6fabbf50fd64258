"""
Tests for the project universe JSON endpoints.
"""

from datetime import date

from django.urls import reverse

from tests.factories import ProjectUpdateFactory


class TestProjectUpdatesView:
    """Test cases for the project_updates view."""

    def test_requires_login(self, client):
        response = client.get(reverse("universe:project_updates", kwargs={"project_id": "Polymarket"}))

        assert response.status_code == 302

    def test_updates_newest_first(self, logged_in_client):
        ProjectUpdateFactory(source_document_date=date(2025, 3, 31), note_tags="Fundraise, Hiring")
        ProjectUpdateFactory(source_document_date=date(2025, 9, 30))

        data = logged_in_client.get(reverse("universe:project_updates", kwargs={"project_id": "Polymarket"})).json()

        assert data["count"] == 2
        assert [u["source_document_date"] for u in data["updates"]] == ["2025-09-30", "2025-03-31"]
        assert data["updates"][1]["note_tags"] == ["Fundraise", "Hiring"]

    def test_project_id_with_slash(self, logged_in_client):
        ProjectUpdateFactory(project_id="Maker/Sky")

        data = logged_in_client.get(reverse("universe:project_updates", kwargs={"project_id": "Maker/Sky"})).json()

        assert data["project_id"] == "Maker/Sky"
        assert data["count"] == 1
