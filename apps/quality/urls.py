"""
URL configuration for quality app.
"""

from django.urls import path

from apps.quality import views

app_name = "quality"

urlpatterns = [
    path("stats/", views.completeness_stats, name="stats"),
    path("projects/", views.project_list, name="projects"),
    path("projects/export/", views.project_export, name="project_export"),
    path("positions/", views.position_summary, name="positions"),
    path(
        "positions/<str:vehicle_id>/",
        views.vehicle_positions,
        name="vehicle_positions",
    ),
]
