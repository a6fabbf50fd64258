"""
URL configuration for universe app.
"""

from django.urls import path

from apps.universe import views

app_name = "universe"

urlpatterns = [
    # Project ids are human-readable names and may contain slashes
    path(
        "projects/<path:project_id>/updates/",
        views.project_updates,
        name="project_updates",
    ),
]
