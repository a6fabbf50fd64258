"""
URL configuration for soi app.
"""

from django.urls import path

from apps.soi import views

app_name = "soi"

urlpatterns = [
    path("<str:vehicle_id>/", views.schedule_of_investments, name="schedule"),
    path("<str:vehicle_id>/excluded/", views.excluded_positions, name="excluded"),
    path(
        "<str:vehicle_id>/excluded/detail/",
        views.excluded_position_details,
        name="excluded_detail",
    ),
    path(
        "<str:vehicle_id>/excluded/reconciliation/",
        views.excluded_reconciliation,
        name="excluded_reconciliation",
    ),
    path("<str:vehicle_id>/buckets/", views.moic_buckets, name="buckets"),
    path(
        "<str:vehicle_id>/buckets/detail/",
        views.moic_bucket_projects,
        name="bucket_projects",
    ),
]
