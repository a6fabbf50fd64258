"""
URL configuration for ledger app.
"""

from django.urls import path

from apps.ledger import views

app_name = "ledger"

urlpatterns = [
    path("vehicles/", views.vehicle_list, name="vehicles"),
    path(
        "vehicles/<str:vehicle_id>/periods/",
        views.vehicle_periods,
        name="vehicle_periods",
    ),
]
