"""
Root URL configuration.

Each app mounts its JSON endpoints under its own prefix; authentication uses
Django's built-in login and logout views.
"""

from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    path("accounts/", include("django.contrib.auth.urls")),
    path("quality/", include("apps.quality.urls")),
    path("soi/", include("apps.soi.urls")),
    path("ledger/", include("apps.ledger.urls")),
    path("universe/", include("apps.universe.urls")),
]
