"""
Django app configuration for the universe app.

This app maps the upstream project and vehicle universe tables:
- Vehicle and Project reference rows
- Processed project updates (research notes)
"""

from __future__ import annotations

from django.apps import AppConfig


class UniverseConfig(AppConfig):
    """App configuration for the project/vehicle universe."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.universe"
