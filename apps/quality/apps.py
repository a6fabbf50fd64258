"""
Django app configuration for the data quality app.

Scores project metadata completeness, aggregates corpus statistics and
position-level quality, and serves the paginated quality listing and exports.
"""

from __future__ import annotations

from django.apps import AppConfig


class QualityConfig(AppConfig):
    """App configuration for data quality reporting."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.quality"
