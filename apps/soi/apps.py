"""
Django app configuration for the schedule of investments (SOI) app.

Covers normal positions with MOIC buckets, excluded-position categories with
line-item drill-down, and the reconciliation check between the two totals.
"""

from __future__ import annotations

from django.apps import AppConfig


class SoiConfig(AppConfig):
    """App configuration for the schedule of investments."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.soi"
