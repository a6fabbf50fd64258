"""
Choices for the schedule of investments.

ExcludedCategory labels double as display text and are returned verbatim to
the dashboard; their declaration order is the display order.
"""

from __future__ import annotations

from django.db import models
from django.utils.translation import gettext_lazy as _


class ExcludedCategory(models.TextChoices):
    """Categories of positions reported outside the normal investment set."""

    OTHER_ASSETS = "Other Assets", _("Other Assets")
    CASH = "Cash & Cash Equivalents", _("Cash & Cash Equivalents")
    NAV_ADJUSTMENT = "NAV Adjustment", _("NAV Adjustment")
    FLOWS = "Flows", _("Flows")


class MoicBucket(models.TextChoices):
    """
    Performance buckets for a multiple on invested capital.

    Ordered from best to worst, with UNKNOWN last.
    """

    GRAND_SLAM = "grand_slam", _("Grand Slam (10x+)")
    HOME_RUN = "home_run", _("Home Run (5x-10x)")
    DOUBLES = "doubles", _("Doubles (2x-5x)")
    BASE_HIT = "base_hit", _("Base Hit (1x-2x)")
    COST = "cost", _("At Cost (1x)")
    LOSS = "loss", _("Loss (<1x)")
    WRITE_OFF = "write_off", _("Write-off (0x)")
    UNKNOWN = "unknown", _("Unknown")
