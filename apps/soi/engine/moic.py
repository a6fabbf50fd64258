"""
MOIC calculation, bucketing and display formatting.

Infinite multiples are legitimate: a position carried at zero or negative cost
with positive market value has MOIC +inf and classifies as a grand slam. Only
None and NaN fall into the unknown bucket (and -inf, which no calculation
here produces).
"""

from __future__ import annotations

import math

from apps.soi.choices import MoicBucket
from libs.numeric import to_number

# Display sentinel for loan positions (cost recorded negative).
LOAN_SENTINEL = -1

GRAND_SLAM_AT = 10
HOME_RUN_AT = 5
DOUBLES_AT = 2

HIGH_MOIC_THRESHOLD = HOME_RUN_AT


def calculate_moic(total_mv, cost) -> float:
    """
    Multiple on invested capital.

    Returns:
        total_mv / cost when cost > 0; +inf when cost <= 0 and total_mv > 0;
        otherwise 0.

    Example:
        >>> calculate_moic("250", "100")
        2.5
        >>> calculate_moic(100, 0)
        inf
    """
    total_mv = to_number(total_mv)
    cost = to_number(cost)
    if cost > 0:
        return float(total_mv / cost)
    if total_mv > 0:
        return math.inf
    return 0.0


def classify_moic(moic) -> MoicBucket:
    """
    Map a MOIC value to its performance bucket.

    Checks run in a fixed order: unknown, grand slam (>= 10), home run (>= 5),
    doubles (>= 2), base hit (> 1), cost (== 1), write-off (== 0), loss.
    """
    if moic is None:
        return MoicBucket.UNKNOWN
    value = float(moic)
    if math.isnan(value) or value == -math.inf:
        return MoicBucket.UNKNOWN
    if value >= GRAND_SLAM_AT:
        return MoicBucket.GRAND_SLAM
    if value >= HOME_RUN_AT:
        return MoicBucket.HOME_RUN
    if value >= DOUBLES_AT:
        return MoicBucket.DOUBLES
    if value > 1:
        return MoicBucket.BASE_HIT
    if value == 1:
        return MoicBucket.COST
    if value == 0:
        return MoicBucket.WRITE_OFF
    return MoicBucket.LOSS


def format_moic(moic) -> str:
    """Render a MOIC for display: "Loan", "∞", "-" or a two-decimal multiple."""
    if moic is None:
        return "-"
    value = float(moic)
    if math.isnan(value) or value == -math.inf:
        return "-"
    if value == LOAN_SENTINEL:
        return "Loan"
    if value == math.inf:
        return "∞"
    return f"{value:.2f}x"
