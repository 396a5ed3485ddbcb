"""
Investment desirability score (0-100) and status tier.

Feasible lots:
    lot size      0-30  (split ratio x 60)
    profit        0-40  (margin / target x 40)
    buildable     0-20  (buildable / new lot area x 30)
    target bonus  0-10
Rejected lots score at most 20, from the legacy split estimate.
"""

import logging
import math
from typing import Optional

from .financial import FinancialResult
from .property import AnalysisConfig
from .subdivision import FeasibilityResult, LegacySplitEstimate

logger = logging.getLogger(__name__)

EXCELLENT_THRESHOLD = 80
GOOD_THRESHOLD = 60


def calculate_score(
    feasibility: FeasibilityResult,
    financial: FinancialResult,
    config: AnalysisConfig,
    legacy: Optional[LegacySplitEstimate] = None,
) -> int:
    """Combine feasibility and economics into a 0-100 score.

    Args:
        feasibility: Subdivision determination
        financial: Investment economics
        config: Investor criteria (target margin)
        legacy: Legacy split estimate, used only when the lot cannot split

    Returns:
        Integer score in [0, 100]
    """
    if not feasibility.can_split:
        split_ratio = legacy.split_ratio if legacy else 0.0
        return _clamp(round_half_up(split_ratio * 20))

    score = min(30.0, feasibility.split_ratio * 60)

    profit_ratio = max(0.0, financial.profit_margin / config.target_profit_margin)
    score += min(40.0, profit_ratio * 40)

    if feasibility.new_lot_area:
        buildable_ratio = feasibility.buildable_area / feasibility.new_lot_area
        score += min(20.0, buildable_ratio * 30)

    if financial.meets_target:
        score += 10

    return _clamp(round_half_up(score))


def get_status(score: int, price: Optional[float] = None, config: Optional[AnalysisConfig] = None,
               can_split: bool = True) -> str:
    """Status tier for a score: excellent, good or poor.

    Over-budget properties and lots that cannot split are always "poor".
    """
    if not can_split:
        return "poor"
    if config is not None and price is not None and price > config.max_price:
        return "poor"
    if score >= EXCELLENT_THRESHOLD:
        return "excellent"
    if score >= GOOD_THRESHOLD:
        return "good"
    return "poor"


def _clamp(score: int) -> int:
    return max(0, min(100, int(score)))


def round_half_up(value: float) -> int:
    """Round to the nearest integer, .5 always rounding up (not to even)."""
    return math.floor(value + 0.5)
