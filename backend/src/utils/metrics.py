"""
Hotel Audit Analytics - Centralized Metric Calculations
=======================================================

SINGLE SOURCE OF TRUTH for the score arithmetic.
Run scores, section scores, fail rates and averages MUST use these functions.

If you need to change how any metric is calculated, change it HERE
and it will apply everywhere consistently.

Architecture Overview
---------------------
    utils/metrics.py                      <-- YOU ARE HERE (constants, formulas)
         |
         +---> analytics/calculators/score.py        (per-run PASS/FAIL/NA tally)
         +---> analytics/aggregation/aggregator.py   (averages of stored scores)
         +---> analytics/aggregation/sections.py     (per-section sub-scores)
         +---> analytics/rankings/member_rankings.py (fail rates)
         +---> analytics/members.py                  (member report)

Key Concepts
------------
- Denom: questions in scope minus NA answers. NA never counts in a ratio.
- Pass: denom minus FAIL answers. Unanswered questions count as PASS.
- Score: pass / denom * 100, or None when denom is 0.
- None means "no data" and is never replaced by 0.
"""
import math
from typing import Any, Optional, Tuple


# =============================================================================
# CONSTANTS
# =============================================================================

# Scores and percentages are surfaced with two decimals (77.78)
SCORE_PRECISION = 2

SCORE_MIN = 0.0
SCORE_MAX = 100.0


# =============================================================================
# CORE METRIC CALCULATIONS
# =============================================================================

def round_score(value: float) -> float:
    """Round a score or percentage to SCORE_PRECISION decimals."""
    return round(value, SCORE_PRECISION)


def calculate_score(total: int, fail: int, na: int) -> Tuple[int, int, Optional[float]]:
    """
    Calculate the 0-100 score for a set of questions.

    Formula
    -------
    denom = max(0, total - na)
    pass  = max(0, denom - fail)
    score = None if denom == 0 else round(pass / denom * 100, 2)

    Worked Example
    --------------
    10 questions, 2 FAIL, 1 NA:
    - denom = 10 - 1 = 9
    - pass = 9 - 2 = 7
    - score = 7 / 9 * 100 = 77.78

    Used By
    -------
    - analytics/calculators/score.py (whole run)
    - analytics/aggregation/sections.py (one section of one run)

    Args:
        total: Number of questions in scope
        fail: Number of FAIL answers among them
        na: Number of NA answers among them

    Returns:
        (denom, pass_count, score) where score is None if denom is 0
    """
    denom = max(0, total - na)
    pass_count = max(0, denom - fail)
    if denom == 0:
        return denom, pass_count, None
    return denom, pass_count, round_score((pass_count / denom) * 100)


def clamp_score(score: Optional[float]) -> Optional[float]:
    """
    Clamp a score into [SCORE_MIN, SCORE_MAX].

    Stored scores come from an external store and may be anomalous, so every
    surfaced score passes through here. None and non-finite values become None.
    """
    if score is None:
        return None
    try:
        value = float(score)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value):
        return None
    return max(SCORE_MIN, min(SCORE_MAX, value))


def coerce_score(value: Any) -> Optional[float]:
    """
    Read a stored run score for averaging.

    Only finite numbers inside [0, 100] are kept. Anything else (None, bools,
    strings that are not numbers, NaN, 120) is treated as "no score" and the
    run is left out of the average rather than clamped into it.

    Args:
        value: Raw score value from the run row

    Returns:
        Float score or None if the value is not an eligible score
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number) or number < SCORE_MIN or number > SCORE_MAX:
        return None
    return number


def pct(numerator: float, denominator: float) -> float:
    """
    Percentage rounded to SCORE_PRECISION, 0 when the denominator is 0.

    Used for shares ("40% of this member's audits were Breakfast") where an
    empty denominator legitimately means 0%.
    """
    if not denominator:
        return 0.0
    return round_score((numerator / denominator) * 100)


def calculate_fail_rate(fails: int, answered: int) -> Optional[float]:
    """
    Fail rate percentage over answered (PASS + FAIL) questions.

    Returns None when nothing was answered, so a member with no answered
    questions is distinguishable from a member with a perfect 0% record.
    """
    if not answered:
        return None
    return pct(fails, answered)
