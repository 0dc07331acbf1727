"""
Analytics calculators - per-run scoring.

This package holds the single source of truth for turning one run's
answers into a PASS/FAIL/NA tally and a 0-100 score.
"""

from analytics.calculators.score import ScoreCalculator, score_run

__all__ = ["ScoreCalculator", "score_run"]
