"""
Failure analytics - FAIL answers grouped by topic, tag, classification or question.
"""

from .common_failures import (
    TOPIC, TAG, CLASSIFICATION, QUESTION, GROUPING_MODES, UNCLASSIFIED,
    FailureAnalysis, analyze_failures, answers_for_runs, by_affected, by_fail_count,
    common_failures, failed_topics_by_member, shared_topic_pairs, topic_key,
)

__all__ = [
    "TOPIC",
    "TAG",
    "CLASSIFICATION",
    "QUESTION",
    "GROUPING_MODES",
    "UNCLASSIFIED",
    "FailureAnalysis",
    "analyze_failures",
    "answers_for_runs",
    "by_affected",
    "by_fail_count",
    "common_failures",
    "failed_topics_by_member",
    "shared_topic_pairs",
    "topic_key",
]
