"""
Hotel Audit Analytics - Structured Logging
Provides JSON-formatted logging so dashboard computations can be queried
by event type in any log aggregator.
"""

import logging
import sys
from typing import Any, Optional

from pythonjsonlogger import jsonlogger

from .config import LOG_LEVEL, config


def setup_logger(name: str = __name__) -> logging.Logger:
    """
    Configure structured JSON logger.

    Args:
        name: Logger name (typically __name__ from calling module)

    Returns:
        Configured logger instance

    Example:
        >>> logger = setup_logger(__name__)
        >>> logger.info("Dashboard computed", extra={
        ...     "hotel_id": "h-1",
        ...     "runs": 412,
        ...     "duration_ms": 18.4
        ... })
    """
    logger = logging.getLogger(name)

    # Prevent duplicate handlers (own handlers only, root handlers don't count)
    if logger.handlers:
        return logger

    level = getattr(logging, LOG_LEVEL.upper(), logging.INFO)
    logger.setLevel(level)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)

    formatter = jsonlogger.JsonFormatter(
        '%(asctime)s %(name)s %(levelname)s %(message)s',
        datefmt='%Y-%m-%dT%H:%M:%S'
    )
    handler.setFormatter(formatter)

    logger.addHandler(handler)

    # Don't propagate to root logger
    logger.propagate = False

    return logger


# Global logger instance
logger = setup_logger('audit_analytics')


def log_computation_start(computation: str, hotel_id: Optional[str], runs: int):
    """Log the start of a dashboard computation."""
    logger.info("Computation started", extra={
        "event_type": "computation_start",
        "computation": computation,
        "hotel_id": hotel_id,
        "runs": runs,
        "environment": config.environment
    })


def log_computation_complete(computation: str, hotel_id: Optional[str], duration_ms: float, **counts: int):
    """Log successful computation with the size of each produced collection."""
    logger.info("Computation completed", extra={
        "event_type": "computation_complete",
        "computation": computation,
        "hotel_id": hotel_id,
        "duration_ms": duration_ms,
        **counts
    })


def log_invalid_argument(argument: str, value: Any, reason: str):
    """Log a rejected caller parameter."""
    logger.warning("Invalid argument", extra={
        "event_type": "invalid_argument",
        "argument": argument,
        "value": repr(value),
        "reason": reason
    })


def log_normalized_records(record_type: str, field: str, count: int):
    """Log data values that were coerced to null instead of rejected."""
    logger.debug("Records normalized", extra={
        "event_type": "records_normalized",
        "record_type": record_type,
        "field": field,
        "count": count
    })


def log_pairwise_scale_warning(people: int, topics: int, threshold: int):
    """Log that the shared-topic pair analysis is running above its expected scale."""
    logger.warning("Pairwise topic analysis above expected scale", extra={
        "event_type": "pairwise_scale_warning",
        "people": people,
        "topics": topics,
        "threshold": threshold,
        "pairs": people * (people - 1) // 2
    })
