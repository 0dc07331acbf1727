"""
Trends - heat matrices and short month-by-month trends.
"""

from .heatmap import ROLLING, YTD, BucketSpec, bucket_labels, build_buckets, build_matrix, short_trend

__all__ = [
    "ROLLING",
    "YTD",
    "BucketSpec",
    "bucket_labels",
    "build_buckets",
    "build_matrix",
    "short_trend",
]
