"""Profiling, ingestion and charting services."""

from .coercion import coerce_number, is_coercible
from .profiler import (
    ColumnClassification,
    ColumnStats,
    Profile,
    aggregate_statistics,
    build_profile,
    classify_columns,
    discover_columns,
)

__all__ = [
    "coerce_number",
    "is_coercible",
    "ColumnClassification",
    "ColumnStats",
    "Profile",
    "aggregate_statistics",
    "build_profile",
    "classify_columns",
    "discover_columns",
]
