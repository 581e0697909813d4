"""
Tabular Profiler — Column Types and Summary Statistics

Builds the profile that drives the charting dashboard from an already-parsed
row set (a list of dicts, one per spreadsheet row):

  rows → classify_columns → (columns, numeric_columns)
       → aggregate_statistics → summary_stats
       → Profile

Runs entirely in memory with per-call state only; the input rows are never
mutated, so independent datasets can be profiled concurrently.

Malformed cells are not errors: anything ``coerce_number`` rejects is simply
left out of that column's statistics.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

import numpy as np

from .coercion import coerce_number, is_coercible

logger = logging.getLogger("sheet_profiler.profiler")

Row = Mapping[str, Any]

FIRST_ROW = "first_row"
UNION = "union"
COLUMN_STRATEGIES = (FIRST_ROW, UNION)


# ═══════════════════════════════════════════════════════════════════════════
# Data Classes
# ═══════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class ColumnStats:
    """Summary statistics for one numeric column."""
    min: float
    max: float
    average: float
    count: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "min": self.min,
            "max": self.max,
            "average": self.average,
            "count": self.count,
        }


@dataclass(frozen=True)
class ColumnClassification:
    """Ordered column names and the numeric subset, in the same order."""
    columns: List[str]
    numeric_columns: List[str]


@dataclass(frozen=True)
class Profile:
    """Structural and statistical summary of a dataset."""
    total_rows: int
    columns: List[str] = field(default_factory=list)
    numeric_columns: List[str] = field(default_factory=list)
    summary_stats: Dict[str, ColumnStats] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with the field names the dashboard client reads."""
        return {
            "totalRows": self.total_rows,
            "columns": list(self.columns),
            "numericColumns": list(self.numeric_columns),
            "summaryStats": {
                name: stats.to_dict() for name, stats in self.summary_stats.items()
            },
        }


# ═══════════════════════════════════════════════════════════════════════════
# Column Classifier
# ═══════════════════════════════════════════════════════════════════════════


def discover_columns(rows: Sequence[Row], strategy: str = FIRST_ROW) -> List[str]:
    """
    Determine the ordered column list.

    ``first_row``: the keys of the first row only. Keys that appear only in
    later rows are invisible to the profile.
    ``union``: every key seen in any row, in order of first appearance.
    """
    if strategy not in COLUMN_STRATEGIES:
        raise ValueError(
            f"Unknown column strategy {strategy!r}; expected one of {COLUMN_STRATEGIES}"
        )
    if not rows:
        return []

    if strategy == FIRST_ROW:
        return list(rows[0].keys())

    seen: Dict[str, None] = {}
    for row in rows:
        for key in row.keys():
            seen.setdefault(key, None)
    return list(seen)


def classify_columns(
    rows: Sequence[Row], strategy: str = FIRST_ROW
) -> ColumnClassification:
    """
    Split the dataset's columns into all columns and numeric columns.

    A column is numeric as soon as a single row holds a coercible value for
    it. A mostly-text column with one number-like cell is still numeric;
    this is intentionally permissive, not a majority vote.
    """
    columns = discover_columns(rows, strategy)
    numeric_columns = []
    for col in columns:
        numeric = any(is_coercible(row.get(col)) for row in rows)
        logger.debug("  classified '%s' → numeric=%s", col, numeric)
        if numeric:
            numeric_columns.append(col)

    return ColumnClassification(columns=columns, numeric_columns=numeric_columns)


# ═══════════════════════════════════════════════════════════════════════════
# Statistics Aggregator
# ═══════════════════════════════════════════════════════════════════════════


def aggregate_statistics(
    rows: Sequence[Row], columns: Sequence[str]
) -> Dict[str, ColumnStats]:
    """
    Compute min/max/average/count per column over coercible values only.

    Coercibility is re-derived here, so passing the full column list is safe:
    columns without a single coercible value are omitted from the result
    rather than reported with empty or zeroed stats.
    """
    stats: Dict[str, ColumnStats] = {}
    for col in columns:
        column_stats = _column_stats(rows, col)
        if column_stats is not None:
            stats[col] = column_stats
    return stats


def _column_stats(rows: Sequence[Row], column: str) -> Optional[ColumnStats]:
    coerced = [coerce_number(row.get(column)) for row in rows]
    values = [v for v in coerced if v is not None]

    if not values:
        return None

    vals = np.array(values, dtype=float)
    lo = float(np.min(vals))
    hi = float(np.max(vals))
    # Left-to-right sum in row order; np.sum's pairwise summation rounds
    # differently on long columns of mixed magnitude.
    average = sum(values) / len(values)
    # Rounding in the sum can push the mean of near-equal values past an
    # endpoint, e.g. three 0.1 cells.
    average = min(max(average, lo), hi)

    return ColumnStats(min=lo, max=hi, average=average, count=len(values))


# ═══════════════════════════════════════════════════════════════════════════
# Profile Assembly
# ═══════════════════════════════════════════════════════════════════════════


def build_profile(rows: Sequence[Row], strategy: str = FIRST_ROW) -> Profile:
    """
    Profile a dataset: row count, columns, numeric columns, summary stats.

    An empty dataset produces an empty profile, never an error.
    """
    logger.info("build_profile: %d rows (columns from %s)", len(rows), strategy)
    if not rows:
        logger.warning("build_profile: no rows — profile will be empty")

    classification = classify_columns(rows, strategy)
    summary_stats = aggregate_statistics(rows, classification.columns)

    logger.info(
        "build_profile: done — %d columns, %d numeric, %d with stats",
        len(classification.columns),
        len(classification.numeric_columns),
        len(summary_stats),
    )
    return Profile(
        total_rows=len(rows),
        columns=classification.columns,
        numeric_columns=classification.numeric_columns,
        summary_stats=summary_stats,
    )
