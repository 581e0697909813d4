"""
Chart helpers for the dashboard.

The client renders charts itself; the backend only picks sensible default
axes from a profile and pairs up x/y values for a chosen column pair.
"""

import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from .coercion import coerce_number
from .profiler import Profile, Row

logger = logging.getLogger("sheet_profiler.charts")


class ChartType(str, enum.Enum):
    """Chart types the dashboard can draw."""
    BAR = "bar"
    LINE = "line"
    PIE = "pie"
    SCATTER = "scatter"
    RADAR = "radar"
    DOUGHNUT = "doughnut"


_RADIAL_TYPES = {ChartType.PIE, ChartType.DOUGHNUT}


def uses_cartesian_axes(chart_type: ChartType) -> bool:
    """Pie and doughnut charts have no x/y scales."""
    return ChartType(chart_type) not in _RADIAL_TYPES


@dataclass
class GraphConfig:
    x_axis: Optional[str]
    y_axis: Optional[str]
    chart_type: ChartType = ChartType.BAR

    def to_dict(self) -> Dict[str, Any]:
        return {
            "xAxis": self.x_axis,
            "yAxis": self.y_axis,
            "chartType": self.chart_type.value,
        }


@dataclass
class ChartSeries:
    labels: List[Any] = field(default_factory=list)
    values: List[float] = field(default_factory=list)


def default_graph_config(profile: Profile) -> GraphConfig:
    """First column on x, first numeric column on y, as a bar chart."""
    return GraphConfig(
        x_axis=profile.columns[0] if profile.columns else None,
        y_axis=profile.numeric_columns[0] if profile.numeric_columns else None,
    )


def prepare_chart_series(rows: Sequence[Row], x_axis: str, y_axis: str) -> ChartSeries:
    """
    Pair each row's x value with its y value coerced to a number.

    Rows whose y cell is not coercible are dropped; x values pass through
    untouched (including None).
    """
    series = ChartSeries()
    for row in rows:
        y = coerce_number(row.get(y_axis))
        if y is None:
            continue
        series.labels.append(row.get(x_axis))
        series.values.append(y)

    logger.debug(
        "prepare_chart_series: %s vs %s → %d/%d points",
        x_axis, y_axis, len(series.values), len(rows),
    )
    return series
