"""
Charts API Endpoints

Chart-type catalogue and x/y series preparation for the dashboard's graphs.
"""

from typing import Any, Dict, List

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ..core.config import Settings, get_settings
from ..services.charts import ChartType, prepare_chart_series, uses_cartesian_axes
from .analysis import check_row_limit

router = APIRouter(prefix="/charts", tags=["Charts"])


class ChartSeriesRequest(BaseModel):
    rows: List[Dict[str, Any]] = Field(..., description="Parsed spreadsheet rows")
    xAxis: str
    yAxis: str
    chartType: ChartType = ChartType.BAR


class ChartSeriesResponse(BaseModel):
    chartType: ChartType
    xAxis: str
    yAxis: str
    labels: List[Any]
    values: List[float]
    cartesian: bool


@router.get("/types")
async def list_chart_types():
    """Chart types the dashboard can render."""
    return {"chartTypes": [t.value for t in ChartType]}


@router.post("/series", response_model=ChartSeriesResponse)
async def chart_series(
    request: ChartSeriesRequest,
    settings: Settings = Depends(get_settings),
):
    """Pair x values with numeric y values, dropping rows without a usable y."""
    check_row_limit(request.rows, settings)
    series = prepare_chart_series(request.rows, request.xAxis, request.yAxis)

    return ChartSeriesResponse(
        chartType=request.chartType,
        xAxis=request.xAxis,
        yAxis=request.yAxis,
        labels=series.labels,
        values=series.values,
        cartesian=uses_cartesian_axes(request.chartType),
    )
