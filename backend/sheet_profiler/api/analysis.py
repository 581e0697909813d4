"""
Analysis API Endpoints

Profiles a dataset for the dashboard, either from rows the client already
parsed (JSON array of row objects) or from an uploaded spreadsheet.
Nothing is stored: each request is profiled and forgotten.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, TypeAdapter, ValidationError

from ..core.config import Settings, get_settings
from ..services.charts import default_graph_config
from ..services.profiler import Profile, build_profile
from ..services.spreadsheet_reader import (
    SpreadsheetReadError,
    UnsupportedFormatError,
    detect_format,
    read_rows,
)

logger = logging.getLogger("sheet_profiler.api.analysis")

router = APIRouter(prefix="/analyze", tags=["Analysis"])


# Pydantic models for API. Field names are what the dashboard client reads.
class ColumnStatsResponse(BaseModel):
    min: float
    max: float
    average: float
    count: int


class ProfileResponse(BaseModel):
    totalRows: int
    columns: List[str]
    numericColumns: List[str]
    summaryStats: Dict[str, ColumnStatsResponse]


class GraphConfigResponse(BaseModel):
    xAxis: Optional[str] = None
    yAxis: Optional[str] = None
    chartType: str


class FileAnalysisResponse(BaseModel):
    filename: str
    profile: ProfileResponse
    defaultGraph: GraphConfigResponse


def check_row_limit(rows: Sequence[Any], settings: Settings) -> None:
    """Reject datasets larger than MAX_ROWS before any work is done."""
    if len(rows) > settings.MAX_ROWS:
        raise HTTPException(
            status_code=413,
            detail=f"Dataset has {len(rows)} rows; the limit is {settings.MAX_ROWS}",
        )


def _profile(rows: List[Dict[str, Any]], settings: Settings) -> Profile:
    check_row_limit(rows, settings)
    return build_profile(rows, strategy=settings.COLUMN_DISCOVERY)


_ROWS = TypeAdapter(List[Dict[str, Any]])

_ROWS_BODY_SCHEMA = {
    "requestBody": {
        "required": True,
        "content": {
            "application/json": {
                "schema": {"type": "array", "items": {"type": "object"}},
            },
        },
    },
}


async def read_rows_body(request: Request) -> List[Dict[str, Any]]:
    """
    Parse the body as a JSON array of row objects whatever its content type.

    The dashboard posts ``JSON.stringify(rows)`` without a content type, so
    browsers label it ``text/plain``.
    """
    body = await request.body()
    try:
        return _ROWS.validate_json(body)
    except ValidationError as e:
        raise RequestValidationError(
            [{**err, "loc": ("body", *err["loc"])} for err in e.errors(include_url=False)]
        )


@router.post("", response_model=ProfileResponse, openapi_extra=_ROWS_BODY_SCHEMA)
async def analyze_rows(
    rows: List[Dict[str, Any]] = Depends(read_rows_body),
    settings: Settings = Depends(get_settings),
):
    """Profile a JSON array of row objects."""
    profile = _profile(rows, settings)
    return profile.to_dict()


@router.post("/file", response_model=FileAnalysisResponse)
async def analyze_file(
    file: UploadFile = File(...),
    settings: Settings = Depends(get_settings),
):
    """
    Parse an uploaded spreadsheet (first sheet only) and profile it.

    The response also carries the graph the dashboard opens with by default.
    """
    filename = file.filename or "uploaded_file"
    fmt = detect_format(filename)
    if fmt not in settings.SUPPORTED_FORMATS:
        raise HTTPException(
            status_code=415,
            detail=f"Unsupported file format '{fmt or filename}'",
        )

    content = await file.read()
    if len(content) > settings.max_file_size_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"File exceeds the {settings.MAX_FILE_SIZE_MB}MB upload limit",
        )

    try:
        rows = read_rows(content, filename)
    except UnsupportedFormatError as e:
        raise HTTPException(status_code=415, detail=str(e))
    except SpreadsheetReadError as e:
        raise HTTPException(status_code=400, detail=str(e))

    profile = _profile(rows, settings)
    logger.info(
        "analyze_file: %s → %d rows, %d numeric columns",
        filename, profile.total_rows, len(profile.numeric_columns),
    )

    return {
        "filename": filename,
        "profile": profile.to_dict(),
        "defaultGraph": default_graph_config(profile).to_dict(),
    }
