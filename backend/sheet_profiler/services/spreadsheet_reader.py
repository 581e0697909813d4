"""
Spreadsheet Reader

Turns an uploaded workbook or CSV file into the row set the profiler
consumes: one dict per data row, keyed by the header row.

Only the first sheet of a workbook is read. Every cell comes back as its
text value and empty cells come back as None, so each row carries every
header key.

Header cells are used as-is. A blank header cell gets the pandas name
"Unnamed: <column index>" (e.g. "Unnamed: 1"), and repeated names get a
suffix ("qty", "qty.1"). Browser-side SheetJS parsing names blank headers
"__EMPTY", "__EMPTY_1", ... instead, so clients that look columns up by
those names must switch to the pandas names for server-side uploads.
"""

import io
import logging
from pathlib import Path
from typing import Any, Dict, List

import pandas as pd

logger = logging.getLogger("sheet_profiler.spreadsheet_reader")

# pandas engine per workbook format
EXCEL_ENGINES = {"xlsx": "openpyxl", "xls": "xlrd"}
EXCEL_FORMATS = set(EXCEL_ENGINES)
TEXT_FORMATS = {"csv"}


class IngestionError(ValueError):
    """Base class for upload parsing failures."""


class UnsupportedFormatError(IngestionError):
    """The file extension is not one the reader understands."""


class SpreadsheetReadError(IngestionError):
    """The file could not be parsed as the format its extension claims."""


def detect_format(filename: str) -> str:
    """Return the lower-cased extension of ``filename`` without the dot."""
    return Path(filename or "").suffix.lower().lstrip(".")


def read_rows(content: bytes, filename: str) -> List[Dict[str, Any]]:
    """Parse ``content`` according to the extension of ``filename``."""
    fmt = detect_format(filename)
    if fmt not in EXCEL_FORMATS | TEXT_FORMATS:
        raise UnsupportedFormatError(
            f"Unsupported file format '{fmt or filename}'. "
            f"Supported: {', '.join(sorted(EXCEL_FORMATS | TEXT_FORMATS))}"
        )

    logger.info("read_rows: %s (%s, %d bytes)", filename, fmt, len(content))
    if not content:
        return []

    try:
        if fmt in EXCEL_FORMATS:
            df = pd.read_excel(
                io.BytesIO(content), sheet_name=0, dtype=str, engine=EXCEL_ENGINES[fmt],
                keep_default_na=False, na_values=[""],
            )
        else:
            df = pd.read_csv(
                io.BytesIO(content), dtype=str,
                keep_default_na=False, na_values=[""],
            )
    except pd.errors.EmptyDataError:
        logger.warning("read_rows: %s has no header row", filename)
        return []
    except Exception as e:
        logger.error("read_rows: failed to parse %s: %s", filename, e)
        raise SpreadsheetReadError(f"Could not read {filename}: {e}") from e

    return frame_to_rows(df)


def frame_to_rows(df: pd.DataFrame) -> List[Dict[str, Any]]:
    """Convert a DataFrame to row dicts with string keys and None for blanks."""
    df = df.copy()
    df.columns = [str(c) for c in df.columns]
    # Drop rows that are blank in every column, as spreadsheet exports do
    df = df.dropna(how="all")
    df = df.astype(object).where(df.notna(), None)

    rows = df.to_dict(orient="records")
    logger.info("frame_to_rows: %d rows, %d columns", len(rows), len(df.columns))
    return rows
