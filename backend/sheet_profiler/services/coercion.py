"""
Numeric Coercion

The single rule deciding whether a spreadsheet cell counts as a number.
Shared by column classification, statistics aggregation and chart series
preparation so that all three always agree on what "numeric" means.
"""

import math
import numbers
import re
from typing import Any, Optional

# Optional sign, digits with an optional fraction (or a bare fraction),
# optional exponent. No hex, no digit separators, no "Infinity"/"NaN".
_NUMERIC_LITERAL = re.compile(
    r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?",
    re.ASCII,
)


def coerce_number(value: Any) -> Optional[float]:
    """
    Convert a cell value to a finite float, or return None.

    - None (null or missing cell) is never coercible.
    - Booleans map to 1.0 / 0.0.
    - Real numbers (ints, floats, numpy scalars) pass through when finite.
    - Strings are stripped; an empty string or anything that is not a plain
      integer / decimal / exponential literal is not coercible.
    - Any other type is not coercible.
    """
    if value is None:
        return None

    if isinstance(value, bool):
        return 1.0 if value else 0.0

    if isinstance(value, numbers.Real):
        try:
            f = float(value)
        except OverflowError:
            return None
        return f if math.isfinite(f) else None

    if isinstance(value, str):
        text = value.strip()
        if not text or not _NUMERIC_LITERAL.fullmatch(text):
            return None
        f = float(text)
        # "1e999" parses to inf
        return f if math.isfinite(f) else None

    return None


def is_coercible(value: Any) -> bool:
    """True when ``coerce_number`` yields a finite float for ``value``."""
    return coerce_number(value) is not None
