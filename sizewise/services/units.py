import math
import re
from typing import Optional


CM_PER_INCH = 2.54

_NUMBER_RE = re.compile(r"\d+(?:\.\d+)?|\.\d+")
# "in", "inch", "inches" as a unit token; "inseam" or "slim" do not count
_INCH_RE = re.compile(r"(?<![a-z])in(?:ch(?:es)?)?(?![a-z])")
_CM_RE = re.compile(r"(?<![a-z])cm(?![a-z])")


def extract_number(text: str) -> Optional[float]:
    """Return the first numeric token in ``text`` or None when there is none."""
    match = _NUMBER_RE.search(text or "")
    if not match:
        return None
    return float(match.group(0))


def _mentions_inches(text: str) -> bool:
    lowered = (text or "").lower()
    return '"' in lowered or bool(_INCH_RE.search(lowered))


def _mentions_cm(text: str) -> bool:
    return bool(_CM_RE.search((text or "").lower()))


def is_inches(cell: str, header: str = "") -> bool:
    # A unit written in the cell wins over whatever the column header says
    if _mentions_cm(cell):
        return False
    if _mentions_inches(cell):
        return True
    return _mentions_inches(header) and not _mentions_cm(header)


def to_centimeters(cell: str, header: str = "") -> Optional[float]:
    """Convert a size-chart cell to centimeters, rounded to one decimal.

    Returns None when the cell holds no finite number. Values already in centimeters
    only get rounded, so the conversion is idempotent for them.
    """
    value = extract_number(cell)
    if value is None:
        return None
    if is_inches(cell, header):
        value *= CM_PER_INCH
    if not math.isfinite(value):
        return None
    return round(value, 1)
