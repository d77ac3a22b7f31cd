import math
import re
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Sequence

from ..errors import NoRelevantMeasurementsError


DEFAULT_CATEGORY = "default"

DEFAULT_CATEGORY_MEASUREMENTS: Mapping[str, Sequence[str]] = MappingProxyType({
    "shirt": ("neck", "chest", "shoulders", "waist", "bicep"),
    "t-shirt": ("chest", "shoulders", "waist", "bicep"),
    "pants": ("waist", "hips", "thigh", "inseam"),
    "jacket": ("chest", "shoulders", "waist", "bicep"),
    "dress": ("chest", "waist", "hips"),
    DEFAULT_CATEGORY: ("chest", "waist", "hips", "shoulders"),
})

_LEADING_NUMBER_RE = re.compile(r"^\s*[-+]?(?:\d+(?:\.\d*)?|\.\d+)")


def coerce_number(value: Any) -> Optional[float]:
    """Parse a profile value the lenient way a form field would be read.

    Numbers pass through, strings are read up to the end of their leading decimal
    number ("94", "94.5cm"). Anything else, including NaN and infinities, is None.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        match = _LEADING_NUMBER_RE.match(value)
        if not match:
            return None
        number = float(match.group(0))
    else:
        return None
    if not math.isfinite(number):
        return None
    return number


class MeasurementSelector:
    def __init__(self, category_measurements: Mapping[str, Sequence[str]] = DEFAULT_CATEGORY_MEASUREMENTS) -> None:
        self.category_measurements = MappingProxyType({k: tuple(v) for k, v in category_measurements.items()})

    def keys_for(self, category: Optional[str]) -> Sequence[str]:
        normalized = (category or "").lower().strip()
        return self.category_measurements.get(normalized) or self.category_measurements.get(DEFAULT_CATEGORY, ())

    def select(self, category: Optional[str], profile: Optional[Mapping[str, Any]]) -> Dict[str, float]:
        if not profile:
            return {}
        measurements: Dict[str, float] = {}
        for key in self.keys_for(category):
            raw = profile.get(key)
            # Missing, empty and zero entries count as not provided
            if not raw:
                continue
            value = coerce_number(raw)
            if value is not None:
                measurements[key] = value
        return measurements

    def require(self, category: Optional[str], profile: Optional[Mapping[str, Any]]) -> Dict[str, float]:
        measurements = self.select(category, profile)
        if not measurements:
            raise NoRelevantMeasurementsError(category)
        return measurements
