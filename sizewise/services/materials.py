import math
import re
from types import MappingProxyType
from typing import Any, Iterable, List, Mapping, Optional, Sequence
import structlog

from ..schemas.chart import MaterialEntry
from .measurements import coerce_number


logger = structlog.get_logger("sizewise")

DEFAULT_STRETCH_COEFFICIENTS: Mapping[str, float] = MappingProxyType({
    "spandex": 4,
    "elastane": 4,
    "lycra": 4,
    "polyester": 1.5,
    "nylon": 1.5,
    "cotton": 1,
    "wool": 1,
    "linen": 0.5,
    "silk": 0.5,
})

# Scraped percentages that are really promotions ("40% off")
DEFAULT_PROMOTIONAL_TERMS: Sequence[str] = ("off", "discount", "original")

BASELINE_COEFFICIENT = 1.0
FULL_COMPOSITION = 100.0

_COMPOSITION_RE = re.compile(r"(\d+(?:\.\d+)?)\s*%\s*([A-Za-z][A-Za-z ]*?)(?=\s*(?:\d|$|[,;/.)\n]))")


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _field(entry: Any, name: str) -> Any:
    if isinstance(entry, Mapping):
        return entry.get(name)
    return getattr(entry, name, None)


class MaterialStretchEstimator:
    def __init__(
        self,
        coefficients: Mapping[str, float] = DEFAULT_STRETCH_COEFFICIENTS,
        promotional_terms: Sequence[str] = DEFAULT_PROMOTIONAL_TERMS,
    ) -> None:
        self.coefficients = MappingProxyType({k.lower(): float(v) for k, v in coefficients.items()})
        self.promotional_terms = tuple(t.lower() for t in promotional_terms)

    def is_promotional(self, material: str) -> bool:
        lowered = material.lower()
        return any(term in lowered for term in self.promotional_terms)

    def clean(self, materials: Optional[Iterable[Any]]) -> List[MaterialEntry]:
        """Keep only well-formed, non-promotional entries with percentage in (0, 100]."""
        cleaned: List[MaterialEntry] = []
        for entry in materials or []:
            material = _field(entry, "material")
            percentage = coerce_number(_field(entry, "percentage"))
            if not isinstance(material, str) or not material.strip():
                logger.debug("material_entry_skipped", reason="missing_material", entry=repr(entry))
                continue
            if percentage is None or not 0 < percentage <= FULL_COMPOSITION:
                logger.debug("material_entry_skipped", reason="bad_percentage", material=material)
                continue
            if self.is_promotional(material):
                logger.debug("material_entry_skipped", reason="promotional", material=material)
                continue
            cleaned.append(MaterialEntry(material=material.strip(), percentage=percentage))
        return cleaned

    def estimate(self, materials: Optional[Iterable[Any]]) -> int:
        raw = list(materials or [])
        if not raw:
            return 0

        total = 0.0
        mass = 0.0
        for entry in self.clean(raw):
            coefficient = self.coefficients.get(entry.material.lower(), BASELINE_COEFFICIENT)
            total += entry.percentage * coefficient
            mass += entry.percentage

        # Unaccounted mass is standard fabric; compositions over 100% are weighted as-is
        if mass < FULL_COMPOSITION:
            total += (FULL_COMPOSITION - mass) * BASELINE_COEFFICIENT

        return max(0, round_half_up(total / FULL_COMPOSITION))

    def parse_materials(self, text: Optional[str]) -> List[MaterialEntry]:
        """Extract "95% Cotton 5% Elastane" style compositions from product text."""
        if not text:
            return []
        found = [
            {"material": name.strip(), "percentage": float(pct)}
            for pct, name in _COMPOSITION_RE.findall(text)
        ]
        return self.clean(found)
