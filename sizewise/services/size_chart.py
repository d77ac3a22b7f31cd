import re
from typing import Dict, List, Optional, Sequence
import structlog

from ..schemas.chart import NormalizedSizeChart
from .headers import HeaderCanonicalizer
from .units import to_centimeters


logger = structlog.get_logger("sizewise")

DELIMITER = "|"
MISSING_VALUE = "-"
NO_CHART_TEXT = "Size chart data not available"

_SEPARATOR_RE = re.compile(r"^[\s|:\-]*-[\s|:\-]*$")


def _split_cells(line: str, outer_pipes: bool = False) -> List[str]:
    stripped = line.strip()
    # Markdown tables wrap every row in pipes that do not delimit real cells
    if outer_pipes:
        if stripped.startswith(DELIMITER):
            stripped = stripped[1:]
        if stripped.endswith(DELIMITER):
            stripped = stripped[:-1]
    return [cell.strip() for cell in stripped.split(DELIMITER)]


def _usable_lines(raw: str) -> List[str]:
    return [line for line in raw.splitlines() if line.strip() and not _SEPARATOR_RE.match(line)]


class SizeChartNormalizer:
    def __init__(self, canonicalizer: HeaderCanonicalizer | None = None) -> None:
        self.canonicalizer = canonicalizer or HeaderCanonicalizer()

    def normalize(self, raw: Optional[str]) -> Optional[NormalizedSizeChart]:
        """Parse a pipe-delimited size chart into canonical centimeter entries.

        Returns None ("no chart") when the text has fewer than two usable lines or
        carries no numeric cell at all.
        """
        if not raw or not isinstance(raw, str):
            logger.info("size_chart_rejected", reason="empty")
            return None

        lines = _usable_lines(raw)
        if len(lines) < 2:
            logger.info("size_chart_rejected", reason="insufficient_lines", lines=len(lines))
            return None

        outer_pipes = lines[0].strip().startswith(DELIMITER)
        raw_headers = _split_cells(lines[0], outer_pipes)
        canonical = [self.canonicalizer.canonicalize(h) if h else "" for h in raw_headers]

        entries: Dict[str, Dict[str, float]] = {}
        numeric_cells = 0
        for line in lines[1:]:
            values = _split_cells(line, outer_pipes)
            if sum(1 for v in values if v) < 2:
                continue
            size = values[0]
            if not size:
                continue

            measurements: Dict[str, float] = {}
            for index, value in enumerate(values[1:], start=1):
                if index >= len(canonical) or not canonical[index]:
                    continue
                cm = to_centimeters(value, raw_headers[index])
                if cm is None:
                    continue
                measurements[canonical[index]] = cm
                numeric_cells += 1
            entries[size] = measurements

        if not numeric_cells:
            logger.info("size_chart_rejected", reason="no_numeric_cells", rows=len(entries))
            return None

        # Blank header cells carry no measurement name
        return NormalizedSizeChart(headers=[h for h in canonical[1:] if h], entries=entries)

    def normalize_rows(self, headers: Sequence[str], rows: Sequence[Sequence[str]]) -> Optional[NormalizedSizeChart]:
        """Normalize a header/row structure extracted from an HTML table."""
        lines = [" | ".join(h.strip() for h in headers)]
        lines.append(" | ".join("---" for _ in headers))
        lines.extend(" | ".join(str(c).strip() for c in row) for row in rows)
        return self.normalize("\n".join(lines))

    @staticmethod
    def basic_chart(sizes: Sequence[str]) -> Optional[NormalizedSizeChart]:
        """Minimal chart listing the available sizes without measurements."""
        labels = [s.strip() for s in sizes if s and s.strip()]
        if not labels:
            return None
        return NormalizedSizeChart(headers=[], entries={s: {} for s in dict.fromkeys(labels)})

    @staticmethod
    def format(chart: Optional[NormalizedSizeChart]) -> str:
        if chart is None:
            return NO_CHART_TEXT

        columns = ["Size", *chart.headers]
        out = [" | ".join(columns), " | ".join("---" for _ in columns)]
        for size, measurements in chart.entries.items():
            cells = [size]
            for header in chart.headers:
                value = measurements.get(header)
                cells.append(f"{value:.1f}" if value is not None else MISSING_VALUE)
            out.append(" | ".join(cells))
        return "\n".join(out)
