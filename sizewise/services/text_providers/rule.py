import re
from typing import Dict, List, Optional, Tuple

from ...schemas.chart import NormalizedSizeChart
from ..measurements import coerce_number
from ..prompt import PREFERENCES_HEADING, SIZE_CHART_HEADING, STRETCH_LABEL, USER_MEASUREMENTS_HEADING
from ..size_chart import SizeChartNormalizer


# Weights for scoring (higher = more important)
METRIC_WEIGHTS = {
    "chest": 2.0,
    "waist": 1.5,
    "hips": 1.5,
    "shoulders": 1.2,
    "default": 1.0
}

# Target ease (optimal slack) in CM
TARGET_EASE_CM = {
    "chest": 2.0,
    "waist": 4.0,
    "hips": 4.0,
    "shoulders": 1.5,
    "default": 2.0
}

# Tolerance for negative slack (tightness) before severe penalty
NEGATIVE_TOLERANCE_CM = 1.0

FIT_TYPES = ("fitted", "regular", "loose")


def _section(prompt: str, heading: str) -> List[str]:
    lines = prompt.splitlines()
    try:
        start = lines.index(heading) + 1
    except ValueError:
        return []
    out: List[str] = []
    for line in lines[start:]:
        if not line.strip():
            break
        out.append(line)
    return out


def _available_sizes(prompt: str) -> List[str]:
    match = re.search(r"Available Sizes:[ \t]*(.*)", prompt)
    if not match:
        return []
    return [s.strip() for s in match.group(1).split(",") if s.strip()]


def _stretch(prompt: str) -> int:
    match = re.search(re.escape(STRETCH_LABEL) + r"\s*(\d+)", prompt)
    return int(match.group(1)) if match else 1


def _measurements(prompt: str) -> Dict[str, float]:
    out: Dict[str, float] = {}
    for line in _section(prompt, USER_MEASUREMENTS_HEADING):
        key, _, value = line.lstrip("- ").partition(":")
        number = coerce_number(value)
        if key.strip() and number is not None:
            out[key.strip()] = number
    return out


def _preferred_fit(prompt: str) -> str:
    for line in _section(prompt, PREFERENCES_HEADING):
        if "Preferred Fit" in line:
            value = line.split(":", 1)[-1].strip().lower()
            for fit in FIT_TYPES:
                if fit in value:
                    return fit
    return "regular"


def _score_size(body: Dict[str, float], garment: Dict[str, float], stretch: int) -> Tuple[float, Dict[str, float]]:
    total_score = 0.0
    details: Dict[str, float] = {}
    tolerance = NEGATIVE_TOLERANCE_CM * max(1, stretch)

    for m, b in body.items():
        g = garment.get(m)
        if g is None:
            continue

        weight = METRIC_WEIGHTS.get(m, METRIC_WEIGHTS["default"])
        target_ease = TARGET_EASE_CM.get(m, TARGET_EASE_CM["default"])

        slack = g - b
        details[m] = round(slack, 1)
        deviation = slack - target_ease

        if deviation < 0:
            # Too tight
            if slack < -tolerance:
                penalty = abs(slack) * 10.0 * weight
            else:
                penalty = abs(deviation) * 2.0 * weight
        else:
            # Too loose
            penalty = abs(deviation) * 1.0 * weight

        total_score += penalty

    return total_score, details


class RuleBasedTextProvider:
    """Deterministic offline stand-in for the language model.

    Reads the analysis prompt the same way a model would (size chart table, user
    measurements, stretch factor, preferences), scores every size by weighted
    deviation from target ease, and answers in the response contract format.
    """

    def __init__(self, normalizer: SizeChartNormalizer | None = None) -> None:
        self.normalizer = normalizer or SizeChartNormalizer()

    def _candidates(self, chart: Optional[NormalizedSizeChart], available: List[str]) -> List[str]:
        sizes = list(chart.entries) if chart else []
        if available:
            in_stock = [s for s in sizes if s in available]
            return in_stock or available
        return sizes

    async def generate(self, prompt: str) -> str:
        chart = self.normalizer.normalize("\n".join(_section(prompt, SIZE_CHART_HEADING)))
        body = _measurements(prompt)
        stretch = _stretch(prompt)
        candidates = self._candidates(chart, _available_sizes(prompt))
        if not candidates:
            return "MEASUREMENTS ANALYSIS:\nNo sizes available to compare."

        best_size = candidates[0]
        best_score = float("inf")
        best_details: Dict[str, float] = {}
        for size in candidates:
            garment = chart.entries.get(size, {}) if chart else {}
            score, details = _score_size(body, garment, stretch)
            if details and score < best_score:
                best_size, best_score, best_details = size, score, details

        if best_details:
            fit_score = max(0.0, 1.0 - (best_score / 100.0))
            confidence = "high" if fit_score >= 0.8 else "medium" if fit_score >= 0.5 else "low"
        else:
            confidence = "low"

        key_lines = [
            f"- {m}: {body[m]:g}cm vs {body[m] + slack:.1f}cm ({slack:+.1f}cm)"
            for m, slack in best_details.items()
        ] or ["- No overlapping measurements in the size chart"]
        tight = [m for m, slack in best_details.items() if slack < 0]
        issue_lines = [f"- {m} may feel tight" for m in tight] or ["- No significant fit issues expected"]

        index = candidates.index(best_size)
        alternatives = []
        if index > 0:
            alternatives.append(f"- {candidates[index - 1]}: if you prefer a closer fit")
        if index + 1 < len(candidates):
            alternatives.append(f"- {candidates[index + 1]}: if you prefer a looser fit")

        compared = ", ".join(f"{m} {slack:+.1f}cm" for m, slack in best_details.items()) or "no chart measurements"
        return "\n".join([
            "MEASUREMENTS ANALYSIS:",
            f"Compared {len(body)} measurements against {len(candidates)} sizes (stretch factor {stretch}).",
            "",
            f"BEST SIZE: {best_size}",
            f"CONFIDENCE: {confidence}",
            f"REASONING: Size {best_size} gives the closest ease: {compared}.",
            f"FIT TYPE: {_preferred_fit(prompt)}",
            "",
            "KEY MEASUREMENTS:",
            *key_lines,
            "",
            "POTENTIAL ISSUES:",
            *issue_lines,
            "",
            "ALTERNATIVE SIZES:",
            *alternatives,
        ])
