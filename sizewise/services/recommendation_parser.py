import re
from enum import Enum
from typing import Any, List, Optional, Sequence, Tuple

from ..errors import InvalidAIResponseFormat
from ..schemas.recommend import BareAlternative, DescribedAlternative, RecommendationRecord


MEASUREMENTS_ANALYSIS = "MEASUREMENTS ANALYSIS"
BEST_SIZE = "BEST SIZE"
CONFIDENCE = "CONFIDENCE"
REASONING = "REASONING"
FIT_TYPE = "FIT TYPE"
KEY_MEASUREMENTS = "KEY MEASUREMENTS"
POTENTIAL_ISSUES = "POTENTIAL ISSUES"
ALTERNATIVE_SIZES = "ALTERNATIVE SIZES"

SECTION_LABELS: Tuple[str, ...] = (
    MEASUREMENTS_ANALYSIS,
    BEST_SIZE,
    CONFIDENCE,
    REASONING,
    FIT_TYPE,
    KEY_MEASUREMENTS,
    POTENTIAL_ISSUES,
    ALTERNATIVE_SIZES,
)

BULLET_MARKERS: Tuple[str, ...] = ("-", "*", "•")
CONFIDENCE_LEVELS: Tuple[str, ...] = ("high", "medium", "low")
FIT_TYPES: Tuple[str, ...] = ("fitted", "regular", "loose")


class _State(Enum):
    SEEKING_HEADER = "seeking_header"
    IN_BODY = "in_body"


def _first_line(body: str) -> str:
    for line in body.splitlines():
        if line.strip():
            return line.strip()
    return ""


def _pick(value: str, allowed: Sequence[str]) -> str:
    match = re.search(r"\b(" + "|".join(allowed) + r")\b", value.lower())
    return match.group(1) if match else ""


def bullet_items(body: str) -> List[str]:
    items: List[str] = []
    for line in body.splitlines():
        stripped = line.strip()
        if stripped[:1] in BULLET_MARKERS:
            item = stripped[1:].strip()
            if item:
                items.append(item)
    return items


def parse_alternative(item: str) -> BareAlternative | DescribedAlternative:
    if ":" in item:
        size, description = (part.strip() for part in item.split(":", 1))
        if size:
            return DescribedAlternative(size=size, description=description)
    return BareAlternative(size=item)


class RecommendationParser:
    """Turns a free-text model response into a validated ``RecommendationRecord``.

    Sections are recognized line by line: a line opens a new section only when it
    starts with one of the known labels followed by a colon. Everything else is
    body text of the current section, so "L: roomier" inside a list never splits
    the document. Text before the first recognized label is ignored.
    """

    def __init__(self, labels: Sequence[str] = SECTION_LABELS) -> None:
        self.labels = tuple(labels)
        alternatives = "|".join(re.escape(label) for label in sorted(self.labels, key=len, reverse=True))
        self._header_re = re.compile(r"^\s*(" + alternatives + r")\s*:(.*)$")

    def split_sections(self, text: str) -> List[Tuple[str, str]]:
        sections: List[Tuple[str, str]] = []
        state = _State.SEEKING_HEADER
        label: Optional[str] = None
        body: List[str] = []

        for line in text.splitlines():
            match = self._header_re.match(line)
            if match:
                if state is _State.IN_BODY and label is not None:
                    sections.append((label, "\n".join(body).strip()))
                label = match.group(1)
                body = [match.group(2)]
                state = _State.IN_BODY
            elif state is _State.IN_BODY:
                body.append(line)

        if state is _State.IN_BODY and label is not None:
            sections.append((label, "\n".join(body).strip()))
        return sections

    def parse(self, text: Any) -> RecommendationRecord:
        if not isinstance(text, str) or not text.strip():
            raise InvalidAIResponseFormat("Invalid response from AI model")

        fields: dict = {
            "size": "",
            "confidence": "",
            "reasoning": "",
            "fit_type": "",
            "key_measurements": [],
            "potential_issues": [],
            "alternative_sizes": [],
        }

        for label, body in self.split_sections(text):
            if label == BEST_SIZE:
                fields["size"] = _first_line(body)
            elif label == CONFIDENCE:
                fields["confidence"] = _pick(_first_line(body), CONFIDENCE_LEVELS)
            elif label == REASONING:
                fields["reasoning"] = body
            elif label == FIT_TYPE:
                fields["fit_type"] = _pick(_first_line(body), FIT_TYPES)
            elif label == KEY_MEASUREMENTS:
                fields["key_measurements"] = bullet_items(body)
            elif label == POTENTIAL_ISSUES:
                fields["potential_issues"] = bullet_items(body)
            elif label == ALTERNATIVE_SIZES:
                fields["alternative_sizes"] = [parse_alternative(item) for item in bullet_items(body)]

        missing = [name for name in ("size", "confidence") if not fields[name]]
        if missing:
            raise InvalidAIResponseFormat(f"Incomplete recommendation from AI model: missing {', '.join(missing)}")

        return RecommendationRecord(**fields)
