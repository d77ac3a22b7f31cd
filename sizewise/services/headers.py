from typing import Sequence, Tuple


HeaderRule = Tuple[Tuple[str, ...], str]

# Ordered, first match wins
DEFAULT_HEADER_RULES: Tuple[HeaderRule, ...] = (
    (("size",), "size"),
    (("chest", "bust"), "chest"),
    (("shoulder",), "shoulders"),
    (("length",), "length"),
    (("waist",), "waist"),
    (("hip",), "hips"),
    (("inseam",), "inseam"),
    (("sleeve",), "sleeve"),
    (("neck",), "neck"),
)


class HeaderCanonicalizer:
    def __init__(self, rules: Sequence[HeaderRule] = DEFAULT_HEADER_RULES) -> None:
        self.rules: Tuple[HeaderRule, ...] = tuple((tuple(keywords), name) for keywords, name in rules)

    @property
    def vocabulary(self) -> Tuple[str, ...]:
        return tuple(name for _, name in self.rules)

    def canonicalize(self, label: str) -> str:
        """Map a raw column label to its canonical name, or return it unchanged."""
        clean = label.lower()
        for keywords, name in self.rules:
            if any(k in clean for k in keywords):
                return name
        return label
