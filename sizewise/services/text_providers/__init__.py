from .base import TextProvider
from .rule import RuleBasedTextProvider


def get_provider(name: str) -> TextProvider:
    name = (name or "rule").lower()
    if name in ("rule", "rules", "mock"):
        return RuleBasedTextProvider()
    if name == "openai":
        from .openai_provider import OpenAITextProvider  # local import to avoid client setup at import time
        return OpenAITextProvider()
    if name in ("http", "remote"):
        from .http import HttpTextProvider
        return HttpTextProvider()
    return RuleBasedTextProvider()
