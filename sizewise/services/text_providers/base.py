from typing import Protocol


class TextProvider(Protocol):
    async def generate(self, prompt: str) -> str:  # returns the raw model response
        ...
