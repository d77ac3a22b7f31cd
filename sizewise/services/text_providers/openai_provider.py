from openai import AsyncOpenAI, OpenAIError

from ...config import settings
from ...errors import TextGenerationError
from ..prompt import SYSTEM_PROMPT


class OpenAITextProvider:
    def __init__(self, client: AsyncOpenAI | None = None) -> None:
        self.api_key = settings.openai_api_key
        self.model = settings.openai_model
        self.client = client or (AsyncOpenAI(api_key=self.api_key) if self.api_key else None)

    async def generate(self, prompt: str) -> str:
        if not self.client:
            raise TextGenerationError("OPENAI_API_KEY not configured")

        try:
            resp = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                temperature=settings.openai_temperature,
                max_tokens=settings.openai_max_tokens,
            )
        except OpenAIError as e:
            raise TextGenerationError(f"OpenAI request failed: {e}") from e
        content = (resp.choices[0].message.content or "").strip() if resp.choices else ""
        if not content:
            raise TextGenerationError("Empty completion from OpenAI")
        return content
