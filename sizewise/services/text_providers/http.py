import httpx

from ...config import settings
from ...errors import TextGenerationError
from ..prompt import SYSTEM_PROMPT


class HttpTextProvider:
    """Generic completion endpoint: POST {base}/generate -> {"text": "..."}."""

    def __init__(self) -> None:
        self.base = settings.text_api_base.rstrip("/")
        self.api_key = settings.text_api_key
        self.timeout = settings.text_api_timeout_seconds

    async def generate(self, prompt: str) -> str:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        payload = {"system_prompt": SYSTEM_PROMPT, "prompt": prompt}

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            try:
                resp = await client.post(f"{self.base}/generate", headers=headers, json=payload)
                resp.raise_for_status()
            except httpx.HTTPStatusError as e:
                raise TextGenerationError(f"Text API returned {e.response.status_code}: {e.response.text}") from e
            except httpx.HTTPError as e:
                raise TextGenerationError(f"Text API request failed: {e}") from e

        try:
            data = resp.json()
        except ValueError as e:
            raise TextGenerationError(f"Text API returned invalid JSON: {e}") from e
        if not isinstance(data, dict):
            raise TextGenerationError(f"Text API returned unexpected payload: {type(data).__name__}")

        # Accept a few common response shapes
        text = data.get("text") or data.get("response") or data.get("output")
        if not text and isinstance(data.get("data"), dict):
            text = data["data"].get("text")
        if not isinstance(text, str) or not text.strip():
            raise TextGenerationError("Text API returned no text")
        return text
