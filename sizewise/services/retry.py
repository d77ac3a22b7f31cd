import asyncio
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Sequence
import structlog

from ..errors import InvalidAIResponseFormat


logger = structlog.get_logger("sizewise")

REQUIRED_MARKERS: Sequence[str] = ("BEST SIZE:", "CONFIDENCE:", "REASONING:")

Generate = Callable[[str], Awaitable[str]]
Sleep = Callable[[float], Awaitable[None]]


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = 3
    delay_seconds: float = 1.0
    sleep: Sleep = field(default=asyncio.sleep, compare=False)
    markers: Sequence[str] = REQUIRED_MARKERS


def has_required_markers(text: object, markers: Sequence[str] = REQUIRED_MARKERS) -> bool:
    return isinstance(text, str) and all(marker in text for marker in markers)


async def generate_with_retry(generate: Generate, prompt: str, policy: RetryPolicy | None = None) -> str:
    """Call ``generate`` until it returns a response carrying the contract markers.

    Collaborator exceptions and responses missing a marker both count as failed
    attempts. After ``policy.max_attempts`` failures the most recent error is
    re-raised. Cancellation is never retried.
    """
    policy = policy or RetryPolicy()
    attempts = max(1, policy.max_attempts)
    last_error: Exception = InvalidAIResponseFormat("Invalid response format")

    for attempt in range(1, attempts + 1):
        try:
            response = await generate(prompt)
            if has_required_markers(response, policy.markers):
                if attempt > 1:
                    logger.info("generation_recovered", attempt=attempt)
                return response
            raise InvalidAIResponseFormat("Invalid response format")
        except Exception as e:
            last_error = e
            logger.warning(
                "generation_attempt_failed",
                attempt=attempt,
                max_attempts=attempts,
                error=str(e),
                error_type=type(e).__name__,
            )
        if attempt < attempts:
            await policy.sleep(policy.delay_seconds)

    raise last_error
