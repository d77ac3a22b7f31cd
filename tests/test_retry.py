import asyncio
import pytest

from sizewise.errors import InvalidAIResponseFormat, TextGenerationError
from sizewise.services.retry import RetryPolicy, generate_with_retry, has_required_markers


VALID = "BEST SIZE: M\nCONFIDENCE: high\nREASONING: fits"


class FakeSleep:
    def __init__(self) -> None:
        self.calls = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


class Scripted:
    """Collaborator that replays a list of responses (exceptions are raised)."""

    def __init__(self, *outcomes) -> None:
        self.outcomes = list(outcomes)
        self.prompts = []

    async def __call__(self, prompt: str) -> str:
        self.prompts.append(prompt)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


def test_marker_check():
    assert has_required_markers(VALID)
    assert not has_required_markers("BEST SIZE: M\nCONFIDENCE: high")
    assert not has_required_markers(None)


@pytest.mark.asyncio
async def test_first_attempt_valid_no_sleep():
    sleep = FakeSleep()
    generate = Scripted(VALID)
    result = await generate_with_retry(generate, "prompt", RetryPolicy(sleep=sleep))
    assert result == VALID
    assert generate.prompts == ["prompt"]
    assert sleep.calls == []


@pytest.mark.asyncio
async def test_recovers_on_third_attempt():
    sleep = FakeSleep()
    generate = Scripted("Bonjour, taille M", TextGenerationError("timeout"), VALID)
    result = await generate_with_retry(generate, "prompt", RetryPolicy(sleep=sleep))
    assert result == VALID
    assert len(generate.prompts) == 3
    assert sleep.calls == [1.0, 1.0]


@pytest.mark.asyncio
async def test_exhausted_raises_most_recent_failure():
    sleep = FakeSleep()
    generate = Scripted(TextGenerationError("down"), TextGenerationError("still down"), "no markers")
    with pytest.raises(InvalidAIResponseFormat):
        await generate_with_retry(generate, "prompt", RetryPolicy(sleep=sleep))
    assert sleep.calls == [1.0, 1.0]


@pytest.mark.asyncio
async def test_exhausted_collaborator_error_propagates():
    generate = Scripted("junk", TextGenerationError("last"))
    with pytest.raises(TextGenerationError, match="last"):
        await generate_with_retry(generate, "p", RetryPolicy(max_attempts=2, delay_seconds=0.5, sleep=FakeSleep()))


@pytest.mark.asyncio
async def test_cancellation_is_not_retried():
    sleep = FakeSleep()
    generate = Scripted(asyncio.CancelledError(), VALID)
    with pytest.raises(asyncio.CancelledError):
        await generate_with_retry(generate, "prompt", RetryPolicy(sleep=sleep))
    assert len(generate.prompts) == 1
    assert sleep.calls == []


@pytest.mark.asyncio
async def test_custom_attempts_and_delay():
    sleep = FakeSleep()
    generate = Scripted("x", "x", "x", "x", VALID)
    result = await generate_with_retry(generate, "p", RetryPolicy(max_attempts=5, delay_seconds=0.25, sleep=sleep))
    assert result == VALID
    assert sleep.calls == [0.25] * 4


@pytest.mark.asyncio
async def test_zero_attempts_still_calls_once():
    sleep = FakeSleep()
    generate = Scripted("no markers")
    with pytest.raises(InvalidAIResponseFormat):
        await generate_with_retry(generate, "p", RetryPolicy(max_attempts=0, sleep=sleep))
    assert generate.prompts == ["p"]
    assert sleep.calls == []
