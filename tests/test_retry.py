"""Tests for the bounded generate/validate retry loop."""

import pytest

from photostudio.clients.gemini import GenerationError
from photostudio.engine.retry import AttemptState, RetryCoordinator
from photostudio.models.outcome import Failure, Photo
from photostudio.models.request import GenerationRequest

from .fakes import ScriptedGenerator, ScriptedValidator, accept, reject


@pytest.fixture
def request_(source):
    return GenerationRequest(source=source, prompt="scene: kitchen", aspect_ratio="3:4")


@pytest.mark.asyncio
@pytest.mark.parametrize("budget", [1, 2, 3, 5])
async def test_always_failing_generator_uses_whole_budget(request_, budget):
    generator = ScriptedGenerator(default=GenerationError("No image data found in response."))
    validator = ScriptedValidator()
    coordinator = RetryCoordinator(generator, validator, max_attempts=budget)

    outcome = await coordinator.run(request_)

    assert isinstance(outcome, Failure)
    assert generator.calls == budget
    assert validator.calls == 0
    assert coordinator.attempts == budget
    assert coordinator.state == AttemptState.EXHAUSTED
    assert "No image data found in response." in outcome.reason


@pytest.mark.asyncio
@pytest.mark.parametrize("budget,accept_on", [(2, 1), (2, 2), (4, 3), (4, 4)])
async def test_accepts_after_exactly_k_attempts(request_, budget, accept_on):
    generator = ScriptedGenerator()
    validator = ScriptedValidator([reject()] * (accept_on - 1) + [accept()])
    coordinator = RetryCoordinator(generator, validator, max_attempts=budget)

    outcome = await coordinator.run(request_)

    assert isinstance(outcome, Photo)
    assert generator.calls == accept_on
    assert validator.calls == accept_on
    assert coordinator.state == AttemptState.ACCEPTED


@pytest.mark.asyncio
async def test_generator_failure_and_rejection_both_consume_attempts(request_):
    photo = Photo(data="data:image/png;base64,BBBB")
    generator = ScriptedGenerator([RuntimeError("503 UNAVAILABLE"), photo])
    validator = ScriptedValidator([accept()])

    outcome = await RetryCoordinator(generator, validator, max_attempts=2).run(request_)

    assert outcome == photo
    assert generator.calls == 2
    assert validator.calls == 1


@pytest.mark.asyncio
async def test_exhausted_failure_reports_last_rejection(request_):
    generator = ScriptedGenerator([RuntimeError("quota exceeded")], kind="photo")
    validator = ScriptedValidator([reject("Label text is garbled.")])

    outcome = await RetryCoordinator(generator, validator, max_attempts=2).run(request_)

    assert isinstance(outcome, Failure)
    assert outcome.kind == "photo"
    assert outcome.reason == (
        "Failed to create a valid photo. Last reason: Rejected by quality check: Label text is garbled."
    )


@pytest.mark.asyncio
async def test_same_request_used_for_every_attempt(request_):
    generator = ScriptedGenerator()
    validator = ScriptedValidator([reject(), reject()])

    await RetryCoordinator(generator, validator, max_attempts=2).run(request_)

    assert generator.requests == [request_, request_]


@pytest.mark.asyncio
async def test_progress_reports_each_validation(request_):
    messages = []
    generator = ScriptedGenerator()
    validator = ScriptedValidator([reject(), accept()])

    await RetryCoordinator(generator, validator, max_attempts=2, progress=messages.append).run(request_)

    assert messages == [
        "Verifying photo quality (Attempt 1)...",
        "Verifying photo quality (Attempt 2)...",
    ]


@pytest.mark.asyncio
async def test_fail_open_validator_error_accepts(request_):
    generator = ScriptedGenerator()
    validator = ScriptedValidator([RuntimeError("QA model unavailable")], fail_open=True)

    outcome = await RetryCoordinator(generator, validator, max_attempts=2).run(request_)

    assert isinstance(outcome, Photo)
    assert generator.calls == 1


@pytest.mark.asyncio
async def test_fail_closed_validator_error_retries(request_):
    generator = ScriptedGenerator()
    validator = ScriptedValidator([RuntimeError("QA model unavailable")] * 2, fail_open=False)

    outcome = await RetryCoordinator(generator, validator, max_attempts=2).run(request_)

    assert isinstance(outcome, Failure)
    assert generator.calls == 2
    assert "Quality check failed: QA model unavailable" in outcome.reason


def test_budget_must_be_positive():
    with pytest.raises(ValueError):
        RetryCoordinator(ScriptedGenerator(), ScriptedValidator(), max_attempts=0)
