"""Retry coordinator - bounded generate/validate loop for one artifact."""

import logging
from enum import Enum
from typing import Callable

from ..config import MAX_RETRIES
from ..generators.base import Generator
from ..models.outcome import Failure, GenerationOutcome
from ..models.request import GenerationRequest
from ..services.validator import Validator

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str], None]


class AttemptState(Enum):
    ATTEMPTING = "attempting"
    GENERATING = "generating"
    VALIDATING = "validating"
    ACCEPTED = "accepted"
    EXHAUSTED = "exhausted"


class RetryCoordinator:
    """
    Generate, validate, and retry until accepted or the budget runs out.

    Attempts are strictly sequential. A generator failure and a validator
    rejection both just consume an attempt; only the most recent reason is
    kept for the final Failure.
    """

    def __init__(
        self,
        generator: Generator,
        validator: Validator,
        max_attempts: int = MAX_RETRIES,
        progress: ProgressCallback | None = None,
    ):
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")
        self.generator = generator
        self.validator = validator
        self.max_attempts = max_attempts
        self.progress = progress
        self.state = AttemptState.ATTEMPTING
        self.attempts = 0

    def _report(self, message: str):
        if self.progress:
            self.progress(message)

    async def run(self, request: GenerationRequest) -> GenerationOutcome:
        """Run the loop for one artifact and return its terminal outcome."""
        kind = self.generator.kind
        last_reason = "Generation failed."
        self.attempts = 0

        while self.attempts < self.max_attempts:
            self.attempts += 1
            attempt_label = f"{self.attempts}/{self.max_attempts}"

            self.state = AttemptState.GENERATING
            outcome = await self.generator.generate(request)
            if not outcome.ok:
                last_reason = outcome.reason
                logger.error(f"Generation attempt {attempt_label} failed: {last_reason}")
                self.state = AttemptState.ATTEMPTING
                continue

            self.state = AttemptState.VALIDATING
            self._report(f"Verifying {kind} quality (Attempt {self.attempts})...")
            verdict = await self.validator.validate(request.source, outcome)
            if verdict.accepted:
                self.state = AttemptState.ACCEPTED
                return outcome

            last_reason = f"Rejected by quality check: {verdict.reason}"
            logger.warning(f"{kind.capitalize()} validation failed (Attempt {attempt_label}): {verdict.reason}")
            self.state = AttemptState.ATTEMPTING

        self.state = AttemptState.EXHAUSTED
        return Failure(
            reason=f"Failed to create a valid {kind}. Last reason: {last_reason}",
            kind=kind,
        )
