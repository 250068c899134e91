"""Quality validators - QA checks for generated photos and captions."""

import logging
from abc import ABC, abstractmethod

from ..clients.gemini import GeminiClient
from ..config import VALIDATOR_FAIL_OPEN
from ..models.image import SourceImage
from ..models.outcome import GenerationOutcome, Photo, Text, ValidationVerdict
from .encoder import decode

logger = logging.getLogger(__name__)

VERDICT_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "isValid": {"type": "BOOLEAN"},
        "reason": {"type": "STRING"},
    },
    "required": ["isValid", "reason"],
}

IMAGE_QA_PROMPT = """You are a strict quality reviewer for e-commerce product photography.
The first image is the original product photo. The second image was generated from it.

Decide whether the generated image is acceptable:
- The product must be the same product: same shape, colors, labels and proportions.
- The product must be clearly visible and not cut off.
- The image must be photorealistic, without distorted objects, artifacts or garbled text.

Return JSON: {"isValid": true/false, "reason": "<one short sentence>"}"""

TEXT_QA_PROMPT = """You are a strict reviewer for social media marketing copy.
The image shows the product being promoted. Here is the proposed caption:

"{caption}"

Decide whether the caption is acceptable:
- It must describe this product accurately and must not invent features.
- It must be free of offensive content and spelling mistakes.
- It must read naturally for the platform "{platform}".

Return JSON: {{"isValid": true/false, "reason": "<one short sentence>"}}"""


class Validator(ABC):
    """One QA round trip per call.

    If the QA call itself fails, fail_open decides the verdict: accepted
    (artifact goes through) or rejected with the error as reason.
    """

    def __init__(self, gemini: GeminiClient, model: str, fail_open: bool = VALIDATOR_FAIL_OPEN):
        self.gemini = gemini
        self.model = model
        self.fail_open = fail_open

    async def validate(self, original: SourceImage, candidate: GenerationOutcome) -> ValidationVerdict:
        if not candidate.ok:
            return ValidationVerdict(accepted=False, reason=candidate.reason)

        try:
            data = await self._check(original, candidate)
            return ValidationVerdict(
                accepted=bool(data.get("isValid")),
                reason=str(data.get("reason") or "No reason given."),
            )
        except Exception as e:
            if self.fail_open:
                logger.warning(f"Validation call failed, accepting artifact: {e}")
                return ValidationVerdict(
                    accepted=True,
                    reason=f"Validation skipped because the quality check failed: {e}",
                )
            logger.warning(f"Validation call failed, rejecting artifact: {e}")
            return ValidationVerdict(accepted=False, reason=f"Quality check failed: {e}")

    @abstractmethod
    async def _check(self, original: SourceImage, candidate: GenerationOutcome) -> dict:
        """Call the QA model and return its raw JSON verdict."""
        pass


class ImageValidator(Validator):
    """Compares a generated photo against the original product photo."""

    async def _check(self, original: SourceImage, candidate: GenerationOutcome) -> dict:
        if not isinstance(candidate, Photo):
            raise TypeError(f"ImageValidator cannot check {candidate.kind} artifacts")
        return await self.gemini.generate_json(
            prompt=IMAGE_QA_PROMPT,
            images=[original, decode(candidate.data)],
            response_schema=VERDICT_SCHEMA,
            model=self.model,
        )


class TextValidator(Validator):
    """Checks a caption against the product photo."""

    async def _check(self, original: SourceImage, candidate: GenerationOutcome) -> dict:
        if not isinstance(candidate, Text):
            raise TypeError(f"TextValidator cannot check {candidate.kind} artifacts")
        return await self.gemini.generate_json(
            prompt=TEXT_QA_PROMPT.format(caption=candidate.content, platform=candidate.title),
            images=[original],
            response_schema=VERDICT_SCHEMA,
            model=self.model,
        )
