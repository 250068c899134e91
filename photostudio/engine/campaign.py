"""Campaign orchestrator - concurrent artifact pipelines joined into one result list."""

import asyncio
import logging
from dataclasses import dataclass, replace
from typing import Awaitable, Callable

from ..config import MAX_RETRIES
from ..generators.base import Generator
from ..generators.text.caption import correction_prompt
from ..models.campaign import CampaignStrategy
from ..models.image import SourceImage
from ..models.outcome import Failure, GenerationOutcome, Text
from ..models.request import GenerationRequest
from ..services.validator import Validator
from .retry import ProgressCallback, RetryCoordinator

logger = logging.getLogger(__name__)

CAMPAIGN_ASPECT_RATIOS = ("1:1", "3:4", "16:9")


@dataclass
class Pipeline:
    """One scheduled artifact pipeline."""
    label: str                                       # e.g. "photo@3:4", "caption@Instagram"
    kind: str                                        # Artifact kind, used if the pipeline crashes
    run: Callable[[], Awaitable[GenerationOutcome]]


class CampaignOrchestrator:
    """
    Builds pipelines for photos and captions and runs them concurrently.

    Photos go through the full RetryCoordinator. Captions are validated once;
    a rejected caption gets exactly one corrective rewrite, which is accepted
    without re-validation. A failing pipeline never affects its siblings.
    """

    def __init__(
        self,
        photo_generator: Generator,
        caption_generator: Generator,
        caption_fixer: Generator,
        image_validator: Validator,
        text_validator: Validator,
        max_attempts: int = MAX_RETRIES,
        progress: ProgressCallback | None = None,
    ):
        self.photo_generator = photo_generator
        self.caption_generator = caption_generator
        self.caption_fixer = caption_fixer
        self.image_validator = image_validator
        self.text_validator = text_validator
        self.max_attempts = max_attempts
        self.progress = progress

    def _report(self, message: str):
        if self.progress:
            self.progress(message)

    def photo_pipeline(self, request: GenerationRequest) -> Pipeline:
        coordinator = RetryCoordinator(
            self.photo_generator,
            self.image_validator,
            max_attempts=self.max_attempts,
            progress=self.progress,
        )
        return Pipeline(
            label=f"photo@{request.aspect_ratio}",
            kind="photo",
            run=lambda: coordinator.run(request),
        )

    def caption_pipeline(
        self,
        request: GenerationRequest,
        product_hint: str = "",
        caption: str | None = None,
    ) -> Pipeline:
        """
        Caption pipeline. With caption given (from a campaign strategy) that
        text is the generated artifact; otherwise it is generated once.
        """
        return Pipeline(
            label=f"caption@{request.title or 'default'}",
            kind="text",
            run=lambda: self._run_caption(request, product_hint, caption),
        )

    async def _run_caption(
        self,
        request: GenerationRequest,
        product_hint: str,
        caption: str | None,
    ) -> GenerationOutcome:
        if caption is None:
            outcome = await self.caption_generator.generate(request)
            if not outcome.ok:
                return outcome
        else:
            outcome = Text(title=request.title or "Caption", content=caption)

        platform = outcome.title
        self._report(f"Validating caption for {platform}...")
        verdict = await self.text_validator.validate(request.source, outcome)
        if verdict.accepted:
            return outcome

        logger.warning(f"Caption for {platform} failed validation: {verdict.reason}. Regenerating...")
        self._report(f"Correction: AI is rewriting caption for {platform}...")
        fix_request = replace(
            request,
            prompt=correction_prompt(product_hint, outcome.content, verdict.reason),
            title=platform,
        )
        return await self.caption_fixer.generate(fix_request)

    async def gather(self, pipelines: list[Pipeline]) -> list[GenerationOutcome]:
        """
        Run all pipelines concurrently and wait for every one of them.

        Results keep schedule order. An exception inside one pipeline becomes
        a Failure for that slot only.
        """
        results = await asyncio.gather(
            *(pipeline.run() for pipeline in pipelines),
            return_exceptions=True,
        )

        outcomes: list[GenerationOutcome] = []
        for pipeline, result in zip(pipelines, results):
            if isinstance(result, Exception):
                logger.error(f"Pipeline {pipeline.label} crashed: {result}")
                outcomes.append(Failure(reason=str(result) or result.__class__.__name__, kind=pipeline.kind))
            elif isinstance(result, BaseException):
                raise result
            else:
                outcomes.append(result)
        return outcomes

    def campaign_schedule(
        self,
        source: SourceImage,
        strategy: CampaignStrategy,
        model: str,
        product_hint: str = "",
    ) -> list[Pipeline]:
        """Fixed schedule: three photos (1:1, 3:4, 16:9), then one caption per platform."""
        pipelines = [
            self.photo_pipeline(GenerationRequest(
                source=source,
                prompt=concept.to_prompt(),
                aspect_ratio=aspect_ratio,
                model=model,
            ))
            for concept, aspect_ratio in zip(strategy.photo_concepts, CAMPAIGN_ASPECT_RATIOS)
        ]
        pipelines.extend(
            self.caption_pipeline(
                GenerationRequest(source=source, prompt=product_hint, model=model, title=sc.platform),
                product_hint=product_hint,
                caption=sc.caption,
            )
            for sc in strategy.social_captions
        )
        return pipelines

    async def run_campaign(
        self,
        source: SourceImage,
        strategy: CampaignStrategy,
        model: str,
        product_hint: str = "",
    ) -> list[GenerationOutcome]:
        self._report("Creating and validating campaign assets...")
        return await self.gather(self.campaign_schedule(source, strategy, model, product_hint))
