"""Studio engine - runs one generation session end to end."""

import logging
from dataclasses import replace

from ..clients.gemini import GeminiClient
from ..config import MAX_RETRIES, OUTPUT_DIR, TEXT_MODEL, VALIDATOR_FAIL_OPEN
from ..generators import create_generator
from ..generators.video.clip import frame_prompt, video_aspect_ratio
from ..models.history import HistoryEntry
from ..models.image import SourceImage
from ..models.outcome import Failure, GenerationOutcome, Photo
from ..models.request import (
    ASPECT_RATIOS,
    GENERATIVE_MODELS,
    MAX_IMAGES_PER_SESSION,
    GenerationRequest,
    GenerationType,
)
from ..models.session import SessionRequest, SessionResult
from ..services.encoder import decode
from ..services.history import HistoryStore
from ..services.prompt import (
    PromptError,
    is_valid_prompt,
    parse_campaign_strategy,
    to_instruction,
    with_context,
)
from ..services.validator import ImageValidator, TextValidator
from .campaign import CampaignOrchestrator
from .retry import ProgressCallback, RetryCoordinator

logger = logging.getLogger(__name__)

SOCIAL_CAPTION_TITLE = "Optimized Instagram Caption"

# Prompt-assist generator per generation type
CONCEPT_SOURCES = {
    GenerationType.PHOTO: "text.concept",
    GenerationType.SOCIAL_POST: "text.social_concept",
    GenerationType.CAMPAIGN: "text.strategy",
}


class InputError(ValueError):
    """Session input rejected before any external call."""


class PromptAssistError(RuntimeError):
    """Prompt suggestion could not be generated."""


class StudioEngine:
    """Routes a session to its pipelines and records clean successes in history."""

    def __init__(
        self,
        gemini: GeminiClient,
        history: HistoryStore,
        max_attempts: int = MAX_RETRIES,
        fail_open: bool = VALIDATOR_FAIL_OPEN,
        output_dir=OUTPUT_DIR,
        progress: ProgressCallback | None = None,
    ):
        self.gemini = gemini
        self.history = history
        self.max_attempts = max_attempts
        self.fail_open = fail_open
        self.progress = progress

        self.photo_generator = create_generator("image.photo", gemini)
        self.edit_generator = create_generator("image.edit", gemini)
        self.caption_generator = create_generator("text.caption", gemini)
        self.caption_fixer = create_generator("text.caption_fix", gemini)
        self.video_generator = create_generator("video.clip", gemini, output_dir=output_dir)

    def _report(self, message: str):
        if self.progress:
            self.progress(message)

    def _orchestrator(self, model: str) -> CampaignOrchestrator:
        """Validators use the session's model choice for their QA calls."""
        return CampaignOrchestrator(
            photo_generator=self.photo_generator,
            caption_generator=self.caption_generator,
            caption_fixer=self.caption_fixer,
            image_validator=ImageValidator(self.gemini, model, fail_open=self.fail_open),
            text_validator=TextValidator(self.gemini, model, fail_open=self.fail_open),
            max_attempts=self.max_attempts,
            progress=self.progress,
        )

    def check_input(self, session: SessionRequest):
        """Raise InputError/PromptError for input that must not reach the service."""
        if session.source is None:
            raise InputError("Please upload a product image first.")
        if session.aspect_ratio not in ASPECT_RATIOS:
            raise InputError(f"Invalid aspect_ratio: {session.aspect_ratio}. Valid: {list(ASPECT_RATIOS)}")
        if session.model not in GENERATIVE_MODELS:
            raise InputError(f"Invalid model: {session.model}. Valid: {list(GENERATIVE_MODELS)}")
        if not 1 <= session.number_of_images <= MAX_IMAGES_PER_SESSION:
            raise InputError(f"number_of_images must be 1-{MAX_IMAGES_PER_SESSION}, got {session.number_of_images}")
        if not session.prompt.strip():
            raise PromptError("Prompt is empty.")
        if not is_valid_prompt(session.prompt, session.generation_type):
            raise PromptError("Please fix the invalid JSON in your prompt before generating.")

    async def generate(self, session: SessionRequest) -> SessionResult:
        """
        Run a session and return every outcome in schedule order.

        A history entry is recorded only when all outcomes succeeded.

        Raises:
            InputError, PromptError: Invalid input (nothing was called).
        """
        self.check_input(session)

        handlers = {
            GenerationType.PHOTO: self._generate_photos,
            GenerationType.SOCIAL_POST: self._generate_social_post,
            GenerationType.CAMPAIGN: self._generate_campaign,
            GenerationType.MAGIC_EDIT: self._generate_edit,
            GenerationType.VIDEO: self._generate_video,
        }
        results = await handlers[session.generation_type](session)

        result = SessionResult(generation_type=session.generation_type, results=results)
        if result.succeeded:
            entry = HistoryEntry.create(session.generation_type, results, session.prompt)
            result.history_entry = self.history.add(entry)
        else:
            logger.info(f"Session finished with {len(result.failures)} failed artifact(s), not saved to history")
        return result

    def _base_request(self, session: SessionRequest, prompt: str) -> GenerationRequest:
        return GenerationRequest(
            source=session.source,
            prompt=prompt,
            aspect_ratio=session.aspect_ratio,
            style_keywords=session.style_keywords,
            model=session.model,
        )

    async def _generate_photos(self, session: SessionRequest) -> list[GenerationOutcome]:
        self._report(f"Generating {session.number_of_images} photo(s)...")
        instruction = with_context(
            to_instruction(session.prompt, session.generation_type),
            session.place_in_context,
        )
        request = replace(self._base_request(session, instruction), reference=session.reference)

        orchestrator = self._orchestrator(session.model)
        pipelines = [orchestrator.photo_pipeline(request) for _ in range(session.number_of_images)]
        return await orchestrator.gather(pipelines)

    async def _generate_social_post(self, session: SessionRequest) -> list[GenerationOutcome]:
        self._report("Generating your social post...")
        instruction = with_context(
            to_instruction(session.prompt, session.generation_type),
            session.place_in_context,
        )
        photo_request = self._base_request(session, instruction)
        caption_request = GenerationRequest(
            source=session.source,
            prompt=session.product_hint or instruction,
            model=session.model,
            title=SOCIAL_CAPTION_TITLE,
        )

        orchestrator = self._orchestrator(session.model)
        return await orchestrator.gather([
            orchestrator.photo_pipeline(photo_request),
            orchestrator.caption_pipeline(caption_request, product_hint=session.product_hint),
        ])

    async def _generate_campaign(self, session: SessionRequest) -> list[GenerationOutcome]:
        self._report("Parsing campaign strategy...")
        strategy = parse_campaign_strategy(session.prompt)
        orchestrator = self._orchestrator(session.model)
        return await orchestrator.run_campaign(
            session.source,
            strategy,
            model=session.model,
            product_hint=session.product_hint,
        )

    async def _generate_edit(self, session: SessionRequest) -> list[GenerationOutcome]:
        self._report("Applying your magic edit...")
        request = replace(self._base_request(session, session.prompt), reference=session.reference)
        return [await self.edit_generator.generate(request)]

    async def _generate_video(self, session: SessionRequest) -> list[GenerationOutcome]:
        """Start frame through the retry loop, then a single video call."""
        self._report("Generating the video start frame...")
        instruction = to_instruction(session.prompt, session.generation_type)
        frame_request = replace(
            self._base_request(session, frame_prompt(instruction)),
            aspect_ratio=video_aspect_ratio(session.aspect_ratio),
        )
        coordinator = RetryCoordinator(
            self.photo_generator,
            ImageValidator(self.gemini, session.model, fail_open=self.fail_open),
            max_attempts=self.max_attempts,
            progress=self.progress,
        )
        frame = await coordinator.run(frame_request)
        if not isinstance(frame, Photo):
            return [Failure(reason=f"Failed to generate video frame. {frame.reason}", kind="video")]

        self._report("Animating the video (this can take a few minutes)...")
        video_request = GenerationRequest(
            source=decode(frame.data),
            prompt=instruction,
            aspect_ratio=session.aspect_ratio,
            model=session.model,
        )
        return [await self.video_generator.generate(video_request)]

    async def suggest_prompt(
        self,
        source: SourceImage | None,
        generation_type: GenerationType,
        product_hint: str = "",
        model: str = TEXT_MODEL,
    ) -> str:
        """
        Suggest a structured prompt for the image (concept or campaign strategy).

        Raises:
            InputError: No image, or the type has no structured prompt.
            PromptAssistError: The suggestion call failed.
        """
        if source is None:
            raise InputError("Please upload a product image first to generate a prompt.")
        if generation_type not in CONCEPT_SOURCES:
            raise InputError(f"No prompt suggestions for {generation_type.value}")

        generator = create_generator(CONCEPT_SOURCES[generation_type], self.gemini)
        outcome = await generator.generate(
            GenerationRequest(source=source, prompt=product_hint, model=model)
        )
        if isinstance(outcome, Failure):
            raise PromptAssistError(outcome.reason)
        return outcome.content
