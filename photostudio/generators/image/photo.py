"""Product photo generators - new scenes and magic edits."""

from .. import register
from ..base import Generator
from ...models.outcome import Photo
from ...models.request import GenerationRequest
from ...services.encoder import to_data_url

EDIT_PROMPT = (
    "Edit this product photo according to the instruction below. Keep the product "
    "itself identical - do not change its shape, colors, labels or details. "
    "Instruction: {instruction}"
)

REFERENCE_NOTE = (
    " Use the second image only as a style and background reference; "
    "the product must come from the first image."
)


@register("image.photo")
class PhotoGenerator(Generator):
    """Generates a product photo from the source image and an instruction."""

    kind = "photo"

    def _build_prompt(self, request: GenerationRequest) -> str:
        prompt = request.instruction
        if request.reference:
            prompt += REFERENCE_NOTE
        return prompt

    async def _generate_raw(self, request: GenerationRequest) -> Photo:
        images = [request.source]
        if request.reference:
            images.append(request.reference)

        image = await self.gemini.generate_image(
            prompt=self._build_prompt(request),
            images=images,
            aspect_ratio=request.aspect_ratio,
        )
        return Photo(data=to_data_url(image))


@register("image.edit")
class EditGenerator(PhotoGenerator):
    """Applies a free-text edit instruction to the source photo (magic edit)."""

    def _build_prompt(self, request: GenerationRequest) -> str:
        prompt = EDIT_PROMPT.format(instruction=request.instruction)
        if request.reference:
            prompt += REFERENCE_NOTE
        return prompt
