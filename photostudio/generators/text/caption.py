"""Caption generators - social captions and corrective rewrites."""

from .. import register
from ..base import Generator
from ...models.outcome import Text
from ...models.request import GenerationRequest

CAPTION_PROMPT = (
    "Based on this product image, write a catchy social media post. "
    'The user\'s goal is: "{goal}". Write only the caption text. '
    "Keep it concise and engaging."
)

CORRECTION_PROMPT = """A social media caption written for this product was rejected by quality review.

Product hint: "{hint}"
Rejected caption: "{caption}"
Reason for rejection: "{reason}"

Rewrite the caption so it accurately describes the product in the image and fixes the problem above.
Keep the tone and platform style of the original. Write only the new caption text."""


def correction_prompt(product_hint: str, caption: str, reason: str) -> str:
    """Build the instruction for rewriting a rejected caption."""
    return CORRECTION_PROMPT.format(
        hint=product_hint or "none",
        caption=caption,
        reason=reason,
    )


@register("text.caption")
class CaptionGenerator(Generator):
    """Writes a caption for the product; request.prompt is the user's goal."""

    kind = "text"
    DEFAULT_TITLE = "Instagram Caption"

    def _build_prompt(self, request: GenerationRequest) -> str:
        return CAPTION_PROMPT.format(goal=request.prompt)

    async def _generate_raw(self, request: GenerationRequest) -> Text:
        content = await self.gemini.generate_text(
            prompt=self._build_prompt(request),
            images=[request.source],
            model=request.model,
        )
        return Text(title=request.title or self.DEFAULT_TITLE, content=content)


@register("text.caption_fix")
class CaptionFixGenerator(CaptionGenerator):
    """Rewrites a rejected caption; request.prompt comes from correction_prompt()."""

    def _build_prompt(self, request: GenerationRequest) -> str:
        return request.prompt
