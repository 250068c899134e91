"""Prompt-assist generators - creative concepts and campaign strategies.

Both return a Text outcome whose content is a structured prompt document,
ready to be edited and submitted as the session prompt.
"""

from .. import register
from ..base import Generator
from ...clients.gemini import GenerationError
from ...models.outcome import Text
from ...models.request import GenerationRequest
from ...services.prompt import (
    PHOTO_FIELDS,
    PromptError,
    build_campaign_strategy,
    build_structured_prompt,
    parse_campaign_strategy,
)

_CONCEPT_PROPERTIES = {name: {"type": "STRING"} for name in PHOTO_FIELDS}

CONCEPT_SCHEMA = {
    "type": "OBJECT",
    "properties": _CONCEPT_PROPERTIES,
    "required": list(PHOTO_FIELDS),
}

STRATEGY_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "photo_concepts": {
            "type": "ARRAY",
            "items": CONCEPT_SCHEMA,
        },
        "social_captions": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "platform": {"type": "STRING"},
                    "caption": {"type": "STRING"},
                },
                "required": ["platform", "caption"],
            },
        },
    },
    "required": ["photo_concepts", "social_captions"],
}

CONCEPT_PROMPT = """You are a creative director for e-commerce product photography.
Look at the product in the image and propose one photo concept that shows it at its best.
{hint_line}
Return JSON with:
- scene_description: where and how the product is placed
- lighting: the lighting setup
- mood: the overall feeling
- props: supporting props (or "none")"""

SOCIAL_CONCEPT_PROMPT = """You are a social media art director.
Look at the product in the image and propose one scroll-stopping photo concept for an Instagram post.
{hint_line}
Return JSON with:
- scene_description: where and how the product is placed
- lighting: the lighting setup
- mood: the overall feeling
- props: supporting props (or "none")"""

STRATEGY_PROMPT = """You are a marketing strategist planning a product launch campaign.
Look at the product in the image.
{hint_line}
Return JSON with:
- photo_concepts: exactly 3 distinct photo concepts, each with scene_description, lighting, mood and props
- social_captions: exactly 3 captions, one each for Instagram, Facebook and LinkedIn, each with platform and caption"""


def _hint_line(hint: str) -> str:
    return f'Product hint from the user: "{hint}"' if hint else ""


@register("text.concept")
class ConceptGenerator(Generator):
    """Suggests a structured photo prompt; request.prompt is the product hint."""

    kind = "text"
    TEMPLATE = CONCEPT_PROMPT
    TITLE = "Creative Concept"

    async def _generate_raw(self, request: GenerationRequest) -> Text:
        data = await self.gemini.generate_json(
            prompt=self.TEMPLATE.format(hint_line=_hint_line(request.prompt)),
            images=[request.source],
            response_schema=CONCEPT_SCHEMA,
            model=request.model,
        )
        fields = {name: str(data.get(name, "")) for name in PHOTO_FIELDS}
        return Text(title=self.TITLE, content=build_structured_prompt(fields))


@register("text.social_concept")
class SocialConceptGenerator(ConceptGenerator):
    TEMPLATE = SOCIAL_CONCEPT_PROMPT


@register("text.strategy")
class StrategyGenerator(Generator):
    """Suggests a campaign strategy document; request.prompt is the product hint."""

    kind = "text"

    async def _generate_raw(self, request: GenerationRequest) -> Text:
        data = await self.gemini.generate_json(
            prompt=STRATEGY_PROMPT.format(hint_line=_hint_line(request.prompt)),
            images=[request.source],
            response_schema=STRATEGY_SCHEMA,
            model=request.model,
        )
        try:
            strategy = parse_campaign_strategy(build_structured_prompt(data))
        except PromptError as e:
            raise GenerationError(f"Campaign strategy is incomplete: {e}")
        return Text(title="Campaign Strategy", content=build_campaign_strategy(strategy))
