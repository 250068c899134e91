"""Prompt builder - structured prompts, style presets and final instructions."""

import json
import logging
import re
from typing import Any

from ..models.campaign import CampaignStrategy, PhotoConcept, SocialCaption
from ..models.request import GenerationType, STRUCTURED_TYPES
from ..models.styles import STYLE_PRESETS, StylePreset

logger = logging.getLogger(__name__)

SCENE_FIELD = "scene_description"
PHOTO_FIELDS = ("scene_description", "lighting", "mood", "props")

CONTEXTUALIZATION_INSTRUCTION = (
    "Intelligently place the product in a relevant, photorealistic context. "
    "For wearable items (like clothing or accessories), show them in a tasteful, "
    "real-world setting as they would be worn. For objects, place them in an "
    "appropriate environment (e.g., kitchenware in a kitchen). The overall "
    "aesthetic must be cohesive and professional."
)

DEFAULT_PHOTO_PROMPT = {
    "scene_description": "A lifestyle shot of the product on a marble countertop, with soft morning light.",
    "lighting": "Soft, natural morning light",
    "mood": "Elegant and clean",
    "props": "A sprig of eucalyptus",
}

DEFAULT_EDIT_PROMPT = "Change the background to a marble countertop."


class PromptError(ValueError):
    """Prompt text is not a valid structured prompt."""


def build_structured_prompt(fields: dict[str, Any]) -> str:
    """Serialize prompt fields as a JSON document (inverse of parse_structured_prompt)."""
    if not isinstance(fields, dict):
        raise PromptError("Structured prompt must be a mapping")
    for key in fields:
        if not isinstance(key, str):
            raise PromptError(f"Structured prompt keys must be strings, got {key!r}")
    try:
        return json.dumps(fields, indent=2, ensure_ascii=False)
    except (TypeError, ValueError) as e:
        raise PromptError(f"Structured prompt is not serializable: {e}")


def parse_structured_prompt(text: str) -> dict[str, Any]:
    """Parse a JSON prompt document into its fields."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise PromptError(f"Prompt is not valid JSON: {e}")
    if not isinstance(data, dict):
        raise PromptError("Prompt JSON must be an object")
    return data


def is_valid_prompt(text: str, generation_type: GenerationType) -> bool:
    """Free-text types are always valid; structured types must parse."""
    if generation_type not in STRUCTURED_TYPES:
        return True
    try:
        if generation_type == GenerationType.CAMPAIGN:
            parse_campaign_strategy(text)
        else:
            parse_structured_prompt(text)
    except PromptError:
        return False
    return True


def _keywords_pattern(preset: StylePreset) -> re.Pattern:
    """Match a preset's keywords, tolerant of whitespace after each comma."""
    parts = preset.keywords.split(", ")
    return re.compile(r",\s*".join(re.escape(p) for p in parts))


def strip_style_presets(scene: str) -> str:
    """Remove every known preset's keywords and tidy leftover commas/spaces."""
    for preset in STYLE_PRESETS:
        scene = _keywords_pattern(preset).sub("", scene)

    scene = re.sub(r",\s*$", "", scene).strip()
    scene = re.sub(r"^\s*,", "", scene).strip()
    return re.sub(r"\s\s+", " ", scene)


def apply_style_preset(
    fields: dict[str, Any],
    preset: StylePreset,
    is_active: bool,
) -> tuple[dict[str, Any], bool]:
    """
    Toggle a style preset on the scene description.

    Presets are mutually exclusive: any known preset keywords are stripped
    first. If the preset is already active it is removed, otherwise its
    keywords are appended.

    Args:
        fields: Structured prompt fields (not mutated)
        preset: Preset being toggled
        is_active: True if this preset is the currently active one

    Returns:
        (new fields, applicable). applicable is False, and fields are
        returned unchanged, when there is no textual scene description.
    """
    scene = fields.get(SCENE_FIELD)
    if not isinstance(scene, str):
        return fields, False

    base_scene = strip_style_presets(scene)

    if is_active:
        new_scene = base_scene
    elif base_scene:
        new_scene = f"{base_scene}{preset.keywords}"
    else:
        new_scene = preset.keywords[2:]

    return {**fields, SCENE_FIELD: new_scene}, True


def to_instruction(prompt: str, generation_type: GenerationType) -> str:
    """
    Turn the user's prompt into the instruction sent to the generator.

    Photo and social post prompts flatten into "field name: value" sentences.
    Free-text prompts (magic edit, video) and campaign strategies pass
    through unchanged. Unparseable structured prompts fall back to the raw
    text.
    """
    if generation_type not in (GenerationType.PHOTO, GenerationType.SOCIAL_POST):
        return prompt

    try:
        fields = parse_structured_prompt(prompt)
    except PromptError:
        logger.warning("Prompt is not valid JSON, using as raw text.")
        return prompt

    return ". ".join(f"{key.replace('_', ' ')}: {value}" for key, value in fields.items())


def with_context(instruction: str, place_in_context: bool) -> str:
    """Prefix the contextualization instruction when requested."""
    if not place_in_context:
        return instruction
    return f"{CONTEXTUALIZATION_INSTRUCTION} {instruction}"


def parse_campaign_strategy(text: str) -> CampaignStrategy:
    """
    Parse a campaign strategy prompt.

    Expected shape:
        {"photo_concepts": [{scene_description, lighting, mood, props} x3],
         "social_captions": [{platform, caption} x3]}
    """
    data = parse_structured_prompt(text)

    concepts = data.get("photo_concepts")
    captions = data.get("social_captions")
    if not isinstance(concepts, list) or len(concepts) < 3:
        raise PromptError("Campaign strategy needs 3 photo_concepts")
    if not isinstance(captions, list) or not captions:
        raise PromptError("Campaign strategy needs social_captions")

    try:
        photo_concepts = [
            PhotoConcept(**{name: str(concept.get(name, "")) for name in PHOTO_FIELDS})
            for concept in concepts[:3]
        ]
        social_captions = [
            SocialCaption(platform=str(item["platform"]), caption=str(item["caption"]))
            for item in captions
        ]
    except (AttributeError, KeyError, TypeError) as e:
        raise PromptError(f"Malformed campaign strategy: {e}")

    return CampaignStrategy(photo_concepts=photo_concepts, social_captions=social_captions)


def build_campaign_strategy(strategy: CampaignStrategy) -> str:
    """Serialize a strategy back into its prompt document."""
    return build_structured_prompt({
        "photo_concepts": [
            {name: getattr(concept, name) for name in PHOTO_FIELDS}
            for concept in strategy.photo_concepts
        ],
        "social_captions": [
            {"platform": c.platform, "caption": c.caption}
            for c in strategy.social_captions
        ],
    })
