"""Style presets for structured photo prompts."""

from dataclasses import dataclass


@dataclass(frozen=True)
class StylePreset:
    """A named keyword suffix appended to the scene description."""

    key: str
    label: str
    keywords: str  # Always starts with ", "


STYLE_PRESETS: list[StylePreset] = [
    StylePreset("cinematic", "Cinematic", ", cinematic lighting, high contrast, dramatic shadows, film grain"),
    StylePreset("minimalist", "Minimalist", ", clean background, simple composition, neutral color palette, soft lighting"),
    StylePreset("vibrant", "Vibrant & Playful", ", bold colors, dynamic composition, bright and fun, pop art style"),
    StylePreset("luxury", "Luxury Dark", ", dark and moody, elegant, high-end, sophisticated, rich textures, low-key lighting"),
    StylePreset("studio", "Studio", ", professional studio shot, clean plain background, product photography, softbox lighting"),
]


def get_preset(key: str) -> StylePreset:
    """Get style preset by key."""
    for preset in STYLE_PRESETS:
        if preset.key == key:
            return preset
    raise ValueError(f"Unknown style preset: {key}. Valid: {[p.key for p in STYLE_PRESETS]}")
