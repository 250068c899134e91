"""Generation request model and the fixed option tables."""

from dataclasses import dataclass
from enum import Enum

from .image import SourceImage


class GenerationType(Enum):
    PHOTO = "photo"
    VIDEO = "video"
    CAMPAIGN = "campaign"
    SOCIAL_POST = "social_post"
    MAGIC_EDIT = "magic_edit"


# Types whose prompt is a structured (JSON) document
STRUCTURED_TYPES = (GenerationType.PHOTO, GenerationType.SOCIAL_POST, GenerationType.CAMPAIGN)

ASPECT_RATIOS: dict[str, str] = {
    "1:1": "Square",
    "9:16": "Story / Reel",
    "16:9": "Widescreen",
    "3:4": "Portrait",
}

GENERATIVE_MODELS: dict[str, str] = {
    "gemini-2.5-flash": "Flash (fast)",
    "gemini-2.5-pro": "Pro (most capable)",
    "gemini-2.5-flash-image": "Nano Banana (vision and editing)",
}

MAX_IMAGES_PER_SESSION = 3


@dataclass(frozen=True)
class GenerationRequest:
    """Everything a generator needs for one artifact attempt."""
    source: SourceImage
    prompt: str                          # Final instruction text
    aspect_ratio: str = "1:1"
    style_keywords: str | None = None    # Appended to the instruction when set
    reference: SourceImage | None = None  # Optional style/background reference
    model: str = "gemini-2.5-flash-image"  # Model for text and QA calls
    title: str | None = None             # Caption platform/title for text artifacts

    @property
    def instruction(self) -> str:
        if self.style_keywords:
            return f"{self.prompt}{self.style_keywords}"
        return self.prompt
