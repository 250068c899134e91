"""Data models."""

from .campaign import CampaignStrategy, PhotoConcept, SocialCaption
from .history import HistoryEntry
from .image import SourceImage
from .outcome import Failure, GenerationOutcome, Photo, Text, ValidationVerdict, Video
from .request import GenerationRequest, GenerationType
from .session import SessionRequest, SessionResult
from .styles import STYLE_PRESETS, StylePreset, get_preset

__all__ = [
    "CampaignStrategy",
    "Failure",
    "GenerationOutcome",
    "GenerationRequest",
    "GenerationType",
    "HistoryEntry",
    "Photo",
    "PhotoConcept",
    "STYLE_PRESETS",
    "SessionRequest",
    "SessionResult",
    "SocialCaption",
    "SourceImage",
    "StylePreset",
    "Text",
    "ValidationVerdict",
    "Video",
    "get_preset",
]
