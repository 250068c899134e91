"""Text generators."""

from .caption import CaptionFixGenerator, CaptionGenerator, correction_prompt
from .concept import ConceptGenerator, SocialConceptGenerator, StrategyGenerator

__all__ = [
    "CaptionFixGenerator",
    "CaptionGenerator",
    "ConceptGenerator",
    "SocialConceptGenerator",
    "StrategyGenerator",
    "correction_prompt",
]
