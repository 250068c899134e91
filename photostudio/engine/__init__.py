"""Generation engine - retry loop, concurrent pipelines and sessions."""

from .campaign import CampaignOrchestrator, Pipeline
from .engine import InputError, PromptAssistError, StudioEngine
from .retry import AttemptState, RetryCoordinator

__all__ = [
    "AttemptState",
    "CampaignOrchestrator",
    "InputError",
    "Pipeline",
    "PromptAssistError",
    "RetryCoordinator",
    "StudioEngine",
]
