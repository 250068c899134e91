"""API clients for external services."""

from .gemini import GeminiClient, GenerationError

__all__ = ["GeminiClient", "GenerationError"]
