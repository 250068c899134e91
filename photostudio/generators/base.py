"""Generator base class."""

import logging
from abc import ABC, abstractmethod

from ..clients.gemini import GeminiClient
from ..models.outcome import Failure, GenerationOutcome
from ..models.request import GenerationRequest

logger = logging.getLogger(__name__)


class Generator(ABC):
    """One external generation round trip per call.

    generate() never raises for service or transport errors: they come back
    as a Failure outcome carrying the error message. Generators never retry.
    """

    kind: str = "photo"  # Artifact kind produced (photo, text, video)

    def __init__(self, gemini: GeminiClient):
        self.gemini = gemini

    async def generate(self, request: GenerationRequest) -> GenerationOutcome:
        """Template method: call the service, convert errors to Failure."""
        try:
            return await self._generate_raw(request)
        except Exception as e:
            logger.error(f"Error generating {self.kind}: {e}")
            return Failure(reason=str(e) or e.__class__.__name__, kind=self.kind)

    @abstractmethod
    async def _generate_raw(self, request: GenerationRequest) -> GenerationOutcome:
        """Make the service call. Subclasses implement this."""
        pass
