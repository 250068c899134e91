"""Session models - one press of "Generate"."""

from dataclasses import dataclass, field

from ..config import DEFAULT_MODEL
from .history import HistoryEntry
from .image import SourceImage
from .outcome import Failure, GenerationOutcome
from .request import GenerationType


@dataclass(frozen=True)
class SessionRequest:
    """User input for a generation session."""
    source: SourceImage | None
    generation_type: GenerationType
    prompt: str                          # Raw prompt text (JSON for structured types)
    aspect_ratio: str = "1:1"
    number_of_images: int = 1            # Photo mode only (1-3)
    model: str = DEFAULT_MODEL
    product_hint: str = ""
    place_in_context: bool = True        # Photo and social post only
    reference: SourceImage | None = None  # Photo and magic edit only
    style_keywords: str | None = None


@dataclass
class SessionResult:
    """Ordered outcomes of a session, plus the history entry if one was recorded."""
    generation_type: GenerationType
    results: list[GenerationOutcome] = field(default_factory=list)
    history_entry: HistoryEntry | None = None

    @property
    def failures(self) -> list[Failure]:
        return [r for r in self.results if isinstance(r, Failure)]

    @property
    def succeeded(self) -> bool:
        """True if there are results and none failed."""
        return bool(self.results) and not self.failures
