"""History entry model."""

from dataclasses import dataclass
from typing import Any

from .outcome import GenerationOutcome, Photo
from .request import GenerationType
from ..utils import new_history_id, now_iso


@dataclass(frozen=True)
class HistoryEntry:
    """A completed, fully successful generation session."""
    id: str
    timestamp: str
    generation_type: GenerationType
    preview: str                             # First photo's data URL, or ""
    results: tuple[GenerationOutcome, ...]
    prompt: str                              # Prompt exactly as the user submitted it

    @classmethod
    def create(
        cls,
        generation_type: GenerationType,
        results: list[GenerationOutcome],
        prompt: str,
    ) -> "HistoryEntry":
        """Build a new entry; the preview is the first photo in the results."""
        first_photo = next((r for r in results if isinstance(r, Photo)), None)
        return cls(
            id=new_history_id(),
            timestamp=now_iso(),
            generation_type=generation_type,
            preview=first_photo.data if first_photo else "",
            results=tuple(results),
            prompt=prompt,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "generationType": self.generation_type.value,
            "preview": self.preview,
            "results": [r.to_dict() for r in self.results],
            "prompt": self.prompt,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "HistoryEntry":
        return cls(
            id=data["id"],
            timestamp=data["timestamp"],
            generation_type=GenerationType(data["generationType"]),
            preview=data.get("preview", ""),
            results=tuple(GenerationOutcome.from_dict(r) for r in data.get("results", [])),
            prompt=data.get("prompt", ""),
        )
