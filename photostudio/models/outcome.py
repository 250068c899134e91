"""Generation outcomes and validation verdicts.

Every artifact pipeline ends in exactly one outcome. Outcomes are immutable
and serialize to the dict shape stored in history.
"""

from dataclasses import dataclass
from typing import Any


class GenerationOutcome:
    """Base for the outcome variants."""

    kind: str = ""

    @property
    def ok(self) -> bool:
        return True

    def to_dict(self) -> dict[str, Any]:
        raise NotImplementedError

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "GenerationOutcome":
        """Rebuild an outcome from its stored dict form."""
        if data.get("error"):
            return Failure(reason=data["error"], kind=data.get("type", "photo"))

        kind = data.get("type")
        if kind == "photo":
            return Photo(data=data["data"])
        if kind == "text":
            return Text(title=data.get("title") or "", content=data["data"])
        if kind == "video":
            return Video(uri=data["data"])
        raise ValueError(f"Unknown outcome type: {kind}")


@dataclass(frozen=True)
class Photo(GenerationOutcome):
    data: str  # data URL: "data:<mime>;base64,<payload>"

    kind = "photo"

    def to_dict(self) -> dict[str, Any]:
        return {"type": "photo", "data": self.data}


@dataclass(frozen=True)
class Text(GenerationOutcome):
    title: str
    content: str

    kind = "text"

    def to_dict(self) -> dict[str, Any]:
        return {"type": "text", "title": self.title, "data": self.content}


@dataclass(frozen=True)
class Video(GenerationOutcome):
    uri: str  # Local path or URL of the finished clip

    kind = "video"

    def to_dict(self) -> dict[str, Any]:
        return {"type": "video", "data": self.uri}


@dataclass(frozen=True)
class Failure(GenerationOutcome):
    reason: str
    kind: str = "photo"  # Artifact kind that failed, for display grouping

    def __post_init__(self):
        if not self.reason:
            raise ValueError("Failure outcome requires a reason")

    @property
    def ok(self) -> bool:
        return False

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.kind, "data": "", "error": self.reason}


@dataclass(frozen=True)
class ValidationVerdict:
    """QA decision for one generated artifact."""
    accepted: bool
    reason: str
