"""Source image model."""

from dataclasses import dataclass


@dataclass(frozen=True)
class SourceImage:
    """An uploaded image: raw bytes plus MIME type. Read-only for the session."""

    data: bytes
    mime_type: str = "image/jpeg"

    def __repr__(self) -> str:
        return f"SourceImage(mime_type={self.mime_type!r}, size={len(self.data)})"
