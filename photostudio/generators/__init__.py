"""Generator registry.

Generators register under "<kind>.<name>" paths (e.g. "image.photo",
"text.caption", "video.clip"); the engine builds them by path.
"""

from typing import Type
from .base import Generator

_GENERATORS: dict[str, Type[Generator]] = {}


def _ensure_generators_loaded():
    """Import the image, text and video packages so their generators register."""
    from . import image  # noqa: F401
    from . import text  # noqa: F401
    from . import video  # noqa: F401


def register(path: str):
    """Decorator to register a generator under a unique path."""
    def decorator(cls):
        existing = _GENERATORS.get(path)
        if existing is not None and existing is not cls:
            raise ValueError(f"Generator path already registered: {path} ({existing.__name__})")
        _GENERATORS[path] = cls
        return cls
    return decorator


def get_generator_class(path: str) -> Type[Generator]:
    _ensure_generators_loaded()
    if path not in _GENERATORS:
        raise ValueError(f"Unknown generator: {path}. Valid: {sorted(_GENERATORS)}")
    return _GENERATORS[path]


def create_generator(path: str, gemini, **kwargs) -> Generator:
    """Build the generator registered at path around a Gemini client."""
    return get_generator_class(path)(gemini, **kwargs)


def list_generators(kind: str | None = None) -> list[str]:
    """Registered paths, optionally only those of one kind ("image", "text", "video")."""
    _ensure_generators_loaded()
    return sorted(p for p in _GENERATORS if kind is None or p.split(".", 1)[0] == kind)


__all__ = [
    "Generator",
    "create_generator",
    "get_generator_class",
    "list_generators",
    "register",
]
