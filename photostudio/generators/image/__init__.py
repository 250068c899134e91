"""Image generators."""

from .photo import EditGenerator, PhotoGenerator

__all__ = ["EditGenerator", "PhotoGenerator"]
