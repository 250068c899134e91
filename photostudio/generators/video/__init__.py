"""Video generators."""

from .clip import VideoGenerator, frame_prompt, video_aspect_ratio

__all__ = ["VideoGenerator", "frame_prompt", "video_aspect_ratio"]
