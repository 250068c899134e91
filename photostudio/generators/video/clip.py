"""Video clip generator - animates a generated start frame."""

import asyncio
import logging
from pathlib import Path

from .. import register
from ..base import Generator
from ...clients.gemini import GeminiClient
from ...config import OUTPUT_DIR
from ...models.outcome import Video
from ...models.request import GenerationRequest
from ...utils import epoch_ms

logger = logging.getLogger(__name__)

FRAME_PROMPT = (
    "Generate a cinematic, high-quality, visually appealing single image based on the "
    "following product and prompt. This image will be used as the starting and ending "
    'frame for a video. User prompt: "{prompt}"'
)


def frame_prompt(prompt: str) -> str:
    """Instruction for the start/end frame photo."""
    return FRAME_PROMPT.format(prompt=prompt)


def video_aspect_ratio(aspect_ratio: str) -> str:
    """Video only supports landscape or portrait."""
    return "16:9" if aspect_ratio == "16:9" else "9:16"


@register("video.clip")
class VideoGenerator(Generator):
    """Animates request.source (the start frame) into a short clip saved locally."""

    kind = "video"

    def __init__(self, gemini: GeminiClient, output_dir: Path = OUTPUT_DIR):
        super().__init__(gemini)
        self.output_dir = Path(output_dir)

    async def _generate_raw(self, request: GenerationRequest) -> Video:
        uri = await self.gemini.generate_video(
            prompt=request.instruction,
            frame=request.source,
            aspect_ratio=video_aspect_ratio(request.aspect_ratio),
        )
        logger.info(f"Video ready, downloading from {uri}")
        content = await self.gemini.download(uri)

        path = self.output_dir / f"video_{epoch_ms()}.mp4"
        await asyncio.to_thread(self._write, path, content)
        return Video(uri=str(path))

    @staticmethod
    def _write(path: Path, content: bytes):
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
