"""Gemini client for image, text and video generation (async)."""

import asyncio
import json
from typing import Any

import requests
from google import genai
from google.genai import types

from ..config import IMAGE_MODEL, TEXT_MODEL, VIDEO_MODEL, VIDEO_POLL_INTERVAL
from ..models.image import SourceImage


class GenerationError(RuntimeError):
    """The service answered but the response carries no usable artifact."""


class GeminiClient:
    """Client for Google's Gemini models via the google-genai async API.

    Every method is a single round trip to the service (video generation is
    one operation, polled until done). Retry policy lives in the engine.
    """

    def __init__(
        self,
        api_key: str,
        image_model: str = IMAGE_MODEL,
        video_model: str = VIDEO_MODEL,
        poll_interval: float = VIDEO_POLL_INTERVAL,
    ):
        self.api_key = api_key
        self.client = genai.Client(api_key=api_key)
        self.image_model = image_model
        self.video_model = video_model
        self.poll_interval = poll_interval

    @staticmethod
    def _part(image: SourceImage) -> types.Part:
        return types.Part.from_bytes(data=image.data, mime_type=image.mime_type)

    async def generate_image(
        self,
        prompt: str,
        images: list[SourceImage],
        aspect_ratio: str = "1:1",
    ) -> SourceImage:
        """
        Generate an image from input images and an instruction.

        Args:
            prompt: Instruction text
            images: Source image first, then optional reference images
            aspect_ratio: Output aspect ratio (default 1:1)

        Returns:
            Generated image bytes and MIME type
        """
        contents: list[Any] = [self._part(img) for img in images]
        contents.append(prompt)

        response = await self.client.aio.models.generate_content(
            model=self.image_model,
            contents=contents,
            config=types.GenerateContentConfig(
                response_modalities=["IMAGE"],
                image_config=types.ImageConfig(aspect_ratio=aspect_ratio),
            ),
        )

        # Extract generated image from response
        if response.candidates and response.candidates[0].content:
            for part in response.candidates[0].content.parts or []:
                if part.inline_data and part.inline_data.data:
                    return SourceImage(
                        data=part.inline_data.data,
                        mime_type=part.inline_data.mime_type or "image/png",
                    )

        text = _response_text(response)
        if text:
            raise GenerationError(
                "API returned text instead of an image. Safety feedback might have "
                f"been triggered. Response: {text}"
            )
        raise GenerationError("No image data found in response.")

    async def generate_text(
        self,
        prompt: str,
        images: list[SourceImage],
        model: str = TEXT_MODEL,
        response_schema: dict[str, Any] | None = None,
    ) -> str:
        """
        Generate text about the given images.

        With response_schema set the model is asked for JSON matching it and
        the raw JSON text is returned.
        """
        contents: list[Any] = [self._part(img) for img in images]
        contents.append(prompt)

        config = None
        if response_schema is not None:
            config = types.GenerateContentConfig(
                response_mime_type="application/json",
                response_schema=response_schema,
            )

        response = await self.client.aio.models.generate_content(
            model=model,
            contents=contents,
            config=config,
        )

        text = _response_text(response)
        if not text:
            raise GenerationError("No text found in response.")
        return text.strip()

    async def generate_json(
        self,
        prompt: str,
        images: list[SourceImage],
        response_schema: dict[str, Any],
        model: str = TEXT_MODEL,
    ) -> dict[str, Any]:
        """Generate text constrained to a JSON schema and parse it."""
        text = await self.generate_text(prompt, images, model=model, response_schema=response_schema)
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise GenerationError(f"Response is not valid JSON: {e}")
        if not isinstance(data, dict):
            raise GenerationError("Response JSON is not an object.")
        return data

    async def generate_video(
        self,
        prompt: str,
        frame: SourceImage,
        aspect_ratio: str = "9:16",
    ) -> str:
        """
        Animate a start frame into a short clip.

        The same frame is used as first and last frame. Polls the long
        running operation every poll_interval seconds.

        Returns:
            Download URI of the generated video
        """
        image = types.Image(image_bytes=frame.data, mime_type=frame.mime_type)
        operation = await self.client.aio.models.generate_videos(
            model=self.video_model,
            prompt=prompt,
            image=image,
            config=types.GenerateVideosConfig(
                number_of_videos=1,
                resolution="720p",
                aspect_ratio=aspect_ratio,
                last_frame=image,
            ),
        )

        while not operation.done:
            await asyncio.sleep(self.poll_interval)
            operation = await self.client.aio.operations.get(operation)

        if operation.error:
            message = operation.error.get("message") if isinstance(operation.error, dict) else None
            raise GenerationError(message or "Video generation operation failed.")

        videos = operation.response.generated_videos if operation.response else None
        uri = videos[0].video.uri if videos and videos[0].video else None
        if not uri:
            raise GenerationError("Video generation succeeded but no download link was found.")
        return uri

    async def download(self, uri: str) -> bytes:
        """Download a generated file (authenticated with the API key)."""
        response = await asyncio.to_thread(
            requests.get,
            uri,
            headers={"x-goog-api-key": self.api_key},
            timeout=120,
        )
        if response.status_code != 200:
            raise GenerationError(
                f"Failed to download video: {response.status_code}. Details: {response.text[:200]}"
            )
        return response.content


def _response_text(response) -> str:
    """Collect text parts of a response without raising on image-only output."""
    if not response.candidates or not response.candidates[0].content:
        return ""
    parts = response.candidates[0].content.parts or []
    return "".join(part.text for part in parts if getattr(part, "text", None))
