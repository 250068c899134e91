"""Encoder - converts images to and from base64 data URLs."""

import asyncio
import base64
import binascii
import re
from io import BytesIO
from pathlib import Path

from PIL import Image

from ..models.image import SourceImage

DEFAULT_MIME_TYPE = "image/jpeg"

_DATA_URL_RE = re.compile(r"^data:(?P<mime>[^;,]*);base64,(?P<payload>.*)$", re.DOTALL)


async def read_image(path: str | Path) -> SourceImage:
    """
    Read an image file and detect its MIME type.

    Raises:
        OSError: If the file cannot be read or is not an image.
    """
    data = await asyncio.to_thread(Path(path).read_bytes)
    return SourceImage(data=data, mime_type=sniff_mime_type(data))


def sniff_mime_type(data: bytes) -> str:
    """Detect the MIME type from the image header (raises OSError if not an image)."""
    with Image.open(BytesIO(data)) as img:
        return Image.MIME.get(img.format or "", DEFAULT_MIME_TYPE)


async def encode(source: SourceImage | str | Path) -> str:
    """Encode an image (or image file) as a data URL, keeping its MIME type."""
    if not isinstance(source, SourceImage):
        source = await read_image(source)
    payload = await asyncio.to_thread(base64.b64encode, source.data)
    return f"data:{source.mime_type};base64,{payload.decode('ascii')}"


def decode(encoded: str) -> SourceImage:
    """
    Decode a data URL (or bare base64 payload) back into an image.

    A bare payload without a data URL header is assumed to be JPEG.
    """
    match = _DATA_URL_RE.match(encoded.strip())
    if match:
        mime_type = match.group("mime") or DEFAULT_MIME_TYPE
        payload = match.group("payload")
    else:
        mime_type = DEFAULT_MIME_TYPE
        payload = encoded.strip()

    try:
        data = base64.b64decode(payload, validate=True)
    except binascii.Error as e:
        raise ValueError(f"Invalid base64 image payload: {e}")
    return SourceImage(data=data, mime_type=mime_type)


def to_data_url(image: SourceImage) -> str:
    """Synchronous data URL for already-loaded bytes (e.g. generator output)."""
    return f"data:{image.mime_type};base64,{base64.b64encode(image.data).decode('ascii')}"
