"""Tests for the image encoder."""

import base64

import pytest

from photostudio.models.image import SourceImage
from photostudio.services.encoder import decode, encode, read_image, to_data_url

from .fakes import make_png


@pytest.mark.asyncio
async def test_encode_keeps_mime_type(source):
    encoded = await encode(source)
    assert encoded.startswith("data:image/png;base64,")
    assert decode(encoded) == source


@pytest.mark.asyncio
async def test_read_image_detects_png(tmp_path, png_bytes):
    path = tmp_path / "product.bin"
    path.write_bytes(png_bytes)

    image = await read_image(path)
    assert image.mime_type == "image/png"
    assert image.data == png_bytes


@pytest.mark.asyncio
async def test_encode_from_path(tmp_path, png_bytes):
    path = tmp_path / "product.png"
    path.write_bytes(png_bytes)
    encoded = await encode(path)
    assert encoded == to_data_url(SourceImage(png_bytes, "image/png"))


@pytest.mark.asyncio
async def test_read_missing_file_raises_io_error(tmp_path):
    with pytest.raises(OSError):
        await read_image(tmp_path / "missing.png")


@pytest.mark.asyncio
async def test_read_non_image_raises_io_error(tmp_path):
    path = tmp_path / "notes.txt"
    path.write_text("not an image")
    with pytest.raises(OSError):
        await read_image(path)


def test_decode_bare_payload_defaults_to_jpeg():
    payload = base64.b64encode(make_png()).decode()
    image = decode(payload)
    assert image.mime_type == "image/jpeg"
    assert image.data == make_png()


def test_decode_rejects_garbage():
    with pytest.raises(ValueError):
        decode("data:image/png;base64,***not base64***")
