"""Shared fixtures. No test touches the network."""

import json

import pytest

from photostudio.models.image import SourceImage
from photostudio.services.history import HistoryStore

from .fakes import FakeGemini, make_png


@pytest.fixture
def png_bytes():
    return make_png()


@pytest.fixture
def source(png_bytes):
    return SourceImage(data=png_bytes, mime_type="image/png")


@pytest.fixture
def gemini():
    return FakeGemini()


@pytest.fixture
def history(tmp_path):
    store = HistoryStore(tmp_path / "history.json")
    store.load()
    return store


@pytest.fixture
def photo_prompt():
    return json.dumps({
        "scene_description": "on a table",
        "lighting": "soft",
        "mood": "calm",
        "props": "none",
    })


@pytest.fixture
def strategy_prompt():
    return json.dumps({
        "photo_concepts": [
            {"scene_description": "kitchen counter", "lighting": "morning", "mood": "fresh", "props": "lemons"},
            {"scene_description": "picnic blanket", "lighting": "golden hour", "mood": "relaxed", "props": "basket"},
            {"scene_description": "studio backdrop", "lighting": "softbox", "mood": "premium", "props": "none"},
        ],
        "social_captions": [
            {"platform": "Instagram", "caption": "Meet your new favourite mug."},
            {"platform": "Facebook", "caption": "Handmade, dishwasher safe, yours."},
            {"platform": "LinkedIn", "caption": "Small-batch ceramics for the office."},
        ],
    })
