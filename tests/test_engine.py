"""End-to-end session tests against a fake Gemini client."""

import json
from pathlib import Path

import pytest

from photostudio.clients.gemini import GenerationError
from photostudio.engine import InputError, PromptAssistError, StudioEngine
from photostudio.engine.engine import SOCIAL_CAPTION_TITLE
from photostudio.models.outcome import Failure, Photo, Text, Video
from photostudio.models.request import GenerationType
from photostudio.models.session import SessionRequest
from photostudio.services.prompt import CONTEXTUALIZATION_INSTRUCTION, PromptError

from .fakes import FakeGemini


@pytest.fixture
def engine_for(history, tmp_path):
    def build(gemini, **kwargs):
        return StudioEngine(gemini, history, max_attempts=2, output_dir=tmp_path / "out", **kwargs)
    return build


def session(source, generation_type=GenerationType.PHOTO, prompt="", **kwargs):
    return SessionRequest(source=source, generation_type=generation_type, prompt=prompt, **kwargs)


@pytest.mark.asyncio
async def test_photo_session_records_history(source, gemini, history, engine_for, photo_prompt):
    engine = engine_for(gemini)

    result = await engine.generate(session(source, prompt=photo_prompt, number_of_images=2))

    assert result.succeeded
    assert [type(r) for r in result.results] == [Photo, Photo]
    assert gemini.count("image") == 2
    assert gemini.count("json") == 2

    assert len(history.entries) == 1
    entry = history.entries[0]
    assert entry == result.history_entry
    assert entry.prompt == photo_prompt
    assert entry.preview == result.results[0].data


@pytest.mark.asyncio
async def test_photo_prompt_is_flattened_and_placed_in_context(source, gemini, engine_for, photo_prompt):
    engine = engine_for(gemini)

    await engine.generate(session(source, prompt=photo_prompt, aspect_ratio="3:4"))

    [call] = [c for c in gemini.calls if c.method == "image"]
    assert call.aspect_ratio == "3:4"
    assert call.prompt.startswith(CONTEXTUALIZATION_INSTRUCTION)
    assert "scene description: on a table" in call.prompt


@pytest.mark.asyncio
async def test_place_in_context_off(source, gemini, engine_for, photo_prompt):
    engine = engine_for(gemini)

    await engine.generate(session(source, prompt=photo_prompt, place_in_context=False))

    [call] = [c for c in gemini.calls if c.method == "image"]
    assert call.prompt == "scene description: on a table. lighting: soft. mood: calm. props: none"


@pytest.mark.asyncio
async def test_partial_failure_is_not_saved(source, history, engine_for, photo_prompt):
    gemini = FakeGemini(image=lambda p, i, a: GenerationError("No image data found in response."))
    engine = engine_for(gemini)

    result = await engine.generate(session(source, GenerationType.SOCIAL_POST, photo_prompt))

    assert not result.succeeded
    assert isinstance(result.results[0], Failure)
    assert result.results[1] == Text(title=SOCIAL_CAPTION_TITLE, content="Fresh caption for a great product")
    assert gemini.count("image") == 2
    assert result.history_entry is None
    assert history.entries == []


@pytest.mark.asyncio
async def test_social_post_caption_uses_product_hint(source, gemini, engine_for, photo_prompt):
    engine = engine_for(gemini)

    result = await engine.generate(
        session(source, GenerationType.SOCIAL_POST, photo_prompt, product_hint="handmade ceramic mug")
    )

    assert result.succeeded
    [caption_call] = [c for c in gemini.calls if c.method == "text"]
    assert "handmade ceramic mug" in caption_call.prompt


@pytest.mark.asyncio
@pytest.mark.parametrize("kwargs,error", [
    ({"source": None}, InputError),
    ({"aspect_ratio": "4:5"}, InputError),
    ({"model": "dall-e-3"}, InputError),
    ({"number_of_images": 0}, InputError),
    ({"number_of_images": 4}, InputError),
    ({"prompt": "   "}, PromptError),
    ({"prompt": '{"scene_description": "on a table",'}, PromptError),
])
async def test_invalid_input_makes_no_calls(source, gemini, history, engine_for, photo_prompt, kwargs, error):
    engine = engine_for(gemini)
    params = {"source": source, "generation_type": GenerationType.PHOTO, "prompt": photo_prompt, **kwargs}

    with pytest.raises(error):
        await engine.generate(SessionRequest(**params))

    assert gemini.calls == []
    assert history.entries == []


@pytest.mark.asyncio
async def test_campaign_requires_strategy_document(source, gemini, engine_for, photo_prompt):
    engine = engine_for(gemini)

    with pytest.raises(PromptError):
        await engine.generate(session(source, GenerationType.CAMPAIGN, photo_prompt))

    assert gemini.calls == []


@pytest.mark.asyncio
async def test_campaign_session(source, gemini, history, engine_for, strategy_prompt):
    engine = engine_for(gemini)

    result = await engine.generate(session(source, GenerationType.CAMPAIGN, strategy_prompt))

    assert result.succeeded
    assert [type(r) for r in result.results] == [Photo, Photo, Photo, Text, Text, Text]
    assert sorted(c.aspect_ratio for c in gemini.calls if c.method == "image") == ["16:9", "1:1", "3:4"]
    assert result.results[3] == Text(title="Instagram", content="Meet your new favourite mug.")
    # captions come from the strategy, nothing is generated for them
    assert gemini.count("text") == 0
    assert history.entries[0].generation_type == GenerationType.CAMPAIGN


@pytest.mark.asyncio
async def test_magic_edit_is_single_call_without_qa(source, gemini, engine_for):
    engine = engine_for(gemini)

    result = await engine.generate(
        session(source, GenerationType.MAGIC_EDIT, "Change the background to a marble countertop.")
    )

    assert result.succeeded
    assert gemini.count("image") == 1
    assert gemini.count("json") == 0
    [call] = gemini.calls
    assert "Change the background to a marble countertop." in call.prompt


@pytest.mark.asyncio
async def test_magic_edit_failure_is_not_retried(source, engine_for):
    gemini = FakeGemini(image=lambda p, i, a: GenerationError("API returned text instead of an image."))
    engine = engine_for(gemini)

    result = await engine.generate(session(source, GenerationType.MAGIC_EDIT, "Remove the shadow."))

    assert result.results == [Failure(reason="API returned text instead of an image.", kind="photo")]
    assert gemini.count("image") == 1


@pytest.mark.asyncio
async def test_video_session_writes_clip(source, gemini, history, engine_for, tmp_path):
    engine = engine_for(gemini)

    result = await engine.generate(
        session(source, GenerationType.VIDEO, "Slow orbit around the mug.", aspect_ratio="1:1")
    )

    assert result.succeeded
    [video] = result.results
    assert isinstance(video, Video)
    path = Path(video.uri)
    assert path.parent == tmp_path / "out"
    assert path.read_bytes() == b"fake-mp4-bytes"

    [frame_call] = [c for c in gemini.calls if c.method == "image"]
    assert frame_call.aspect_ratio == "9:16"
    assert "Slow orbit around the mug." in frame_call.prompt
    [video_call] = [c for c in gemini.calls if c.method == "video"]
    assert video_call.aspect_ratio == "9:16"
    assert video_call.prompt == "Slow orbit around the mug."
    assert history.entries[0].preview == ""


@pytest.mark.asyncio
async def test_video_frame_failure_skips_video(source, engine_for):
    gemini = FakeGemini(json=lambda p, i, s: {"isValid": False, "reason": "Product is cut off."})
    engine = engine_for(gemini)

    result = await engine.generate(session(source, GenerationType.VIDEO, "Slow orbit."))

    [failure] = result.results
    assert isinstance(failure, Failure)
    assert failure.kind == "video"
    assert failure.reason.startswith("Failed to generate video frame.")
    assert "Product is cut off." in failure.reason
    assert gemini.count("image") == 2
    assert gemini.count("video") == 0


@pytest.mark.asyncio
async def test_progress_messages(source, gemini, history, tmp_path, photo_prompt):
    messages = []
    engine = StudioEngine(gemini, history, max_attempts=2, output_dir=tmp_path, progress=messages.append)

    await engine.generate(session(source, prompt=photo_prompt))

    assert messages == ["Generating 1 photo(s)...", "Verifying photo quality (Attempt 1)..."]


@pytest.mark.asyncio
async def test_suggest_photo_concept(source, engine_for):
    concept = {"scene_description": "marble counter", "lighting": "window light", "mood": "calm", "props": "linen"}
    gemini = FakeGemini(json=lambda p, i, s: concept)
    engine = engine_for(gemini)

    suggestion = await engine.suggest_prompt(source, GenerationType.PHOTO, "ceramic mug")

    assert json.loads(suggestion) == concept
    assert "ceramic mug" in gemini.calls[0].prompt


@pytest.mark.asyncio
async def test_suggest_campaign_strategy(source, engine_for, strategy_prompt):
    gemini = FakeGemini(json=lambda p, i, s: json.loads(strategy_prompt))
    engine = engine_for(gemini)

    suggestion = await engine.suggest_prompt(source, GenerationType.CAMPAIGN)

    assert json.loads(suggestion) == json.loads(strategy_prompt)


@pytest.mark.asyncio
async def test_suggest_errors(source, engine_for):
    gemini = FakeGemini(json=lambda p, i, s: GenerationError("Empty response"))
    engine = engine_for(gemini)

    with pytest.raises(InputError):
        await engine.suggest_prompt(None, GenerationType.PHOTO)
    with pytest.raises(InputError):
        await engine.suggest_prompt(source, GenerationType.MAGIC_EDIT)
    with pytest.raises(PromptAssistError, match="Empty response"):
        await engine.suggest_prompt(source, GenerationType.SOCIAL_POST)
