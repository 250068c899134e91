"""Studio handler - runs a generation session from a JSON event or the command line."""

import argparse
import asyncio
import json
import logging
import sys

from ..clients.gemini import GeminiClient
from ..config import DEFAULT_MODEL, GEMINI_API_KEY, HISTORY_PATH, TEXT_MODEL
from ..engine import InputError, PromptAssistError, StudioEngine
from ..models.request import GenerationType
from ..models.session import SessionRequest, SessionResult
from ..models.styles import STYLE_PRESETS, get_preset
from ..services.encoder import read_image
from ..services.history import HistoryStore
from ..services.prompt import (
    DEFAULT_EDIT_PROMPT,
    DEFAULT_PHOTO_PROMPT,
    PromptError,
    apply_style_preset,
    build_structured_prompt,
    parse_structured_prompt,
)


def _progress(message: str):
    print(f"  {message}", flush=True)


def _default_prompt(generation_type: GenerationType) -> str:
    if generation_type in (GenerationType.MAGIC_EDIT, GenerationType.VIDEO):
        return DEFAULT_EDIT_PROMPT
    return build_structured_prompt(DEFAULT_PHOTO_PROMPT)


def _status_code(result: SessionResult) -> int:
    if result.succeeded:
        return 200
    if len(result.failures) < len(result.results):
        return 207  # Multi-Status (partial success)
    return 500


def _int_field(body: dict, name: str, default: int) -> int:
    value = body.get(name, default)
    if isinstance(value, bool):
        raise InputError(f"{name} must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InputError(f"{name} must be an integer, got {value!r}")


def _bool_field(body: dict, name: str, default: bool) -> bool:
    value = body.get(name, default)
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "1", "yes", "on"):
        return True
    if isinstance(value, str) and value.strip().lower() in ("false", "0", "no", "off"):
        return False
    if value in (0, 1):
        return bool(value)
    raise InputError(f"{name} must be true or false, got {value!r}")


def _style_keywords(body: dict) -> str | None:
    key = body.get("style_preset")
    if not key:
        return None
    try:
        return get_preset(key).keywords
    except ValueError as e:
        raise InputError(str(e))


async def run_session(body: dict, engine: StudioEngine) -> SessionResult:
    """Build a SessionRequest from an event body and run it."""
    generation_type = GenerationType(body.get("generation_type", "photo"))

    source = None
    if body.get("image_path"):
        source = await read_image(body["image_path"])
    reference = None
    if body.get("reference_image_path"):
        reference = await read_image(body["reference_image_path"])

    session = SessionRequest(
        source=source,
        generation_type=generation_type,
        prompt=body.get("prompt") or _default_prompt(generation_type),
        aspect_ratio=body.get("aspect_ratio", "1:1"),
        number_of_images=_int_field(body, "number_of_images", 1),
        model=body.get("model", DEFAULT_MODEL),
        product_hint=body.get("product_hint", ""),
        place_in_context=_bool_field(body, "place_in_context", True),
        reference=reference,
        style_keywords=_style_keywords(body),
    )
    return await engine.generate(session)


def handler(event, context, engine: StudioEngine | None = None):
    """
    Run one generation session.

    Input payload:
    {
        "image_path": "product.jpg",
        "generation_type": "photo",
        "prompt": "{\"scene_description\": \"...\", ...}",
        "aspect_ratio": "1:1",
        "number_of_images": 1,
        "model": "gemini-2.5-flash-image",
        "product_hint": "handmade ceramic mug",
        "place_in_context": true,
        "reference_image_path": null,
        "style_preset": "cinematic"
    }

    Output: 200 all artifacts ok, 207 partial, 500 all failed, 400 bad input.
    """
    try:
        body = event.get("body", event)
        if isinstance(body, str):
            body = json.loads(body or "{}")
        if not isinstance(body, dict):
            raise InputError("Request body must be a JSON object.")

        if engine is None:
            history = HistoryStore(body.get("history_path", HISTORY_PATH))
            history.load()
            engine = StudioEngine(GeminiClient(api_key=GEMINI_API_KEY), history, progress=_progress)

        result = asyncio.run(run_session(body, engine))

    except (InputError, PromptError, ValueError, OSError) as e:
        print(f"ERROR: {e}", flush=True)
        return {
            "statusCode": 400,
            "body": json.dumps({"error": str(e)}),
        }

    return {
        "statusCode": _status_code(result),
        "body": json.dumps({
            "generation_type": result.generation_type.value,
            "results": [r.to_dict() for r in result.results],
            "history_id": result.history_entry.id if result.history_entry else None,
            "errors": [f.reason for f in result.failures] or None,
        }),
    }


def _summarize(data: str, limit: int = 80) -> str:
    return data if len(data) <= limit else f"{data[:limit]}... ({len(data)} chars)"


def _print_results(results: list[dict]):
    for i, item in enumerate(results, start=1):
        label = item.get("title") or item["type"]
        if item.get("error"):
            print(f"[{i}] {label}: ERROR: {item['error']}")
        else:
            print(f"[{i}] {label}: {_summarize(item['data'])}")


def _cmd_generate(args) -> int:
    prompt = args.prompt
    if args.prompt_file:
        with open(args.prompt_file, encoding="utf-8") as f:
            prompt = f.read()

    event = {"body": json.dumps({
        "image_path": args.image,
        "generation_type": args.type,
        "prompt": prompt,
        "aspect_ratio": args.aspect_ratio,
        "number_of_images": args.count,
        "model": args.model,
        "product_hint": args.hint,
        "place_in_context": not args.no_context,
        "reference_image_path": args.reference,
        "style_preset": args.style,
        "history_path": args.history,
    })}
    result = handler(event, None)
    body = json.loads(result["body"])

    print("\n=== RESULTS ===")
    if "results" in body:
        _print_results(body["results"])
        if body.get("history_id"):
            print(f"\nSaved to history: {body['history_id']}")
    else:
        print(f"ERROR: {body['error']}")
    return 0 if result["statusCode"] == 200 else 1


def _cmd_suggest(args) -> int:
    async def suggest() -> str:
        source = await read_image(args.image)
        engine = StudioEngine(GeminiClient(api_key=GEMINI_API_KEY), HistoryStore(args.history))
        return await engine.suggest_prompt(source, GenerationType(args.type), args.hint, args.model)

    try:
        print(asyncio.run(suggest()))
    except (InputError, PromptAssistError, ValueError, OSError) as e:
        print(f"ERROR: {e}")
        return 1
    return 0


def _cmd_preset(args) -> int:
    with open(args.prompt_file, encoding="utf-8") as f:
        text = f.read()
    try:
        fields = parse_structured_prompt(text)
    except PromptError as e:
        print(f"Your prompt is not valid JSON. Please fix it before applying a style preset. ({e})")
        return 1

    fields, applicable = apply_style_preset(fields, get_preset(args.preset), args.active)
    if not applicable:
        print("Preset can't be applied to this prompt structure (no scene_description).")
        return 1
    print(build_structured_prompt(fields))
    return 0


def _cmd_history(args) -> int:
    store = HistoryStore(args.history)
    entries = store.load()

    if args.action == "clear":
        store.clear()
        print(f"Cleared {len(entries)} history entries.")
    elif args.action == "show":
        if not args.id:
            print("Usage: photostudio history show <id>")
            return 2
        entry = store.get(args.id)
        if entry is None:
            print(f"No history entry {args.id}")
            return 1
        print(f"{entry.id} | {entry.timestamp} | {entry.generation_type.value}")
        print(f"Prompt: {entry.prompt}\n")
        _print_results([r.to_dict() for r in entry.results])
    else:
        if not entries:
            print("No history yet.")
        for entry in entries:
            print(f"{entry.id} | {entry.timestamp} | {entry.generation_type.value} | {len(entry.results)} result(s)")
    return 0


def build_parser() -> argparse.ArgumentParser:
    types = [t.value for t in GenerationType]

    ap = argparse.ArgumentParser(prog="photostudio", description="Product photo studio")
    ap.add_argument("--history", default=str(HISTORY_PATH), help="History file path")
    sub = ap.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="Run a generation session")
    gen.add_argument("image", help="Product image path")
    gen.add_argument("--type", choices=types, default="photo")
    gen.add_argument("--prompt", default="")
    gen.add_argument("--prompt-file")
    gen.add_argument("--aspect-ratio", default="1:1")
    gen.add_argument("--count", type=int, default=1, help="Photos to generate (1-3)")
    gen.add_argument("--model", default=DEFAULT_MODEL)
    gen.add_argument("--hint", default="", help="Short product description")
    gen.add_argument("--reference", help="Reference image path")
    gen.add_argument("--no-context", action="store_true", help="Do not place the product in context")
    gen.add_argument("--style", choices=[p.key for p in STYLE_PRESETS], help="Style preset appended to the prompt")
    gen.set_defaults(func=_cmd_generate)

    sug = sub.add_parser("suggest", help="Suggest a structured prompt for an image")
    sug.add_argument("image")
    sug.add_argument("--type", choices=["photo", "social_post", "campaign"], default="photo")
    sug.add_argument("--hint", default="")
    sug.add_argument("--model", default=TEXT_MODEL)
    sug.set_defaults(func=_cmd_suggest)

    pre = sub.add_parser("preset", help="Toggle a style preset on a prompt file")
    pre.add_argument("prompt_file")
    pre.add_argument("preset", choices=[p.key for p in STYLE_PRESETS])
    pre.add_argument("--active", action="store_true", help="Preset is currently active (removes it)")
    pre.set_defaults(func=_cmd_preset)

    his = sub.add_parser("history", help="List, show or clear history")
    his.add_argument("action", choices=["list", "show", "clear"], nargs="?", default="list")
    his.add_argument("id", nargs="?")
    his.set_defaults(func=_cmd_history)

    return ap


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    args = build_parser().parse_args(argv)
    return args.func(args)


# Local testing
if __name__ == "__main__":
    sys.exit(main())
