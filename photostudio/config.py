import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# API Keys and Config - loaded from .env
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY")

# Models
DEFAULT_MODEL = os.getenv("PHOTOSTUDIO_DEFAULT_MODEL", "gemini-2.5-flash-image")
TEXT_MODEL = os.getenv("PHOTOSTUDIO_TEXT_MODEL", "gemini-2.5-pro")
IMAGE_MODEL = os.getenv("PHOTOSTUDIO_IMAGE_MODEL", "gemini-2.5-flash-image")
VIDEO_MODEL = os.getenv("PHOTOSTUDIO_VIDEO_MODEL", "veo-3.1-fast-generate-preview")

# Generate + validate round trips per artifact
MAX_RETRIES = int(os.getenv("PHOTOSTUDIO_MAX_RETRIES", "2"))

# A broken QA call lets the artifact through when True
VALIDATOR_FAIL_OPEN = _env_bool("PHOTOSTUDIO_VALIDATOR_FAIL_OPEN", True)

# Local persistence
HISTORY_PATH = Path(
    os.getenv("PHOTOSTUDIO_HISTORY_PATH", str(Path.home() / ".photostudio" / "history.json"))
)
HISTORY_KEY = "generationHistory"
OUTPUT_DIR = Path(os.getenv("PHOTOSTUDIO_OUTPUT_DIR", "outputs"))

# Video operation polling (seconds)
VIDEO_POLL_INTERVAL = float(os.getenv("PHOTOSTUDIO_VIDEO_POLL_INTERVAL", "10"))
