import time
from datetime import datetime, timezone


def epoch_ms() -> int:
    """Current time in epoch milliseconds."""
    return int(time.time() * 1000)


def new_history_id() -> str:
    """Return a history id based on the current epoch milliseconds.

    Example: "gen_1760900000000"
    """
    return f"gen_{epoch_ms()}"


def now_iso() -> str:
    """Return the current UTC time as an ISO 8601 string."""
    return datetime.now(timezone.utc).isoformat()
