"""Time utilities."""
import time
from datetime import datetime, timezone


def epoch_ms() -> int:
    """Current time as integer milliseconds since the epoch."""
    return time.time_ns() // 1_000_000


def epoch_ms_to_iso(value: int) -> str:
    """Format epoch milliseconds as an ISO UTC timestamp."""
    return datetime.fromtimestamp(value / 1000, tz=timezone.utc).isoformat()
