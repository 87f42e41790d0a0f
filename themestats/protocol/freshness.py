"""Request timestamp freshness window."""
import time
from typing import Optional, Union

TIMESTAMP_TOLERANCE_MS = 5 * 60 * 1000


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def is_fresh(timestamp: Union[int, float], now: Optional[Union[int, float]] = None) -> bool:
    """Return True when ``timestamp`` (epoch ms) is within five minutes of now.

    The window is symmetric to tolerate client clock skew in either
    direction, and the boundary is inclusive. It bounds replay age only;
    duplicates inside the window are absorbed by idempotent mutations.
    """
    if now is None:
        now = now_ms()
    return abs(now - timestamp) <= TIMESTAMP_TOLERANCE_MS
