"""
Identifier generation for events and friends.
"""

import uuid
from typing import Callable, Container, Optional


def new_id(prefix: str, now_ms: int, taken: Container[str] = (), token: Optional[Callable[[], str]] = None) -> str:
    """
    Generate an opaque id of the form "<prefix>_<epoch-ms>_<7 hex chars>".

    Regenerates while the candidate collides with an id in `taken`.

    Args:
        prefix: "event" or "friend"
        now_ms: Creation time in epoch milliseconds
        taken: Ids that must not be reused
        token: Random suffix source (injectable for tests)

    Example:
        new_id("event", 1700000000000) -> "event_1700000000000_3f9a1c2"
    """
    token = token or (lambda: uuid.uuid4().hex[:7])
    while True:
        candidate = f"{prefix}_{now_ms}_{token()}"
        if candidate not in taken:
            return candidate
