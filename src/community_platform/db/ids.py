"""Monotonic, sortable identifier generator."""

from __future__ import annotations

import secrets
import threading
import time

_ID_LOCK = threading.Lock()
_LAST_ID = 0
_RANDOM_BITS = 80


def new_id() -> str:
    """Return a 32-character hex identifier ordered by creation time.

    The high 48 bits are the millisecond clock and the low 80 bits are random.
    Within one process the value is strictly increasing even when the clock
    stalls or steps backwards, so lexicographic order of ids matches issue order.
    """
    global _LAST_ID
    with _ID_LOCK:
        millis = time.time_ns() // 1_000_000
        candidate = (millis << _RANDOM_BITS) | secrets.randbits(_RANDOM_BITS)
        if candidate <= _LAST_ID:
            candidate = _LAST_ID + 1
        _LAST_ID = candidate
        return f"{candidate:032x}"
