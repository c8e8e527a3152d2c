"""Utility helpers (datetime, id generation)."""

from visita.shared.utils.datetime import (
    MonotonicUTCClock,
    ensure_utc,
    process_clock,
    utc_now,
)
from visita.shared.utils.generators import generate_cuid, generate_time_ordered_id

__all__ = [
    "MonotonicUTCClock",
    "ensure_utc",
    "generate_cuid",
    "generate_time_ordered_id",
    "process_clock",
    "utc_now",
]
