"""In-process event counters for the block transformation pipeline.

Usage:
    from gutensync.engine.metrics import log_event

    log_event("embed_failed", url=url, reason="timeout")

Counters never influence control flow; they exist so a sync run can report
how many blocks were skipped or how many media imports failed.
"""

from collections import Counter
from typing import Any

from loguru import logger

_counts: Counter[str] = Counter()


def log_event(event_type: str, **data: Any) -> None:
    """Count an event and emit it as a structured debug log line."""
    _counts[event_type] += 1
    logger.bind(event_type=event_type, **data).debug(f"{event_type} {data}")


def get_counts() -> dict[str, int]:
    """Snapshot of all counters since the last reset."""
    return dict(_counts)


def reset() -> None:
    _counts.clear()
