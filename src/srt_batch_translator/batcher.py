"""Greedy size-bounded batching of subtitle entries."""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Sequence

from .models import Batch, SrtEntry

logger = logging.getLogger(__name__)

DEFAULT_MAX_BATCH_CHARS = 2000

# 序列化时的换行、分隔等开销
ENTRY_OVERHEAD = 10


def estimate_entry_size(entry: SrtEntry) -> int:
    """Approximate serialized size of an entry in characters."""
    return (
        len(entry.text)
        + len(entry.sequence_label)
        + len(entry.timing)
        + ENTRY_OVERHEAD
    )


def resolve_batch_size(value: Any) -> int:
    """
    Turn a user-supplied batch size into a positive integer.

    Absent, unparseable and non-positive values fall back to
    DEFAULT_MAX_BATCH_CHARS.
    """
    if value is None or isinstance(value, bool):
        return DEFAULT_MAX_BATCH_CHARS
    try:
        if isinstance(value, float):
            size = int(value)
        else:
            size = int(str(value).strip())
    except (TypeError, ValueError, OverflowError):
        logger.debug(f"Invalid batch size {value!r}, using {DEFAULT_MAX_BATCH_CHARS}")
        return DEFAULT_MAX_BATCH_CHARS
    if size <= 0:
        logger.debug(f"Non-positive batch size {size}, using {DEFAULT_MAX_BATCH_CHARS}")
        return DEFAULT_MAX_BATCH_CHARS
    return size


def make_batches(
    entries: Sequence[SrtEntry],
    max_batch_chars: Optional[int] = None,
) -> List[Batch]:
    """
    Split entries into contiguous batches bounded by an estimated size.

    The budget is advisory: an entry is never split, so a single entry
    larger than the budget forms a batch on its own.

    Args:
        entries: Ordered subtitle entries
        max_batch_chars: Approximate characters per batch

    Returns:
        List of non-empty batches; concatenated they equal ``entries``
    """
    budget = resolve_batch_size(max_batch_chars)

    batches: List[Batch] = []
    current: Batch = []
    current_size = 0

    for entry in entries:
        size = estimate_entry_size(entry)

        if current_size + size > budget and current:
            batches.append(current)
            current = []
            current_size = 0

        current.append(entry)
        current_size += size

    if current:
        batches.append(current)

    logger.debug(f"Split {len(entries)} entries into {len(batches)} batches (budget {budget})")
    return batches
