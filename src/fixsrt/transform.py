"""Bulk operations applied to a parsed subtitle collection."""

from __future__ import annotations

import logging
from typing import Iterable, List, Sequence

from .models import Rule, SrtEntry
from .rewriter import replace_one

__all__ = [
    "CollectionTooLargeError",
    "apply_text_rules",
    "apply_time_shift_stretch",
    "should_exclude_last",
]

logger = logging.getLogger(__name__)

MAX_ENTRIES = 2**31 - 1
MAX_TRAILING_GAP_MS = 5 * 60 * 60 * 1000


class CollectionTooLargeError(ValueError):
    """Raised when a collection holds more entries than can be timed."""


def apply_text_rules(entries: Iterable[SrtEntry], rules: Sequence[Rule]) -> int:
    """Rewrite every text line of ``entries`` in place.

    Returns the number of lines that changed.
    """

    changed = 0
    for entry in entries:
        new_lines: List[str] = []
        for line in entry.lines:
            fixed = replace_one(line, rules)
            if fixed != line:
                changed += 1
                logger.debug("Subtitle %d: %r -> %r", entry.index, line, fixed)
            new_lines.append(fixed)
        entry.lines = new_lines
    return changed


def should_exclude_last(entries: Sequence[SrtEntry]) -> bool:
    """Return ``True`` when the last entry should not drive the stretch ratio.

    A trailing cue that goes back in time, or that starts more than five hours
    after the previous one, is most likely garbage.
    """

    if not entries:
        return False
    if len(entries) == 1:
        return entries[0].start <= 0

    last = entries[-1].start
    previous = entries[-2].start
    return last < previous or last - previous > MAX_TRAILING_GAP_MS


def apply_time_shift_stretch(entries: List[SrtEntry], shift_ms: int, stretch_ms: int) -> None:
    """Shift every entry by ``shift_ms`` and spread ``stretch_ms`` linearly.

    The entry at position ``i`` of ``N`` eligible entries receives an extra
    ``floor(i * stretch_ms / (N - 1))``, so the first one is unchanged and the
    last eligible one moves by the full ``stretch_ms``.

    Raises:
        CollectionTooLargeError: If there are more entries than a signed
            32-bit count can hold. Nothing is modified in that case.
    """

    if shift_ms == 0 and stretch_ms == 0:
        return

    count = len(entries)
    if count > MAX_ENTRIES:
        raise CollectionTooLargeError(f"Too many subtitles to shift or stretch: {count}")

    eligible = 0
    if stretch_ms != 0:
        eligible = count - 1 if should_exclude_last(entries) else count
        if eligible < 2:
            logger.info("Not enough subtitles to stretch, only shifting")
            eligible = 0

    for position, entry in enumerate(entries):
        offset = shift_ms
        if position < eligible:
            offset += (position * stretch_ms) // (eligible - 1)
        entry.start += offset
        entry.end += offset
