"""SRT (SubRip) subtitle parser tolerant of common real-world defects.

The parser is a small state machine driven one line at a time by
:func:`step`. Each record is expected as::

    index
    start --> end
    text (0 to 5 lines)
    <blank line>

Blank lines before an index are skipped, lines holding only whitespace count
as blank, and a blank line right after the time range does not end the record
unless the next non-blank line looks like the following index.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable, List, Optional

from .encoding import SubtitleEncodingError, decode_subtitle_bytes
from .models import MAX_TEXT_LINES, SrtEntry
from .timecode import parse_time

__all__ = ["SrtParseError", "State", "Transition", "load_srt", "parse_srt_text", "step"]

logger = logging.getLogger(__name__)

_UINT32_MAX = 2**32 - 1
_UINT32_DIGITS = len(str(_UINT32_MAX))


class SrtParseError(RuntimeError):
    """Raised when an SRT file cannot be parsed."""

    def __init__(self, message: str, line_number: Optional[int] = None) -> None:
        super().__init__(message)
        self.line_number = line_number


class State(Enum):
    WANTS_INDEX = "wants_index"
    WANTS_TIME_RANGE = "wants_time_range"
    WANTS_FIRST_TEXT = "wants_first_text"
    WANTS_FIRST_TEXT_RETRY = "wants_first_text_retry"
    WANTS_MORE_TEXT = "wants_more_text"


@dataclass(slots=True, frozen=True)
class Transition:
    """Outcome of feeding one line to the parser.

    ``pending`` is the record being built, ``flushed`` the record this line
    completed (if any).
    """

    state: State
    pending: Optional[SrtEntry]
    flushed: Optional[SrtEntry] = None


def _parse_index(line: str) -> Optional[int]:
    """Read an unsigned 32-bit index, optionally written with a leading ``+``."""
    digits = line[1:] if line.startswith("+") else line
    if not (digits.isascii() and digits.isdigit()):
        return None
    digits = digits.lstrip("0") or "0"
    if len(digits) > _UINT32_DIGITS:
        return None
    value = int(digits)
    if value > _UINT32_MAX:
        return None
    return value


def _with_text(entry: SrtEntry, line: str) -> SrtEntry:
    return dataclasses.replace(entry, lines=[*entry.lines, line])


def step(state: State, pending: Optional[SrtEntry], line: str, line_number: int) -> Transition:
    """Feed a single line to the parser and return the resulting transition.

    ``line`` is classified after trailing whitespace is removed. ``pending`` is
    never modified in place.

    Raises:
        SrtParseError: If the line does not fit the current state.
        ValueError: If ``pending`` is missing in a state that needs a record.
    """

    line = line.rstrip()

    if state is State.WANTS_INDEX:
        if not line:
            return Transition(state, pending)
        index = _parse_index(line)
        if index is None:
            raise SrtParseError(f"Bad number at line {line_number}: {line!r}", line_number)
        return Transition(State.WANTS_TIME_RANGE, SrtEntry(index=index, start=0, end=0))

    if pending is None:
        raise ValueError(f"State {state.name} needs a pending subtitle (line {line_number})")

    if state is State.WANTS_TIME_RANGE:
        if "-->" not in line:
            raise SrtParseError(
                f"Missing '-->' in time range at line {line_number}: {line!r}", line_number
            )
        start_text, end_text = (part.strip() for part in line.split("-->", 1))
        start = parse_time(start_text)
        if start is None:
            raise SrtParseError(f"Bad start time at line {line_number}: {start_text!r}", line_number)
        end = parse_time(end_text)
        if end is None:
            raise SrtParseError(f"Bad end time at line {line_number}: {end_text!r}", line_number)
        return Transition(State.WANTS_FIRST_TEXT, dataclasses.replace(pending, start=start, end=end))

    if state is State.WANTS_FIRST_TEXT:
        if not line:
            return Transition(State.WANTS_FIRST_TEXT_RETRY, pending)
        return Transition(State.WANTS_MORE_TEXT, _with_text(pending, line))

    if state is State.WANTS_FIRST_TEXT_RETRY:
        if not line:
            return Transition(state, pending)
        # Either the cue really is empty and this is the next index, or the
        # text arrived after a spurious blank line.
        index = _parse_index(line)
        if index is not None and index == pending.index + 1:
            logger.debug("Empty subtitle %d closed at line %d", pending.index, line_number)
            return Transition(
                State.WANTS_TIME_RANGE,
                SrtEntry(index=index, start=0, end=0),
                flushed=pending,
            )
        return Transition(State.WANTS_MORE_TEXT, _with_text(pending, line))

    if not line:
        return Transition(State.WANTS_INDEX, None, flushed=pending)
    if len(pending.lines) >= MAX_TEXT_LINES:
        raise SrtParseError(
            f"Too much text at line {line_number} for subtitle {pending.index}", line_number
        )
    return Transition(State.WANTS_MORE_TEXT, _with_text(pending, line))


def _split_lines(text: str) -> List[str]:
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def parse_lines(lines: Iterable[str]) -> List[SrtEntry]:
    """Run the state machine over ``lines`` and return the parsed entries."""

    entries: list[SrtEntry] = []
    state = State.WANTS_INDEX
    pending: Optional[SrtEntry] = None
    for line_number, line in enumerate(lines, start=1):
        transition = step(state, pending, line, line_number)
        if transition.flushed is not None:
            entries.append(transition.flushed)
        state, pending = transition.state, transition.pending

    # The last record may not be followed by a blank line.
    if pending is not None and pending.lines:
        entries.append(pending)
    return entries


def parse_srt_text(text: str) -> List[SrtEntry]:
    """Parse the full text of an SRT file."""

    return parse_lines(_split_lines(text))


def load_srt(path: str | Path) -> List[SrtEntry]:
    """Read, decode and parse an SRT file."""

    path = Path(path)
    try:
        raw = path.read_bytes()
    except FileNotFoundError as exc:
        raise SrtParseError(f"SRT file not found: {path}") from exc
    except OSError as exc:
        raise SrtParseError(f"Cannot open file {path}: {exc}") from exc

    try:
        text = decode_subtitle_bytes(raw)
    except SubtitleEncodingError as exc:
        raise SrtParseError(f"{path}: {exc}") from exc

    entries = parse_srt_text(text)
    logger.debug("Parsed %d subtitles from %s", len(entries), path)
    return entries
