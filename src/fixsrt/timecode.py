"""Conversion between SRT timestamps and signed millisecond counts."""

from __future__ import annotations

import re
from typing import Optional

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1

# More significant digits than this never fit in 32 bits, whatever the field.
_MAX_DIGITS = 10

_FIELD_PATTERN = re.compile(r"^(?P<sign>[+-]?)(?P<digits>[0-9]+)$")
_SECONDS_PATTERN = re.compile(
    r"^(?P<sign>[+-]?)(?P<digits>[0-9]+)(?:[.,](?P<fraction>[0-9]*))?$"
)


def _to_int(digits: str) -> Optional[int]:
    digits = digits.lstrip("0") or "0"
    if len(digits) > _MAX_DIGITS:
        return None
    return int(digits)


def parse_time(value: str | None) -> Optional[int]:
    """Parse a timestamp such as ``00:01:02,789`` into milliseconds.

    The hour and minute groups are optional (``"1:14,28"`` is one minute and
    14.28 seconds, ``"1.247"`` is just seconds). The fraction holds one to
    three digits and is right padded to milliseconds.

    A minus sign at the start of the value or at the start of any single field
    makes the whole value negative. Some real-world files carry a stray ``-``
    inside a group and are still read that way.

    Returns ``None`` when the value cannot be parsed or does not fit in a
    signed 32-bit integer.
    """

    if value is None:
        return None

    value = value.strip()
    if not value:
        return None

    fields = value.split(":")
    if len(fields) > 3:
        return None

    negative = False
    numbers: list[int] = []
    for field in fields[:-1]:
        match = _FIELD_PATTERN.match(field)
        if not match:
            return None
        if match.group("sign") == "-":
            negative = True
        number = _to_int(match.group("digits"))
        if number is None:
            return None
        numbers.append(number)

    match = _SECONDS_PATTERN.match(fields[-1])
    if not match:
        return None
    if match.group("sign") == "-":
        negative = True
    seconds = _to_int(match.group("digits"))
    if seconds is None:
        return None

    fraction = match.group("fraction")
    milliseconds = 0
    if fraction is not None:
        if not 1 <= len(fraction) <= 3:
            return None
        milliseconds = int(fraction.ljust(3, "0"))

    # Left-pad so the list always reads hours, minutes.
    hours, minutes = ([0, 0] + numbers)[-2:]
    total = ((hours * 60 + minutes) * 60 + seconds) * 1000 + milliseconds
    if negative:
        total = -total

    if not INT32_MIN <= total <= INT32_MAX:
        return None
    return total


def format_time(milliseconds: int) -> str:
    """Render ``milliseconds`` as ``HH:MM:SS,mmm`` with a leading ``-`` if negative."""

    sign = "-" if milliseconds < 0 else ""
    magnitude = abs(milliseconds)
    seconds, millis = divmod(magnitude, 1000)
    minutes, seconds = divmod(seconds, 60)
    hours, minutes = divmod(minutes, 60)
    return f"{sign}{hours:02d}:{minutes:02d}:{seconds:02d},{millis:03d}"
