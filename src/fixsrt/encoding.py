"""Decoding of raw subtitle bytes into text."""

from __future__ import annotations

BOM = b"\xef\xbb\xbf"

# Windows-1252 code points for bytes 0x80 to 0x9F. Slots left undefined by the
# code page keep their C1 control code point.
_W1252_80_9F = (
    "\u20ac", "\u0081", "\u201a", "\u0192",
    "\u201e", "\u2026", "\u2020", "\u2021",
    "\u02c6", "\u2030", "\u0160", "\u2039",
    "\u0152", "\u008d", "\u017d", "\u008f",
    "\u0090", "\u2018", "\u2019", "\u201c",
    "\u201d", "\u2022", "\u2013", "\u2014",
    "\u02dc", "\u2122", "\u0161", "\u203a",
    "\u0153", "\u009d", "\u017e", "\u0178",
)
_W1252_TABLE = {0x80 + offset: char for offset, char in enumerate(_W1252_80_9F)}


class SubtitleEncodingError(ValueError):
    """Raised when subtitle bytes cannot be turned into text."""


def decode_windows_1252(raw: bytes) -> str:
    """Decode ``raw`` as Windows-1252. Every byte maps to a character."""

    return raw.decode("latin-1").translate(_W1252_TABLE)


def decode_subtitle_bytes(raw: bytes) -> str:
    """Detect the encoding of ``raw`` and return the decoded text.

    A UTF-8 byte-order mark forces strict UTF-8. Without it UTF-8 is tried
    first and Windows-1252 is the fallback.
    """

    if raw.startswith(BOM):
        try:
            return raw[len(BOM):].decode("utf-8")
        except UnicodeDecodeError as exc:
            raise SubtitleEncodingError(f"Invalid UTF-8: {exc}") from exc

    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        return decode_windows_1252(raw)
