from __future__ import annotations

import pytest

from fixsrt.encoding import SubtitleEncodingError, decode_subtitle_bytes, decode_windows_1252


def test_decode_windows_1252_maps_control_range() -> None:
    raw = bytes([0x64, 0xE9, 0x6A, 0xE0, 0x20, 0x62, 0x9C, 0x75, 0x66, 0x20, 0x33, 0x80])
    assert decode_windows_1252(raw) == "déjà bœuf 3€"


def test_decode_windows_1252_quotes_and_undefined_slots() -> None:
    assert decode_windows_1252(b"\x93hi\x94") == "“hi”"
    assert decode_windows_1252(b"\x81\x8d\x8f\x90\x9d") == "\x81\x8d\x8f\x90\x9d"


def test_utf8_without_bom() -> None:
    assert decode_subtitle_bytes("déjà".encode("utf-8")) == "déjà"


def test_bom_is_stripped() -> None:
    assert decode_subtitle_bytes(b"\xef\xbb\xbfabc") == "abc"


def test_invalid_utf8_falls_back_to_windows_1252() -> None:
    assert decode_subtitle_bytes(b"caf\xe9") == "café"


def test_invalid_utf8_after_bom_is_an_error() -> None:
    with pytest.raises(SubtitleEncodingError):
        decode_subtitle_bytes(b"\xef\xbb\xbfcaf\xe9")
