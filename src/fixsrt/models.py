"""Data models shared by the parser, the rewriter and the command line."""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional

MAX_TEXT_LINES = 5


@dataclass(slots=True)
class SrtEntry:
    """Represents a single SRT subtitle block.

    ``start`` and ``end`` are signed milliseconds. ``index`` is kept exactly as
    written in the source file.
    """
    index: int
    start: int
    end: int
    lines: List[str] = field(default_factory=list)


class Boundary(Enum):
    """What may sit right before or right after a rule match."""
    SEPARATOR = ""
    ANY = "*"
    LETTER = "+"
    DIGIT = "#"


@dataclass(slots=True, frozen=True)
class Rule:
    """A rewrite rule with its boundary markers already parsed."""
    pattern: str
    core: str
    replacement: str
    precede: Boundary = Boundary.SEPARATOR
    follow: Boundary = Boundary.SEPARATOR


@dataclass(slots=True)
class FixOptions:
    """Settings applied to every processed file."""
    language: str = "FR"
    shift_ms: int = 0
    stretch_ms: int = 0
    backup: bool = True
    output: Optional[Path] = None
    rules_path: Optional[Path] = None
