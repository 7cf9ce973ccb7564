"""Context-aware literal text replacement driven by ordered rules.

A rule pattern may carry a boundary marker as its first and/or last
character:

``*``
    anything may precede/follow the match
``+``
    only a letter may precede/follow the match
``#``
    only a digit may precede/follow the match
(no marker)
    only a separator may precede/follow the match

Separators are space, non-breaking space, ``.``, ``,``, ``"`` and ``-``. Every
other character counts as a letter.
"""

from __future__ import annotations

from typing import Iterable, Optional

from .models import Boundary, Rule

__all__ = ["RuleError", "SEPARATORS", "apply_rule", "compile_rule", "replace_one"]

SEPARATORS = frozenset(" \u00a0.,\"-")

_MARKERS = {marker.value: marker for marker in Boundary if marker.value}


class RuleError(ValueError):
    """Raised when a rule or a rule table cannot be used."""


def is_separator(char: str) -> bool:
    return char in SEPARATORS


def is_letter(char: str) -> bool:
    return char not in SEPARATORS


def is_digit(char: str) -> bool:
    return "0" <= char <= "9"


def compile_rule(pattern: str, replacement: str) -> Rule:
    """Strip the boundary markers of ``pattern`` and return a :class:`Rule`."""

    core = pattern
    follow = Boundary.SEPARATOR
    precede = Boundary.SEPARATOR
    if core and core[-1] in _MARKERS:
        follow = _MARKERS[core[-1]]
        core = core[:-1]
    if core and core[0] in _MARKERS:
        precede = _MARKERS[core[0]]
        core = core[1:]
    if not core:
        raise RuleError(f"Rule pattern {pattern!r} has nothing to search for")
    return Rule(pattern=pattern, core=core, replacement=replacement, precede=precede, follow=follow)


def _precede_ok(char: Optional[str], boundary: Boundary) -> bool:
    if char is None:
        return True
    if boundary is Boundary.ANY:
        return True
    if boundary is Boundary.LETTER:
        return is_letter(char)
    if boundary is Boundary.DIGIT:
        return is_digit(char)
    # An apostrophe counts as a separator here so that "l'Etat" still matches.
    return is_separator(char) or char == "'"


def _follow_ok(char: Optional[str], boundary: Boundary) -> bool:
    if char is None:
        return True
    if boundary is Boundary.ANY:
        return True
    if boundary is Boundary.LETTER:
        return is_letter(char)
    if boundary is Boundary.DIGIT:
        return is_digit(char)
    return is_separator(char)


def apply_rule(line: str, rule: Rule | str, replacement: str | None = None) -> str:
    """Apply a single rule to ``line``.

    ``rule`` is either a compiled :class:`Rule` or a raw pattern string, in
    which case ``replacement`` must be given as well.
    """

    if not isinstance(rule, Rule):
        if replacement is None:
            raise TypeError("apply_rule() needs a replacement for a raw pattern")
        rule = compile_rule(rule, replacement)

    core = rule.core
    parts: list[str] = []
    start_at = 0
    while True:
        index = line.find(core, start_at)
        if index < 0:
            parts.append(line[start_at:])
            break

        end = index + len(core)
        prev_char = line[index - 1] if index > 0 else None
        next_char = line[end] if end < len(line) else None

        parts.append(line[start_at:index])
        start_at = end
        end_reached = start_at >= len(line)

        if _precede_ok(prev_char, rule.precede) and _follow_ok(next_char, rule.follow):
            with_text = rule.replacement
            if end_reached and with_text.endswith(" "):
                with_text = with_text[:-1]
            parts.append(with_text)
        else:
            parts.append(core)

        if end_reached:
            break
    return "".join(parts)


def replace_one(line: str, rules: Iterable[Rule]) -> str:
    """Run every rule of ``rules`` over ``line`` in order."""

    for rule in rules:
        line = apply_rule(line, rule)
    return line
