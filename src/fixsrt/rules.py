"""Loading of the rewrite rule tables.

The built-in tables live as JSON next to this module (``data/<lang>.json``).
A table is either a list of ``[pattern, replacement]`` pairs or an object
holding such a list under ``"rules"``.
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any, Tuple

from .models import Rule
from .rewriter import RuleError, compile_rule

__all__ = ["AVAILABLE_LANGUAGES", "RuleSet", "compile_rules", "load_rule_file", "load_rule_set"]

logger = logging.getLogger(__name__)

AVAILABLE_LANGUAGES = ("FR", "EN")

RuleSet = Tuple[Rule, ...]


def compile_rules(raw: Any, source: str = "<rules>") -> RuleSet:
    """Compile a decoded JSON rule table into an immutable rule set."""

    if isinstance(raw, dict):
        raw = raw.get("rules")
    if not isinstance(raw, list):
        raise RuleError(f"{source}: expected a list of [pattern, replacement] pairs")

    compiled: list[Rule] = []
    for position, entry in enumerate(raw, start=1):
        if (
            not isinstance(entry, (list, tuple))
            or len(entry) != 2
            or not all(isinstance(part, str) for part in entry)
        ):
            raise RuleError(f"{source}: rule #{position} is not a [pattern, replacement] pair: {entry!r}")
        try:
            compiled.append(compile_rule(entry[0], entry[1]))
        except RuleError as exc:
            raise RuleError(f"{source}: rule #{position}: {exc}") from exc
    return tuple(compiled)


def load_rule_file(path: str | Path) -> RuleSet:
    """Load a user supplied JSON rule table."""

    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8-sig") as fh:
            raw = json.load(fh)
    except OSError as exc:
        raise RuleError(f"Cannot read rule file {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise RuleError(f"Invalid JSON in rule file {path}: {exc}") from exc

    rules = compile_rules(raw, source=str(path))
    logger.debug("Loaded %d rules from %s", len(rules), path)
    return rules


def load_rule_set(language: str) -> RuleSet:
    """Return the built-in rule set for ``language`` (``FR`` or ``EN``)."""

    normalized = (language or "").strip().upper()
    if normalized not in AVAILABLE_LANGUAGES:
        choices = ", ".join(AVAILABLE_LANGUAGES)
        raise RuleError(f"Unknown language {language!r} (expected one of {choices})")
    return _load_builtin(normalized)


@lru_cache(maxsize=None)
def _load_builtin(language: str) -> RuleSet:
    resource = resources.files(__package__) / "data" / f"{language.lower()}.json"
    raw = json.loads(resource.read_text(encoding="utf-8"))
    rules = compile_rules(raw, source=f"{language} rules")
    logger.debug("Loaded %d built-in %s rules", len(rules), language)
    return rules
