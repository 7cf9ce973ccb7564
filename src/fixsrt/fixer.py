"""Per-file correction pipeline: load, rewrite, retime, save."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

from .models import FixOptions, Rule
from .srt import load_srt
from .transform import CollectionTooLargeError, apply_text_rules, apply_time_shift_stretch
from .writer import backup_file, save_srt

__all__ = ["FixReport", "fix_file"]

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class FixReport:
    """Summary of what happened to one file."""

    source: Path
    target: Path
    entry_count: int = 0
    changed_lines: int = 0
    backup: Optional[Path] = None
    warnings: List[str] = field(default_factory=list)


def fix_file(path: str | Path, options: FixOptions, rules: Sequence[Rule]) -> FixReport:
    """Correct a single subtitle file according to ``options``.

    Raises:
        SrtParseError: If the file cannot be read, decoded or parsed.
        OSError: If the corrected file cannot be written.
    """

    source = Path(path)
    target = Path(options.output) if options.output else source
    report = FixReport(source=source, target=target)

    entries = load_srt(source)
    report.entry_count = len(entries)
    report.changed_lines = apply_text_rules(entries, rules)

    try:
        apply_time_shift_stretch(entries, options.shift_ms, options.stretch_ms)
    except CollectionTooLargeError as exc:
        logger.warning("%s: %s", source, exc)
        report.warnings.append(str(exc))

    if options.backup and target.exists():
        report.backup = backup_file(target)
        if report.backup is None:
            report.warnings.append(f"No backup created for {target}")

    save_srt(entries, target)
    logger.info(
        "%s: %d subtitles, %d lines corrected -> %s",
        source,
        report.entry_count,
        report.changed_lines,
        target,
    )
    return report
