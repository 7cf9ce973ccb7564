"""Command line interface for the fixsrt toolkit."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import List, Optional

import typer

from .fixer import fix_file
from .logger import setup_logging
from .models import FixOptions
from .rewriter import RuleError
from .rules import RuleSet, load_rule_file, load_rule_set
from .srt import SrtParseError

app = typer.Typer(help="Fix spelling, accents, encoding and timing of SRT subtitles")


class Language(str, Enum):
    FR = "FR"
    EN = "EN"


def _load_rules(options: FixOptions) -> RuleSet:
    if options.rules_path is not None:
        return load_rule_file(options.rules_path)
    return load_rule_set(options.language)


@app.command()
def fix(
    files: List[Path] = typer.Argument(..., dir_okay=False, help="SRT files to correct in place"),
    no_backup: bool = typer.Option(False, "--no-backup", help="Do not keep a copy of the original as <file>~"),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", dir_okay=False, help="Write the result here (single input only)"
    ),
    shift: int = typer.Option(0, "--shift", help="Milliseconds added to every subtitle"),
    stretch: int = typer.Option(0, "--stretch", help="Milliseconds spread linearly up to the last subtitle"),
    lang: Language = typer.Option(Language.FR, "--lang", case_sensitive=False, help="Rule set to apply"),
    rules: Optional[Path] = typer.Option(
        None, "--rules", exists=True, dir_okay=False, readable=True, help="Custom JSON rule table"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every correction"),
) -> None:
    """Correct one or more subtitle files."""
    setup_logging(verbose)

    if output is not None and len(files) > 1:
        raise typer.BadParameter("--output can only be used with a single input file", param_hint="--output")

    options = FixOptions(
        language=lang.value,
        shift_ms=shift,
        stretch_ms=stretch,
        backup=not no_backup,
        output=output,
        rules_path=rules,
    )

    try:
        rule_set = _load_rules(options)
    except RuleError as exc:
        typer.secho(str(exc), fg=typer.colors.RED)
        raise typer.Exit(code=1) from exc

    failures = 0
    for path in files:
        try:
            report = fix_file(path, options, rule_set)
        except SrtParseError as exc:
            failures += 1
            typer.secho(f"{path}: {exc}", fg=typer.colors.RED)
            continue
        except OSError as exc:
            failures += 1
            typer.secho(f"{path}: cannot write result: {exc}", fg=typer.colors.RED)
            continue

        for warning in report.warnings:
            typer.secho(f"{path}: {warning}", fg=typer.colors.YELLOW)
        typer.secho(
            f"{report.entry_count} subtitles, {report.changed_lines} lines corrected -> {report.target}",
            fg=typer.colors.GREEN,
        )

    if failures:
        typer.secho(f"{failures} of {len(files)} files failed", fg=typer.colors.RED)
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
