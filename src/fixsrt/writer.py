"""Rendering subtitles back to SRT and writing them safely to disk."""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path
from types import TracebackType
from typing import BinaryIO, Iterable, Optional, Type

from .encoding import BOM
from .models import SrtEntry
from .timecode import format_time

__all__ = ["WorkFile", "backup_file", "encode_srt", "format_entry", "format_srt", "save_srt"]

logger = logging.getLogger(__name__)

NEWLINE = "\r\n"
WORK_SUFFIX = ".work"
BACKUP_SUFFIX = "~"


def format_entry(entry: SrtEntry) -> str:
    """Render a single entry, blank separator line included."""

    lines = [str(entry.index), f"{format_time(entry.start)} --> {format_time(entry.end)}"]
    lines.extend(entry.lines)
    lines.append("")
    return "".join(line + NEWLINE for line in lines)


def format_srt(entries: Iterable[SrtEntry]) -> str:
    return "".join(format_entry(entry) for entry in entries)


def encode_srt(entries: Iterable[SrtEntry]) -> bytes:
    return format_srt(entries).encode("utf-8")


class WorkFile:
    """Write to a sibling work file and move it over the target when done.

    Used as a context manager. Leaving the block normally renames the work
    file onto ``path``; leaving it with an exception deletes the work file and
    lets the exception propagate, so ``path`` is never half written.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self.work_path = self.path.with_name(self.path.name + WORK_SUFFIX)
        self._handle: Optional[BinaryIO] = None

    def __enter__(self) -> "WorkFile":
        self._handle = open(self.work_path, "wb")
        return self

    def write(self, data: bytes) -> int:
        if self._handle is None:
            raise ValueError(f"Work file for {self.path} is not open")
        return self._handle.write(data)

    def commit(self) -> None:
        handle, self._handle = self._handle, None
        if handle is not None:
            handle.close()
        os.replace(self.work_path, self.path)

    def rollback(self) -> None:
        handle, self._handle = self._handle, None
        if handle is not None:
            handle.close()
        try:
            self.work_path.unlink()
        except FileNotFoundError:
            pass

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        if exc_type is not None:
            self.rollback()
            return
        try:
            self.commit()
        except BaseException:
            self.rollback()
            raise


def save_srt(entries: Iterable[SrtEntry], path: str | Path) -> None:
    """Write ``entries`` to ``path`` as UTF-8 with a byte-order mark."""

    with WorkFile(path) as work_file:
        work_file.write(BOM)
        work_file.write(encode_srt(entries))
    logger.debug("Saved %s", path)


def backup_file(path: str | Path) -> Optional[Path]:
    """Copy ``path`` to ``<path>~``.

    A failed copy is only logged; the caller goes on without a backup.
    """

    path = Path(path)
    backup = path.with_name(path.name + BACKUP_SUFFIX)
    try:
        shutil.copy2(path, backup)
    except OSError as exc:
        logger.warning("Cannot create backup %s: %s", backup, exc)
        return None
    return backup
