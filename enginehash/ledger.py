"""
enginehash.ledger
=================
The newest-first CSV ledger of engine snapshot hashes.

Format
------
UTF-8, one record per line, header first, trailing newline::

    channel,flutter_version,dart_sdk_version,release_date,flutter_release_commit_hash,engine_version_commit_hash,snapshot_hash

Fields are joined with bare commas.  Nothing is quoted or escaped, which
keeps existing files byte-compatible; a comma inside a field would break
the 7-field layout.

Existing lines are carried over verbatim: never re-parsed, re-sorted or
dropped.  New records go on top.
"""

from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import astuple, dataclass, field
from pathlib import Path
from typing import Iterable

from enginehash.releases import Release

logger = logging.getLogger(__name__)


HEADER = (
    "channel,flutter_version,dart_sdk_version,release_date,"
    "flutter_release_commit_hash,engine_version_commit_hash,snapshot_hash"
)
FIELD_COUNT = 7

_FLUTTER_COMMIT_FIELD = 4


@dataclass(frozen=True, slots=True)
class LedgerRecord:
    """One ledger line."""
    channel:          str
    flutter_version:  str
    dart_sdk_version: str
    release_date:     str
    flutter_commit:   str
    engine_commit:    str
    snapshot_hash:    str

    @classmethod
    def from_release(cls, release: Release, engine_commit: str, snapshot_hash: str) -> LedgerRecord:
        return cls(
            channel=release.channel,
            flutter_version=release.version,
            dart_sdk_version=release.dart_sdk_version,
            release_date=release.release_date,
            flutter_commit=release.hash,
            engine_commit=engine_commit,
            snapshot_hash=snapshot_hash,
        )

    def to_line(self) -> str:
        return ",".join(astuple(self))

    def __str__(self) -> str:
        return self.to_line()


@dataclass
class Ledger:
    """Ledger contents as read from disk (data lines only, header dropped)."""
    path:  Path
    lines: list[str] = field(default_factory=list)

    @property
    def newest_release_hash(self) -> str | None:
        """Flutter commit of the newest recorded release, if any."""
        if not self.lines:
            return None
        parts = self.lines[0].split(",")
        if len(parts) <= _FLUTTER_COMMIT_FIELD:
            return None
        return parts[_FLUTTER_COMMIT_FIELD]


def is_valid_ledger_line(line: str) -> bool:
    """True if *line* has exactly 7 comma-separated (possibly empty) fields."""
    return len(line.split(",")) == FIELD_COUNT


def split_lines(text: str) -> list[str]:
    r"""
    Split ledger text on ``\n`` only; a trailing ``\r`` is dropped from each
    line.  Other separators (form feed, U+2028, ...) stay inside the line.
    """
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def read_ledger(path: Path | str) -> Ledger:
    """Load the ledger at *path*; a missing file is an empty ledger."""
    path = Path(path)
    if not path.exists():
        logger.info("No ledger at %s, starting a new one", path)
        return Ledger(path=path)

    lines = split_lines(path.read_bytes().decode("utf-8"))
    ledger = Ledger(path=path, lines=lines[1:])
    logger.info("Loaded %d existing entries from %s", len(ledger.lines), path)
    return ledger


def render_ledger(new_records: Iterable[LedgerRecord], existing_lines: Iterable[str]) -> str:
    """Header, then *new_records* in order, then *existing_lines* unchanged."""
    lines = [HEADER]
    lines.extend(record.to_line() for record in new_records)
    lines.extend(existing_lines)
    return "\n".join(lines) + "\n"


def write_ledger(
    path: Path | str,
    new_records: Iterable[LedgerRecord],
    existing_lines: Iterable[str],
) -> None:
    """
    Write the merged ledger to *path*.

    The content is assembled in full and written to a sibling temp file that
    replaces *path* in one step, so an interrupted run leaves the previous
    ledger intact.
    """
    path = Path(path)
    content = render_ledger(new_records, existing_lines)
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as fh:
            fh.write(content)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    logger.debug("Wrote %d bytes → %s", len(content), path)
