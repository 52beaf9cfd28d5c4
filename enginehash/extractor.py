"""
enginehash.extractor
====================
Snapshot hash extraction from raw engine binaries.

The Dart VM snapshot hash is compiled into ``gen_snapshot`` as a plain
32-character hexadecimal string.  It is found without any knowledge of the
executable format:

1.  The byte stream is split into **printable runs**: maximal spans of bytes
    in ``0x20..0x7E`` (space through tilde).
2.  A run is only inspected once a non-printable byte terminates it, and only
    if it is at least 32 characters long.
3.  The first terminated run containing 32 consecutive hex digits wins; within
    that run the leftmost 32 digits are returned, case preserved.

A run still open when the stream ends is never inspected, so a hash sitting
in the very last bytes of a file, with nothing after it, is not reported.

Files are read in chunks; a printable run that straddles a chunk boundary is
carried over into the next chunk so chunking never changes the result.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from functools import partial
from pathlib import Path
from typing import Iterable, Iterator

logger = logging.getLogger(__name__)


HASH_LENGTH = 32
CHUNK_SIZE  = 1024 * 1024   # 1 MB per read

# ---------------------------------------------------------------------------
# Regex constants — compiled once at import time
# ---------------------------------------------------------------------------

_PRINTABLE          = bytes(range(0x20, 0x7F))
_RE_SNAPSHOT_HASH   = re.compile(r"[0-9a-fA-F]{%d}" % HASH_LENGTH)
_RE_PRINTABLE_RUN   = re.compile(rb"[ -~]{%d,}" % HASH_LENGTH)


# ---------------------------------------------------------------------------
# Data containers
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class ExtractionResult:
    """A printable run (or a hash found in one) with its stream offset."""
    value:  str
    offset: int  = -1
    meta:   str  = ""

    def __str__(self) -> str:
        parts: list[str] = []
        if self.offset >= 0:
            parts.append(f"@0x{self.offset:08X}")
        if self.meta:
            parts.append(f"[{self.meta}]")
        parts.append(self.value)
        return "  ".join(parts)


# ---------------------------------------------------------------------------
# Printable-run scanner
# ---------------------------------------------------------------------------

def _run_pattern(min_length: int) -> re.Pattern[bytes]:
    if min_length == HASH_LENGTH:
        return _RE_PRINTABLE_RUN
    return re.compile(rb"[ -~]{%d,}" % max(min_length, 1))


def iter_printable_runs(
    chunks: Iterable[bytes],
    min_length: int = HASH_LENGTH,
) -> Iterator[ExtractionResult]:
    """
    Yield every boundary-terminated printable run of at least *min_length*
    characters, in stream order.

    *chunks* is any iterable of byte blocks forming one stream.  The open run
    at the end of each block is held back and prepended to the next one; the
    open run left after the last block is dropped without being yielded.
    """
    pattern = _run_pattern(min_length)
    carry   = b""
    base    = 0       # stream offset of carry[0]

    for chunk in chunks:
        if not chunk:
            continue
        buf  = carry + chunk
        head = buf.rstrip(_PRINTABLE)   # everything up to the last boundary byte

        # Every run inside *head* is followed by a non-printable byte
        for match in pattern.finditer(head):
            run = match.group()
            yield ExtractionResult(
                value=run.decode("ascii"),
                offset=base + match.start(),
                meta=f"len:{len(run)}",
            )

        carry = buf[len(head):]
        base += len(head)

    if carry:
        logger.debug("Unterminated run of %d bytes at 0x%08X ignored", len(carry), base)


# ---------------------------------------------------------------------------
# Hash pattern matcher
# ---------------------------------------------------------------------------

def match_snapshot_hash(run: str) -> str:
    """Return the leftmost 32-hex-digit substring of *run*, or ``""``."""
    match = _RE_SNAPSHOT_HASH.search(run)
    return match.group() if match else ""


def scan_chunks(chunks: Iterable[bytes]) -> str:
    """
    Return the first snapshot hash in the chunked stream, or ``""``.

    Stops consuming *chunks* as soon as a hash is found.
    """
    for run in iter_printable_runs(chunks):
        found = match_snapshot_hash(run.value)
        if found:
            logger.debug("Snapshot hash %s found in run @0x%08X", found, run.offset)
            return found
    return ""


def find_snapshot_hash(data: bytes) -> str:
    """Return the first snapshot hash embedded in *data*, or ``""``."""
    return scan_chunks((data,))


def get_snapshot_hash_from_path(path: Path | str, chunk_size: int = CHUNK_SIZE) -> str:
    """
    Extract the snapshot hash from the binary at *path*.

    A missing or unreadable file gives ``""`` like any other miss; some
    artifacts legitimately carry no hash.
    """
    path = Path(path)
    try:
        with path.open("rb") as fh:
            return scan_chunks(iter(partial(fh.read, chunk_size), b""))
    except OSError as exc:
        logger.warning("Cannot read %s: %s", path, exc)
        return ""


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def is_valid_snapshot_hash(value: str) -> bool:
    """True if *value* is exactly 32 hexadecimal characters (any case)."""
    if len(value) != HASH_LENGTH:
        return False
    return _RE_SNAPSHOT_HASH.fullmatch(value) is not None
