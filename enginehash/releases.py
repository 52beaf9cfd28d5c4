"""
enginehash.releases
===================
Flutter release list retrieval.

The list is a JSON document published next to the SDK archives::

    {"releases": [{"hash": "...", "channel": "stable", "version": "3.32.5",
                   "dart_sdk_version": "3.8.1", "release_date": "..."}, ...]}

Releases are listed newest first and that order is kept as-is.  Entries are
only converted as they are iterated, so a malformed entry older than the
ledger's newest release is never looked at.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterator

import httpx

from enginehash.errors import ReleaseListError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Release:
    """One entry of the release list."""
    hash:             str
    version:          str
    channel:          str
    dart_sdk_version: str
    release_date:     str

    @classmethod
    def from_json(cls, entry: dict[str, Any]) -> Release:
        try:
            return cls(
                hash=str(entry["hash"]),
                version=str(entry["version"]),
                channel=str(entry["channel"]),
                # Releases older than Dart 2 carry no SDK version
                dart_sdk_version=str(entry.get("dart_sdk_version") or ""),
                release_date=str(entry["release_date"]),
            )
        except (KeyError, TypeError) as exc:
            raise ReleaseListError(f"Malformed release entry: {entry!r}") from exc


def parse_releases(payload: Any) -> Iterator[Release]:
    """
    Return a lazy iterator of :class:`Release` objects for a decoded release
    list.  The document shape is checked immediately; each entry raises
    :class:`ReleaseListError` only when it is reached.
    """
    if not isinstance(payload, dict) or not isinstance(payload.get("releases"), list):
        raise ReleaseListError("Release list has no 'releases' array")
    return (Release.from_json(entry) for entry in payload["releases"])


def fetch_releases(client: httpx.Client, url: str) -> Iterator[Release]:
    """Download and parse the release list at *url*."""
    logger.info("Fetching release list from %s", url)
    try:
        response = client.get(url)
        response.raise_for_status()
        payload = response.json()
    except httpx.HTTPError as exc:
        raise ReleaseListError(f"Cannot fetch release list: {exc}") from exc
    except ValueError as exc:
        raise ReleaseListError(f"Release list is not valid JSON: {exc}") from exc

    releases = parse_releases(payload)
    logger.info("Release list contains %d releases", len(payload["releases"]))
    return releases
