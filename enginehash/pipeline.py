"""
enginehash.pipeline
===================
Incremental ledger update.

Releases are walked newest first.  For each one the engine commit is read
from the Flutter repository at the release commit, the engine artifact is
scanned for its snapshot hash, and a :class:`LedgerRecord` is produced.  The
walk stops at the first release already at the top of the ledger.

A release that cannot be resolved (no ``engine.version`` at that commit,
download failure, no ``gen_snapshot``, no hash) is logged and skipped.  The
ledger is only rewritten after the walk completes.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Optional

import httpx

from enginehash.artifacts import ArtifactFetcher
from enginehash.config import Settings
from enginehash.errors import ArtifactError
from enginehash.git import FlutterRepository
from enginehash.ledger import LedgerRecord, read_ledger, write_ledger
from enginehash.releases import Release, fetch_releases

logger = logging.getLogger(__name__)

EngineResolver  = Callable[[str], Optional[str]]
HashFetcher     = Callable[[str], Optional[str]]


def collect_new_records(
    releases: Iterable[Release],
    stop_hash: str | None,
    resolve_engine: EngineResolver,
    fetch_snapshot_hash: HashFetcher,
) -> list[LedgerRecord]:
    """
    Build records for every release newer than *stop_hash*.

    Parameters
    ----------
    releases:
        Release list, newest first.
    stop_hash:
        Flutter commit of the newest release already recorded, or ``None``.
    resolve_engine:
        Maps a Flutter commit to its engine commit, ``None`` on a miss.
    fetch_snapshot_hash:
        Maps an engine commit to its snapshot hash, ``None`` on a miss.  May
        raise :class:`ArtifactError`.

    Returns
    -------
    list[LedgerRecord]
        New records in release-list order.
    """
    records: list[LedgerRecord] = []

    for release in releases:
        logger.info("-----------------------")

        if stop_hash is not None and release.hash == stop_hash:
            logger.info("Reached existing release: %s (%s) - stopping", release.version, release.hash)
            break

        logger.info("Processing new release: %s (%s)", release.version, release.hash)

        engine_hash = resolve_engine(release.hash)
        if engine_hash is None:
            # Some early pre-releases predate bin/internal/engine.version
            logger.warning("No engine version for %s, skipping", release.version)
            continue
        logger.info("Engine version hash: %s", engine_hash)

        try:
            snapshot_hash = fetch_snapshot_hash(engine_hash)
        except ArtifactError as exc:
            logger.warning("Skipping %s: %s", release.version, exc)
            continue

        if snapshot_hash is None:
            logger.warning("No snapshot hash for %s, skipping", release.version)
            continue

        record = LedgerRecord.from_release(release, engine_hash, snapshot_hash)
        records.append(record)
        logger.info("New entry added: %s", record)

    return records


def update_ledger(
    settings: Settings,
    *,
    client: httpx.Client | None = None,
    repository: FlutterRepository | None = None,
) -> list[LedgerRecord]:
    """
    Bring the ledger at ``settings.ledger_path`` up to date and return the
    records that were added.

    *client* and *repository* default to a fresh ``httpx.Client`` and a clone
    at ``settings.clone_path``; the clone is removed before returning.
    """
    ledger = read_ledger(settings.ledger_path)

    own_client = client is None
    if client is None:
        client = httpx.Client(timeout=settings.http_timeout, follow_redirects=True)
    if repository is None:
        repository = FlutterRepository(settings.clone_path, settings.flutter_repo_url)

    try:
        with repository:
            releases = fetch_releases(client, settings.releases_url)
            fetcher  = ArtifactFetcher(client, settings)
            records  = collect_new_records(
                releases,
                ledger.newest_release_hash,
                lambda commit: repository.engine_version(commit, settings.engine_version_file),
                fetcher.snapshot_hash,
            )
    finally:
        if own_client:
            client.close()

    write_ledger(settings.ledger_path, records, ledger.lines)

    if records:
        logger.info("Added %d new entries to %s", len(records), settings.ledger_path)
    else:
        logger.info("No new entries found. File updated with existing entries.")
    logger.info("Parsing finished, output is in %s", settings.ledger_path)
    return records
