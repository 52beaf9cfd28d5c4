"""
enginehash.artifacts
====================
Engine artifact download and snapshot hash extraction.

For each engine commit the ``linux-x64.zip`` host-tools archive is downloaded
into a private temporary directory, unpacked next to it, and the
``gen_snapshot`` binary at its root is handed to
:func:`enginehash.extractor.get_snapshot_hash_from_path`.  The directory is
removed when the release is done with, whatever the outcome.
"""

from __future__ import annotations

import logging
import tempfile
import zipfile
import zlib
from pathlib import Path

import httpx

from enginehash.config import Settings
from enginehash.errors import ArtifactError
from enginehash.extractor import get_snapshot_hash_from_path

logger = logging.getLogger(__name__)


class ArtifactFetcher:
    """Resolves engine commits to snapshot hashes over a shared HTTP client."""

    def __init__(self, client: httpx.Client, settings: Settings) -> None:
        self.client   = client
        self.settings = settings

    def snapshot_hash(self, engine_hash: str) -> str | None:
        """
        Return the snapshot hash compiled into the engine at *engine_hash*,
        or ``None`` if the archive has no binary or the binary has no hash.

        Raises :class:`ArtifactError` when the archive cannot be fetched or
        unpacked.
        """
        work_dir = self.settings.work_dir
        if work_dir is not None:
            work_dir.mkdir(parents=True, exist_ok=True)

        with tempfile.TemporaryDirectory(prefix="enginehash-", dir=work_dir) as tmp:
            tmp_path = Path(tmp)
            archive  = self._download(engine_hash, tmp_path / f"{engine_hash}.zip")
            tree     = self._extract(archive, tmp_path / engine_hash)

            binary = tree / self.settings.binary_name
            if not binary.is_file():
                logger.warning("%s not found in artifacts for %s", self.settings.binary_name, engine_hash)
                return None

            value = get_snapshot_hash_from_path(binary)
            if not value:
                logger.warning("No snapshot hash in %s for %s", self.settings.binary_name, engine_hash)
                return None
            return value

    def _download(self, engine_hash: str, dest: Path) -> Path:
        url = self.settings.artifact_url(engine_hash)
        logger.info("Fetching zip from %s", url)
        try:
            with self.client.stream("GET", url) as response:
                if response.status_code != 200:
                    raise ArtifactError(f"GET {url} returned HTTP {response.status_code}")
                with dest.open("wb") as fh:
                    for block in response.iter_bytes():
                        fh.write(block)
        except httpx.HTTPError as exc:
            raise ArtifactError(f"GET {url} failed: {exc}") from exc
        except OSError as exc:
            raise ArtifactError(f"Cannot save {url} to {dest}: {exc}") from exc
        logger.debug("Downloaded %d bytes → %s", dest.stat().st_size, dest)
        return dest

    def _extract(self, archive: Path, dest: Path) -> Path:
        try:
            with zipfile.ZipFile(archive) as zf:
                zf.extractall(dest)
        except (zipfile.BadZipFile, zlib.error, EOFError, OSError) as exc:
            raise ArtifactError(f"Cannot unpack {archive.name}: {exc}") from exc
        return dest
