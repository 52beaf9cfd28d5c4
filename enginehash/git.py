"""
enginehash.git
==============
Thin wrapper around a throw-away clone of the Flutter repository.

Only two git operations are needed: ``git clone`` and
``git cat-file -p <commit>:<path>`` to read a file as it was at a release.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path

from enginehash.errors import RepositoryError

logger = logging.getLogger(__name__)


class FlutterRepository:
    """
    A local clone that exists for the duration of a ``with`` block.

    Usage::

        with FlutterRepository(Path("flutter"), FLUTTER_REPO_URL) as repo:
            engine = repo.engine_version(release.hash, "bin/internal/engine.version")
    """

    def __init__(self, path: Path, url: str) -> None:
        self.path = Path(path)
        self.url  = url

    def __enter__(self) -> FlutterRepository:
        self.clone()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.remove()

    def clone(self) -> None:
        """Clone :attr:`url` into :attr:`path`, replacing any stale clone."""
        self.remove()
        logger.info("Cloning %s into %s", self.url, self.path)
        result = subprocess.run(
            ["git", "clone", self.url, str(self.path)],
            capture_output=True,
            text=True,
        )
        if result.returncode != 0:
            raise RepositoryError(f"git clone failed: {result.stderr.strip()}")

    def remove(self) -> None:
        if self.path.exists():
            shutil.rmtree(self.path)

    def read_file(self, commit: str, file_path: str) -> str | None:
        """
        Return the text of *file_path* at *commit*, or ``None`` when the path
        does not exist there.
        """
        result = subprocess.run(
            ["git", "cat-file", "-p", f"{commit}:{file_path}"],
            cwd=self.path,
            capture_output=True,
            text=True,
        )
        if result.returncode != 0:
            logger.warning("git cat-file %s:%s: %s", commit, file_path, result.stderr.strip())
            return None
        return result.stdout

    def engine_version(self, commit: str, file_path: str) -> str | None:
        """Engine commit hash pinned by the release at *commit*."""
        text = self.read_file(commit, file_path)
        if text is None:
            return None
        return text.strip() or None
