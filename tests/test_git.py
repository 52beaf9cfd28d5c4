"""
Tests for enginehash.git
========================
Run with:  pytest tests/test_git.py -v

Uses a throw-away local repository as the clone origin.
"""

from __future__ import annotations

import shutil
import subprocess

import pytest

from enginehash.errors import RepositoryError
from enginehash.git import FlutterRepository

pytestmark = pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")

ENGINE = "dd93de6fb1776398bf586cbd477deade1391c7e4"


def _git(cwd, *args: str) -> str:
    result = subprocess.run(
        ["git", "-c", "user.name=test", "-c", "user.email=test@example.com", *args],
        cwd=cwd,
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout.strip()


@pytest.fixture
def origin(tmp_path):
    repo = tmp_path / "origin"
    repo.mkdir()
    _git(repo, "init", "-q")
    (repo / "README.md").write_text("flutter\n")
    _git(repo, "add", "README.md")
    _git(repo, "commit", "-q", "-m", "initial")
    first = _git(repo, "rev-parse", "HEAD")

    (repo / "bin" / "internal").mkdir(parents=True)
    (repo / "bin" / "internal" / "engine.version").write_text(ENGINE + "\n")
    _git(repo, "add", "bin")
    _git(repo, "commit", "-q", "-m", "pin engine")
    second = _git(repo, "rev-parse", "HEAD")
    return repo, first, second


class TestFlutterRepository:
    def test_engine_version(self, tmp_path, origin):
        repo_path, first, second = origin
        with FlutterRepository(tmp_path / "flutter", str(repo_path)) as repo:
            assert repo.engine_version(second, "bin/internal/engine.version") == ENGINE
            assert repo.engine_version(first, "bin/internal/engine.version") is None

    def test_read_file(self, tmp_path, origin):
        repo_path, first, _ = origin
        with FlutterRepository(tmp_path / "flutter", str(repo_path)) as repo:
            assert repo.read_file(first, "README.md") == "flutter\n"

    def test_clone_removed_on_exit(self, tmp_path, origin):
        clone = tmp_path / "flutter"
        with FlutterRepository(clone, str(origin[0])):
            assert (clone / ".git").exists()
        assert not clone.exists()

    def test_stale_clone_replaced(self, tmp_path, origin):
        clone = tmp_path / "flutter"
        clone.mkdir()
        (clone / "stale.txt").write_text("old")
        with FlutterRepository(clone, str(origin[0])):
            assert not (clone / "stale.txt").exists()

    def test_clone_failure(self, tmp_path):
        repo = FlutterRepository(tmp_path / "flutter", str(tmp_path / "nope"))
        with pytest.raises(RepositoryError):
            repo.clone()
