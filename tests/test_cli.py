"""
Tests for enginehash.cli
========================
Run with:  pytest tests/test_cli.py -v
"""

from __future__ import annotations

from pathlib import Path

from typer.testing import CliRunner

from enginehash import cli
from enginehash.config import DEFAULT_LEDGER_PATH, RELEASES_URL
from tests.factories import SNAPSHOT_HASH, gen_snapshot_bytes

runner = CliRunner()


class TestScan:
    def test_prints_hash(self, tmp_path):
        path = tmp_path / "gen_snapshot"
        path.write_bytes(gen_snapshot_bytes())
        result = runner.invoke(cli.app, ["scan", str(path)])
        assert result.exit_code == 0
        assert result.stdout.strip() == SNAPSHOT_HASH

    def test_no_hash(self, tmp_path):
        path = tmp_path / "gen_snapshot"
        path.write_bytes(b"\x00nothing\x00")
        result = runner.invoke(cli.app, ["scan", str(path)])
        assert result.exit_code == 1

    def test_missing_file(self, tmp_path):
        result = runner.invoke(cli.app, ["scan", str(tmp_path / "missing")])
        assert result.exit_code == 1


class TestUpdate:
    def test_defaults(self, monkeypatch):
        calls = []
        monkeypatch.setattr(cli, "update_ledger", lambda settings: calls.append(settings) or [])
        result = runner.invoke(cli.app, [])
        assert result.exit_code == 0
        assert len(calls) == 1
        assert calls[0].ledger_path == DEFAULT_LEDGER_PATH
        assert calls[0].releases_url == RELEASES_URL

    def test_overrides(self, monkeypatch, tmp_path):
        calls = []
        monkeypatch.setattr(cli, "update_ledger", lambda settings: calls.append(settings) or [])
        out = tmp_path / "ledger.csv"
        result = runner.invoke(cli.app, ["--output", str(out), "--clone-path", str(tmp_path / "f")])
        assert result.exit_code == 0
        assert calls[0].ledger_path == Path(out)
        assert calls[0].clone_path == tmp_path / "f"

    def test_scan_does_not_update(self, monkeypatch, tmp_path):
        calls = []
        monkeypatch.setattr(cli, "update_ledger", lambda settings: calls.append(settings) or [])
        path = tmp_path / "gen_snapshot"
        path.write_bytes(gen_snapshot_bytes())
        runner.invoke(cli.app, ["scan", str(path)])
        assert calls == []
