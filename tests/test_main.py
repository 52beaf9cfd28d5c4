"""
Tests for enginehash.__main__
=============================
Run with:  pytest tests/test_main.py -v
"""

from __future__ import annotations

import importlib

from enginehash import cli


def test_import_does_not_run(monkeypatch):
    calls = []
    monkeypatch.setattr(cli, "main", lambda: calls.append(True))
    importlib.import_module("enginehash.__main__")
    assert calls == []
