"""
enginehash.config
=================
Run settings.  Every value has a default so the tool runs with no arguments.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

RELEASES_URL = (
    "https://storage.googleapis.com/flutter_infra_release/releases/releases_linux.json"
)
FLUTTER_REPO_URL = "https://github.com/flutter/flutter.git"

# android-arm64-release/linux-x64.zip is the archive that ships gen_snapshot
ARTIFACT_URL_TEMPLATE = (
    "https://storage.googleapis.com/flutter_infra_release/flutter/"
    "{engine_hash}/android-arm64-release/linux-x64.zip"
)

DEFAULT_LEDGER_PATH = Path("output") / "enginehash.csv"
DEFAULT_CLONE_PATH  = Path("flutter")


@dataclass
class Settings:
    """Configuration for a single ledger update."""
    ledger_path:           Path          = DEFAULT_LEDGER_PATH
    clone_path:            Path          = DEFAULT_CLONE_PATH
    releases_url:          str           = RELEASES_URL
    flutter_repo_url:      str           = FLUTTER_REPO_URL
    artifact_url_template: str           = ARTIFACT_URL_TEMPLATE
    engine_version_file:   str           = "bin/internal/engine.version"
    binary_name:           str           = "gen_snapshot"
    http_timeout:          float         = 300.0
    work_dir:              Path | None   = None   # parent for per-release temp dirs

    def artifact_url(self, engine_hash: str) -> str:
        return self.artifact_url_template.format(engine_hash=engine_hash)
