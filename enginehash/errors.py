"""
enginehash.errors
=================
Exception hierarchy.  Only :class:`ArtifactError` is recovered from (per
release); the others abort a run before the ledger is rewritten.
"""

from __future__ import annotations


class EngineHashError(Exception):
    """Base class for all enginehash errors."""


class ReleaseListError(EngineHashError):
    """The release list could not be fetched or is malformed."""


class RepositoryError(EngineHashError):
    """The Flutter repository clone could not be prepared."""


class ArtifactError(EngineHashError):
    """An engine artifact could not be downloaded or unpacked."""
