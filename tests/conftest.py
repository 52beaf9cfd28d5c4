from __future__ import annotations

import pytest

from enginehash.releases import Release
from tests.factories import make_release


@pytest.fixture
def releases() -> list[Release]:
    """Five releases, newest first."""
    return [make_release(n) for n in (5, 4, 3, 2, 1)]
