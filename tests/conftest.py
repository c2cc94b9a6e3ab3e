from __future__ import annotations

import sys
from pathlib import Path

import matplotlib
import pytest

matplotlib.use("Agg")

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from snapsphere import icosphere  # noqa: E402
from snapcrust import Grid  # noqa: E402


@pytest.fixture(scope="session")
def mesh():
    """162 vertex / 320 face unit icosphere."""
    return icosphere(2)


@pytest.fixture(scope="session")
def grid(mesh):
    return Grid(mesh)
