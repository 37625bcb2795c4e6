"""Pytest configuration and fixtures for slippymap tests."""

import sys
from pathlib import Path

import pytest

# Add src directory to path for imports
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))
# Shared test helpers (fakes.py)
sys.path.insert(0, str(Path(__file__).parent))

from fakes import ControlledLoader, solid_tile  # noqa: E402


@pytest.fixture
def controlled_loader():
    return ControlledLoader()


@pytest.fixture
def instant_loader():
    async def _load(url):
        return solid_tile()

    return _load
