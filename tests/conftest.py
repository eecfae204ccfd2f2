"""Pytest configuration for sidecaromatic tests."""

import pytest

# Skip the entire suite when the imaging dependency is unavailable.
pytest.importorskip("nibabel")

from sidecaromatic.config import ConfigSchema  # noqa: E402


@pytest.fixture
def cfg() -> ConfigSchema:
    """Default configuration (same values as the packaged YAML)."""
    return ConfigSchema()
