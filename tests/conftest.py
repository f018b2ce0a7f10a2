"""
Shared test fixtures and helpers for the Kestrel test suite.
"""

from pathlib import Path

import pytest

from kestrel.config import ConfigSource
from kestrel.di.testing import recording_diagnostics

SAMPLE_APP_DIR = Path(__file__).parent / "sample_app"


# ============================================================================
# Configuration
# ============================================================================


@pytest.fixture
def sample_env_path() -> Path:
    """Path to the sample application's settings file."""
    return SAMPLE_APP_DIR / "application.env"


@pytest.fixture
def sample_config(sample_env_path) -> ConfigSource:
    return ConfigSource.from_file(sample_env_path)


# ============================================================================
# Diagnostics
# ============================================================================


@pytest.fixture
def diagnostics():
    """(DIDiagnostics, RecordingListener) pair."""
    return recording_diagnostics()
