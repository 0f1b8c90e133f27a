"""
Pytest configuration and shared fixtures for all tests.
"""

import sys
from pathlib import Path

import pytest
import json

# Add the project root to sys.path so we can import from src
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))


@pytest.fixture(scope="session")
def fixtures_dir():
    """Get the fixtures directory path."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture(scope="session")
def load_fixture(fixtures_dir):
    """Load a JSON fixture by file name."""
    def _load(name):
        with open(fixtures_dir / name, encoding="utf-8") as f:
            return json.load(f)
    return _load


@pytest.fixture
def clean_env(monkeypatch):
    """Remove environment variables that override configuration."""
    for name in (
        "CONFIG_FILE",
        "HOV_BADPLATSEN_URL",
        "CONTEXT_BROKER_URL",
        "LWM2M_ENDPOINT_URL",
        "OUTPUT_TYPE",
        "PROCESSING_TIMEZONE",
        "TLS_SKIP_VERIFY",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch

