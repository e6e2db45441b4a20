"""
pytest configuration for the pairing import tests.

Adds src directory to Python path for imports and isolates tests from the
developer's environment.
"""

import sys
from pathlib import Path

import pytest

# Add src directory to Python path
src_dir = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_dir))

# Environment variables referenced by config/config.yaml
APPDB_ENV_VARS = (
    "APPDB_API_URL",
    "APPDB_LANG",
    "APPDB_TIMEOUT_SECONDS",
    "APPDB_INSTALLED",
    "APPDB_CUSTOMER_ID",
    "APPDB_DEVICE_ID",
    "APPDB_INSTALLATION_UUID",
    "APPDB_UPDATE_AVAILABLE",
    "APPDB_BUNDLE_ID",
    "APPDB_APP_GROUP",
    "APPDB_APP_ID",
    "APPDB_ALONGSIDE_ID",
    "PAIRING_DOCUMENTS_DIR",
)


@pytest.fixture(autouse=True)
def clean_appdb_env(monkeypatch):
    for name in APPDB_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def reset_log_context():
    from core.logging.context import clear_log_context

    clear_log_context()
    yield
    clear_log_context()
