"""Test configuration that keeps project modules importable and mock data isolated."""

import sys
from pathlib import Path

import pytest

# Add project root to sys.path so `vcd_client` and `vcd_shared` can be imported in tests.
ROOT = Path(__file__).resolve().parent.parent
ROOT_STR = str(ROOT)
if ROOT_STR not in sys.path:
    sys.path.insert(0, ROOT_STR)

FIXTURES = Path(__file__).resolve().parent / "fixtures"


@pytest.fixture(autouse=True)
def _fresh_mock_data():
    """Give every test its own copy of the shared mock dataset."""
    from vcd_client import mock_data

    mock_data.reset_data()
    yield
    mock_data.reset_data()


@pytest.fixture
def clean_env(monkeypatch):
    """Remove VCLOUD_DIRECTOR_* variables that could leak from the host environment."""
    for name in (
        "VCLOUD_DIRECTOR_HOST",
        "VCLOUD_DIRECTOR_USERNAME",
        "VCLOUD_DIRECTOR_PASSWORD",
        "VCLOUD_DIRECTOR_API_VERSION",
        "VCLOUD_DIRECTOR_VERIFY_TLS",
        "VCLOUD_DIRECTOR_MOCK",
        "VCLOUD_DIRECTOR_MOCK_DATA",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES
