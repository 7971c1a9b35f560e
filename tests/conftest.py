"""Shared test fixtures and utilities."""

import pytest

from walrus_client.client import WalrusClient

from tests.stub_service import AGGREGATOR_URL, PUBLISHER_URL, StubWalrusService


@pytest.fixture
def service():
    """Fresh stub service per test."""
    return StubWalrusService()


@pytest.fixture
def client(service):
    """WalrusClient whose session talks to the stub service."""
    walrus = WalrusClient(AGGREGATOR_URL, PUBLISHER_URL)
    walrus.session.mount("http://", service)
    yield walrus
    walrus.close()


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep tests away from the real home config and endpoint env vars."""
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    for var in ("WALRUS_AGGREGATOR_URL", "WALRUS_PUBLISHER_URL", "WALRUS_EPOCHS", "DEBUG"):
        monkeypatch.delenv(var, raising=False)
