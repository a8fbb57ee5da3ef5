"""Shared pytest fixtures for BoardSync test suite."""

import pytest


@pytest.fixture(autouse=True)
def _default_azure_settings(monkeypatch):
    """Keep remote URL settings deterministic regardless of developer shell env vars."""
    for name in (
        "BOARDSYNC_AZURE_BASE_URL",
        "BOARDSYNC_API_VERSION",
        "BOARDSYNC_HTTP_TIMEOUT_SECONDS",
        "BOARDSYNC_AREA_PATH_DEPTH",
    ):
        monkeypatch.delenv(name, raising=False)
