"""Shared fixtures for unit and feature tests."""

from __future__ import annotations

import pytest


@pytest.fixture(autouse=True)
def _isolate_github_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's GitHub credentials out of every test."""
    for name in ("GITHUB_TOKEN", "GITHUB_API_URL", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
