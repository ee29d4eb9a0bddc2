"""Shared fixtures for the ImageStudio test-suite."""

from __future__ import annotations

import pytest


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep credentials from the developer's shell out of the tests."""
    for name in ("NEBIUS_API_KEY", "IMAGESTUDIO_IMAGE_API_KEY", "IMAGESTUDIO_IMAGE_API_BASE_URL"):
        monkeypatch.delenv(name, raising=False)
