"""Shared fixtures for the typedlicense test suite."""

from __future__ import annotations

import pytest

from typedlicense.base import InMemoryLicense


@pytest.fixture
def base():
    """An empty, verified in-memory license."""
    return InMemoryLicense(verified=True)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every ``TYPEDLICENSE_*`` variable from the environment."""
    import os

    for key in list(os.environ):
        if key.startswith("TYPEDLICENSE_"):
            monkeypatch.delenv(key, raising=False)
    return monkeypatch
