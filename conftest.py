"""
Repository-level pytest configuration.

Why this exists:
  - Keep every test independent of a developer's local config/pagebind.yaml
  - Keep PAGEBIND_* variables from the shell out of the test runs
  - Expose the repository root to tests that need on-disk fixtures
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Generator

import pytest

from pagebind.common.config_loader import ENV_PREFIX, ConfigLoader


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return repo root path."""
    return Path(__file__).parent


@pytest.fixture(autouse=True)
def _isolated_configuration(monkeypatch, tmp_path) -> Generator[None, None, None]:
    """
    Point the configuration singleton at an empty location for each test.

    Tests that need configuration write their own YAML and set PAGEBIND_CONFIG.
    """
    for key in list(os.environ):
        if key.startswith(ENV_PREFIX):
            monkeypatch.delenv(key)
    monkeypatch.setenv(f"{ENV_PREFIX}CONFIG", str(tmp_path / "no-config.yaml"))

    ConfigLoader.reset()
    yield
    ConfigLoader.reset()
