"""Test configuration helpers."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest


def _ensure_project_root_on_path() -> None:
    """Add the repository root to ``sys.path`` when running ``pytest`` without installing the package."""

    root = Path(__file__).resolve().parents[1]
    root_str = str(root)
    if root_str not in sys.path:
        sys.path.insert(0, root_str)


_ensure_project_root_on_path()

from finance_bot.config import get_settings  # noqa: E402


@pytest.fixture(autouse=True)
def _fresh_settings():
    """Environment patches made by a test must not leak through the settings cache."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
