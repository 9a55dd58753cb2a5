"""Shared pytest configuration for the test suite."""

from __future__ import annotations

from pathlib import Path

import pytest


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    """Tag every test that is not marked as system as a unit test."""

    for item in items:
        if "system" not in item.keywords:
            item.add_marker(pytest.mark.unit)


@pytest.fixture()
def config_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Redirect the wisshrd configuration directory into a temporary folder."""

    path = tmp_path / "config"
    monkeypatch.setenv("WISSHRD_CONFIG_DIR", str(path))
    return path
