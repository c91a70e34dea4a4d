# pyright: standard
from collections.abc import Iterator
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[None]:
    """Keeps tests away from the user's real storage dir and dev-mode setting."""
    monkeypatch.delenv("SNAPSTACK_DEV", raising=False)
    monkeypatch.setenv("SNAPSTACK_HOME", str(tmp_path / "snapstack-home"))
    yield


@pytest.fixture
def home(tmp_path: Path) -> Path:
    return tmp_path / "snapstack-home"
