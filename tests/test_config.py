# pyright: standard
from pathlib import Path

import pytest

from snapstack import ConfigurationError, ManagerOptions, default_storage_dir
from snapstack.config import parse_flag


@pytest.mark.parametrize("raw, expected", [("1", True), ("TRUE", True), (" on ", True), ("0", False), ("no", False), ("", False)])
def test_parse_flag(raw: str, expected: bool) -> None:
    assert parse_flag("SNAPSTACK_DEV", raw) is expected


def test_parse_flag_rejects_garbage() -> None:
    with pytest.raises(ConfigurationError, match="SNAPSTACK_DEV"):
        _ = parse_flag("SNAPSTACK_DEV", "maybe")


def test_options_from_env_reads_dev_flag(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SNAPSTACK_DEV", "yes")
    assert ManagerOptions.from_env().dev_mode is True


def test_options_from_env_defaults_when_unset(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("SNAPSTACK_DEV", raising=False)
    assert ManagerOptions.from_env() == ManagerOptions()


def test_options_from_env_overrides_win(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SNAPSTACK_DEV", "1")
    options = ManagerOptions.from_env(dev_mode=False, initial_sequence=["a"])
    assert options.dev_mode is False
    assert options.initial_sequence == ["a"]


def test_default_storage_dir_prefers_snapstack_home(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("SNAPSTACK_HOME", str(tmp_path))
    monkeypatch.setenv("XDG_DATA_HOME", "/elsewhere")
    assert default_storage_dir() == tmp_path


def test_default_storage_dir_requires_absolute_home(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SNAPSTACK_HOME", "relative/dir")
    with pytest.raises(ConfigurationError, match="absolute"):
        _ = default_storage_dir()


def test_default_storage_dir_uses_xdg_data_home(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv("SNAPSTACK_HOME", raising=False)
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path))
    assert default_storage_dir() == tmp_path / "snapstack"


def test_default_storage_dir_falls_back_to_home(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv("SNAPSTACK_HOME", raising=False)
    monkeypatch.delenv("XDG_DATA_HOME", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    assert default_storage_dir() == tmp_path / ".local" / "share" / "snapstack"
