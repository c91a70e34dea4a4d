import os
from collections.abc import Callable, Sequence
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from snapstack.exceptions import ConfigurationError, SnapstackError

DEV_ENV_VAR = "SNAPSTACK_DEV"
HOME_ENV_VAR = "SNAPSTACK_HOME"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off", ""}


def parse_flag(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    raise ConfigurationError(f"{name} must be one of 1/0, true/false, yes/no, on/off; got {raw!r}")


@dataclass(frozen=True, slots=True)
class ManagerOptions:
    """Constructor options for StateManager."""

    dev_mode: bool = False
    initial_sequence: Sequence[Any] | None = None
    initial_cursor: int | None = None
    on_error: Callable[[SnapstackError], object] | None = None

    @classmethod
    def from_env(cls, **overrides: Any) -> "ManagerOptions":
        """
        Builds options from the environment, then applies keyword overrides.

        Only SNAPSTACK_DEV is read here; an unset variable means dev mode is off.
        """
        options = cls()
        if (raw := os.environ.get(DEV_ENV_VAR)) is not None:
            options = replace(options, dev_mode=parse_flag(DEV_ENV_VAR, raw))
        return replace(options, **overrides)


def default_storage_dir() -> Path:
    """
    Resolves where FileStorage keeps persisted states.

    SNAPSTACK_HOME wins if set (and must be absolute); otherwise XDG_DATA_HOME/snapstack
    or ~/.local/share/snapstack.
    """
    if env_path := os.environ.get(HOME_ENV_VAR):
        path = Path(env_path)
        if not path.is_absolute():
            raise ConfigurationError(f"{HOME_ENV_VAR} must be an absolute path")
        return path

    xdg_data = os.environ.get("XDG_DATA_HOME")
    base = Path(xdg_data) if xdg_data else Path.home() / ".local" / "share"
    return base / "snapstack"
