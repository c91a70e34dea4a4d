from dataclasses import dataclass
from pathlib import Path
from typing import Any

import msgspec
import typer

from snapstack.config import ManagerOptions, default_storage_dir
from snapstack.exceptions import InvalidInputError
from snapstack.manager import StateManager, with_storage
from snapstack.models import Template
from snapstack.persistence import FileStorage
from snapstack.serialization import to_json

DEFAULT_KEY = "default"


@dataclass(frozen=True, slots=True)
class CliSettings:
    key: str = DEFAULT_KEY
    home: Path | None = None
    dev: bool | None = None

    def storage(self) -> FileStorage:
        return FileStorage(self.home if self.home is not None else default_storage_dir())


def open_manager(settings: CliSettings, template: Template | None = None) -> StateManager:
    """Loads the state stored under the configured key; an unknown key starts empty."""
    overrides: dict[str, Any] = {} if settings.dev is None else {"dev_mode": settings.dev}
    options = ManagerOptions.from_env(**overrides)
    return with_storage(settings.storage(), settings.key, template, options)


def commit(manager: StateManager, settings: CliSettings) -> None:
    _ = manager.save(settings.key).unwrap()


def parse_record(raw: str) -> Any:
    try:
        return msgspec.json.decode(raw)
    except msgspec.DecodeError as e:
        raise InvalidInputError(f"Record must be valid JSON: {e}") from e


def echo_json(value: object) -> None:
    typer.echo(to_json(value).decode("utf-8"))


def field_printer(name: str):
    """Handler that prints ``name=<json>`` for a dispatched field."""

    def _print(value: Any) -> None:
        typer.echo(f"{name}={to_json(value).decode('utf-8')}")

    return _print
