from collections.abc import Callable

from snapstack.manager import StateManager
from snapstack.models import Outcome, StateRecord
from snapstack.session import CliSettings, commit, echo_json, field_printer, open_manager


def _navigate(
    settings: CliSettings,
    fields: list[str] | None,
    move: Callable[[StateManager], Outcome[StateRecord]],
) -> None:
    # With --field, output comes from the template handlers during recall
    template = {name: field_printer(name) for name in fields} if fields else None
    manager = open_manager(settings, template)
    record = move(manager).unwrap()
    commit(manager, settings)
    if not fields:
        echo_json(record)


def recall(settings: CliSettings, index: int, fields: list[str] | None) -> None:
    _navigate(settings, fields, lambda manager: manager.recall(index))


def undo(settings: CliSettings, fields: list[str] | None) -> None:
    _navigate(settings, fields, lambda manager: manager.undo())


def redo(settings: CliSettings, fields: list[str] | None) -> None:
    _navigate(settings, fields, lambda manager: manager.redo())
