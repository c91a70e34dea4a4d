# pyright: standard
import io

import msgspec
import pytest
from rich.console import Console

from snapstack import ManagerOptions, StateManager
from snapstack.diagnostics import Tracer


def _capture() -> tuple[Console, io.StringIO]:
    buffer = io.StringIO()
    return Console(file=buffer, width=200, color_system=None), buffer


def test_tracer_is_silent_when_disabled() -> None:
    console, buffer = _capture()
    manager = StateManager()
    manager.tracer = Tracer(enabled=False, console=console)

    _ = manager.append({"x": 1})
    _ = manager.undo()

    assert buffer.getvalue() == ""


def test_tracer_reports_operations_and_failures() -> None:
    # GIVEN a manager with dev mode switched on at runtime
    console, buffer = _capture()
    manager = StateManager()
    manager.tracer = Tracer(console=console)
    manager.dev_mode(True)

    # WHEN one operation succeeds and one fails
    _ = manager.append({"x": 1})
    _ = manager.recall(7)

    # THEN both are traced and the failure is flagged with its message
    output = buffer.getvalue()
    assert "append:" in output
    assert "recall index: 7" in output
    assert "^ Failed" in output
    assert "Unable to recall at index 7" in output


def test_user_error_sink_replaces_tracer_error_output() -> None:
    console, buffer = _capture()
    errors: list[object] = []
    manager = StateManager(options=ManagerOptions(dev_mode=True, on_error=errors.append))
    manager.tracer = Tracer(enabled=True, console=console)

    _ = manager.undo()

    assert len(errors) == 1
    assert "^ Failed" in buffer.getvalue()
    assert "Nothing to undo" not in buffer.getvalue()


def test_tracer_escapes_markup_in_records() -> None:
    console, buffer = _capture()
    tracer = Tracer(enabled=True, console=console)
    tracer.start("append:", {"text": "[bold]not markup[/bold]"})
    assert "[bold]not markup[/bold]" in buffer.getvalue()


def test_tracer_closes_block_when_append_raises() -> None:
    # GIVEN a traced manager
    console, buffer = _capture()
    manager = StateManager()
    manager.tracer = Tracer(enabled=True, console=console)

    # WHEN an append raises on a record msgspec cannot encode
    with pytest.raises((TypeError, msgspec.EncodeError)):
        _ = manager.append({"f": object()})
    _ = manager.append({"x": 1})

    # THEN the raise is marked and the next operation starts back at the left margin
    lines = buffer.getvalue().splitlines()
    assert any("^ Raised" in line for line in lines)
    assert lines[-2].startswith("append:")
    assert "{'x': 1}" in lines[-2]


def test_tracer_closes_block_when_handler_raises() -> None:
    def explode(value: object) -> None:
        raise RuntimeError(f"bad {value}")

    console, buffer = _capture()
    manager = StateManager({"a": explode}, ManagerOptions(initial_sequence=[{"a": 1}, {"a": 2}]))
    manager.tracer = Tracer(enabled=True, console=console)

    with pytest.raises(RuntimeError, match="bad 1"):
        _ = manager.undo()
    _ = manager.set_current(1)

    lines = buffer.getvalue().splitlines()
    assert "^ Raised RuntimeError" in lines[-3]
    assert not lines[-2].startswith(" ")
