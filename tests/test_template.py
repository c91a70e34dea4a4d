# pyright: standard
from functools import partial
from typing import Any

import pytest
from pytest_mock import MockerFixture

from snapstack import InvalidTemplateError, TemplateDispatcher, validate_template
from snapstack.template import is_unary


def _two_args(a: Any, b: Any) -> None:
    pass


def _one_with_default(a: Any, b: Any = None) -> None:
    pass


@pytest.mark.parametrize(
    "handler, expected",
    [
        (lambda value: None, True),
        (_one_with_default, True),
        (lambda *values: None, True),
        (partial(_two_args, 1), True),
        (print, True),
        (lambda: None, False),
        (_two_args, False),
        (5, False),
        ("handler", False),
        (None, False),
    ],
)
def test_is_unary(handler: object, expected: bool) -> None:
    assert is_unary(handler) is expected


def test_validate_template_accepts_mapping_of_unary_handlers() -> None:
    assert validate_template({}) is True
    assert validate_template({"a": lambda v: v, "b": print}) is True


@pytest.mark.parametrize("template", [{"a": 5}, {"a": lambda v: v, "b": "nope"}, [lambda v: v], "a", None, 3])
def test_validate_template_rejects_invalid(template: object) -> None:
    assert validate_template(template) is False


def test_replace_keeps_previous_template_on_failure() -> None:
    # GIVEN a dispatcher with a valid template
    def handler(value: Any) -> None:
        pass

    dispatcher = TemplateDispatcher({"a": handler})

    # WHEN a template with a non-function value is supplied
    outcome = dispatcher.replace({"a": 5})

    # THEN the replacement fails and the old template stays active
    assert isinstance(outcome.error, InvalidTemplateError)
    assert dispatcher.template() == {"a": handler}


def test_constructor_rejects_invalid_template() -> None:
    with pytest.raises(InvalidTemplateError):
        _ = TemplateDispatcher({"a": 5})  # type: ignore[dict-item]


def test_template_getter_returns_new_mapping() -> None:
    dispatcher = TemplateDispatcher({"a": print})
    template = dispatcher.template()
    template["b"] = print
    assert dispatcher.keys() == ["a"]


def test_dispatch_invokes_only_overlapping_keys(mocker: MockerFixture) -> None:
    # GIVEN a template with handlers for a and c
    handler_a = mocker.Mock()
    handler_c = mocker.Mock()
    dispatcher = TemplateDispatcher({"a": handler_a, "c": handler_c})

    # WHEN dispatching a record with keys a and b
    dispatched = dispatcher.dispatch({"a": 1, "b": 2})

    # THEN only the handler for a is called, exactly once with the field value
    handler_a.assert_called_once_with(1)
    handler_c.assert_not_called()
    assert dispatched == ["a"]


def test_dispatch_passes_independent_copies() -> None:
    # GIVEN a handler that mutates what it receives
    def mutate(value: list[int]) -> None:
        value.append(99)

    dispatcher = TemplateDispatcher({"items": mutate})
    record = {"items": [1]}

    # WHEN dispatching
    _ = dispatcher.dispatch(record)

    # THEN the record itself is untouched
    assert record == {"items": [1]}


def test_dispatch_ignores_non_mapping_records(mocker: MockerFixture) -> None:
    handler = mocker.Mock()
    dispatcher = TemplateDispatcher({"a": handler})
    assert dispatcher.dispatch(["a"]) == []
    handler.assert_not_called()


def test_dispatch_follows_template_order() -> None:
    calls: list[str] = []
    dispatcher = TemplateDispatcher(
        {"b": lambda v: calls.append(f"b={v}"), "a": lambda v: calls.append(f"a={v}")}
    )
    _ = dispatcher.dispatch({"a": 1, "b": 2})
    assert calls == ["b=2", "a=1"]
