import inspect
from collections.abc import Mapping
from typing import Any

from snapstack.exceptions import InvalidTemplateError
from snapstack.models import Handler, Outcome, Template
from snapstack.serialization import clone


def is_unary(handler: object) -> bool:
    """
    Checks that ``handler`` can be called with exactly one positional argument.

    Callables whose signature cannot be introspected (some builtins and C extensions)
    are given the benefit of the doubt.
    """
    if not callable(handler):
        return False
    try:
        signature = inspect.signature(handler)
    except (TypeError, ValueError):
        return True
    try:
        _ = signature.bind(None)
    except TypeError:
        return False
    return True


def validate_template(template: object) -> bool:
    """Returns True only for a mapping of field names to unary handlers."""
    if not isinstance(template, Mapping):
        return False
    return all(isinstance(key, str) and is_unary(value) for key, value in template.items())  # pyright: ignore[reportUnknownVariableType]


def describe_invalid_template(template: object) -> str:
    if not isinstance(template, Mapping):
        return f"Template must be a mapping of field names to handlers, got {type(template).__name__}."
    bad_keys = [repr(key) for key, value in template.items() if not (isinstance(key, str) and is_unary(value))]  # pyright: ignore[reportUnknownVariableType]
    return f"Template entries are not unary handlers: {', '.join(bad_keys)}."


class TemplateDispatcher:
    """Routes the fields of a recalled record to their handlers."""

    _handlers: dict[str, Handler]

    def __init__(self, template: Template | None = None) -> None:
        self._handlers = {}
        if template is not None:
            self.replace(template).unwrap()

    def template(self) -> dict[str, Handler]:
        return dict(self._handlers)

    def keys(self) -> list[str]:
        return list(self._handlers)

    def replace(self, template: object) -> Outcome[dict[str, Handler]]:
        """Swaps in a new template after validating all of it; the old one survives a failure."""
        if not validate_template(template):
            return Outcome.failure(InvalidTemplateError(describe_invalid_template(template)))
        assert isinstance(template, Mapping)
        self._handlers = dict(template)  # pyright: ignore[reportUnknownArgumentType]
        return Outcome.success(self.template())

    def dispatch(self, record: Any) -> list[str]:
        """
        Invokes each handler whose key is also present in ``record``.

        Keys found only in the template or only in the record are skipped. Each handler
        receives its own copy of the field value. Returns the keys that were dispatched,
        in template order.
        """
        if not isinstance(record, Mapping):
            return []
        dispatched: list[str] = []
        for key, handler in self._handlers.items():
            if key in record:
                _ = handler(clone(record[key]))
                dispatched.append(key)
        return dispatched
