from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Literal

from msgspec import Struct, field

from snapstack.exceptions import SnapstackError

type StateRecord = Any
type Handler = Callable[[Any], object]
type Template = Mapping[str, Handler]

STATE_TYPE_TAG = "snapstack_state_v1"


@dataclass(frozen=True)
class Outcome[T]:
    """
    Result of a store operation.

    Exactly one of ``value`` and ``error`` is meaningful: a successful outcome carries
    the (already copied) value, a failed one carries the error that explains why nothing
    was mutated. Outcomes are falsy on failure so ``if manager.undo():`` reads naturally.
    """

    value: T | None = None
    error: SnapstackError | None = None

    @classmethod
    def success(cls, value: T) -> Outcome[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: SnapstackError) -> Outcome[T]:
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def __bool__(self) -> bool:
        return self.ok

    def unwrap(self) -> T:
        """Returns the value, raising the carried error on failure."""
        if self.error is not None:
            raise self.error
        return self.value  # pyright: ignore[reportReturnType]


class PersistedState(Struct):
    """
    Serializable snapshot of a manager: the record sequence and the cursor.

    Handlers are not data and are never persisted. ``template_keys`` only records which
    fields had a handler at save time.
    """

    type: Literal["snapstack_state_v1"] = STATE_TYPE_TAG
    sequence: list[Any] = field(default_factory=list)
    cursor: int = -1
    template_keys: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not -1 <= self.cursor < len(self.sequence):
            raise ValueError(
                f"PersistedState.cursor {self.cursor} is outside [-1, {len(self.sequence) - 1}]."
            )
        if self.sequence and self.cursor == -1:
            raise ValueError("PersistedState.cursor must point at a record when the sequence is not empty.")
