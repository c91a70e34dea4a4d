from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import msgspec

from snapstack.exceptions import BoundaryError, InvalidIndexError, InvalidSequenceError
from snapstack.models import Outcome, StateRecord
from snapstack.serialization import clone
from snapstack.template import TemplateDispatcher


def _is_index(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _describe_range(low: int, high: int) -> str:
    if high < low:
        return "the store is empty"
    if high == low:
        return f"the only valid index is {low}"
    return f"valid indices are {low} to {high}"


class StateStore:
    """
    Ordered, in-memory sequence of state records with a single cursor.

    - Records are deep-copied on the way in and on the way out; nothing handed to or
      returned from the store aliases its internal data.
    - Every operation either commits a new valid ``(sequence, cursor)`` pair or leaves
      both untouched and returns a failed ``Outcome``.
    - The cursor is ``-1`` exactly when the store is empty.
    """

    _records: list[StateRecord]
    _cursor: int
    dispatcher: TemplateDispatcher

    def __init__(
        self,
        records: Sequence[StateRecord] | None = None,
        cursor: int | None = None,
        dispatcher: TemplateDispatcher | None = None,
    ) -> None:
        self._records = []
        self._cursor = -1
        self.dispatcher = dispatcher if dispatcher is not None else TemplateDispatcher()
        if records is not None:
            self.set_sequence(records).unwrap()
        if cursor is not None:
            self.set_current(cursor).unwrap()

    def __len__(self) -> int:
        return len(self._records)

    # ---------- Cursor accessors ----------

    def current(self) -> int:
        return self._cursor

    def first(self) -> int:
        return 0

    def last(self) -> int:
        return len(self._records) - 1

    def set_current(self, index: object) -> Outcome[int]:
        if error := self._check_index(index, "set the current index"):
            return Outcome.failure(error)
        assert isinstance(index, int)
        self._cursor = index
        return Outcome.success(index)

    # ---------- Bulk accessors ----------

    def sequence(self) -> list[StateRecord]:
        return clone(self._records)

    def get(self, index: object) -> Outcome[StateRecord]:
        """Reads a record without moving the cursor or dispatching."""
        if error := self._check_index(index, "read"):
            return Outcome.failure(error)
        assert isinstance(index, int)
        return Outcome.success(clone(self._records[index]))

    def set_sequence(self, records: object) -> Outcome[list[StateRecord]]:
        """Replaces the whole sequence and moves the cursor to the new last index."""
        if isinstance(records, str | bytes | bytearray) or not isinstance(records, Sequence):
            return Outcome.failure(
                InvalidSequenceError(f"Sequence must be a list of records, got {type(records).__name__}.")
            )
        try:
            copied: list[StateRecord] = clone(list(records))  # pyright: ignore[reportUnknownArgumentType]
        except (msgspec.EncodeError, TypeError, ValueError, OverflowError) as e:
            return Outcome.failure(InvalidSequenceError(f"Sequence contains a record that cannot be stored: {e}"))
        self._records = copied
        self._cursor = len(copied) - 1
        return Outcome.success(clone(copied))

    # ---------- Mutations ----------

    def append(self, record: StateRecord) -> Outcome[StateRecord]:
        stored = clone(record)
        self._records.append(stored)
        self._cursor = len(self._records) - 1
        return Outcome.success(clone(stored))

    def insert(self, index: object, record: StateRecord) -> Outcome[StateRecord]:
        """
        Splices a copy of ``record`` in at ``index`` (``len(store)`` appends).

        Inserting at or before the cursor shifts it so it keeps pointing at the same record.
        """
        if error := self._check_index(index, "insert", allow_end=True):
            return Outcome.failure(error)
        assert isinstance(index, int)
        stored = clone(record)
        self._records.insert(index, stored)
        if self._cursor == -1:
            self._cursor = 0
        elif index <= self._cursor:
            self._cursor += 1
        return Outcome.success(clone(stored))

    def delete(self, index: object) -> Outcome[StateRecord]:
        """
        Removes the record at ``index`` and returns it.

        The cursor moves back one step when the removed record sat before it, or was the
        current record itself with a predecessor to fall back to. Deleting after the cursor
        leaves it alone.
        """
        if error := self._check_index(index, "delete"):
            return Outcome.failure(error)
        assert isinstance(index, int)
        removed = self._records.pop(index)
        if not self._records:
            self._cursor = -1
        elif index < self._cursor or (index == self._cursor and self._cursor > 0):
            self._cursor -= 1
        return Outcome.success(removed)

    def replace(self, index: object, record: StateRecord) -> Outcome[StateRecord]:
        """
        Swaps the record at ``index`` for a copy of ``record``.

        Equivalent to deleting and re-inserting at the same position, but validated up
        front so a bad index mutates nothing. The cursor keeps its position.
        """
        if error := self._check_index(index, "replace"):
            return Outcome.failure(error)
        assert isinstance(index, int)
        stored = clone(record)
        self._records[index] = stored
        return Outcome.success(clone(stored))

    # ---------- Navigation ----------

    def recall(self, index: object) -> Outcome[StateRecord]:
        """Moves the cursor to ``index`` and runs the record through the template."""
        if error := self._check_index(index, "recall"):
            return Outcome.failure(error)
        assert isinstance(index, int)
        self._cursor = index
        recalled = clone(self._records[index])
        _ = self.dispatcher.dispatch(recalled)
        return Outcome.success(recalled)

    def undo(self) -> Outcome[StateRecord]:
        if self._cursor <= 0:
            return Outcome.failure(BoundaryError(f"Nothing to undo: current index is {self._cursor}."))
        return self.recall(self._cursor - 1)

    def redo(self) -> Outcome[StateRecord]:
        if self._cursor >= self.last():
            return Outcome.failure(
                BoundaryError(f"Nothing to redo: current index {self._cursor} is the last index.")
            )
        return self.recall(self._cursor + 1)

    # ---------- Internal ----------

    def _check_index(self, index: object, action: str, allow_end: bool = False) -> InvalidIndexError | None:
        high = len(self._records) if allow_end else len(self._records) - 1
        if _is_index(index) and 0 <= index <= high:  # pyright: ignore[reportOperatorIssue]
            return None
        return InvalidIndexError(f"Unable to {action} at index {index!r}: {_describe_range(0, high)}.")

    def snapshot(self) -> tuple[list[Any], int]:
        """Returns a copy of the ``(sequence, cursor)`` pair."""
        return clone(self._records), self._cursor
