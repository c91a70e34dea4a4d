from __future__ import annotations

from collections.abc import Callable

from snapstack.config import ManagerOptions
from snapstack.diagnostics import Tracer
from snapstack.exceptions import InvalidTemplateError, SnapstackError
from snapstack.models import Handler, Outcome, PersistedState, StateRecord, Template
from snapstack.persistence import KeyValueStorage, MemoryStorage, load_state, save_state
from snapstack.store import StateStore
from snapstack.template import TemplateDispatcher, describe_invalid_template, validate_template

type Callback[T] = Callable[[Outcome[T]], object]
type ErrorSink = Callable[[SnapstackError], object]


class StateManager:
    """
    Stores snapshots of application state and moves a cursor back and forth through them.

    The template maps field names to handlers. Whenever a snapshot is recalled (directly,
    or through undo/redo) each handler whose field is present in the snapshot is called
    with that field's value.

    Every operation returns an ``Outcome`` and, if a ``callback`` is given, also passes the
    same outcome to it before returning. Failed operations never mutate anything; they
    report through the outcome and the ``on_error`` sink.
    """

    storage: KeyValueStorage
    tracer: Tracer
    _store: StateStore
    _dispatcher: TemplateDispatcher
    _on_error: ErrorSink | None

    def __init__(
        self,
        template: Template | None = None,
        options: ManagerOptions | None = None,
        *,
        storage: KeyValueStorage | None = None,
    ) -> None:
        options = options if options is not None else ManagerOptions()

        if template is not None and not validate_template(template):
            raise InvalidTemplateError(describe_invalid_template(template))
        self._dispatcher = TemplateDispatcher(template)

        store = StateStore(dispatcher=self._dispatcher)
        if options.initial_sequence is not None:
            store.set_sequence(options.initial_sequence).unwrap()
        if options.initial_cursor is not None:
            store.set_current(options.initial_cursor).unwrap()
        self._store = store

        self.storage = storage if storage is not None else MemoryStorage()
        self.tracer = Tracer(enabled=options.dev_mode)
        self._on_error = options.on_error

    # ---------- Runtime switches ----------

    def dev_mode(self, on: bool) -> None:
        self.tracer.enabled = on

    def on_error(self, handler: ErrorSink | None) -> None:
        self._on_error = handler

    # ---------- Mutations ----------

    def append(self, record: StateRecord, callback: Callback[StateRecord] | None = None) -> Outcome[StateRecord]:
        self.tracer.start("append:", record)
        return self._finish(self._call(lambda: self._store.append(record)), callback)

    def insert(
        self, index: int, record: StateRecord, callback: Callback[StateRecord] | None = None
    ) -> Outcome[StateRecord]:
        self.tracer.start(f"insert at index: {index}", record)
        return self._finish(self._call(lambda: self._store.insert(index, record)), callback)

    def delete(self, index: int, callback: Callback[StateRecord] | None = None) -> Outcome[StateRecord]:
        self.tracer.start(f"delete index: {index}")
        return self._finish(self._store.delete(index), callback)

    def replace(
        self, index: int, record: StateRecord, callback: Callback[StateRecord] | None = None
    ) -> Outcome[StateRecord]:
        self.tracer.start(f"replace state at index: {index}", record)
        return self._finish(self._call(lambda: self._store.replace(index, record)), callback)

    # ---------- Navigation ----------

    def recall(self, index: int, callback: Callback[StateRecord] | None = None) -> Outcome[StateRecord]:
        self.tracer.start(f"recall index: {index}")
        return self._finish(self._call(lambda: self._store.recall(index)), callback)

    def undo(self, callback: Callback[StateRecord] | None = None) -> Outcome[StateRecord]:
        self.tracer.start(f"undo to index: {self.current() - 1} out of {self.last()}")
        return self._finish(self._call(lambda: self._store.undo()), callback)

    def redo(self, callback: Callback[StateRecord] | None = None) -> Outcome[StateRecord]:
        self.tracer.start(f"redo to index: {self.current() + 1} out of {self.last()}")
        return self._finish(self._call(lambda: self._store.redo()), callback)

    # ---------- Template and sequence ----------

    def template(self) -> dict[str, Handler]:
        return self._dispatcher.template()

    def set_template(
        self, template: Template, callback: Callback[dict[str, Handler]] | None = None
    ) -> Outcome[dict[str, Handler]]:
        self.tracer.start("set template:", sorted(template) if validate_template(template) else template)
        return self._finish(self._dispatcher.replace(template), callback)

    def sequence(self) -> list[StateRecord]:
        return self._store.sequence()

    def set_sequence(
        self, sequence: list[StateRecord], callback: Callback[list[StateRecord]] | None = None
    ) -> Outcome[list[StateRecord]]:
        self.tracer.start("set sequence:", sequence)
        return self._finish(self._store.set_sequence(sequence), callback)

    # ---------- Cursor ----------

    def current(self) -> int:
        return self._store.current()

    def first(self) -> int:
        return self._store.first()

    def last(self) -> int:
        return self._store.last()

    def set_current(self, index: int, callback: Callback[int] | None = None) -> Outcome[int]:
        self.tracer.start(f"set current index: {index}")
        return self._finish(self._store.set_current(index), callback)

    # ---------- Persistence ----------

    def export_state(self) -> PersistedState:
        """The data half of the manager, in the shape that gets persisted."""
        sequence, cursor = self._store.snapshot()
        return PersistedState(sequence=sequence, cursor=cursor, template_keys=self._dispatcher.keys())

    def save(self, key: str, callback: Callback[PersistedState] | None = None) -> Outcome[PersistedState]:
        self.tracer.start(f"save: {key}")
        state = self.export_state()
        try:
            save_state(self.storage, key, state)
        except SnapstackError as e:
            return self._finish(Outcome.failure(e), callback)
        return self._finish(Outcome.success(state), callback)

    def load(self, key: str, callback: Callback[PersistedState] | None = None) -> Outcome[PersistedState]:
        """
        Replaces the sequence and cursor with the state stored under ``key``.

        The active template is kept: handlers are never persisted and must be supplied
        by whoever constructs the manager.
        """
        self.tracer.start(f"load: {key}")
        try:
            state = load_state(self.storage, key)
        except SnapstackError as e:
            return self._finish(Outcome.failure(e), callback)

        try:
            cursor = state.cursor if state.cursor >= 0 else None
            restored = StateStore(state.sequence, cursor, dispatcher=self._dispatcher)
        except SnapstackError as e:
            return self._finish(Outcome.failure(e), callback)
        self._store = restored

        missing = [k for k in state.template_keys if k not in self._dispatcher.keys()]
        if missing:
            self.tracer.log("no handler for saved template keys:", missing)
        return self._finish(Outcome.success(state), callback)

    # ---------- Internal ----------

    def _call[T](self, operation: Callable[[], Outcome[T]]) -> Outcome[T]:
        try:
            return operation()
        except Exception as e:
            self.tracer.abort(e)
            raise

    def _finish[T](self, outcome: Outcome[T], callback: Callback[T] | None) -> Outcome[T]:
        self.tracer.end(outcome)
        if outcome.error is not None:
            self._report(outcome.error)
        if callback is not None:
            _ = callback(outcome)
        return outcome

    def _report(self, error: SnapstackError) -> None:
        if self._on_error is not None:
            _ = self._on_error(error)
        else:
            self.tracer.error(error)


def with_storage(
    storage: KeyValueStorage,
    key: str,
    template: Template | None = None,
    options: ManagerOptions | None = None,
) -> StateManager:
    """
    Builds a manager bound to ``storage`` and loads ``key`` into it when present.

    An absent key leaves the manager empty; a corrupt payload raises PersistenceError.
    """
    manager = StateManager(template, options, storage=storage)
    if storage.read(key) is not None:
        manager.load(key).unwrap()
    return manager
