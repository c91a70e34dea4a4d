"""
In-memory, indexed history of application state snapshots.

Provides:
- StateManager: append/insert/delete/replace snapshots, recall them by index, undo/redo
- TemplateDispatcher: routes recalled fields to caller-supplied handlers
- Outcome: success-or-failure result returned by every operation
- Key-value persistence of the (sequence, cursor) pair
"""

from .config import ManagerOptions, default_storage_dir
from .exceptions import (
    BoundaryError,
    ConfigurationError,
    InvalidIndexError,
    InvalidSequenceError,
    InvalidTemplateError,
    PersistenceError,
    SnapstackError,
)
from .manager import StateManager, with_storage
from .models import Outcome, PersistedState
from .persistence import FileStorage, KeyValueStorage, MemoryStorage
from .store import StateStore
from .template import TemplateDispatcher, validate_template

__all__ = [
    "ManagerOptions",
    "default_storage_dir",
    "SnapstackError",
    "BoundaryError",
    "ConfigurationError",
    "InvalidIndexError",
    "InvalidSequenceError",
    "InvalidTemplateError",
    "PersistenceError",
    "StateManager",
    "with_storage",
    "Outcome",
    "PersistedState",
    "FileStorage",
    "KeyValueStorage",
    "MemoryStorage",
    "StateStore",
    "TemplateDispatcher",
    "validate_template",
]
