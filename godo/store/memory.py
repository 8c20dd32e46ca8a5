"""
In-memory todo store and request counter.
State lives for the lifetime of the process and is never persisted.
"""

import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List
import logging

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now().astimezone()


class Todo(BaseModel):
    """A thing to do."""
    body: str
    completed: bool = False
    created_at: datetime = Field(default_factory=_now)


class TodoStore:
    """
    Maps list names to ordered sequences of todos.
    Lists are created on first insert. Appends and snapshots are serialized
    by a single lock, so concurrent requests never interleave writes.
    """

    def __init__(self):
        self._lists: Dict[str, List[Todo]] = {}
        self._lock = threading.Lock()

    def append(self, list_name: str, todo: Todo) -> Todo:
        """Append a todo to the end of a list and return the stored value."""
        with self._lock:
            self._lists.setdefault(list_name, []).append(todo)
            stored = self._lists[list_name][-1]

        logger.info(
            f"added todo: '{stored.body}' to list: '{list_name}' "
            f"at {stored.created_at.isoformat()}"
        )
        return stored

    def create(self, list_name: str, body: str) -> Todo:
        """Build a new, not yet completed todo and append it."""
        return self.append(list_name, Todo(body=body, completed=False))

    def snapshot(self) -> Dict[str, List[Todo]]:
        """Copy of the full store, safe to serialize without the lock."""
        with self._lock:
            return {name: list(todos) for name, todos in self._lists.items()}

    def __len__(self) -> int:
        with self._lock:
            return sum(len(todos) for todos in self._lists.values())


class RequestCounter:
    """Counts requests to the root path."""

    def __init__(self):
        self._count = 0
        self._lock = threading.Lock()

    def increment(self) -> int:
        with self._lock:
            self._count += 1
            return self._count

    @property
    def value(self) -> int:
        with self._lock:
            return self._count


@dataclass
class ServerState:
    """Shared mutable state owned by one server instance."""
    store: TodoStore = field(default_factory=TodoStore)
    counter: RequestCounter = field(default_factory=RequestCounter)
