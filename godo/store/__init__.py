"""Store module."""

from godo.store.memory import Todo, TodoStore, RequestCounter, ServerState

__all__ = [
    "Todo",
    "TodoStore",
    "RequestCounter",
    "ServerState",
]
