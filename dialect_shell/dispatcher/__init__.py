"""Special action dispatcher."""

from .dispatcher import DispatchResult, Dispatcher, QueryBackend

__all__ = ["DispatchResult", "Dispatcher", "QueryBackend"]
