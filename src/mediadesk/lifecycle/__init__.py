"""Request lifecycle: open/closed sets and the transitions between them."""

from mediadesk.lifecycle.manager import RequestLifecycleManager
from mediadesk.lifecycle.memory import InMemoryRequestStore
from mediadesk.lifecycle.store import RequestStore

__all__ = ["InMemoryRequestStore", "RequestLifecycleManager", "RequestStore"]
