"""Coordination store interface, path layout and record encoding."""

from clusteradmin.coordination.store import (
    CoordinationError,
    CoordinationStore,
    InMemoryCoordinationStore,
    NodeExistsError,
)

__all__ = [
    "CoordinationError",
    "CoordinationStore",
    "InMemoryCoordinationStore",
    "NodeExistsError",
]
