"""
Coordination store client interface.

The admin core talks to a hierarchical, strongly consistent key-value
tree (ZooKeeper-style) through the narrow CoordinationStore interface.
InMemoryCoordinationStore implements it for local tooling and tests.
"""

import threading
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from clusteradmin.utils.logging import get_logger

logger = get_logger(__name__)


class CoordinationError(Exception):
    """Base class for coordination store failures."""


class NodeExistsError(CoordinationError):
    """A create targeted a path that already exists."""


class CoordinationStore(ABC):
    """Abstract coordination store client."""

    @abstractmethod
    def exists(self, path: str) -> bool:
        """Check whether a node exists."""
        pass

    @abstractmethod
    def create_persistent(self, path: str, data: Optional[str] = None) -> None:
        """
        Create a persistent node, creating missing parents.

        Raises:
            NodeExistsError: If the node already exists
        """
        pass

    @abstractmethod
    def create_persistent_sequential(self, path_prefix: str, data: Optional[str] = None) -> str:
        """
        Create a node named ``path_prefix`` plus a monotonically increasing,
        zero-padded sequence number.

        Returns:
            The allocated path
        """
        pass

    @abstractmethod
    def read_data(self, path: str) -> Optional[str]:
        """Read node data, or None if the node does not exist."""
        pass

    @abstractmethod
    def update_persistent(self, path: str, data: Optional[str]) -> None:
        """Overwrite node data, creating the node (and parents) if absent."""
        pass

    @abstractmethod
    def delete_path_recursive(self, path: str) -> None:
        """Delete a node and all of its descendants. Missing paths are ignored."""
        pass

    @abstractmethod
    def get_children(self, path: str) -> List[str]:
        """List child names of a node; empty if the node does not exist."""
        pass


class InMemoryCoordinationStore(CoordinationStore):
    """
    Process-local coordination store.

    Each operation is atomic with respect to the others, mirroring the
    per-request atomicity of a remote coordination service.
    """

    def __init__(self):
        self._nodes: Dict[str, Optional[str]] = {"/": None}
        self._sequences: Dict[str, int] = {}
        self._lock = threading.RLock()

    @staticmethod
    def _parent(path: str) -> str:
        parent = path.rsplit("/", 1)[0]
        return parent or "/"

    @staticmethod
    def _validate(path: str) -> None:
        if not path.startswith("/") or (len(path) > 1 and path.endswith("/")):
            raise CoordinationError(f"Invalid path: {path!r}")

    def _ensure_parents(self, path: str) -> None:
        parent = self._parent(path)
        missing = []
        while parent not in self._nodes:
            missing.append(parent)
            parent = self._parent(parent)
        for p in reversed(missing):
            self._nodes[p] = None

    def exists(self, path: str) -> bool:
        self._validate(path)
        with self._lock:
            return path in self._nodes

    def create_persistent(self, path: str, data: Optional[str] = None) -> None:
        self._validate(path)
        with self._lock:
            if path in self._nodes:
                raise NodeExistsError(path)
            self._ensure_parents(path)
            self._nodes[path] = data

        logger.debug("Created node", path=path)

    def create_persistent_sequential(self, path_prefix: str, data: Optional[str] = None) -> str:
        self._validate(path_prefix)
        with self._lock:
            parent = self._parent(path_prefix)
            self._ensure_parents(path_prefix)

            seq = self._sequences.get(parent, 0)
            self._sequences[parent] = seq + 1
            path = f"{path_prefix}{seq:010d}"
            self._nodes[path] = data

        logger.debug("Created sequential node", path=path)
        return path

    def read_data(self, path: str) -> Optional[str]:
        self._validate(path)
        with self._lock:
            return self._nodes.get(path)

    def update_persistent(self, path: str, data: Optional[str]) -> None:
        self._validate(path)
        with self._lock:
            if path not in self._nodes:
                self._ensure_parents(path)
            self._nodes[path] = data

    def delete_path_recursive(self, path: str) -> None:
        self._validate(path)
        if path == "/":
            raise CoordinationError("Refusing to delete the root node")

        with self._lock:
            prefix = path + "/"
            doomed = [p for p in self._nodes if p == path or p.startswith(prefix)]
            for p in doomed:
                del self._nodes[p]

        if doomed:
            logger.debug("Deleted path", path=path, nodes=len(doomed))

    def get_children(self, path: str) -> List[str]:
        self._validate(path)
        with self._lock:
            if path not in self._nodes:
                return []
            prefix = "/" if path == "/" else path + "/"
            return sorted(
                p[len(prefix):] for p in self._nodes
                if p.startswith(prefix) and p != path and "/" not in p[len(prefix):]
            )
