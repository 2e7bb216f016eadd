"""Base classes and utilities for the Chord simulation.

Provides the error taxonomy, the result records produced by the
lookup engine, the abstract node contract every ring member
implements, and helpers for generating deterministic node and key
names.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional


class ChordError(Exception):
    """Root of every error raised by the simulator."""


class ConfigurationError(ChordError, ValueError):
    """The ring cannot be built from the given parameters."""


class RoutingFault(ChordError, RuntimeError):
    """A lookup could not reach the owner of its key."""

    def __init__(self, message: str, key: int, route: list):
        super().__init__(message)
        self.key = key
        self.route = list(route)


class OwnershipMismatch(ChordError, AssertionError):
    """A lookup returned a node other than the key's true owner."""

    def __init__(self, key_name: str, key: int, expected: str,
                 actual: Optional[str]):
        super().__init__(
            f"{key_name} ({key}): expected {expected}, got {actual}")
        self.key_name = key_name
        self.key = key
        self.expected = expected
        self.actual = actual


@dataclass(frozen=True)
class Key:
    """A named key and its position on the identifier ring."""
    name: str
    identifier: int


@dataclass
class LookupResult:
    """Result of a Chord key lookup."""
    key: int
    responsible_node: Optional[str]
    responsible_id: Optional[int]
    path: list = field(default_factory=list)
    success: bool = True
    error: Optional[str] = None

    @property
    def hop_count(self) -> int:
        return max(len(self.path) - 1, 0)

    def __str__(self):
        return (f"LookupResult(key={self.key}, node={self.responsible_node}, "
                f"hops={self.hop_count}, route={self.path})")


class DHTNode(ABC):
    """Abstract node contract consumed by the ring builders and router.

    A node is identified by its name.  Its identifier, successor and
    routing table are assigned by the build stages; the successor is
    held as an identifier and resolved through the owning ring.
    """

    def __init__(self, name: str):
        self.name = name
        self.node_id: Optional[int] = None
        self.successor: Optional[int] = None
        self.data: set[int] = set()
        self.routing_table = None

    def add_data(self, key: int):
        self.data.add(key)

    def has_data(self, key: int) -> bool:
        return key in self.data

    @abstractmethod
    def closest_preceding_node(self, key: int) -> Optional[int]:
        """Identifier of the known node closest to, but before, *key*."""
        ...

    @abstractmethod
    def routing_table_size(self) -> int:
        """Number of distinct entries in the routing table."""
        ...

    def __repr__(self):
        return f"{type(self).__name__}({self.name!r}, id={self.node_id})"


# ---------------------------------------------------------------------------
# Deterministic name generators (for reproducible simulations)
# ---------------------------------------------------------------------------

def generate_node_names(count: int) -> list[str]:
    """Return the names ``Node 1`` .. ``Node <count>``."""
    return [f"Node {i}" for i in range(1, count + 1)]


def generate_key_names(count: int) -> list[str]:
    """Return the names ``key 1`` .. ``key <count>``."""
    return [f"key {i}" for i in range(1, count + 1)]
