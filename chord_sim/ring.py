"""Identifier ring and overlay construction.

Nodes are hashed onto the ring, ordered by identifier and linked to
their successor, with the highest identifier wrapping back to the
lowest.  The :class:`Ring` owns every node; successor and finger
references are identifiers resolved through it.
"""

import bisect
import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional

from .base import ConfigurationError, DHTNode
from .hashing import IdentifierHasher

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Ring-interval helpers
# ---------------------------------------------------------------------------

def in_open(x: int, a: int, b: int) -> bool:
    """Is *x* in the open interval (a, b) on the ring?"""
    if a == b:
        return x != a
    if a < b:
        return a < x < b
    return x > a or x < b


@dataclass(frozen=True)
class Interval:
    """Half-open ring range ``[start, end)``.

    ``start > end`` wraps past zero; ``start == end`` spans the whole
    ring.
    """
    start: int
    end: int

    def contains(self, identifier: int) -> bool:
        if self.start < self.end:
            return self.start <= identifier < self.end
        return identifier >= self.start or identifier < self.end

    def __contains__(self, identifier: int) -> bool:
        return self.contains(identifier)

    def __str__(self):
        return f"({self.start},{self.end})"


# ---------------------------------------------------------------------------
# Nodes
# ---------------------------------------------------------------------------

class ChordNode(DHTNode):

    def closest_preceding_node(self, key: int) -> Optional[int]:
        """Return the finger owner closest to (but preceding) *key*.

        Fingers are scanned from the longest reach down; ``None`` means
        no finger lies strictly between this node and *key*.
        """
        if self.routing_table is None:
            raise ConfigurationError(
                f"{self.name} has no finger table; build it first")
        for entry in reversed(self.routing_table):
            owner = entry.node_id
            if owner != self.node_id and in_open(owner, self.node_id, key):
                return owner
        return None

    def routing_table_size(self) -> int:
        if self.routing_table is None:
            return 0
        return len({e.node_id for e in self.routing_table} - {self.node_id})


def create_nodes(names: Iterable[str]) -> list[ChordNode]:
    return [ChordNode(name) for name in names]


# ---------------------------------------------------------------------------
# Ring
# ---------------------------------------------------------------------------

class Ring:
    """The ordered set of nodes sharing one identifier space."""

    def __init__(self, nodes: Iterable[DHTNode], id_bits: int):
        self.id_bits = id_bits
        self.id_space = 2 ** id_bits
        self._nodes = sorted(nodes, key=lambda n: n.node_id)
        self._ids = [n.node_id for n in self._nodes]
        self._by_id = {n.node_id: n for n in self._nodes}
        self._by_name = {n.name: n for n in self._nodes}

    def __len__(self):
        return len(self._nodes)

    def __iter__(self) -> Iterator[DHTNode]:
        return iter(self._nodes)

    def __contains__(self, name: str) -> bool:
        return name in self._by_name

    @property
    def node_ids(self) -> list[int]:
        return list(self._ids)

    @property
    def first(self) -> DHTNode:
        """The node with the smallest identifier."""
        return self._nodes[0]

    def node(self, name: str) -> DHTNode:
        try:
            return self._by_name[name]
        except KeyError:
            raise KeyError(f"no node named {name!r} on the ring") from None

    def get_node(self, node_id: int) -> Optional[DHTNode]:
        return self._by_id.get(node_id)

    def successor_of(self, node: DHTNode) -> DHTNode:
        return self._by_id[node.successor]

    def predecessor_of(self, node: DHTNode) -> DHTNode:
        i = bisect.bisect_left(self._ids, node.node_id)
        return self._nodes[i - 1]

    def owner_of(self, identifier: int) -> DHTNode:
        """First node whose identifier is >= *identifier*, wrapping."""
        i = bisect.bisect_left(self._ids, identifier % self.id_space)
        if i == len(self._nodes):
            return self._nodes[0]
        return self._nodes[i]

    def responsible_interval(self, node: DHTNode) -> Interval:
        """Identifiers owned by *node*: ``[pred + 1, node + 1)``."""
        pred = self.predecessor_of(node)
        return Interval((pred.node_id + 1) % self.id_space,
                        (node.node_id + 1) % self.id_space)

    def walk(self, start: Optional[DHTNode] = None) -> Iterator[DHTNode]:
        """Follow successor links once around the ring from *start*."""
        node = start if start is not None else self.first
        for _ in range(len(self._nodes)):
            yield node
            node = self.successor_of(node)


def build_ring(nodes: Iterable[DHTNode], hasher: IdentifierHasher) -> Ring:
    """Hash every node onto the ring and link each to its successor.

    Raises :class:`ConfigurationError` for an empty node set, duplicate
    names, or two names hashing to the same identifier.
    """
    nodes = list(nodes)
    if not nodes:
        raise ConfigurationError("cannot build a ring with zero nodes")

    names: set[str] = set()
    owners: dict[int, str] = {}
    for node in nodes:
        if node.name in names:
            raise ConfigurationError(f"duplicate node name {node.name!r}")
        names.add(node.name)
        node_id = hasher.hash(node.name)
        if node_id in owners:
            raise ConfigurationError(
                f"identifier collision: {node.name!r} and "
                f"{owners[node_id]!r} both hash to {node_id}")
        owners[node_id] = node.name
        node.node_id = node_id

    ring = Ring(nodes, hasher.id_bits)
    ordered = list(ring)
    for i, node in enumerate(ordered):
        node.successor = ordered[(i + 1) % len(ordered)].node_id

    logger.info("Built ring of %d nodes (m=%d)", len(ring), hasher.id_bits)
    logger.debug("Ring order: %s", [n.node_id for n in ordered])
    return ring
