"""Finger-table construction.

Entry i (1-based) of node n starts at ``(n + 2**(i-1)) mod 2**m``,
covers ``[start_i, start_{i+1})`` and points at the owner of
``start_i``.  The last entry ends at n itself, one before start_1.
"""

import logging
from dataclasses import dataclass
from typing import Iterator

from .base import ConfigurationError, DHTNode
from .ring import Interval, Ring

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FingerTableEntry:
    index: int
    start: int
    interval: Interval
    node_id: int
    node_name: str

    def __str__(self):
        return (f"FingerTableEntry: {{start: {self.start}, "
                f"interval: {self.interval}, node: {self.node_name}}}")


class FingerTable:
    """The m routing entries of one node, ordered by index."""

    def __init__(self, entries: list[FingerTableEntry]):
        self.entries = list(entries)

    def __len__(self):
        return len(self.entries)

    def __iter__(self) -> Iterator[FingerTableEntry]:
        return iter(self.entries)

    def __reversed__(self) -> Iterator[FingerTableEntry]:
        return reversed(self.entries)

    def __getitem__(self, i: int) -> FingerTableEntry:
        return self.entries[i]

    def __eq__(self, other):
        if not isinstance(other, FingerTable):
            return NotImplemented
        return self.entries == other.entries

    def entry(self, index: int) -> FingerTableEntry:
        """Entry by its 1-based routing index."""
        if not 1 <= index <= len(self.entries):
            raise IndexError(f"finger index {index} out of range")
        return self.entries[index - 1]

    def __str__(self):
        return "[" + ", ".join(str(e) for e in self.entries) + "]"


def finger_start(node_id: int, index: int, id_bits: int) -> int:
    return (node_id + (1 << (index - 1))) % (1 << id_bits)


def _entry(index: int, node: DHTNode, owner: DHTNode,
           id_bits: int) -> FingerTableEntry:
    start = finger_start(node.node_id, index, id_bits)
    end = (node.node_id + (1 << index)) % (1 << id_bits)
    return FingerTableEntry(index, start, Interval(start, end),
                            owner.node_id, owner.name)


def _ring_offset(node_id: int, base: int, id_space: int) -> int:
    """Clockwise distance from *base* to *node_id*."""
    return (node_id - base) % id_space


def scan_finger_table(ring: Ring, node: DHTNode) -> FingerTable:
    """Resolve every finger start through the ring's ownership rule."""
    entries = []
    for i in range(1, ring.id_bits + 1):
        owner = ring.owner_of(finger_start(node.node_id, i, ring.id_bits))
        entries.append(_entry(i, node, owner, ring.id_bits))
    return FingerTable(entries)


def walk_finger_table(ring: Ring, node: DHTNode) -> FingerTable:
    """Build the table by advancing along successor links.

    Starts start_i are visited in increasing ring order, so the
    candidate only ever moves forward; the walk stops at the first node
    whose ring-adjusted identifier reaches the ring-adjusted start, or
    wraps back to *node* itself.
    """
    entries = []
    candidate = ring.successor_of(node)
    for i in range(1, ring.id_bits + 1):
        start = finger_start(node.node_id, i, ring.id_bits)
        target = _ring_offset(start, node.node_id, ring.id_space)
        while candidate is not node and \
                _ring_offset(candidate.node_id, node.node_id,
                             ring.id_space) < target:
            candidate = ring.successor_of(candidate)
        entries.append(_entry(i, node, candidate, ring.id_bits))
    return FingerTable(entries)


STRATEGIES = {
    "scan": scan_finger_table,
    "walk": walk_finger_table,
}


def build_finger_table(ring: Ring, node: DHTNode,
                       strategy: str = "scan") -> FingerTable:
    try:
        builder = STRATEGIES[strategy]
    except KeyError:
        raise ConfigurationError(
            f"unknown finger table strategy {strategy!r}") from None
    table = builder(ring, node)
    node.routing_table = table
    return table


def build_finger_tables(ring: Ring, strategy: str = "scan") -> Ring:
    """Replace the routing table of every node on *ring*."""
    if len(ring) == 0:
        raise ConfigurationError("cannot build finger tables on an empty ring")
    logger.info("Building the finger tables (%s)...", strategy)
    for node in ring:
        table = build_finger_table(ring, node, strategy)
        logger.debug("%s (%d): %s", node.name, node.node_id, table)
    return ring
