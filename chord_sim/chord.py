"""Key assignment and greedy finger routing over a built ring.

Keys are stored on the first node at or after their identifier,
wrapping to the smallest node.  The router starts at a node and hops
to the closest preceding finger until the current node or its
successor holds the key, giving up after a fixed number of hops.
"""

import logging
from typing import Iterable, Optional

from .base import DHTNode, Key, LookupResult, RoutingFault
from .ring import Ring

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Key assignment
# ---------------------------------------------------------------------------

def assign_keys(ring: Ring, keys: Iterable[Key]) -> dict[str, str]:
    """Store every key on its owner; return key name -> owner name."""
    owners = {}
    for key in keys:
        owner = ring.owner_of(key.identifier)
        owner.add_data(key.identifier)
        owners[key.name] = owner.name
    logger.info("Assigned %d keys to %d nodes", len(owners), len(ring))
    return owners


def ground_truth(key: int, node_ids: list[int]) -> int:
    """Correct responsible node: first node with ID >= key (wrapping)."""
    sorted_ids = sorted(node_ids)
    for nid in sorted_ids:
        if nid >= key:
            return nid
    return sorted_ids[0]


def check_response(ring: Ring, key: int, node_name: Optional[str]) -> bool:
    """Does the node called *node_name* actually store *key*?"""
    if node_name is None or node_name not in ring:
        logger.warning("Node %s not found", node_name)
        return False
    return ring.node(node_name).has_data(key)


# ---------------------------------------------------------------------------
# Routing
# ---------------------------------------------------------------------------

class Router:
    """Greedy finger-table routing over a fully built ring.

    The router never mutates the ring.  ``max_hops`` bounds every
    lookup; the default is ``2 * m``.
    """

    def __init__(self, ring: Ring, max_hops: Optional[int] = None):
        self.ring = ring
        self.max_hops = max_hops if max_hops is not None else 2 * ring.id_bits

    def _next_node(self, current: DHTNode, key: int, path: list) -> DHTNode:
        next_id = current.closest_preceding_node(key)
        if next_id is None or next_id == current.node_id:
            # key lies past the end of the ring
            return self.ring.first
        node = self.ring.get_node(next_id)
        if node is None:
            raise RoutingFault(
                f"{current.name} routes to unknown node {next_id}", key, path)
        return node

    def resolve(self, key: int, start: DHTNode) -> LookupResult:
        """Route to the node storing *key*, raising on failure."""
        current = start
        path = [current.name]

        while True:
            if current.has_data(key):
                return LookupResult(key, current.name, current.node_id, path)

            succ = self.ring.successor_of(current)
            if succ.has_data(key):
                path.append(succ.name)
                if len(path) - 1 > self.max_hops:
                    break
                return LookupResult(key, succ.name, succ.node_id, path)

            next_node = self._next_node(current, key, path)
            if next_node is current:
                raise RoutingFault(
                    f"no progress from {current.name} towards key {key}",
                    key, path)
            path.append(next_node.name)
            if len(path) - 1 > self.max_hops:
                break
            current = next_node

        raise RoutingFault(
            f"key {key} not found within {self.max_hops} hops", key, path)

    def lookup(self, key: int, start: Optional[DHTNode] = None) -> LookupResult:
        """Find the node storing *key*, starting at *start*.

        A routing fault is reported as a failed result rather than
        raised, so one corrupt route never aborts a run.
        """
        if start is None:
            start = self.ring.first
        try:
            return self.resolve(key, start)
        except RoutingFault as exc:
            logger.warning("Routing fault: %s (route %s)", exc, exc.route)
            return LookupResult(key, None, None, exc.route,
                                success=False, error=str(exc))


def lookup(ring: Ring, key: int, start: Optional[DHTNode] = None,
           max_hops: Optional[int] = None) -> LookupResult:
    return Router(ring, max_hops).lookup(key, start)
