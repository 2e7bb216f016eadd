"""End-to-end Chord simulation.

Drives the pipeline hasher -> ring -> finger tables -> key assignment
-> lookups -> evaluation over one static ring, and renders the ring,
topology and lookup results as text lines.
"""

import logging
import random
from typing import Optional

from .base import (ConfigurationError, DHTNode, Key, LookupResult,
                   generate_node_names)
from .chord import Router, assign_keys
from .config import SimulationConfig
from .evaluator import EvaluationReport, Evaluator
from .finger_table import build_finger_tables
from .hashing import IdentifierHasher, generate_keys
from .ring import Ring, build_ring, create_nodes

logger = logging.getLogger(__name__)


class ChordSimulator:

    def __init__(self, config: Optional[SimulationConfig] = None,
                 hasher: Optional[IdentifierHasher] = None):
        self.config = (config or SimulationConfig()).validate()
        self.hasher = hasher or IdentifierHasher(self.config.id_bits)
        self.ring: Optional[Ring] = None
        self.keys: list[Key] = []
        self.owners: dict[str, str] = {}
        self.results: list[LookupResult] = []
        self.node_names: list[str] = []

    # ------------------------------------------------------------------
    # Build
    # ------------------------------------------------------------------

    def build(self, node_names: Optional[list[str]] = None) -> Ring:
        """Build the ring and finger tables, then assign keys."""
        if node_names is None:
            node_names = generate_node_names(self.config.node_count)
        self.node_names = list(node_names)
        self.ring = build_ring(create_nodes(self.node_names), self.hasher)
        start = self.config.start_node
        if start is not None and start not in self.ring:
            raise ConfigurationError(f"start node {start!r} is not on the ring")
        build_finger_tables(self.ring, self.config.finger_strategy)
        self.keys = generate_keys(self.config.key_count, self.hasher)
        self.owners = assign_keys(self.ring, self.keys)
        return self.ring

    def _require_ring(self) -> Ring:
        if self.ring is None:
            self.build()
        return self.ring

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def start_node(self, key: Key) -> DHTNode:
        ring = self._require_ring()
        if self.config.random_start:
            nodes = list(ring)
            return random.Random(self.config.seed + key.identifier).choice(nodes)
        if self.config.start_node is not None:
            return ring.node(self.config.start_node)
        return ring.node(self.node_names[0])

    def run(self) -> EvaluationReport:
        """Look up every key and evaluate the routes."""
        ring = self._require_ring()
        router = Router(ring, self.config.hop_limit)
        evaluator = Evaluator(self.owners, len(ring), ring)

        self.results = []
        for key in self.keys:
            logger.debug("Looking up %s (%d)", key.name, key.identifier)
            result = router.lookup(key.identifier, self.start_node(key))
            self.results.append(result)
            evaluator.record(key, result)

        report = evaluator.report
        logger.info("%d/%d lookups succeeded, mean hops %.2f",
                    len(report.successes), len(report.outcomes),
                    report.mean_hops)
        return report

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def format_ring(self) -> str:
        ring = self._require_ring()
        names = [n.name for n in ring.walk()]
        return " --- ".join(names + [names[0]])

    def format_topology(self) -> list[str]:
        ring = self._require_ring()
        lines = []
        for node in ring:
            succ = ring.successor_of(node)
            lines.append(f"{node.name} (id {node.node_id})  "
                         f"successor: {succ.name}  "
                         f"data: {sorted(node.data)}")
            for entry in node.routing_table:
                lines.append(f"    {entry}")
        return lines

    @staticmethod
    def format_lookups(report: EvaluationReport) -> list[str]:
        lines = []
        for outcome in report.outcomes:
            key, result = outcome.key, outcome.result
            if not outcome.success:
                lines.append(f"{key.name}: {key.identifier}\t"
                             f"lookup failed: {outcome.error}")
                continue
            lines.append(f"{key.name}: {key.identifier}\t"
                         f"{result.responsible_node}: {result.responsible_id}"
                         f"\thop count: {result.hop_count}"
                         f"\troute: {result.path}")
        lines.append("")
        lines.append(f"average hop count: {report.mean_hops}")
        lines.append(f"estimated average hop count: {report.estimated_hops}")
        return lines
