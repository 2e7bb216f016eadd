"""Chord DHT routing simulator.

Builds a static Chord ring with finger tables, assigns keys to their
owners and measures greedy lookup hop counts against 0.5 * log2(N).
"""

from .base import (
    ChordError,
    ConfigurationError,
    Key,
    LookupResult,
    OwnershipMismatch,
    RoutingFault,
    generate_key_names,
    generate_node_names,
)
from .chord import Router, assign_keys, ground_truth, lookup
from .config import SimulationConfig
from .evaluator import EvaluationReport, Evaluator, estimated_hop_count
from .finger_table import FingerTable, FingerTableEntry, build_finger_tables
from .hashing import IdentifierHasher, generate_keys
from .ring import ChordNode, Interval, Ring, build_ring, create_nodes
from .simulator import ChordSimulator

__all__ = [
    "ChordError",
    "ConfigurationError",
    "RoutingFault",
    "OwnershipMismatch",
    "Key",
    "LookupResult",
    "generate_node_names",
    "generate_key_names",
    "IdentifierHasher",
    "generate_keys",
    "Interval",
    "ChordNode",
    "Ring",
    "build_ring",
    "create_nodes",
    "FingerTable",
    "FingerTableEntry",
    "build_finger_tables",
    "Router",
    "lookup",
    "assign_keys",
    "ground_truth",
    "Evaluator",
    "EvaluationReport",
    "estimated_hop_count",
    "SimulationConfig",
    "ChordSimulator",
]
