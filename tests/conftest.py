"""Shared fixtures for the Chord simulation tests."""

import pytest

from chord_sim.base import Key
from chord_sim.chord import assign_keys
from chord_sim.finger_table import build_finger_tables
from chord_sim.hashing import IdentifierHasher
from chord_sim.ring import build_ring, create_nodes


class FixedHasher(IdentifierHasher):
    """Places names at hand-picked identifiers."""

    def __init__(self, id_bits, table):
        super().__init__(id_bits)
        self.table = dict(table)

    def hash(self, name):
        return self.table[name]


@pytest.fixture
def small_ring():
    """m=3 ring with nodes at 0, 3 and 5; keys at 4 and 6."""
    hasher = FixedHasher(3, {"A": 0, "B": 3, "C": 5})
    ring = build_ring(create_nodes(["A", "B", "C"]), hasher)
    build_finger_tables(ring)
    keys = [Key("k4", 4), Key("k6", 6)]
    owners = assign_keys(ring, keys)
    return ring, keys, owners


@pytest.fixture
def fixed_hasher():
    """Factory for hashers with hand-picked identifiers."""
    return FixedHasher
