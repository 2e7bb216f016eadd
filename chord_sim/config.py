"""Simulation parameters."""

from dataclasses import dataclass
from typing import Optional

from .base import ConfigurationError

DEFAULT_ID_BITS = 16  # identifier space: 2^16 positions
DEFAULT_NODE_COUNT = 10
DEFAULT_KEY_COUNT = 50
DEFAULT_SEED = 42


@dataclass(frozen=True)
class SimulationConfig:
    id_bits: int = DEFAULT_ID_BITS
    node_count: int = DEFAULT_NODE_COUNT
    key_count: int = DEFAULT_KEY_COUNT
    # None -> 2 * id_bits
    max_hops: Optional[int] = None
    # None -> first generated node ("Node 1")
    start_node: Optional[str] = None
    random_start: bool = False
    seed: int = DEFAULT_SEED
    finger_strategy: str = "scan"

    @property
    def id_space(self) -> int:
        return 2 ** self.id_bits

    @property
    def hop_limit(self) -> int:
        return self.max_hops if self.max_hops is not None else 2 * self.id_bits

    def validate(self) -> "SimulationConfig":
        if self.id_bits <= 0:
            raise ConfigurationError(
                f"id_bits must be positive, got {self.id_bits}")
        if self.node_count < 1:
            raise ConfigurationError(
                f"node_count must be at least 1, got {self.node_count}")
        if self.node_count > self.id_space:
            raise ConfigurationError(
                f"{self.node_count} nodes do not fit on a ring of "
                f"size {self.id_space}")
        if self.key_count < 0:
            raise ConfigurationError(
                f"key_count must be >= 0, got {self.key_count}")
        if self.max_hops is not None and self.max_hops <= 0:
            raise ConfigurationError(
                f"max_hops must be positive, got {self.max_hops}")
        return self
