"""Lookup evaluation against ground-truth ownership."""

import logging
import math
import statistics
from dataclasses import dataclass, field
from typing import Optional

from .base import (ChordError, Key, LookupResult, OwnershipMismatch,
                   RoutingFault)
from .chord import check_response
from .ring import Ring

logger = logging.getLogger(__name__)


def estimated_hop_count(node_count: int) -> float:
    """Theoretical mean hop count, ``0.5 * log2(N)``."""
    return 0.5 * math.log2(node_count)


@dataclass
class LookupOutcome:
    key: Key
    result: LookupResult
    expected: str
    error: Optional[ChordError] = None

    @property
    def success(self) -> bool:
        return self.error is None


@dataclass
class EvaluationReport:
    node_count: int
    outcomes: list = field(default_factory=list)

    @property
    def successes(self) -> list:
        return [o for o in self.outcomes if o.success]

    @property
    def failures(self) -> list:
        return [o for o in self.outcomes if not o.success]

    @property
    def hop_counts(self) -> list[int]:
        return [o.result.hop_count for o in self.successes]

    @property
    def correctness(self) -> float:
        if not self.outcomes:
            return 0.0
        return len(self.successes) / len(self.outcomes)

    @property
    def mean_hops(self) -> float:
        hops = self.hop_counts
        return statistics.mean(hops) if hops else 0.0

    @property
    def median_hops(self) -> float:
        hops = self.hop_counts
        return statistics.median(hops) if hops else 0.0

    @property
    def p95_hops(self) -> int:
        sh = sorted(self.hop_counts)
        if not sh:
            return 0
        return sh[int(len(sh) * 0.95)] if len(sh) > 1 else sh[0]

    @property
    def max_hops(self) -> int:
        return max(self.hop_counts, default=0)

    @property
    def estimated_hops(self) -> float:
        return estimated_hop_count(self.node_count)

    def raise_for_failures(self):
        failures = self.failures
        if failures:
            raise failures[0].error


class Evaluator:
    """Classify lookups and accumulate hop statistics.

    ``ground_truth`` maps each key name to the name of the node that
    key assignment stored it on.  When a *ring* is given, the returned
    node must also hold the key in its data set.
    """

    def __init__(self, ground_truth: dict[str, str], node_count: int,
                 ring: Optional[Ring] = None):
        self.ground_truth = ground_truth
        self.ring = ring
        self.report = EvaluationReport(node_count)

    def record(self, key: Key, result: LookupResult) -> LookupOutcome:
        expected = self.ground_truth[key.name]
        error = None
        if not result.success:
            error = RoutingFault(result.error or "lookup failed",
                                 key.identifier, result.path)
        elif result.responsible_node != expected or (
                self.ring is not None and not check_response(
                    self.ring, key.identifier, result.responsible_node)):
            error = OwnershipMismatch(key.name, key.identifier, expected,
                                      result.responsible_node)
            logger.warning("Lookup failed for %s with value %d: %s",
                           key.name, key.identifier, error)

        outcome = LookupOutcome(key, result, expected, error)
        self.report.outcomes.append(outcome)
        return outcome

    def evaluate(self, pairs) -> EvaluationReport:
        """Record every ``(key, result)`` pair and return the report."""
        for key, result in pairs:
            self.record(key, result)
        return self.report
