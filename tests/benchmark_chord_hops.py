"""Chord-only benchmark of hop count against network size.

Builds Chord rings at increasing N, looks every key up from a seeded
random node, and asserts that the mean hop count stays within a small
multiple of the 0.5 * log2(N) estimate and grows logarithmically.

Run:  python -m pytest tests/benchmark_chord_hops.py -v -s
"""

import math
import statistics

import pytest

from chord_sim.config import SimulationConfig
from chord_sim.simulator import ChordSimulator

ID_BITS = 16
LOOKUPS_PER_N = 200
N_VALUES = [10, 20, 50, 100]
# mean_hops <= COEF * 0.5 * log2(N) + 1  (the final successor step)
COEF = 2.5


def run_simulation(num_nodes: int, id_bits: int = ID_BITS,
                   key_count: int = LOOKUPS_PER_N):
    sim = ChordSimulator(SimulationConfig(
        id_bits=id_bits, node_count=num_nodes, key_count=key_count,
        random_start=True))
    return sim.run()


@pytest.mark.parametrize("n", N_VALUES)
def test_chord_hops_olog_n(n: int):
    """Mean hop count must stay near the 0.5 * log2(N) estimate."""
    report = run_simulation(n)

    assert report.correctness == 1.0, "all lookups should succeed"
    upper_bound = COEF * report.estimated_hops + 1

    print(f"\n  N={n:3d}:  mean_hops={report.mean_hops:.2f}  "
          f"estimate={report.estimated_hops:.2f}  bound={upper_bound:.1f}  "
          f"median={report.median_hops:.1f}  max={report.max_hops}")

    assert report.max_hops <= ID_BITS
    assert report.mean_hops <= upper_bound, (
        f"N={n}: mean hops {report.mean_hops:.2f} "
        f"exceeds {COEF}*0.5*log2(N)+1 = {upper_bound:.1f}"
    )


def test_chord_hops_scale_sublinearly():
    """Hop ratio (large N / small N) should be sublinear in N."""
    results = {}
    for n in N_VALUES:
        report = run_simulation(n)
        results[n] = {
            "mean": report.mean_hops,
            "median": report.median_hops,
            "hops": report.hop_counts,
        }

    print("\n  Chord hop count vs N:")
    for n in N_VALUES:
        r = results[n]
        print(f"    N={n:3d}:  mean={r['mean']:.2f}  median={r['median']:.2f}  "
              f"stdev={statistics.pstdev(r['hops']):.2f}  "
              f"0.5*log2(N)={0.5 * math.log2(n):.2f}")

    ratio = results[100]["mean"] / max(results[10]["mean"], 0.01)
    assert ratio < 100 / 10, (
        f"hop ratio N=100/N=10 = {ratio:.2f}x should be sublinear")
    assert ratio < COEF * math.log2(100) / math.log2(10), (
        f"hop ratio N=100/N=10 = {ratio:.2f}x should be O(log N)")
