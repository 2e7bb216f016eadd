"""Chord protocol simulation.

Builds a Chord ring of N nodes, assigns K keys, looks every key up and
prints the ring, the topology and a per-key lookup report, comparing
the mean hop count against the estimate 0.5 * log2(N).  The lookup
report is also written to ``<output-dir>/output_<N>_<K>.txt``.

Usage
-----
    python simulate.py 10 50
    python simulate.py 100 500 -m 20 --random-start
"""

import argparse
import logging
import os
import sys

from chord_sim.base import ChordError
from chord_sim.config import (
    DEFAULT_ID_BITS,
    DEFAULT_KEY_COUNT,
    DEFAULT_NODE_COUNT,
    DEFAULT_SEED,
    SimulationConfig,
)
from chord_sim.simulator import ChordSimulator

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Simulate Chord lookups")
    parser.add_argument("nodes", type=int, nargs="?",
                        default=DEFAULT_NODE_COUNT, help="number of nodes")
    parser.add_argument("keys", type=int, nargs="?",
                        default=DEFAULT_KEY_COUNT, help="number of keys")
    parser.add_argument("-m", "--id-bits", type=int, default=DEFAULT_ID_BITS,
                        help="identifier length in bits")
    parser.add_argument("--max-hops", type=int, default=None,
                        help="hop cap per lookup (default 2*m)")
    parser.add_argument("--start-node", default=None,
                        help="name of the node every lookup starts from")
    parser.add_argument("--random-start", action="store_true",
                        help="start each lookup from a seeded random node")
    parser.add_argument("--seed", type=int, default=DEFAULT_SEED)
    parser.add_argument("--strategy", choices=["scan", "walk"],
                        default="scan", help="finger table construction")
    parser.add_argument("--output-dir", default="output",
                        help="directory for the report file")
    parser.add_argument("--no-topology", action="store_true",
                        help="skip printing every finger table")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser.parse_args(argv)


def write_report(lines, output_dir, node_count, key_count):
    os.makedirs(output_dir, exist_ok=True)
    path = os.path.join(output_dir, f"output_{node_count}_{key_count}.txt")
    with open(path, "w") as f:
        for line in lines:
            f.write(line + "\n")
    return path


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level),
                        format=LOG_FORMAT)

    try:
        config = SimulationConfig(
            id_bits=args.id_bits,
            node_count=args.nodes,
            key_count=args.keys,
            max_hops=args.max_hops,
            start_node=args.start_node,
            random_start=args.random_start,
            seed=args.seed,
            finger_strategy=args.strategy,
        )
        sim = ChordSimulator(config)
        sim.build()
    except ChordError as exc:
        print(f"configuration error: {exc}", file=sys.stderr)
        return 2

    sep = "=" * 70
    print(f"\n{sep}")
    print(f"  CHORD SIMULATION  N={config.node_count}  K={config.key_count}  "
          f"m={config.id_bits}")
    print(sep)

    print("\n........printing ring..............")
    print(sim.format_ring())
    print(".....................................")

    if not args.no_topology:
        print("\n........printing topology..........")
        for line in sim.format_topology():
            print(line)

    report = sim.run()
    lines = sim.format_lookups(report)

    print("\n........printing lookups ..............")
    for line in lines:
        print(line)

    print(f"\n  correctness: {report.correctness:.1%}  "
          f"({len(report.successes)}/{len(report.outcomes)})  "
          f"median={report.median_hops:.1f}  p95={report.p95_hops}  "
          f"max={report.max_hops}")

    path = write_report(lines, args.output_dir,
                        config.node_count, config.key_count)
    print(f"  report written to {path}\n")
    return 0 if not report.failures else 1


if __name__ == "__main__":
    sys.exit(main())
