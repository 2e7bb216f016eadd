"""Chord hop-count visualization tool.

Runs the Chord simulation for several network sizes, collects lookup
traces, and produces static plots: mean hops vs N against the
0.5 * log2(N) estimate, hop count distributions, a single lookup route
drawn on the identifier ring, and one node's finger table.

Run from project root:
    python scripts/viz_chord_hops.py

Output: figures/*.png (created in ./figures/)
"""

import os
import sys

# Run from project root so chord_sim is on path
if __name__ == "__main__":
    sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import matplotlib.pyplot as plt
import numpy as np

from chord_sim.config import SimulationConfig
from chord_sim.evaluator import estimated_hop_count
from chord_sim.simulator import ChordSimulator

# ---------------------------------------------------------------------------
# Config (aligned with tests/benchmark_chord_hops.py)
# ---------------------------------------------------------------------------
ID_BITS = 16
KEYS_PER_N = 200
N_VALUES = [10, 20, 50, 100, 200]
FIGURES_DIR = "figures"


def run_benchmark():
    """Run the simulation for each N; return trace dicts and finger snapshots."""
    traces: list[dict] = []
    finger_snapshots: dict[int, dict] = {}  # N -> first node's fingers

    for n in N_VALUES:
        sim = ChordSimulator(SimulationConfig(
            id_bits=ID_BITS, node_count=n, key_count=KEYS_PER_N,
            random_start=True))
        ring = sim.build()
        first = ring.first
        finger_snapshots[n] = {
            "node_id": first.node_id,
            "starts": [e.start for e in first.routing_table],
            "owners": [e.node_id for e in first.routing_table],
        }
        node_ids = {node.name: node.node_id for node in ring}

        report = sim.run()
        for outcome in report.successes:
            result = outcome.result
            traces.append({
                "N": n,
                "key": result.key,
                "hop_count": result.hop_count,
                "path": [node_ids[name] for name in result.path],
            })
    return traces, finger_snapshots


def aggregate_by_n(traces: list[dict]):
    """Group by N; return dict N -> {mean_hops, median_hops, p95_hops, traces}."""
    by_n: dict[int, list[dict]] = {}
    for t in traces:
        by_n.setdefault(t["N"], []).append(t)
    agg = {}
    for n, group in by_n.items():
        hops = np.array([t["hop_count"] for t in group])
        agg[n] = {
            "mean_hops": float(hops.mean()),
            "median_hops": float(np.median(hops)),
            "p95_hops": float(np.percentile(hops, 95)),
            "traces": group,
        }
    return agg


# ---------------------------------------------------------------------------
# Plot 1: mean hops vs N + 0.5 * log2(N) estimate
# ---------------------------------------------------------------------------
def plot_hop_scaling(agg: dict, out_path: str):
    fig, ax = plt.subplots(figsize=(6, 4))
    ns = sorted(agg.keys())
    mean_hops = [agg[n]["mean_hops"] for n in ns]
    x_curve = np.linspace(min(ns), max(ns), 200)
    y_ref = 0.5 * np.log2(x_curve)

    ax.plot(ns, mean_hops, "o-", color="C0", linewidth=2, markersize=8,
            label="Mean observed hops")
    ax.plot(x_curve, y_ref, "--", color="gray", linewidth=1.5,
            label=r"$\frac{1}{2} \log_2 N$")
    ax.set_xlabel("Network size N")
    ax.set_ylabel("Mean hop count")
    ax.set_title("Chord: lookup hop count vs N")
    ax.legend()
    ax.set_xticks(ns)
    fig.tight_layout()
    fig.savefig(out_path, dpi=150, bbox_inches="tight")
    plt.close(fig)


# ---------------------------------------------------------------------------
# Plot 2: hop count distribution per N (boxplots)
# ---------------------------------------------------------------------------
def plot_distributions(agg: dict, out_path: str):
    ns = sorted(agg.keys())
    hops_by_n = [[t["hop_count"] for t in agg[n]["traces"]] for n in ns]

    fig, ax = plt.subplots(figsize=(6, 4))
    ax.boxplot(hops_by_n, tick_labels=ns)
    ax.scatter(range(1, len(ns) + 1), [estimated_hop_count(n) for n in ns],
               marker="x", color="C3", zorder=3, label="0.5 log2 N")
    ax.set_ylabel("Hop count")
    ax.set_xlabel("Network size N")
    ax.set_title("Lookup hop count distribution by N")
    ax.legend()
    fig.tight_layout()
    fig.savefig(out_path, dpi=150, bbox_inches="tight")
    plt.close(fig)


# ---------------------------------------------------------------------------
# Plot 3: one lookup route per N, drawn on the identifier ring
# ---------------------------------------------------------------------------
def _ring_xy(ids, id_space):
    theta = 2 * np.pi * np.asarray(ids, dtype=float) / id_space
    return np.sin(theta), np.cos(theta)


def plot_routes(agg: dict, out_path: str):
    id_space = 2 ** ID_BITS
    n_plots = len(N_VALUES)
    n_cols = 3
    n_rows = (n_plots + n_cols - 1) // n_cols
    fig, axes = plt.subplots(n_rows, n_cols, figsize=(4 * n_cols, 4 * n_rows))
    axes = np.atleast_1d(axes).flatten()

    cmap = plt.colormaps["viridis"].resampled(12)
    circle = np.linspace(0, 2 * np.pi, 400)

    for idx, n in enumerate(N_VALUES):
        ax = axes[idx]
        ax.plot(np.sin(circle), np.cos(circle), color="lightgray", lw=1)
        group = sorted(agg[n]["traces"], key=lambda t: t["hop_count"])
        trace = group[len(group) // 2]
        path = trace["path"]

        xs, ys = _ring_xy(path, id_space)
        for i in range(len(path) - 1):
            color = cmap(i / max(len(path) - 1, 1))
            ax.annotate("", xy=(xs[i + 1], ys[i + 1]), xytext=(xs[i], ys[i]),
                        arrowprops=dict(arrowstyle="->", color=color, lw=2))
        ax.plot(xs, ys, "ko", markersize=5)
        kx, ky = _ring_xy([trace["key"]], id_space)
        ax.plot(kx, ky, "r*", markersize=10)
        ax.set_xlim(-1.2, 1.2)
        ax.set_ylim(-1.2, 1.2)
        ax.set_aspect("equal")
        ax.axis("off")
        ax.set_title(f"N={n}, key={trace['key']}, hops={trace['hop_count']}")

    for j in range(n_plots, len(axes)):
        axes[j].set_visible(False)
    fig.suptitle("Chord lookup route (median-hop lookup per N)", y=1.02)
    fig.tight_layout()
    fig.savefig(out_path, dpi=150, bbox_inches="tight")
    plt.close(fig)


# ---------------------------------------------------------------------------
# Plot 4: finger table of one node (finger index vs distance reached)
# ---------------------------------------------------------------------------
def plot_fingers(finger_snapshots: dict[int, dict], out_path: str,
                 chosen_n: int = 50):
    snap = finger_snapshots.get(chosen_n)
    if not snap:
        return
    id_space = 2 ** ID_BITS
    node_id = snap["node_id"]
    start_dist = [(s - node_id) % id_space for s in snap["starts"]]
    owner_dist = [(o - node_id) % id_space or id_space for o in snap["owners"]]
    indices = np.arange(1, len(start_dist) + 1)

    fig, ax = plt.subplots(figsize=(7, 4))
    ax.bar(indices, owner_dist, color="steelblue", edgecolor="navy",
           alpha=0.8, label="owner distance")
    ax.plot(indices, start_dist, "k.--", label=r"start distance $2^{i-1}$")
    ax.set_yscale("log", base=2)
    ax.set_xlabel("Finger index i")
    ax.set_ylabel("Clockwise distance from node")
    ax.set_title(f"Chord finger table (node {node_id}, N={chosen_n})")
    ax.set_xticks(indices)
    ax.legend()
    fig.tight_layout()
    fig.savefig(out_path, dpi=150, bbox_inches="tight")
    plt.close(fig)


def main():
    os.makedirs(FIGURES_DIR, exist_ok=True)
    print("Running Chord simulations...")
    traces, finger_snapshots = run_benchmark()
    print(f"  Collected {len(traces)} lookup traces.")
    agg = aggregate_by_n(traces)

    base = os.path.join(FIGURES_DIR, "chord")
    print("Generating plots...")
    plot_hop_scaling(agg, f"{base}_hop_scaling.png")
    print(f"  Saved {base}_hop_scaling.png")
    plot_distributions(agg, f"{base}_hop_distributions.png")
    print(f"  Saved {base}_hop_distributions.png")
    plot_routes(agg, f"{base}_route_example.png")
    print(f"  Saved {base}_route_example.png")
    plot_fingers(finger_snapshots, f"{base}_fingers.png", chosen_n=50)
    print(f"  Saved {base}_fingers.png")
    print("Done.")


if __name__ == "__main__":
    main()
