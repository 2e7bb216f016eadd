"""End-to-end simulation, configuration and CLI tests."""

import math

import pytest

from chord_sim.base import ConfigurationError
from chord_sim.config import SimulationConfig
from chord_sim.simulator import ChordSimulator
from simulate import main


# ──────────────────────────────────────────────────────────────────────
# 1. Configuration
# ──────────────────────────────────────────────────────────────────────

def test_default_config():
    config = SimulationConfig().validate()
    assert (config.id_bits, config.node_count, config.key_count) == (16, 10, 50)
    assert config.hop_limit == 32
    assert SimulationConfig(max_hops=5).hop_limit == 5


@pytest.mark.parametrize("kwargs", [
    {"id_bits": 0},
    {"id_bits": -1},
    {"node_count": 0},
    {"key_count": -1},
    {"id_bits": 3, "node_count": 9},
    {"max_hops": 0},
])
def test_invalid_config(kwargs):
    with pytest.raises(ConfigurationError):
        SimulationConfig(**kwargs).validate()
    with pytest.raises(ConfigurationError):
        ChordSimulator(SimulationConfig(**kwargs))


# ──────────────────────────────────────────────────────────────────────
# 2. Simulation
# ──────────────────────────────────────────────────────────────────────

def test_ten_nodes_fifty_keys():
    sim = ChordSimulator(SimulationConfig(id_bits=16, node_count=10,
                                          key_count=50))
    ring = sim.build()
    report = sim.run()

    assert len(ring) == 10
    assert len(sim.keys) == 50
    assert len(report.outcomes) == 50
    assert report.correctness == 1.0
    assert all(r.path[0] == "Node 1" for r in sim.results)
    assert 0 < report.mean_hops <= 16
    assert report.estimated_hops == pytest.approx(0.5 * math.log2(10))
    print(f"\n  N=10 K=50 m=16: mean={report.mean_hops:.2f}  "
          f"estimate={report.estimated_hops:.2f}")


@pytest.mark.parametrize("strategy", ["scan", "walk"])
def test_random_start_and_strategies(strategy):
    sim = ChordSimulator(SimulationConfig(node_count=20, key_count=100,
                                          random_start=True,
                                          finger_strategy=strategy))
    report = sim.run()
    assert report.correctness == 1.0
    starts = {r.path[0] for r in sim.results}
    assert len(starts) > 1


def test_named_start_node():
    sim = ChordSimulator(SimulationConfig(start_node="Node 3"))
    sim.run()
    assert all(r.path[0] == "Node 3" for r in sim.results)


def test_rebuild_from_same_names_is_identical():
    a = ChordSimulator(SimulationConfig(node_count=15))
    b = ChordSimulator(SimulationConfig(node_count=15))
    ring_a, ring_b = a.build(), b.build()
    assert [n.name for n in ring_a] == [n.name for n in ring_b]
    for x, y in zip(ring_a, ring_b):
        assert x.successor == y.successor
        assert x.routing_table == y.routing_table
        assert x.data == y.data
    assert a.owners == b.owners


def test_format_ring_and_topology():
    sim = ChordSimulator(SimulationConfig(node_count=4, key_count=5))
    sim.build()
    ring_line = sim.format_ring().split(" --- ")
    assert len(ring_line) == 5
    assert ring_line[0] == ring_line[-1] == sim.ring.first.name

    topology = sim.format_topology()
    assert len(topology) == 4 * (1 + 16)
    assert "FingerTableEntry: {start:" in topology[1]


def test_format_lookups():
    sim = ChordSimulator(SimulationConfig(node_count=5, key_count=3))
    report = sim.run()
    lines = sim.format_lookups(report)
    assert lines[0].startswith("key 1: ")
    assert "\thop count: " in lines[0]
    assert "\troute: ['Node 1'" in lines[0]
    assert lines[-2].startswith("average hop count: ")
    assert lines[-1].startswith("estimated average hop count: ")


# ──────────────────────────────────────────────────────────────────────
# 3. Command line
# ──────────────────────────────────────────────────────────────────────

def test_cli_writes_report(tmp_path, capsys):
    code = main(["10", "50", "--output-dir", str(tmp_path), "--no-topology"])
    assert code == 0

    out = capsys.readouterr().out
    assert "printing ring" in out
    assert "estimated average hop count: " in out

    report = tmp_path / "output_10_50.txt"
    lines = report.read_text().splitlines()
    assert len(lines) == 50 + 3
    assert lines[-1].startswith("estimated average hop count: 1.66")


def test_unknown_start_node_rejected_before_lookups():
    sim = ChordSimulator(SimulationConfig(start_node="Node 99"))
    with pytest.raises(ConfigurationError, match="Node 99"):
        sim.build()
    with pytest.raises(ConfigurationError):
        ChordSimulator(SimulationConfig(start_node="Node 99")).run()
    assert sim.results == []


def test_cli_rejects_unknown_start_node(tmp_path, capsys):
    code = main(["10", "50", "--start-node", "Node 99",
                 "--output-dir", str(tmp_path)])
    assert code == 2
    assert "Node 99" in capsys.readouterr().err
    assert not (tmp_path / "output_10_50.txt").exists()


def test_cli_rejects_bad_config(tmp_path, capsys):
    code = main(["0", "5", "--output-dir", str(tmp_path)])
    assert code == 2
    assert "configuration error" in capsys.readouterr().err
