"""
main.py — SSSP Trace Comparison Flask App
=========================================
JSON API in front of the tracers.

Routes:
  GET  /api/algorithms         – registered tracers
  POST /api/graph/generate     – generate a seeded random graph
  POST /api/run                – run both tracers, return traces + comparison
  POST /api/path               – path & node status at one snapshot

State management:
  None. Every request carries (or generates) its graph and re-runs the
  tracers from scratch; a trace is a pure function of (graph, source), so
  there is nothing worth keeping between requests.

Configuration:
  app.config defaults below, overridable with SSSP_TRACE_* environment
  variables (e.g. SSSP_TRACE_MAX_NODES=80).
"""

import logging
from dataclasses import asdict

from flask import Flask, jsonify, request

from graph import Graph, GraphFormatError
from tracers import TraceError, get_algorithm, list_algorithms
from engine import Recorder, export_snapshot, run_comparison, status_for
from engine.recorder import ComparisonResult

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------
DEFAULT_NODE_COUNT = 10
DEFAULT_DENSITY    = 0.18
DEFAULT_SEED       = 42

DEFAULTS = {
    "MAX_NODES":          60,
    "DEFAULT_NODE_COUNT": DEFAULT_NODE_COUNT,
    "DEFAULT_DENSITY":    DEFAULT_DENSITY,
    "DEFAULT_SEED":       DEFAULT_SEED,
}


app = Flask(__name__)
app.config.update(DEFAULTS)
app.config.from_prefixed_env("SSSP_TRACE")


# ---------------------------------------------------------------------------
# Request helpers
# ---------------------------------------------------------------------------
def _payload() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError("request body must be a JSON object")
    return data


def _number(data: dict, key: str, default, cast):
    raw = data.get(key, default)
    try:
        return cast(raw)
    except (TypeError, ValueError):
        raise ValueError(f"{key} must be a number, got {raw!r}") from None


def _generate(data: dict) -> Graph:
    num_nodes = _number(data, "num_nodes", app.config["DEFAULT_NODE_COUNT"], int)
    if num_nodes > app.config["MAX_NODES"]:
        raise ValueError(f"num_nodes is limited to {app.config['MAX_NODES']}")
    seed = _number(data, "seed", app.config["DEFAULT_SEED"], lambda s: s if s is None else int(s))
    return Graph.generate_random(
        num_nodes=num_nodes,
        density=_number(data, "density", app.config["DEFAULT_DENSITY"], float),
        seed=seed,
    )


def _graph_from(data: dict) -> Graph:
    """Graph from the request body, or a generated one when none is given."""
    if "graph" in data:
        g = Graph.from_dict(data["graph"])
    else:
        g = _generate(data)
    if g.node_count() > app.config["MAX_NODES"]:
        raise ValueError(f"graph has {g.node_count()} nodes, limit is {app.config['MAX_NODES']}")
    return g


def _endpoints(graph: Graph, data: dict):
    ids = graph.node_ids()
    source = str(data.get("source", ids[0] if ids else "0"))
    target = data.get("target")
    if source not in graph.nodes:
        raise ValueError(f"unknown source node {source!r}")
    if target is not None:
        target = str(target)
        if target not in graph.nodes:
            raise ValueError(f"unknown target node {target!r}")
    return source, target


def _comparison_dict(result: ComparisonResult) -> dict:
    data = asdict(result)
    data["disagreements"] = {n: list(pair) for n, pair in result.disagreements.items()}
    return data


def _path_dict(path) -> dict:
    return {
        "pairs":    sorted([list(p) for p in path.pairs]),
        "nodes":    sorted(path.nodes),
        "ordered":  list(path.ordered),
        "complete": path.complete,
    }


# ---------------------------------------------------------------------------
# Error handlers
# ---------------------------------------------------------------------------
@app.errorhandler(GraphFormatError)
def handle_graph_format(err):
    return jsonify({"error": str(err)}), 400


@app.errorhandler(ValueError)
def handle_bad_request(err):
    return jsonify({"error": str(err)}), 400


@app.errorhandler(TraceError)
def handle_trace_error(err):
    logger.error("Trace failed: %s", err)
    return jsonify({"error": str(err)}), 500


# ---------------------------------------------------------------------------
# API: Registry
# ---------------------------------------------------------------------------
@app.route("/api/algorithms", methods=["GET"])
def api_algorithms():
    return jsonify({"algorithms": [a.to_dict() for a in list_algorithms()]})


# ---------------------------------------------------------------------------
# API: Graph Generation
# ---------------------------------------------------------------------------
@app.route("/api/graph/generate", methods=["POST"])
def api_graph_generate():
    data = _payload()
    g = _generate(data)
    return jsonify({"graph": g.to_dict(), "node_ids": g.node_ids()})


# ---------------------------------------------------------------------------
# API: Run both tracers
# ---------------------------------------------------------------------------
@app.route("/api/run", methods=["POST"])
def api_run():
    data = _payload()
    graph = _graph_from(data)
    source, target = _endpoints(graph, data)

    left, right, comparison = run_comparison(graph, source, target)

    runs = {}
    for rec in (left, right):
        run = rec.export()
        if target is not None:
            run["path"] = _path_dict(rec.final_path())
        runs[rec.algo_key] = run

    return jsonify({
        "graph":      graph.to_dict(),
        "source":     source,
        "target":     target,
        "runs":       runs,
        "comparison": _comparison_dict(comparison),
    })


# ---------------------------------------------------------------------------
# API: Path at one snapshot
# ---------------------------------------------------------------------------
@app.route("/api/path", methods=["POST"])
def api_path():
    data = _payload()
    graph = _graph_from(data)
    source, target = _endpoints(graph, data)
    if target is None:
        raise ValueError("target is required")

    algo_key = data.get("algo", "dijkstra")
    if get_algorithm(algo_key) is None:
        raise ValueError(f"Unknown algorithm: {algo_key}")

    rec = Recorder()
    rec.start(algo_key=algo_key, graph=graph, source=source, target=target)
    rec.run_to_completion()

    step = int(data.get("step", len(rec.steps) - 1))
    path = rec.path_at(step)
    snap = rec.steps[step]

    return jsonify({
        "algo":     algo_key,
        "step":     step,
        "total":    len(rec.steps),
        "snapshot": export_snapshot(snap),
        "path":     _path_dict(path),
        "status": {
            nid: status_for(nid, snap, source=source, target=target, path_nodes=path.nodes)
            for nid in graph.node_ids()
        },
    })


# ---------------------------------------------------------------------------
# Run
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    logger.info("SSSP trace comparison API on http://localhost:5000")
    app.run(debug=True, host="0.0.0.0", port=5000)
