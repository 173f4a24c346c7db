"""
PageRank by a fixed number of refinement passes.

Each pass gives every vertex alpha/N of teleportation mass plus (1 - alpha) of
its parents' rank shared over their out-degree, then rescales the whole table
to sum to one. Rank held by sink vertices is recovered only through that
rescaling; there is no separate dangling-node step.
"""
from __future__ import annotations

from typing import Dict, Iterator

from pagerank_spider.graph import Graph

DEFAULT_ALPHA = 0.15
DEFAULT_PASSES = 50


def iter_passes(graph: Graph, alpha: float = DEFAULT_ALPHA, passes: int = DEFAULT_PASSES) -> Iterator[Dict[str, float]]:
    """
    Yield the rank table after each pass.

    The graph must not be empty and alpha must lie in (0, 1]; with alpha 0 a
    graph without edges has no mass left to rescale.
    """
    if not 0.0 < alpha <= 1.0:
        raise ValueError(f"alpha must be in (0, 1], got {alpha}")
    nodes = graph.nodes()
    n = len(nodes)
    ranks = {node.node_id: 1.0 / n for node in nodes}
    teleport = alpha / n

    for _ in range(passes):
        raw: Dict[str, float] = {}
        for node in nodes:
            inflow = 0.0
            for parent_id in node.edges_in:
                parent = graph.node(parent_id)
                inflow += ranks[parent_id] / parent.out_degree
            raw[node.node_id] = (1 - alpha) * inflow + teleport

        total = sum(raw.values())
        ranks = {node_id: value / total for node_id, value in raw.items()}
        yield ranks


def pagerank(graph: Graph, alpha: float = DEFAULT_ALPHA, passes: int = DEFAULT_PASSES) -> Dict[str, float]:
    """Return the rank table after ``passes`` passes."""
    ranks = {node.node_id: 1.0 / len(graph) for node in graph.nodes()}
    for ranks in iter_passes(graph, alpha, passes):
        pass
    return ranks
