"""
Directed link graph over indexed pages.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Mapping, Sequence, Set, Tuple


@dataclass(slots=True)
class Node:
    """A graph vertex. Edge lists keep insertion order and hold no duplicates."""
    node_id: str
    edges_in: List[str] = field(default_factory=list)
    edges_out: List[str] = field(default_factory=list)

    @property
    def out_degree(self) -> int:
        return len(self.edges_out)

    def __str__(self) -> str:
        return self.node_id


class Graph:
    """Vertices keyed by page ID, in indexing order."""

    def __init__(self) -> None:
        self._nodes: Dict[str, Node] = {}
        self._edges: Set[Tuple[str, str]] = set()

    def add_node(self, node_id: str) -> Node:
        node = self._nodes.get(node_id)
        if node is None:
            node = self._nodes[node_id] = Node(node_id)
        return node

    def add_edge(self, src: str, dst: str) -> bool:
        """Add src -> dst. Returns False for self-loops and existing edges."""
        if src == dst or (src, dst) in self._edges:
            return False
        source = self.add_node(src)
        dest = self.add_node(dst)
        source.edges_out.append(dst)
        dest.edges_in.append(src)
        self._edges.add((src, dst))
        return True

    def node(self, node_id: str) -> Node:
        return self._nodes[node_id]

    def nodes(self) -> List[Node]:
        return list(self._nodes.values())

    def edges(self) -> Iterator[Tuple[str, str]]:
        for node in self._nodes.values():
            for dst in node.edges_out:
                yield node.node_id, dst

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    @property
    def edge_count(self) -> int:
        return len(self._edges)


def build_graph(
    url_to_id: Mapping[str, str],
    pending_edges: Mapping[str, Sequence[str]],
) -> Graph:
    """
    Resolve recorded outbound URLs into edges between indexed pages.

    Every indexed page becomes a vertex. Sources without an ID are ignored,
    repeated destinations collapse to one edge, self-links are dropped and
    destinations that were never indexed are left out entirely.
    """
    graph = Graph()
    for node_id in url_to_id.values():
        graph.add_node(node_id)

    for src_url, dst_urls in pending_edges.items():
        src_id = url_to_id.get(src_url)
        if src_id is None:
            continue
        seen: Set[str] = set()
        for dst_url in dst_urls:
            if dst_url == src_url or dst_url in seen:
                continue
            seen.add(dst_url)
            dst_id = url_to_id.get(dst_url)
            if dst_id is not None:
                graph.add_edge(src_id, dst_id)

    return graph
