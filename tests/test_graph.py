from pagerank_spider.graph import Graph, build_graph


def _edges(graph):
    return sorted(graph.edges())


def test_vertices_are_exactly_the_indexed_pages():
    url_to_id = {"u1": "P1", "u2": "P2", "u3": "P3"}
    graph = build_graph(url_to_id, {})
    assert [n.node_id for n in graph.nodes()] == ["P1", "P2", "P3"]
    assert graph.edge_count == 0


def test_duplicates_self_links_and_unindexed_targets_are_dropped():
    url_to_id = {"u1": "P1", "u2": "P2"}
    pending = {
        "u1": ["u2", "u2", "u1", "ghost", "u2"],
        "u2": ["u1"],
    }
    graph = build_graph(url_to_id, pending)

    assert _edges(graph) == [("P1", "P2"), ("P2", "P1")]
    assert "ghost" not in graph
    assert len(graph) == 2
    assert graph.node("P1").edges_out == ["P2"]
    assert graph.node("P2").edges_in == ["P1"]


def test_sources_without_an_id_contribute_no_edges():
    url_to_id = {"u1": "P1", "u2": "P2"}
    pending = {"noindex": ["u1", "u2"], "u1": ["u2"]}
    graph = build_graph(url_to_id, pending)
    assert _edges(graph) == [("P1", "P2")]


def test_edge_invariants_hold_on_a_messy_crawl():
    url_to_id = {f"u{i}": f"P{i}" for i in range(6)}
    pending = {
        f"u{i}": [f"u{(i * 7 + k) % 9}" for k in range(12)]
        for i in range(9)
    }
    graph = build_graph(url_to_id, pending)

    edges = list(graph.edges())
    assert len(edges) == len(set(edges)) == graph.edge_count
    for src, dst in edges:
        assert src != dst
        assert src in graph and dst in graph
        assert graph.node(src).out_degree >= 1


def test_add_edge_refuses_self_loops_and_parallel_edges():
    graph = Graph()
    assert graph.add_edge("A", "B")
    assert not graph.add_edge("A", "B")
    assert not graph.add_edge("A", "A")
    assert graph.node("A").out_degree == 1


def test_build_is_deterministic():
    url_to_id = {"a": "P1", "b": "P2", "c": "P3"}
    pending = {"a": ["c", "b"], "b": ["c"], "c": ["a"]}
    first = build_graph(url_to_id, pending)
    second = build_graph(url_to_id, pending)
    assert list(first.edges()) == list(second.edges())
