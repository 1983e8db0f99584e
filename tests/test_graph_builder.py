from jsongraph.graph_builder import build_graph, graph_summary


DOC = {
    "customer": {"name": "Ada", "tags": ["vip"]},
    "orders": [{"id": 1}, {"id": 2}],
    "notes": None,
}


def test_nodes_are_tagged_with_paths():
    graph = build_graph(DOC)
    paths = [n.path for n in graph.nodes]
    assert paths == [
        (),
        ("customer",),
        ("customer", "tags", 0),
        ("orders", 0),
        ("orders", 1),
    ]
    assert [n.id for n in graph.nodes] == ["1", "2", "3", "4", "5"]


def test_array_items_link_to_owner_with_key_label():
    graph = build_graph(DOC)
    edges = {(e.source, e.target, e.label) for e in graph.edges}
    assert ("1", "4", "orders") in edges
    assert ("1", "5", "orders") in edges
    assert ("2", "3", "tags") in edges
    assert [graph.get_node(n).path for n in graph.graph.successors("1")] == [
        ("customer",),
        ("orders", 0),
        ("orders", 1),
    ]


def test_root_rows_and_label():
    root = build_graph(DOC).find_by_path(())
    assert [(r.key, r.type) for r in root.rows] == [
        ("customer", "object"),
        ("orders", "array"),
        ("notes", "null"),
    ]
    assert root.label == "customer (2 keys)\norders [2]\nnotes: null"


def test_scalar_document_is_one_node():
    graph = build_graph(42)
    assert len(graph.nodes) == 1
    node = graph.nodes[0]
    assert node.path == ()
    assert node.rows[0].key is None
    assert node.label == "42"


def test_array_document_has_several_roots():
    graph = build_graph([{"a": 1}, "x"])
    assert [n.path for n in graph.nodes] == [(0,), (1,)]
    assert graph_summary(graph) == {"nodes": 2, "edges": 0, "roots": 2}


def test_empty_object_label():
    assert build_graph({}).nodes[0].label == "(empty)"


def test_lookup_helpers():
    graph = build_graph(DOC)
    assert graph.get_node("2").path == ("customer",)
    assert graph.get_node("99") is None
    assert graph.find_by_path(("nope",)) is None
