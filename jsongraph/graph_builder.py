"""
Derives the node graph shown in the editor from a parsed JSON document.

Each object becomes one node holding its scalar fields plus one summary row
per object/array child. Arrays do not get a node of their own: each item
becomes a node linked from the node that owns the array row (array items
that are arrays are flattened the same way). A scalar document or a scalar
array item becomes a node with a single unkeyed row.

Every node records the path of the value it displays, which is what the
editor uses to write an edit back into the document.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import networkx as nx

from jsongraph.field_codec import Row, rows_from_value, value_to_text
from jsongraph.json_path import JsonPath, path_to_string


@dataclass
class NodeData:
    """One display node: its rows and the path of the value they show."""
    id: str
    rows: List[Row] = field(default_factory=list)
    path: JsonPath = ()

    @property
    def label(self) -> str:
        """Short multi-line text used as the node's caption in the chart."""
        if not self.rows:
            return "(empty)"
        lines = []
        for row in self.rows:
            if row.is_container:
                count = row.child_count or 0
                if row.type == 'object':
                    lines.append(f"{row.key} ({count} keys)")
                else:
                    lines.append(f"{row.key} [{count}]")
            elif row.key is None:
                lines.append(value_to_text(row.value))
            else:
                lines.append(f"{row.key}: {value_to_text(row.value)}")
        return "\n".join(lines)


@dataclass
class EdgeData:
    source: str
    target: str
    label: str = ""


@dataclass
class GraphData:
    """Nodes and edges derived from one snapshot of the document."""
    nodes: List[NodeData] = field(default_factory=list)
    edges: List[EdgeData] = field(default_factory=list)
    graph: nx.DiGraph = field(default_factory=nx.DiGraph)

    def get_node(self, node_id: str) -> Optional[NodeData]:
        if node_id in self.graph:
            return self.graph.nodes[node_id]['data']
        return None

    def find_by_path(self, path: JsonPath) -> Optional[NodeData]:
        for node in self.nodes:
            if node.path == tuple(path):
                return node
        return None


class _Builder:
    def __init__(self):
        self.result = GraphData()
        self._counter = 0

    def _next_id(self) -> str:
        self._counter += 1
        return str(self._counter)

    def add_node(self, rows: List[Row], path: JsonPath, parent_id: Optional[str], edge_label: str) -> str:
        node = NodeData(id=self._next_id(), rows=rows, path=path)
        self.result.nodes.append(node)
        self.result.graph.add_node(node.id, data=node, path=path_to_string(path))
        if parent_id is not None:
            self.result.edges.append(EdgeData(source=parent_id, target=node.id, label=edge_label))
            self.result.graph.add_edge(parent_id, node.id, label=edge_label)
        return node.id

    def visit(self, value: Any, path: JsonPath, parent_id: Optional[str], edge_label: str) -> None:
        if isinstance(value, list):
            for index, item in enumerate(value):
                self.visit(item, path + (index,), parent_id, edge_label)
            return

        node_id = self.add_node(rows_from_value(value), path, parent_id, edge_label)
        if isinstance(value, dict):
            for key, child in value.items():
                if isinstance(child, (dict, list)):
                    self.visit(child, path + (key,), node_id, key)


def build_graph(value: Any) -> GraphData:
    """
    Build the node graph for a parsed document.

    Node ids are sequential strings in depth-first order, so they are only
    stable for one snapshot of the document.
    """
    builder = _Builder()
    builder.visit(value, (), None, "")
    return builder.result


def graph_summary(graph: GraphData) -> Dict[str, int]:
    """Counts shown in the status line."""
    roots = [n for n in graph.graph.nodes if graph.graph.in_degree(n) == 0]
    return {
        'nodes': graph.graph.number_of_nodes(),
        'edges': graph.graph.number_of_edges(),
        'roots': len(roots),
    }
