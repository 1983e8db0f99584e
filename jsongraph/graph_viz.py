"""
Graph visualizer that produces an ECharts-compatible configuration for rendering
the node graph of a JSON document.

The output is a plain dict representing an ECharts option which can be used
with NiceGUI's ui.echart. A graphviz.Digraph export is available for saving
the same graph as DOT/SVG.

Node colors encode what a node displays:
- Object nodes (keyed rows) are slate
- Scalar nodes (single unkeyed row) are teal
- Empty nodes are gray
The node addressed by the root path gets a highlighted border.
"""

from typing import Any, Dict, List, Optional

from graphviz import Digraph

from jsongraph.graph_builder import GraphData, NodeData
from jsongraph.json_path import path_to_string

# Event keys we request from ECharts click events
REQUESTED_EVENT_KEYS = ['componentType', 'name', 'seriesType', 'dataType']

OBJECT_COLOR = "#334155"
SCALAR_COLOR = "#0f766e"
EMPTY_COLOR = "#6b7280"
ROOT_BORDER_COLOR = "#facc15"
EDGE_COLOR = "#94a3b8"


class GraphVisualizer:
    """
    Build an ECharts configuration (dict) for a GraphData snapshot.

    The returned dict follows an ECharts option pattern with a single 'graph' series:
      {
        "series": [
          {
            "type": "graph",
            "layout": "force",
            "roam": True,
            "data": [...],
            "links": [...],
            ...
          }
        ]
      }
    Each data entry's "name" is the node id, so click payloads map straight
    back to a node.
    """

    @staticmethod
    def color_for_node(node: NodeData) -> str:
        if not node.rows:
            return EMPTY_COLOR
        if len(node.rows) == 1 and node.rows[0].key is None:
            return SCALAR_COLOR
        return OBJECT_COLOR

    @staticmethod
    def _symbol_size(node: NodeData) -> List[int]:
        label_lines = node.label.split("\n")
        width = max(len(line) for line in label_lines) * 7 + 24
        height = len(label_lines) * 16 + 16
        return [min(max(width, 40), 320), min(height, 400)]

    def generate_echarts(self, graph: GraphData) -> Dict[str, Any]:
        """
        Given a derived graph, construct the ECharts option dict.
        """
        data = []
        for node in graph.nodes:
            item_style = {"color": self.color_for_node(node), "borderRadius": 4}
            if node.path == ():
                item_style.update({"borderColor": ROOT_BORDER_COLOR, "borderWidth": 2})
            data.append({
                "name": node.id,
                "symbol": "rect",
                "symbolSize": self._symbol_size(node),
                "itemStyle": item_style,
                "label": {
                    "show": True,
                    "formatter": node.label,
                    "color": "#f8fafc",
                    "fontFamily": "monospace",
                    "align": "left",
                },
                "tooltip": {"formatter": path_to_string(node.path)},
            })

        links = []
        for edge in graph.edges:
            links.append({
                "source": edge.source,
                "target": edge.target,
                "label": {"show": bool(edge.label), "formatter": str(edge.label)},
                "lineStyle": {"color": EDGE_COLOR, "width": 1, "opacity": 0.9},
            })

        option = {
            "tooltip": {},
            "series": [
                {
                    "type": "graph",
                    "layout": "force",
                    "roam": True,
                    "draggable": True,
                    "data": data,
                    "links": links,
                    "edgeSymbol": ["none", "arrow"],
                    "force": {"repulsion": 400, "edgeLength": [80, 200]},
                    "emphasis": {"focus": "adjacency"},
                }
            ]
        }
        return option

    def to_graphviz(self, graph: GraphData, name: str = "document") -> Digraph:
        """Export the graph as a graphviz Digraph (render with .pipe() or .source)."""
        dot = Digraph(name=name, comment=f"{name} node graph")
        dot.attr('node', shape='box', fontname='monospace', style='filled', fontcolor='white')
        for node in graph.nodes:
            dot.node(node.id, label=node.label, fillcolor=self.color_for_node(node))
        for edge in graph.edges:
            dot.edge(edge.source, edge.target, label=str(edge.label))
        return dot


def normalize_click_payload(raw_payload: Any) -> Dict[str, Any]:
    """Normalize NiceGUI chart click payloads into a dictionary for easier parsing."""
    if isinstance(raw_payload, dict):
        return raw_payload
    if isinstance(raw_payload, (list, tuple)):
        return {
            REQUESTED_EVENT_KEYS[i]: raw_payload[i]
            for i in range(min(len(raw_payload), len(REQUESTED_EVENT_KEYS)))
        }
    if isinstance(raw_payload, str):
        return {'name': raw_payload}
    return {}


def resolve_node_id_from_payload(payload: Dict[str, Any], graph: GraphData) -> Optional[str]:
    """Return a node_id from a normalized payload by validating against the current graph."""
    if not isinstance(payload, dict):
        return None
    if payload.get('componentType') not in (None, 'series'):
        return None
    if payload.get('dataType') == 'edge':
        return None

    node_id = payload.get('name')
    if not node_id:
        return None
    node_id = str(node_id)
    if graph.get_node(node_id) is not None:
        return node_id
    return None
