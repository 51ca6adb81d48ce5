"""
Graph view: turns the controller's node/edge mirror into the payload handed to
the force-directed layout engine, and forwards selection events.

Edges whose endpoints are not in the current node set are dropped before
rendering, since the layout engine cannot draw a dangling reference.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, Sequence

logger = logging.getLogger(__name__)

SelectionListener = Callable[[str], None]


def node_display_label(node: Dict[str, Any]) -> str:
    name = (node.get("properties") or {}).get("name")
    if name:
        return str(name)
    node_id = node.get("id") or ""
    return f"Node {node_id[:8]}" if node_id else "Node (unknown)"


def edge_endpoints(edge: Dict[str, Any]) -> tuple:
    """(source id, target id) from either the snapshot or the bare id fields."""
    start = edge.get("start_node") or {}
    end = edge.get("end_node") or {}
    return (
        start.get("id") or edge.get("start_node_id"),
        end.get("id") or edge.get("end_node_id"),
    )


def filter_dangling_edges(nodes: Sequence[Dict[str, Any]],
                          edges: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
    node_ids = {n.get("id") for n in nodes}
    kept = []
    for edge in edges:
        source, target = edge_endpoints(edge)
        if source in node_ids and target in node_ids:
            kept.append(edge)
    dropped = len(edges) - len(kept)
    if dropped:
        logger.info("dropped %d edge(s) referencing nodes outside the current view", dropped)
    return kept


class GraphView:
    def __init__(self) -> None:
        self.payload: Dict[str, List[Dict[str, Any]]] = {"nodes": [], "edges": []}
        self.highlighted: List[str] = []
        self._node_listeners: List[SelectionListener] = []
        self._edge_listeners: List[SelectionListener] = []

    # ---- rendering ----------------------------------------------------------

    def render(self, nodes: Sequence[Dict[str, Any]],
               edges: Sequence[Dict[str, Any]]) -> Dict[str, List[Dict[str, Any]]]:
        layout_nodes = [
            {
                "id": n["id"],
                "label": node_display_label(n),
                "labels": list(n.get("labels") or []),
                "properties": n.get("properties") or {},
            }
            for n in nodes
            if n.get("id")
        ]
        layout_edges = []
        for e in filter_dangling_edges(layout_nodes, edges):
            source, target = edge_endpoints(e)
            layout_edges.append({
                "id": e.get("id"),
                "source": source,
                "target": target,
                "label": e.get("type") or "RELATED",
                "properties": e.get("properties") or {},
            })
        self.payload = {"nodes": layout_nodes, "edges": layout_edges}
        self.highlighted = [h for h in self.highlighted if h in {n["id"] for n in layout_nodes}]
        return self.payload

    def highlight(self, node_ids: Sequence[str]) -> Optional[str]:
        """Mark nodes as highlighted; returns the id to focus, if any."""
        present = {n["id"] for n in self.payload["nodes"]}
        self.highlighted = [i for i in node_ids if i in present]
        return self.highlighted[0] if self.highlighted else None

    # ---- selection ----------------------------------------------------------

    def on_node_selected(self, listener: SelectionListener) -> None:
        self._node_listeners.append(listener)

    def on_edge_selected(self, listener: SelectionListener) -> None:
        self._edge_listeners.append(listener)

    def select_node(self, node_id: str) -> None:
        for listener in self._node_listeners:
            listener(node_id)

    def select_edge(self, edge_id: str) -> None:
        for listener in self._edge_listeners:
            listener(edge_id)
