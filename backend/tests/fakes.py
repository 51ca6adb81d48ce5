"""
In-memory stand-in for Neo4jStore.

Each Cypher template in kgms.graph.queries is mapped to a small Python
function with the same semantics, so service and API tests can exercise
real create/read/update/delete flows without a database.
"""
import itertools
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from kgms.graph import queries
from kgms.services.neo4j_client import CypherResult


class FakeNode:
    """Mimics neo4j.graph.Node: labels, element_id and mapping access."""
    def __init__(self, element_id: str, labels, props: Dict[str, Any]):
        self.element_id = element_id
        self.labels = frozenset(labels)
        self.props = dict(props)

    def items(self):
        return self.props.items()

    def __getitem__(self, key):
        return self.props[key]


class FakeRelationship:
    def __init__(self, element_id: str, legacy_id: int, rel_type: str,
                 props: Dict[str, Any], start: str, end: str):
        self.element_id = element_id
        self.legacy_id = legacy_id
        self.type = rel_type
        self.props = dict(props)
        self.start = start
        self.end = end

    def items(self):
        return self.props.items()


@dataclass
class FakeCounters:
    nodes_deleted: int = 0
    relationships_deleted: int = 0


Rows = Tuple[List[Dict[str, Any]], FakeCounters]


def _merge_props(target: Dict[str, Any], update: Dict[str, Any]) -> None:
    """`SET x += $properties`: null values remove the key."""
    for key, value in update.items():
        if value is None:
            target.pop(key, None)
        else:
            target[key] = value


class FakeGraphStore:
    def __init__(self):
        self.nodes: Dict[str, FakeNode] = {}
        self.rels: Dict[str, FakeRelationship] = {}
        self.executed: List[Tuple[str, Dict[str, Any]]] = []
        self.fail_with: Optional[Exception] = None
        self._seq = itertools.count()
        self._handlers: Dict[str, Callable[[Dict[str, Any]], Rows]] = {
            queries.PING: lambda p: ([{"ok": 1}], FakeCounters()),
            queries.LIST_NODES: self._list_nodes,
            queries.GET_NODE: self._get_node,
            queries.CREATE_NODE: self._create_node,
            queries.UPDATE_NODE: self._update_node,
            queries.DELETE_NODE: self._delete_node,
            queries.SEARCH_NODES: self._search_nodes,
            queries.LIST_EDGES: self._list_edges,
            queries.GET_EDGE: self._get_edge,
            queries.CREATE_EDGE: self._create_edge,
            queries.UPDATE_EDGE: self._update_edge,
            queries.DELETE_EDGE: self._delete_edge,
            queries.INCOMING_EDGES: lambda p: self._node_edges(p, incoming=True, outgoing=False),
            queries.OUTGOING_EDGES: lambda p: self._node_edges(p, incoming=False, outgoing=True),
            queries.ALL_NODE_EDGES: lambda p: self._node_edges(p, incoming=True, outgoing=True),
        }

    # ---- Neo4jStore interface ----------------------------------------------

    def read(self, query: str, params: Optional[Dict[str, Any]] = None) -> CypherResult:
        return self._run(query, params or {})

    def write(self, query: str, params: Optional[Dict[str, Any]] = None) -> CypherResult:
        return self._run(query, params or {})

    def _run(self, query: str, params: Dict[str, Any]) -> CypherResult:
        self.executed.append((query, params))
        if self.fail_with is not None:
            raise self.fail_with
        records, counters = self._handlers[query](params)
        return CypherResult(records=records, counters=counters)

    # ---- helpers ------------------------------------------------------------

    def _next_id(self) -> int:
        return next(self._seq)

    def _by_app_id(self, app_id: str) -> List[FakeNode]:
        return [n for n in self.nodes.values() if n.props.get("id") == app_id]

    @staticmethod
    def _page(rows: List[Any], params: Dict[str, Any]) -> List[Any]:
        skip, limit = params["skip"], params["limit"]
        return rows[skip:skip + limit]

    def _edge_row(self, rel: FakeRelationship) -> Dict[str, Any]:
        return {"r": rel, "start": self.nodes[rel.start], "end": self.nodes[rel.end]}

    # ---- nodes --------------------------------------------------------------

    def _list_nodes(self, p) -> Rows:
        label = p["label"]
        rows = [{"n": n} for n in self.nodes.values() if label is None or label in n.labels]
        return self._page(rows, p), FakeCounters()

    def _get_node(self, p) -> Rows:
        return [{"n": n} for n in self._by_app_id(p["id"])][:1], FakeCounters()

    def _create_node(self, p) -> Rows:
        eid = f"4:fake:{self._next_id()}"
        props = {k: v for k, v in p["properties"].items() if v is not None}
        node = FakeNode(eid, p["labels"], props)
        self.nodes[eid] = node
        return [{"n": node}], FakeCounters()

    def _update_node(self, p) -> Rows:
        rows = []
        for node in self._by_app_id(p["id"]):
            _merge_props(node.props, p["properties"])
            rows.append({"n": node})
        return rows, FakeCounters()

    def _delete_node(self, p) -> Rows:
        counters = FakeCounters()
        for node in self._by_app_id(p["id"]):
            for rid in [r.element_id for r in self.rels.values()
                        if node.element_id in (r.start, r.end)]:
                del self.rels[rid]
                counters.relationships_deleted += 1
            del self.nodes[node.element_id]
            counters.nodes_deleted += 1
        return [], counters

    def _search_nodes(self, p) -> Rows:
        rows = [{"n": n} for n in self.nodes.values() if n.props.get(p["key"]) == p["value"]]
        return self._page(rows, p), FakeCounters()

    # ---- relationships ------------------------------------------------------

    def _list_edges(self, p) -> Rows:
        rows = [self._edge_row(r) for r in self.rels.values()
                if p["type"] is None or r.type == p["type"]]
        return self._page(rows, p), FakeCounters()

    def _get_edge(self, p) -> Rows:
        rows = [self._edge_row(r) for r in self.rels.values() if r.props.get("id") == p["id"]]
        return rows[:1], FakeCounters()

    def _create_edge(self, p) -> Rows:
        rows = []
        for a in self._by_app_id(p["start_id"]):
            for b in self._by_app_id(p["end_id"]):
                seq = self._next_id()
                rel = FakeRelationship(f"5:fake:{seq}", seq, p["type"], p["properties"],
                                       a.element_id, b.element_id)
                self.rels[rel.element_id] = rel
                rows.append(self._edge_row(rel))
        return rows, FakeCounters()

    def _update_edge(self, p) -> Rows:
        rows = []
        for rel in self.rels.values():
            if rel.props.get("id") == p["id"]:
                _merge_props(rel.props, p["properties"])
                rows.append(self._edge_row(rel))
        return rows, FakeCounters()

    def _delete_edge(self, p) -> Rows:
        counters = FakeCounters()
        for rel in list(self.rels.values()):
            if (rel.props.get("id") == p["id"] or rel.element_id == p["id"]
                    or (p["legacy_id"] is not None and rel.legacy_id == p["legacy_id"])):
                del self.rels[rel.element_id]
                counters.relationships_deleted += 1
        return [], counters

    def _node_edges(self, p, incoming: bool, outgoing: bool) -> Rows:
        targets = {n.element_id for n in self._by_app_id(p["node_id"])}
        rows = []
        for rel in self.rels.values():
            if (outgoing and rel.start in targets) or (incoming and rel.end in targets):
                rows.append(self._edge_row(rel))
        return self._page(rows, p), FakeCounters()
