"""
Application controller for the graph management UI.

Keeps an in-memory mirror of the graph (fetched through ``GraphApiClient``),
feeds it to ``GraphView``, serves node/edge detail views and runs the
create/update/delete flows.

Detail views move through ``idle -> loading -> {from_cache | from_local |
from_fetch | error}``. Deletes are applied to the mirror optimistically; an
indeterminate outcome leaves the id in ``pending_deletes`` until
``reconcile()`` reads it back.
"""
from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

from kgms.core.config import settings
from kgms.ui.api import ApiError, DeleteOutcome, DeleteResult, GraphApiClient, NotFound
from kgms.ui.cache import TTLCache
from kgms.ui.graph_view import GraphView, edge_endpoints

logger = logging.getLogger(__name__)

MAX_DISPLAY_LIMIT = 10000

Notifier = Callable[[str, str], None]


_LEVELS = {"error": logging.ERROR, "warning": logging.WARNING}


def _log_notifier(level: str, message: str) -> None:
    logger.log(_LEVELS.get(level, logging.INFO), "[%s] %s", level, message)


class DetailState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    FROM_CACHE = "from_cache"
    FROM_LOCAL = "from_local"
    FROM_FETCH = "from_fetch"
    ERROR = "error"


@dataclass
class DetailView:
    kind: Optional[str] = None
    entity_id: Optional[str] = None
    state: DetailState = DetailState.IDLE
    record: Optional[Dict[str, Any]] = None
    error: Optional[str] = None


def parse_properties(value: Union[str, Dict[str, Any], None]) -> Dict[str, Any]:
    """Accept a dict or the JSON text typed into a properties form field."""
    if value is None:
        return {}
    if isinstance(value, dict):
        return dict(value)
    try:
        parsed = json.loads(value or "{}")
    except ValueError:
        raise ValueError("Properties must be valid JSON") from None
    if not isinstance(parsed, dict):
        raise ValueError("Properties must be a JSON object")
    return parsed


def is_valid_id(value: Any) -> bool:
    return isinstance(value, str) and len(value) > 0


class GraphController:
    def __init__(self, api: Optional[GraphApiClient] = None, view: Optional[GraphView] = None,
                 cache_ttl: Optional[float] = None, clock: Callable[[], float] = time.monotonic,
                 notify: Notifier = _log_notifier, max_nodes: int = MAX_DISPLAY_LIMIT,
                 max_edges: int = MAX_DISPLAY_LIMIT) -> None:
        self._owns_api = api is None
        self.api = api or GraphApiClient()
        self.view = view or GraphView()
        ttl = cache_ttl if cache_ttl is not None else settings.DETAIL_CACHE_TTL_SECONDS
        self.node_cache: TTLCache[Dict[str, Any]] = TTLCache(ttl, clock)
        self.edge_cache: TTLCache[Dict[str, Any]] = TTLCache(ttl, clock)
        self.notify = notify
        self.max_nodes = max_nodes
        self.max_edges = max_edges

        self.nodes: List[Dict[str, Any]] = []
        self.edges: List[Dict[str, Any]] = []
        self.detail = DetailView()
        self.pending_deletes: Dict[str, str] = {}

        self.view.on_node_selected(self.show_node_detail)
        self.view.on_edge_selected(self.show_edge_detail)

    def close(self) -> None:
        """Close the API client if this controller created it."""
        if self._owns_api:
            self.api.close()

    def __enter__(self) -> "GraphController":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    # ---- loading ------------------------------------------------------------

    def load_data(self) -> bool:
        """Fetch both collections, truncate to the display limits and render."""
        try:
            nodes_resp = self.api.get_nodes(self.max_nodes)
            edges_resp = self.api.get_edges(self.max_edges)
        except ApiError as exc:
            self.notify("error", f"Failed to load data: {exc.message}")
            return False

        nodes = nodes_resp.get("data") or []
        edges = edges_resp.get("data") or []
        if len(nodes) > self.max_nodes:
            logger.warning("received %d nodes, showing the first %d", len(nodes), self.max_nodes)
            nodes = nodes[:self.max_nodes]
        if len(edges) > self.max_edges:
            logger.warning("received %d edges, showing the first %d", len(edges), self.max_edges)
            edges = edges[:self.max_edges]

        self.nodes = nodes
        self.edges = edges
        self._render()
        return True

    def refresh(self) -> bool:
        return self.load_data()

    def _render(self) -> None:
        self.view.render(self.nodes, self.edges)

    def set_max_nodes(self, value: int) -> bool:
        if not 0 < value <= MAX_DISPLAY_LIMIT:
            self.notify("error", f"Maximum node count must be between 1 and {MAX_DISPLAY_LIMIT}")
            return False
        self.max_nodes = value
        return self.load_data()

    def set_max_edges(self, value: int) -> bool:
        if not 0 < value <= MAX_DISPLAY_LIMIT:
            self.notify("error", f"Maximum edge count must be between 1 and {MAX_DISPLAY_LIMIT}")
            return False
        self.max_edges = value
        return self.load_data()

    # ---- detail views -------------------------------------------------------

    def show_node_detail(self, node_id: str) -> DetailView:
        return self._show_detail("node", node_id, self.node_cache, self.nodes, self.api.get_node)

    def show_edge_detail(self, edge_id: str) -> DetailView:
        return self._show_detail("edge", edge_id, self.edge_cache, self.edges, self.api.get_edge)

    def _show_detail(self, kind: str, entity_id: str, cache: TTLCache,
                     local: List[Dict[str, Any]],
                     fetch: Callable[[str], Dict[str, Any]]) -> DetailView:
        if not is_valid_id(entity_id):
            self.detail = DetailView(kind, entity_id, DetailState.ERROR, error=f"Invalid {kind} id")
            self.notify("error", self.detail.error)
            return self.detail

        self.detail = DetailView(kind, entity_id, DetailState.LOADING)

        cached = cache.get(entity_id)
        if cached is not None:
            self.detail = DetailView(kind, entity_id, DetailState.FROM_CACHE, cached)
            return self.detail

        record = next((item for item in local if item.get("id") == entity_id), None)
        if record is not None:
            cache.put(entity_id, record)
            self.detail = DetailView(kind, entity_id, DetailState.FROM_LOCAL, record)
            return self.detail

        try:
            record = fetch(entity_id).get("data")
        except ApiError as exc:
            self.detail = DetailView(kind, entity_id, DetailState.ERROR, error=exc.message)
            self.notify("error", f"Failed to load {kind} details: {exc.message}")
            return self.detail
        if not record:
            self.detail = DetailView(kind, entity_id, DetailState.ERROR, error=f"Empty {kind} data")
            self.notify("error", self.detail.error)
            return self.detail

        cache.put(entity_id, record)
        self.detail = DetailView(kind, entity_id, DetailState.FROM_FETCH, record)
        return self.detail

    def close_detail(self) -> None:
        self.detail = DetailView()

    # ---- create / update ----------------------------------------------------

    def save_node(self, name: str, labels: Optional[List[str]] = None,
                  properties: Union[str, Dict[str, Any], None] = None,
                  existing_id: Optional[str] = None) -> Optional[Dict[str, Any]]:
        """Create a node, or merge properties into `existing_id`."""
        try:
            props = parse_properties(properties)
            props["name"] = name
            if existing_id:
                resp = self.api.update_node(existing_id, props)
                self.node_cache.invalidate(existing_id)
            else:
                resp = self.api.create_node(props, [l.strip() for l in labels or [] if l.strip()])
        except (ValueError, ApiError) as exc:
            message = exc.message if isinstance(exc, ApiError) else str(exc)
            self.notify("error", f"Failed to save node: {message}")
            return None

        self.notify("success", "Node updated" if existing_id else "Node created")
        self.close_detail()
        self.load_data()
        return resp.get("data")

    def save_edge(self, start_node_id: str, end_node_id: str, rel_type: str,
                  properties: Union[str, Dict[str, Any], None] = None,
                  existing_id: Optional[str] = None) -> Optional[Dict[str, Any]]:
        """Create a relationship, or merge properties into `existing_id`."""
        try:
            props = parse_properties(properties)
            if existing_id:
                resp = self.api.update_edge(existing_id, props)
                self.edge_cache.invalidate(existing_id)
            else:
                resp = self.api.create_edge(start_node_id, end_node_id, rel_type, props)
        except (ValueError, ApiError) as exc:
            message = exc.message if isinstance(exc, ApiError) else str(exc)
            self.notify("error", f"Failed to save relationship: {message}")
            return None

        self.notify("success", "Relationship updated" if existing_id else "Relationship created")
        self.close_detail()
        self.load_data()
        return resp.get("data")

    # ---- delete -------------------------------------------------------------

    def delete_node(self, node_id: str) -> DeleteResult:
        snapshot = (list(self.nodes), list(self.edges))
        self.nodes = [n for n in self.nodes if n.get("id") != node_id]
        removed_edges = [e for e in self.edges if node_id in edge_endpoints(e)]
        self.edges = [e for e in self.edges if node_id not in edge_endpoints(e)]
        self.node_cache.invalidate(node_id)
        for edge in removed_edges:
            self.edge_cache.invalidate(edge.get("id"))
        self._render()
        return self._finish_delete("node", node_id, self.api.delete_node(node_id), snapshot)

    def delete_edge(self, edge_id: str) -> DeleteResult:
        snapshot = (list(self.nodes), list(self.edges))
        self.edges = [e for e in self.edges if e.get("id") != edge_id]
        self.edge_cache.invalidate(edge_id)
        self._render()
        return self._finish_delete("edge", edge_id, self.api.delete_edge(edge_id), snapshot)

    def _finish_delete(self, kind: str, entity_id: str, result: DeleteResult,
                       snapshot: tuple) -> DeleteResult:
        self.close_detail()
        if result.outcome is DeleteOutcome.CONFIRMED:
            self.notify("success", result.message)
            self.load_data()
        elif result.outcome is DeleteOutcome.FAILED:
            self.nodes, self.edges = snapshot
            self._render()
            self.notify("error", f"Failed to delete {kind}: {result.message}")
        else:
            self.pending_deletes[entity_id] = kind
            self.notify("warning", f"Deletion status of {kind} {entity_id} unknown, "
                                   "please verify manually or refresh")
        return result

    def reconcile(self) -> Dict[str, DeleteOutcome]:
        """
        Read back every pending delete. A 404 confirms the delete, a record
        means it did not happen, a network error leaves it pending.
        """
        outcomes: Dict[str, DeleteOutcome] = {}
        for entity_id, kind in list(self.pending_deletes.items()):
            fetch = self.api.get_node if kind == "node" else self.api.get_edge
            try:
                fetch(entity_id)
            except NotFound:
                outcomes[entity_id] = DeleteOutcome.CONFIRMED
                self.notify("success", f"{kind.capitalize()} {entity_id} deletion confirmed")
            except ApiError as exc:
                logger.warning("reconcile %s %s still unknown: %s", kind, entity_id, exc.message)
                outcomes[entity_id] = DeleteOutcome.INDETERMINATE
                continue
            else:
                outcomes[entity_id] = DeleteOutcome.FAILED
                self.notify("warning", f"{kind.capitalize()} {entity_id} was not deleted")
            del self.pending_deletes[entity_id]

        if any(o is not DeleteOutcome.INDETERMINATE for o in outcomes.values()):
            self.load_data()
        return outcomes

    # ---- search -------------------------------------------------------------

    def search(self, query: str) -> List[str]:
        """Highlight nodes whose `name` equals the query; returns their ids."""
        query = (query or "").strip()
        if not query:
            return []
        try:
            resp = self.api.search_nodes("name", query)
        except ApiError as exc:
            self.notify("error", f"Search failed: {exc.message}")
            return []
        ids = [n["id"] for n in resp.get("data") or []]
        if not ids:
            self.notify("info", "No matching nodes found")
            return []
        self.view.highlight(ids)
        return ids
