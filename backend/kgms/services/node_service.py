"""
Node collection service.

Thin layer over the Cypher templates in ``kgms.graph.queries``: it validates
identifiers, generates application ids and maps driver records into
``Node`` models. Store errors propagate to the caller unchanged.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional
from uuid import uuid4

from kgms.core.config import settings
from kgms.core.errors import NotFoundError
from kgms.graph import queries
from kgms.models.graph import Node
from kgms.services.neo4j_client import Neo4jStore
from kgms.utils.cypher_sanitize import validate_identifier, validate_labels

logger = logging.getLogger(__name__)


def clamp_page(limit: Optional[int], skip: Optional[int]) -> Dict[str, int]:
    """Bound limit to [1, MAX_PAGE_SIZE] and skip to >= 0."""
    if limit is None:
        limit = settings.DEFAULT_PAGE_SIZE
    limit = max(1, min(int(limit), settings.MAX_PAGE_SIZE))
    skip = max(0, int(skip or 0))
    return {"limit": limit, "skip": skip}


def format_node(node: Any) -> Node:
    """Driver node -> Node. The `id` property wins over the element id."""
    props = dict(node.items())
    return Node(
        id=str(props.get("id") or node.element_id),
        labels=sorted(node.labels),
        properties=props,
        neo4j_id=node.element_id,
    )


class NodeService:
    def __init__(self, store: Neo4jStore) -> None:
        self.store = store

    def _nodes(self, records: Iterable[Any]) -> List[Node]:
        return [format_node(rec["n"]) for rec in records]

    def list(self, limit: Optional[int] = None, skip: Optional[int] = 0,
             label: Optional[str] = None) -> List[Node]:
        if label is not None:
            label = validate_identifier(label, "label")
        params = {"label": label, **clamp_page(limit, skip)}
        result = self.store.read(queries.LIST_NODES, params)
        return self._nodes(result.records)

    def list_by_label(self, label: str, limit: Optional[int] = None,
                      skip: Optional[int] = 0) -> List[Node]:
        return self.list(limit=limit, skip=skip, label=label)

    def get_by_id(self, node_id: str) -> Optional[Node]:
        result = self.store.read(queries.GET_NODE, {"id": node_id})
        if not result.records:
            return None
        return format_node(result.records[0]["n"])

    def create(self, properties: Dict[str, Any], labels: Iterable[str] = ()) -> Node:
        labels = validate_labels(labels)
        node_id = str(uuid4())
        props = {**properties, "id": node_id}
        result = self.store.write(queries.CREATE_NODE, {"properties": props, "labels": labels})
        if not result.records:
            raise RuntimeError("node creation returned no record")
        node = format_node(result.records[0]["n"])
        logger.info("created node %s labels=%s", node.id, labels)
        return node

    def update(self, node_id: str, properties: Dict[str, Any]) -> Node:
        # the application id is immutable
        props = {k: v for k, v in properties.items() if k != "id"}
        result = self.store.write(queries.UPDATE_NODE, {"id": node_id, "properties": props})
        if not result.records:
            raise NotFoundError("Node not found")
        return format_node(result.records[0]["n"])

    def delete(self, node_id: str) -> bool:
        result = self.store.write(queries.DELETE_NODE, {"id": node_id})
        deleted = result.nodes_deleted > 0
        if deleted:
            logger.info("deleted node %s (%d relationships removed)",
                        node_id, result.relationships_deleted)
        return deleted

    def search(self, key: str, value: Any, limit: Optional[int] = None,
               skip: Optional[int] = 0) -> List[Node]:
        key = validate_identifier(key, "property key")
        params = {"key": key, "value": value, **clamp_page(limit, skip)}
        result = self.store.read(queries.SEARCH_NODES, params)
        return self._nodes(result.records)
