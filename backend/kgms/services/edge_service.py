"""Relationship collection service, mirroring NodeService."""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Union
from uuid import uuid4

from kgms.core.errors import InvalidInputError, NotFoundError
from kgms.graph import queries
from kgms.models.graph import Direction, Edge, EndpointSnapshot
from kgms.services.neo4j_client import Neo4jStore
from kgms.services.node_service import clamp_page
from kgms.utils.cypher_sanitize import validate_identifier

logger = logging.getLogger(__name__)


def _snapshot(node: Any) -> EndpointSnapshot:
    props = dict(node.items())
    return EndpointSnapshot(
        id=str(props.get("id") or node.element_id),
        labels=sorted(node.labels),
        properties=props,
    )


def format_edge(rel: Any, start: Any, end: Any) -> Edge:
    """Driver relationship plus its endpoints -> Edge."""
    props = dict(rel.items())
    return Edge(
        id=str(props.get("id") or rel.element_id),
        type=rel.type,
        properties=props,
        start_node=_snapshot(start),
        end_node=_snapshot(end),
        neo4j_id=rel.element_id,
    )


class EdgeService:
    def __init__(self, store: Neo4jStore) -> None:
        self.store = store

    def _edges(self, records: Iterable[Any]) -> List[Edge]:
        return [format_edge(rec["r"], rec["start"], rec["end"]) for rec in records]

    def list(self, limit: Optional[int] = None, skip: Optional[int] = 0,
             rel_type: Optional[str] = None) -> List[Edge]:
        if rel_type is not None:
            rel_type = validate_identifier(rel_type, "relationship type")
        params = {"type": rel_type, **clamp_page(limit, skip)}
        result = self.store.read(queries.LIST_EDGES, params)
        return self._edges(result.records)

    def get_by_type(self, rel_type: str, limit: Optional[int] = None,
                    skip: Optional[int] = 0) -> List[Edge]:
        return self.list(limit=limit, skip=skip, rel_type=rel_type)

    def get_by_id(self, edge_id: str) -> Optional[Edge]:
        result = self.store.read(queries.GET_EDGE, {"id": edge_id})
        if not result.records:
            return None
        rec = result.records[0]
        return format_edge(rec["r"], rec["start"], rec["end"])

    def get_for_node(self, node_id: str, direction: Union[Direction, str] = Direction.BOTH,
                     limit: Optional[int] = None, skip: Optional[int] = 0) -> List[Edge]:
        try:
            direction = Direction(direction)
        except ValueError:
            raise InvalidInputError(
                "direction must be one of: incoming, outgoing, both"
            ) from None
        query = queries.EDGES_BY_DIRECTION[direction.value]
        result = self.store.read(query, {"node_id": node_id, **clamp_page(limit, skip)})
        return self._edges(result.records)

    def create(self, start_id: str, end_id: str, rel_type: str,
               properties: Optional[Dict[str, Any]] = None) -> Edge:
        rel_type = validate_identifier(rel_type, "relationship type")
        edge_id = str(uuid4())
        props = {**(properties or {}), "id": edge_id}
        params = {"start_id": start_id, "end_id": end_id, "type": rel_type, "properties": props}
        result = self.store.write(queries.CREATE_EDGE, params)
        if not result.records:
            raise NotFoundError(
                f"Cannot create relationship: start node {start_id!r} "
                f"or end node {end_id!r} not found"
            )
        rec = result.records[0]
        edge = format_edge(rec["r"], rec["start"], rec["end"])
        logger.info("created relationship %s (%s)-[%s]->(%s)", edge.id, start_id, rel_type, end_id)
        return edge

    def update(self, edge_id: str, properties: Dict[str, Any]) -> Edge:
        props = {k: v for k, v in properties.items() if k != "id"}
        result = self.store.write(queries.UPDATE_EDGE, {"id": edge_id, "properties": props})
        if not result.records:
            raise NotFoundError("Relationship not found")
        rec = result.records[0]
        return format_edge(rec["r"], rec["start"], rec["end"])

    def delete(self, edge_id: str) -> bool:
        """
        Delete by application id, element id, or numeric legacy id.
        Returns False when nothing matched.
        """
        legacy_id = int(edge_id) if edge_id.isdigit() else None
        result = self.store.write(queries.DELETE_EDGE, {"id": edge_id, "legacy_id": legacy_id})
        deleted = result.relationships_deleted > 0
        if deleted:
            logger.info("deleted relationship %s", edge_id)
        return deleted
