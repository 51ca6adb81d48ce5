"""Relationship collection endpoints."""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from kgms.core.errors import NotFoundError
from kgms.dependencies import get_edge_service
from kgms.models.graph import EdgeCreate, PropertiesUpdate
from kgms.routers.responses import ok, ok_list
from kgms.services.edge_service import EdgeService
from kgms.services.node_service import clamp_page

router = APIRouter(prefix="/api/edges", tags=["edges"])


@router.get("", summary="List relationships, optionally filtered by type")
def list_edges(
    limit: Optional[int] = Query(None, ge=1),
    skip: int = Query(0, ge=0),
    type: Optional[str] = None,
    svc: EdgeService = Depends(get_edge_service),
) -> dict:
    page = clamp_page(limit, skip)
    return ok_list(svc.list(rel_type=type, **page), **page)


@router.get("/type/{rel_type}")
def edges_by_type(
    rel_type: str,
    limit: Optional[int] = Query(None, ge=1),
    skip: int = Query(0, ge=0),
    svc: EdgeService = Depends(get_edge_service),
) -> dict:
    page = clamp_page(limit, skip)
    return ok_list(svc.get_by_type(rel_type, **page), **page)


@router.get("/node/{node_id}", summary="Relationships incident to a node")
def edges_for_node(
    node_id: str,
    direction: str = "both",
    limit: Optional[int] = Query(None, ge=1),
    skip: int = Query(0, ge=0),
    svc: EdgeService = Depends(get_edge_service),
) -> dict:
    # direction is checked by the service so the 400 carries our own message
    page = clamp_page(limit, skip)
    return ok_list(svc.get_for_node(node_id, direction, **page), **page)


@router.get("/{edge_id}")
def get_edge(edge_id: str, svc: EdgeService = Depends(get_edge_service)) -> dict:
    edge = svc.get_by_id(edge_id)
    if edge is None:
        raise NotFoundError("Relationship not found")
    return ok(edge)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_edge(body: EdgeCreate, svc: EdgeService = Depends(get_edge_service)) -> dict:
    edge = svc.create(body.start_node_id, body.end_node_id, body.type, body.properties)
    return ok(edge, message="Relationship created")


@router.put("/{edge_id}")
def update_edge(edge_id: str, body: PropertiesUpdate,
                svc: EdgeService = Depends(get_edge_service)) -> dict:
    return ok(svc.update(edge_id, body.properties), message="Relationship updated")


@router.delete("/{edge_id}")
def delete_edge(edge_id: str, svc: EdgeService = Depends(get_edge_service)) -> dict:
    """Accepts the application id or the store's internal id."""
    if not svc.delete(edge_id):
        raise NotFoundError("Relationship not found")
    return ok(message="Relationship deleted")
