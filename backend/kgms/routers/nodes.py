"""Node collection endpoints."""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from kgms.core.errors import NotFoundError
from kgms.dependencies import get_node_service
from kgms.models.graph import NodeCreate, PropertiesUpdate
from kgms.routers.responses import ok, ok_list
from kgms.services.node_service import NodeService, clamp_page

router = APIRouter(prefix="/api/nodes", tags=["nodes"])


@router.get("", summary="List nodes, optionally filtered by label")
def list_nodes(
    limit: Optional[int] = Query(None, ge=1),
    skip: int = Query(0, ge=0),
    label: Optional[str] = None,
    svc: NodeService = Depends(get_node_service),
) -> dict:
    page = clamp_page(limit, skip)
    nodes = svc.list(label=label, **page)
    return ok_list(nodes, **page)


@router.get("/label/{label}", summary="List nodes carrying a label")
def list_by_label(
    label: str,
    limit: Optional[int] = Query(None, ge=1),
    skip: int = Query(0, ge=0),
    svc: NodeService = Depends(get_node_service),
) -> dict:
    page = clamp_page(limit, skip)
    return ok_list(svc.list_by_label(label, **page), **page)


@router.get("/search/{key}/{value:path}", summary="Nodes whose property `key` equals `value`")
def search_nodes(
    key: str,
    value: str,
    limit: Optional[int] = Query(None, ge=1),
    skip: int = Query(0, ge=0),
    svc: NodeService = Depends(get_node_service),
) -> dict:
    page = clamp_page(limit, skip)
    return ok_list(svc.search(key, value, **page), **page)


@router.get("/{node_id}")
def get_node(node_id: str, svc: NodeService = Depends(get_node_service)) -> dict:
    node = svc.get_by_id(node_id)
    if node is None:
        raise NotFoundError("Node not found")
    return ok(node)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_node(body: NodeCreate, svc: NodeService = Depends(get_node_service)) -> dict:
    node = svc.create(body.properties, body.labels)
    return ok(node, message="Node created")


@router.put("/{node_id}")
def update_node(node_id: str, body: PropertiesUpdate,
                svc: NodeService = Depends(get_node_service)) -> dict:
    node = svc.update(node_id, body.properties)
    return ok(node, message="Node updated")


@router.delete("/{node_id}")
def delete_node(node_id: str, svc: NodeService = Depends(get_node_service)) -> dict:
    """Delete a node together with all of its relationships."""
    if not svc.delete(node_id):
        raise NotFoundError("Node not found")
    return ok(message="Node deleted")
