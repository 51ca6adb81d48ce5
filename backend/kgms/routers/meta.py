# kgms/routers/meta.py
from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from kgms.core.config import settings
from kgms.dependencies import get_store
from kgms.routers.responses import ok
from kgms.services.neo4j_client import Neo4jStore, ping

router = APIRouter(prefix="/api", tags=["meta"])

AVAILABLE_ENDPOINTS = ["/api/nodes", "/api/edges", "/api/health", "/api"]

ENDPOINT_MAP = {
    "nodes": {
        "GET /api/nodes": "list nodes (limit, skip, label)",
        "GET /api/nodes/{id}": "get node by id",
        "POST /api/nodes": "create node",
        "PUT /api/nodes/{id}": "merge node properties",
        "DELETE /api/nodes/{id}": "delete node and its relationships",
        "GET /api/nodes/search/{key}/{value}": "search nodes by property",
        "GET /api/nodes/label/{label}": "list nodes by label",
    },
    "edges": {
        "GET /api/edges": "list relationships (limit, skip, type)",
        "GET /api/edges/{id}": "get relationship by id",
        "POST /api/edges": "create relationship",
        "PUT /api/edges/{id}": "merge relationship properties",
        "DELETE /api/edges/{id}": "delete relationship",
        "GET /api/edges/type/{type}": "list relationships by type",
        "GET /api/edges/node/{nodeId}": "relationships of a node (direction)",
    },
}


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("")
def info() -> dict:
    return ok(
        message=f"{settings.APP_NAME} is running",
        version=settings.APP_VERSION,
        endpoints=ENDPOINT_MAP,
        timestamp=_now(),
    )


@router.get("/health")
def health(store: Neo4jStore = Depends(get_store)) -> dict:
    db_ok = ping(store)
    return ok(
        message="Service is healthy" if db_ok else "Graph store unreachable",
        status="OK" if db_ok else "DEGRADED",
        database=db_ok,
        timestamp=_now(),
    )
