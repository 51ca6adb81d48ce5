"""FastAPI dependency providers; tests override `get_store`."""
from fastapi import Depends

from kgms.services.edge_service import EdgeService
from kgms.services.neo4j_client import Neo4jStore
from kgms.services.node_service import NodeService


def get_store() -> Neo4jStore:
    return Neo4jStore()


def get_node_service(store: Neo4jStore = Depends(get_store)) -> NodeService:
    return NodeService(store)


def get_edge_service(store: Neo4jStore = Depends(get_store)) -> EdgeService:
    return EdgeService(store)
