# kgms/models/graph.py
from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, JsonValue


PropertyMap = Dict[str, JsonValue]


# ---- Enumerations -----------------------------------------------------------

class Direction(str, Enum):
    """Which relationships of a node to return."""
    INCOMING = "incoming"
    OUTGOING = "outgoing"
    BOTH = "both"


# ---- Request bodies ---------------------------------------------------------

class NodeCreate(BaseModel):
    """
    Payload for POST /api/nodes.
    Any `id` inside `properties` is replaced by a generated one.
    """
    properties: PropertyMap = Field(..., description="Property map of the new node.")
    labels: List[str] = Field(default_factory=list, description="Labels, e.g. ['Person'].")


class PropertiesUpdate(BaseModel):
    """Partial property merge for PUT /api/nodes/{id} and /api/edges/{id}."""
    properties: PropertyMap = Field(..., description="Keys to merge into the entity.")


class EdgeCreate(BaseModel):
    """
    Payload for POST /api/edges. Accepts both camelCase (browser client)
    and snake_case field names.
    """
    model_config = ConfigDict(populate_by_name=True)

    start_node_id: str = Field(..., alias="startNodeId", min_length=1)
    end_node_id: str = Field(..., alias="endNodeId", min_length=1)
    type: str = Field(..., min_length=1, description="Relationship type, e.g. KNOWS.")
    properties: PropertyMap = Field(default_factory=dict)


# ---- Records returned to clients -------------------------------------------

class Node(BaseModel):
    id: str
    labels: List[str] = Field(default_factory=list)
    properties: Dict[str, Any] = Field(default_factory=dict)
    neo4j_id: Optional[str] = Field(None, description="Store-internal element id (informational).")


class EndpointSnapshot(BaseModel):
    """Endpoint node as seen when the relationship was read."""
    id: str
    labels: List[str] = Field(default_factory=list)
    properties: Dict[str, Any] = Field(default_factory=dict)


class Edge(BaseModel):
    id: str
    type: str
    properties: Dict[str, Any] = Field(default_factory=dict)
    start_node: EndpointSnapshot
    end_node: EndpointSnapshot
    neo4j_id: Optional[str] = None
