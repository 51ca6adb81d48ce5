"""
HTTP client for the kgms REST API, used by the application controller.

Every call has a fixed wall-clock timeout. Deletes never raise on transport
problems: a timed-out or dropped DELETE may still complete server-side, so it
is reported as ``DeleteOutcome.INDETERMINATE``.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from kgms.core.config import settings

logger = logging.getLogger(__name__)


class ApiError(Exception):
    def __init__(self, status_code: Optional[int], message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class NotFound(ApiError):
    pass


class NetworkError(ApiError):
    """The request may or may not have reached the server."""


class RequestTimeout(NetworkError):
    pass


class DeleteOutcome(str, Enum):
    CONFIRMED = "confirmed"
    FAILED = "failed"
    INDETERMINATE = "indeterminate"


@dataclass
class DeleteResult:
    outcome: DeleteOutcome
    message: str


def _seg(value: str) -> str:
    return quote(str(value), safe="")


class GraphApiClient:
    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None,
                 transport: Optional[httpx.BaseTransport] = None) -> None:
        self.base_url = base_url or settings.API_BASE_URL
        self.timeout = timeout if timeout is not None else settings.CLIENT_TIMEOUT_SECONDS
        self._http = httpx.Client(
            base_url=self.base_url,
            timeout=httpx.Timeout(self.timeout),
            transport=transport,
            headers={"Content-Type": "application/json"},
        )

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "GraphApiClient":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    # ---- transport ----------------------------------------------------------

    def request(self, method: str, path: str, *, params: Optional[Dict[str, Any]] = None,
                json: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Send one request and return the JSON envelope."""
        logger.debug("%s %s params=%s", method, path, params)
        try:
            resp = self._http.request(method, path, params=params, json=json)
        except httpx.TimeoutException as exc:
            raise RequestTimeout(None, f"Request timed out after {self.timeout}s") from exc
        except httpx.TransportError as exc:
            raise NetworkError(None, f"Network error: {exc}") from exc

        if resp.status_code >= 400:
            message = _error_message(resp)
            logger.warning("%s %s failed: %d %s", method, path, resp.status_code, message)
            cls = NotFound if resp.status_code == 404 else ApiError
            raise cls(resp.status_code, message)

        body = resp.json()
        if isinstance(body, dict) and "success" in body:
            return body
        return {"success": True, "data": body}

    def _delete(self, path: str) -> DeleteResult:
        try:
            body = self.request("DELETE", path)
        except NetworkError as exc:
            logger.warning("DELETE %s outcome unknown: %s", path, exc.message)
            return DeleteResult(
                DeleteOutcome.INDETERMINATE,
                f"{exc.message}; deletion status unknown, please verify manually",
            )
        except NotFound:
            # gone either way, e.g. removed by another session
            return DeleteResult(DeleteOutcome.CONFIRMED, "Already deleted")
        except ApiError as exc:
            return DeleteResult(DeleteOutcome.FAILED, exc.message)
        return DeleteResult(DeleteOutcome.CONFIRMED, body.get("message", "Deleted"))

    # ---- nodes --------------------------------------------------------------

    def get_nodes(self, limit: int = 10000, skip: int = 0,
                  label: Optional[str] = None) -> Dict[str, Any]:
        params: Dict[str, Any] = {"limit": limit, "skip": skip}
        if label:
            params["label"] = label
        return self.request("GET", "/nodes", params=params)

    def get_node(self, node_id: str) -> Dict[str, Any]:
        return self.request("GET", f"/nodes/{_seg(node_id)}")

    def create_node(self, properties: Dict[str, Any],
                    labels: Optional[List[str]] = None) -> Dict[str, Any]:
        return self.request("POST", "/nodes",
                            json={"properties": properties or {}, "labels": labels or []})

    def update_node(self, node_id: str, properties: Dict[str, Any]) -> Dict[str, Any]:
        return self.request("PUT", f"/nodes/{_seg(node_id)}", json={"properties": properties})

    def delete_node(self, node_id: str) -> DeleteResult:
        return self._delete(f"/nodes/{_seg(node_id)}")

    def search_nodes(self, key: str, value: str, limit: int = 10000,
                     skip: int = 0) -> Dict[str, Any]:
        return self.request("GET", f"/nodes/search/{_seg(key)}/{_seg(value)}",
                            params={"limit": limit, "skip": skip})

    # ---- edges --------------------------------------------------------------

    def get_edges(self, limit: int = 10000, skip: int = 0,
                  rel_type: Optional[str] = None) -> Dict[str, Any]:
        params: Dict[str, Any] = {"limit": limit, "skip": skip}
        if rel_type:
            params["type"] = rel_type
        return self.request("GET", "/edges", params=params)

    def get_edge(self, edge_id: str) -> Dict[str, Any]:
        return self.request("GET", f"/edges/{_seg(edge_id)}")

    def create_edge(self, start_node_id: str, end_node_id: str, rel_type: str,
                    properties: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        body = {
            "startNodeId": start_node_id,
            "endNodeId": end_node_id,
            "type": rel_type,
            "properties": properties or {},
        }
        return self.request("POST", "/edges", json=body)

    def update_edge(self, edge_id: str, properties: Dict[str, Any]) -> Dict[str, Any]:
        return self.request("PUT", f"/edges/{_seg(edge_id)}", json={"properties": properties})

    def delete_edge(self, edge_id: str) -> DeleteResult:
        return self._delete(f"/edges/{_seg(edge_id)}")

    def get_node_edges(self, node_id: str, direction: str = "both", limit: int = 10000,
                       skip: int = 0) -> Dict[str, Any]:
        return self.request("GET", f"/edges/node/{_seg(node_id)}",
                            params={"direction": direction, "limit": limit, "skip": skip})


def _error_message(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text or resp.reason_phrase
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return resp.reason_phrase
