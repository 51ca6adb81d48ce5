# kgms/routers/responses.py
from typing import Any, Dict, List, Optional

from pydantic import BaseModel


def ok(data: Any = None, message: Optional[str] = None, **extra: Any) -> Dict[str, Any]:
    """Success envelope: {success: true, data?, message?, ...extra}."""
    body: Dict[str, Any] = {"success": True}
    if message is not None:
        body["message"] = message
    if data is not None:
        body["data"] = _dump(data)
    body.update(extra)
    return body


def ok_list(items: List[BaseModel], limit: int, skip: int) -> Dict[str, Any]:
    """Envelope for paginated collections."""
    return ok(
        items,
        count=len(items),
        meta={"limit": limit, "skip": skip, "returned": len(items)},
    )


def fail(message: str, error: Optional[str] = None, **extra: Any) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": False, "message": message}
    if error is not None:
        body["error"] = error
    body.update(extra)
    return body


def _dump(data: Any) -> Any:
    if isinstance(data, BaseModel):
        return data.model_dump()
    if isinstance(data, list):
        return [_dump(d) for d in data]
    return data
