"""Error taxonomy shared by services and routers.

Services raise these; the exception handlers in ``kgms.main`` turn them into
the JSON envelope. Store (driver) errors are not wrapped and bubble as-is.
"""
from __future__ import annotations


class GraphAPIError(Exception):
    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidInputError(GraphAPIError):
    """Request is well-formed JSON but a value is not acceptable."""
    status_code = 400


class NotFoundError(GraphAPIError):
    """No node/relationship matches the given id."""
    status_code = 404
