# kgms/services/neo4j_client.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from neo4j import Driver, GraphDatabase, READ_ACCESS, WRITE_ACCESS
from neo4j import SummaryCounters

from kgms.core.config import settings
from kgms.graph import queries

logger = logging.getLogger(__name__)

_driver: Optional[Driver] = None  # module-level singleton


def init_driver() -> Driver:
    """
    Create the Neo4j driver once (idempotent). Uses env from settings:
    NEO4J_URI, NEO4J_USER, NEO4J_PASSWORD, NEO4J_DATABASE (optional).
    """
    global _driver
    if _driver is None:
        if not settings.NEO4J_URI or not settings.NEO4J_USER or not settings.NEO4J_PASSWORD:
            raise RuntimeError("Neo4j settings missing: check NEO4J_URI/USER/PASSWORD")
        _driver = GraphDatabase.driver(
            settings.NEO4J_URI,
            auth=(settings.NEO4J_USER, settings.NEO4J_PASSWORD),
        )
        # fail fast if unreachable
        _driver.verify_connectivity()
        logger.info("Neo4j driver initialised for %s", settings.NEO4J_URI)
    return _driver


def close_driver() -> None:
    """Close and clear the global driver."""
    global _driver
    if _driver is not None:
        _driver.close()
        _driver = None
        logger.info("Neo4j driver closed")


def _get_driver() -> Driver:
    """Internal accessor that ensures the driver exists."""
    return _driver or init_driver()


@dataclass
class CypherResult:
    """Records of one statement plus the write counters the store reported."""
    records: List[Any]
    counters: Optional[SummaryCounters] = None

    @property
    def nodes_deleted(self) -> int:
        return self.counters.nodes_deleted if self.counters else 0

    @property
    def relationships_deleted(self) -> int:
        return self.counters.relationships_deleted if self.counters else 0


class Neo4jStore:
    """
    Two access modes over the shared driver. Each call opens its own session;
    errors from the driver are not caught here.
    """

    def __init__(self, database: Optional[str] = None) -> None:
        self._database = database or settings.NEO4J_DATABASE or None

    def _run(self, query: str, params: Optional[Dict[str, Any]], mode: str) -> CypherResult:
        drv = _get_driver()
        with drv.session(database=self._database, default_access_mode=mode) as s:
            res = s.run(query, parameters=(params or {}))
            records = list(res)
            summary = res.consume()
        return CypherResult(records=records, counters=summary.counters)

    def read(self, query: str, params: Optional[Dict[str, Any]] = None) -> CypherResult:
        return self._run(query, params, READ_ACCESS)

    def write(self, query: str, params: Optional[Dict[str, Any]] = None) -> CypherResult:
        return self._run(query, params, WRITE_ACCESS)


def ping(store: Optional[Neo4jStore] = None) -> bool:
    """Lightweight connectivity check."""
    try:
        rows = (store or Neo4jStore()).read(queries.PING).records
        return bool(rows) and rows[0]["ok"] == 1
    except Exception as exc:
        logger.warning("Neo4j ping failed: %s", exc)
        return False
