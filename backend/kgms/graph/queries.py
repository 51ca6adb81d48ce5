"""
Cypher templates used by the node and edge services.

Every caller-supplied value (ids, labels, types, property keys) is passed as a
bound parameter. Dynamic labels and relationship types on create go through
APOC, so nothing is interpolated into the query text.
"""

PING = "RETURN 1 AS ok"

# ---- nodes -----------------------------------------------------------------

LIST_NODES = """
MATCH (n)
WHERE $label IS NULL OR $label IN labels(n)
RETURN n
SKIP $skip
LIMIT $limit
"""

GET_NODE = """
MATCH (n {id: $id})
RETURN n
LIMIT 1
"""

CREATE_NODE = """
CREATE (n)
SET n = $properties
WITH n
CALL apoc.create.addLabels(n, $labels) YIELD node
RETURN node AS n
"""

UPDATE_NODE = """
MATCH (n {id: $id})
SET n += $properties
RETURN n
"""

# DETACH removes every incident relationship with the node
DELETE_NODE = """
MATCH (n {id: $id})
DETACH DELETE n
"""

SEARCH_NODES = """
MATCH (n)
WHERE n[$key] = $value
RETURN n
SKIP $skip
LIMIT $limit
"""

# ---- relationships ---------------------------------------------------------

LIST_EDGES = """
MATCH (a)-[r]->(b)
WHERE $type IS NULL OR type(r) = $type
RETURN r, a AS start, b AS end
SKIP $skip
LIMIT $limit
"""

GET_EDGE = """
MATCH (a)-[r {id: $id}]->(b)
RETURN r, a AS start, b AS end
LIMIT 1
"""

# zero rows when either endpoint is missing, so nothing is created
CREATE_EDGE = """
MATCH (a {id: $start_id})
MATCH (b {id: $end_id})
CALL apoc.create.relationship(a, $type, $properties, b) YIELD rel
RETURN rel AS r, a AS start, b AS end
"""

UPDATE_EDGE = """
MATCH (a)-[r {id: $id}]->(b)
SET r += $properties
RETURN r, a AS start, b AS end
"""

DELETE_EDGE = """
MATCH ()-[r]->()
WHERE r.id = $id OR elementId(r) = $id OR id(r) = $legacy_id
DELETE r
"""

INCOMING_EDGES = """
MATCH (a)-[r]->(n {id: $node_id})
RETURN r, a AS start, n AS end
SKIP $skip
LIMIT $limit
"""

OUTGOING_EDGES = """
MATCH (n {id: $node_id})-[r]->(b)
RETURN r, n AS start, b AS end
SKIP $skip
LIMIT $limit
"""

ALL_NODE_EDGES = """
MATCH (n {id: $node_id})-[r]-()
WITH DISTINCT r
RETURN r, startNode(r) AS start, endNode(r) AS end
SKIP $skip
LIMIT $limit
"""

EDGES_BY_DIRECTION = {
    "incoming": INCOMING_EDGES,
    "outgoing": OUTGOING_EDGES,
    "both": ALL_NODE_EDGES,
}
