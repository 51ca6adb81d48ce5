# scripts/seed_neo4j.py
"""
Seed a small demo graph through the same services the API uses:

    (Alice:Person)-[:KNOWS]->(Bob:Person)-[:WORKS_AT]->(Acme:Org)
"""
from kgms.core.config import settings
from kgms.core.log import configure_logging
from kgms.services.edge_service import EdgeService
from kgms.services.neo4j_client import Neo4jStore, close_driver, init_driver
from kgms.services.node_service import NodeService

configure_logging(settings.LOG_LEVEL)
print("Using URI:", settings.NEO4J_URI)
init_driver()

store = Neo4jStore()
nodes = NodeService(store)
edges = EdgeService(store)

try:
    alice = nodes.create({"name": "Alice", "age": 34}, ["Person"])
    bob = nodes.create({"name": "Bob"}, ["Person"])
    acme = nodes.create({"name": "Acme", "city": "Karachi"}, ["Org"])
    edges.create(alice.id, bob.id, "KNOWS", {"since": 2019})
    edges.create(bob.id, acme.id, "WORKS_AT", {"role": "engineer"})
    print("Seeded nodes:", alice.id, bob.id, acme.id)
finally:
    close_driver()
print("Done.")
