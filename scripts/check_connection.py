# scripts/check_connection.py
from kgms.core.config import settings
from kgms.services.neo4j_client import close_driver, init_driver, ping

print("Using URI:", settings.NEO4J_URI)
init_driver()
try:
    print("ok" if ping() else "unreachable")
finally:
    close_driver()
