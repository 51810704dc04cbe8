"""
ProductBridge Backend — Services Layer
========================================

Service Inventory:
    - Datastore:      executes statements inside a per-call transaction scope
    - PersistService: commit/rollback gate every write passes through
    - ProductService: builds the statement for each route
"""
