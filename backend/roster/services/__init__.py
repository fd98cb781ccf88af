# Services package init
"""
Campus Roster Backend — Services Package
=========================================

What:  Business logic between the routes and the database.

Service Inventory:
    - sequence_registry.py: dense id assignment and compaction
    - roster_service.py:    list / create / delete for one collection
"""
