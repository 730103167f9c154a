"""API Layer — route table, pipeline middleware, and error handlers.

Invariants:
    - Routes registered from the typed route table in create_app (no auto-discovery)
    - All error bodies share the flat {error, code} shape

Design Decisions:
    - Thin endpoints delegate to services/handle_* modules
"""
