"""Pydantic Schemas — request/response validation at the API boundary.

Invariants:
    - Schemas sanitize string fields before constraints are checked
    - Response schemas serialize with camelCase aliases where the public API uses them
"""
