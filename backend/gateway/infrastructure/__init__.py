"""Infrastructure Layer — external stores, email client, and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from core/ decision logic, only core types and errors
    - Every external call is bounded by a timeout or mapped to a typed error
"""
