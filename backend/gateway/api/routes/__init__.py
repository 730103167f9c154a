"""Route Modules — one file per public operation.

Invariants:
    - Endpoints take the raw Request and parse bodies themselves, so the rate
      check dependency always runs before any validation
    - Routes never contain business logic (delegate to services)
"""
