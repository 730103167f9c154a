"""Services Layer — orchestrates core decisions around infrastructure IO.

Invariants:
    - Side-effect failures (email, sinks, counter store) are logged, never raised
      to the caller
"""
