"""Core Layer — pure gateway logic, no IO, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - Functions are deterministic given their inputs (clocks and RNGs are passed in)

Design Decisions:
    - Functional core separated from imperative shell: the shell does the awaiting,
      core decides (sanitize, classify, prune windows, aggregate)
"""
