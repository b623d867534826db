"""Core Layer — pure domain logic, no IO, no async.

Invariants:
    - No module in core/ imports from services/, api/, or infrastructure/
    - All functions are pure and deterministic (clock and sleep supplied by callers)

Design Decisions:
    - Functional core separated from imperative shell: backoff schedule, permit
      arithmetic, aggregations and status mapping are tested without a transport
"""
