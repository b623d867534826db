"""Infrastructure Layer — upstream HTTP client, resilience shell, and logging.

Invariants:
    - Every outbound call passes through ResilientExecutor (permit + retry)
    - Every terminal outbound failure passes through classify_failure()

Design Decisions:
    - Resilient wrappers over raw clients (single responsibility)
"""
