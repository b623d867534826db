"""Employee Facade — REST facade over the upstream mock employee API.

Invariants:
    - Package root has no import side effects beyond the version constant

Design Decisions:
    - Explicit imports only, no star exports
"""

__version__ = "1.0.0"
