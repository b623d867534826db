"""Employee Aggregations — pure reductions over an already-fetched employee list.

Invariants:
    - Inputs are never mutated; every function returns a new sequence or a scalar
    - filter_by_name preserves original relative order; empty needle matches all
    - max_salary([]) == 0 (the only default substitution in the service)
    - top_n_names is a stable sort by salary descending — ties keep original order
    - len(top_n_names(xs, n)) == min(n, len(xs))

Design Decisions:
    - Structural SalariedNamed protocol over the Employee schema: core stays free of
      pydantic imports and tests can pass plain objects
    - casefold over lower: handles non-ASCII names (e.g. "ß" vs "SS")
"""

from collections.abc import Sequence
from typing import Protocol, TypeVar


class SalariedNamed(Protocol):
    """Anything with a name and a salary — the Employee schema satisfies this."""
    name: str
    salary: int


E = TypeVar("E", bound=SalariedNamed)


def filter_by_name(employees: Sequence[E], needle: str) -> list[E]:
    """Case-insensitive substring match on name."""
    folded = needle.casefold()
    return [e for e in employees if folded in e.name.casefold()]


def max_salary(employees: Sequence[SalariedNamed]) -> int:
    """Highest salary, or 0 when there are no employees."""
    return max((e.salary for e in employees), default=0)


def top_n_names(employees: Sequence[SalariedNamed], n: int) -> list[str]:
    """Names of the n highest earners, highest first."""
    if n < 0:
        raise ValueError("n must be >= 0")
    ranked = sorted(employees, key=lambda e: e.salary, reverse=True)
    return [e.name for e in ranked[:n]]
