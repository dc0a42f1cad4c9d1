"""Utilization-based schedulability bounds for rate-monotonic systems.

Both tests here are sufficient only: a system that fails them may still be
schedulable, which only the response-time analysis can tell.

    Liu & Layland:  U <= n (2^(1/n) - 1)
    Bini et al.:    prod_i (U_i + 1) <= 2
"""

import math
from functools import reduce
from typing import Sequence

from rmsa.errors import EmptySystemError
from rmsa.models import DEFAULT_DECIMALS, Task, round_to

BINI_DECIMALS = 2
BINI_LIMIT = 2


def total_utilization(tasks: Sequence[Task], decimals: int = DEFAULT_DECIMALS) -> float:
    """Return the sum of task utilizations (0.0 for an empty system)."""
    return round_to(sum(task.utilization for task in tasks), decimals)


def hyperperiod(tasks: Sequence[Task]) -> int:
    """Return the least common multiple of all non-zero periods.

    Raises:
        EmptySystemError: If there are no tasks.
        ValueError: If a period is not integral.
    """
    if not tasks:
        raise EmptySystemError("Hyperperiod is undefined for an empty system")
    periods = []
    for task in tasks:
        if task.T == 0:
            continue
        if not float(task.T).is_integer():
            raise ValueError(f"Task {task.id}: hyperperiod needs integral periods, got {task.T}")
        periods.append(int(task.T))
    return reduce(math.lcm, periods, 1)


def liu_bound(n: int) -> float:
    """Return the Liu & Layland utilization bound for n tasks."""
    if n < 1:
        raise EmptySystemError("Liu & Layland bound is undefined for an empty system")
    return n * (2 ** (1.0 / n) - 1)


def is_schedulable_by_liu(tasks: Sequence[Task], decimals: int = DEFAULT_DECIMALS) -> bool:
    """Liu & Layland test; sufficient only, False does not prove infeasibility."""
    return total_utilization(tasks, decimals) <= liu_bound(len(tasks))


def bini_bound(tasks: Sequence[Task]) -> float:
    """Return the hyperbolic product prod(U_i + 1), rounded to 2 decimals."""
    if not tasks:
        raise EmptySystemError("Hyperbolic bound is undefined for an empty system")
    return round_to(math.prod(task.utilization + 1 for task in tasks), BINI_DECIMALS)


def is_schedulable_by_bini(tasks: Sequence[Task]) -> bool:
    """Hyperbolic test; sufficient only, but never stricter than Liu & Layland."""
    return bini_bound(tasks) <= BINI_LIMIT
