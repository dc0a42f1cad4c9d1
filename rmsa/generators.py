"""Random task-system generators for tests and experiments."""

import math
import random
from typing import List, Optional

from rmsa.config import AnalysisConfig
from rmsa.models import Task
from rmsa.system import TaskSystem


def uunifast(n: int, u_total: float, seed: Optional[int] = None) -> List[float]:
    """Generate task utilizations using the UUniFast algorithm.

    UUniFast generates uniformly distributed task utilizations that sum to
    the target total utilization.

    Reference:
    Bini, E., & Buttazzo, G. C. (2005). Measuring the performance of schedulability tests.
    Real-Time Systems, 30(1-2), 129-154.

    Args:
        n: Number of tasks.
        u_total: Target total utilization.
        seed: Optional random seed for reproducibility.

    Returns:
        List of n utilization values that sum to approximately u_total.

    Raises:
        ValueError: If n <= 0 or u_total < 0.
    """
    if n <= 0:
        raise ValueError("Number of tasks must be positive")
    if u_total < 0:
        raise ValueError("Target utilization must be non-negative")

    rng = random.Random(seed)

    utilizations = []
    sum_u = u_total
    for i in range(1, n):
        next_sum_u = sum_u * (rng.random() ** (1.0 / (n - i)))
        utilizations.append(sum_u - next_sum_u)
        sum_u = next_sum_u

    # Last utilization is whatever remains
    utilizations.append(sum_u)

    return utilizations


def generate_tasks(
    n: int,
    target_utilization: float,
    period_min: int = 10,
    period_max: int = 100,
    seed: Optional[int] = None,
) -> List[Task]:
    """Generate n integer tasks with implicit deadlines, in RM priority order.

    Periods are drawn log-uniformly from [period_min, period_max] and
    execution times are rounded to whole units (at least 1), so the achieved
    utilization only approximates the target.
    """
    if period_min <= 0 or period_max < period_min:
        raise ValueError("Invalid period range")

    rng = random.Random(seed)
    utilizations = uunifast(n, target_utilization, seed=seed)

    drawn = []
    for u in utilizations:
        T = int(round(math.exp(rng.uniform(math.log(period_min), math.log(period_max)))))
        C = max(1, int(round(u * T)))
        drawn.append((C, T))

    # shorter period = higher priority; the engine trusts input order
    drawn.sort(key=lambda ct: ct[1])
    return [Task(id=i, C=C, T=T, D=T) for i, (C, T) in enumerate(drawn, start=1)]


def generate_system(
    n: int,
    target_utilization: float,
    period_min: int = 10,
    period_max: int = 100,
    seed: Optional[int] = None,
    config: Optional[AnalysisConfig] = None,
) -> TaskSystem:
    """Convenience wrapper around generate_tasks returning a TaskSystem."""
    tasks = generate_tasks(n, target_utilization, period_min, period_max, seed)
    return TaskSystem.from_tasks(tasks, config)
