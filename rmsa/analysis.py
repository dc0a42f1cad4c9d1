"""Fixed-point analyses for rate-monotonic scheduling.

Response time of task i (tasks ordered by priority, highest first):

    R_i^(k+1) = C_i + sum_{j < i} ceil(R_i^(k) / T_j) * C_j

First free slot, the first time unit left idle after the synchronous
release of all tasks:

    M^(k+1) = 1 + sum_j ceil(M^(k) / T_j) * C_j

Both recurrences are monotonically non-decreasing. A response time that
does not settle within the iteration cap is reported as UNSCHEDULABLE
instead of raising, so that the rest of the system can still be analyzed.
The first-free-slot search has no such per-task fallback and raises
NonConvergenceError instead.
"""

import logging
import math
from typing import List, Optional, Sequence

from rmsa.errors import EmptySystemError, NonConvergenceError
from rmsa.models import Task

logger = logging.getLogger(__name__)

UNSCHEDULABLE = -1
MAX_ITERATIONS = 50
FREE_SLOT_MAX_ITERATIONS = 1000


def workload(tasks: Sequence[Task], t: float) -> float:
    """Processor demand of all releases of ``tasks`` in [0, t)."""
    demand = 0.0
    for task in tasks:
        if task.T > 0:
            demand += math.ceil(t / task.T) * task.C
    return demand


def compute_response_time(
    task: Task,
    higher_priority_tasks: Sequence[Task],
    seed: Optional[float] = None,
    max_iterations: int = MAX_ITERATIONS,
) -> float:
    """Compute the worst-case response time of a task by fixed-point iteration.

    Args:
        task: The task to analyze.
        higher_priority_tasks: Tasks with strictly higher priority.
        seed: Starting point of the iteration (defaults to the task's own C).
            Any seed at or below the fixed point reaches the same result.
        max_iterations: Number of iterations before giving up.

    Returns:
        The response time, or UNSCHEDULABLE if no fixed point was found
        within max_iterations.
    """
    r_prev = task.C if seed is None else seed

    for iteration in range(1, max_iterations + 1):
        r_new = task.C + workload(higher_priority_tasks, r_prev)
        if r_new == r_prev:
            logger.debug("Task %d: R = %g after %d iteration(s)", task.id, r_new, iteration)
            return r_new
        r_prev = r_new

    logger.debug("Task %d: no fixed point after %d iterations", task.id, max_iterations)
    return UNSCHEDULABLE


def response_times(
    tasks: Sequence[Task],
    seed_mode: str = "execution",
    max_iterations: int = MAX_ITERATIONS,
) -> List[float]:
    """Return the worst-case response times, index-aligned with ``tasks``.

    With ``seed_mode="chained"`` each recurrence starts from the previous
    task's response time plus the current execution time, which is how
    earlier releases of this tool seeded it.
    """
    if seed_mode not in ("execution", "chained"):
        raise ValueError(f"Unknown seed mode {seed_mode!r}")

    results: List[float] = []
    for i, task in enumerate(tasks):
        if i == 0:
            results.append(task.C)
            continue
        seed = None
        if seed_mode == "chained" and results[-1] != UNSCHEDULABLE:
            seed = results[-1] + task.C
        results.append(compute_response_time(task, tasks[:i], seed, max_iterations))

    unschedulable = [task.id for task, r in zip(tasks, results) if r == UNSCHEDULABLE]
    if unschedulable:
        logger.warning("No bounded response time for task(s) %s", unschedulable)
    return results


def first_free_slot(
    tasks: Sequence[Task],
    responses: Sequence[float],
    max_iterations: int = FREE_SLOT_MAX_ITERATIONS,
) -> int:
    """Return the first time unit with no pending demand from any task.

    The iteration is seeded one past the largest bounded response time.

    Raises:
        EmptySystemError: If there are no tasks.
        NonConvergenceError: If no task has a bounded response time or the
            recurrence does not settle within max_iterations (the processor
            is never idle, e.g. utilization above 1).
    """
    if not tasks:
        raise EmptySystemError("First free slot is undefined for an empty system")
    bounded = [r for r in responses if r != UNSCHEDULABLE]
    if not bounded:
        raise NonConvergenceError("No task has a bounded response time", iterations=0)

    m_prev = 1 + max(bounded)
    for iteration in range(1, max_iterations + 1):
        m_new = 1 + workload(tasks, m_prev)
        if m_new == m_prev:
            logger.debug("First free slot %g after %d iteration(s)", m_new, iteration)
            return int(m_new) if float(m_new).is_integer() else m_new
        m_prev = m_new

    raise NonConvergenceError(
        f"First free slot did not converge within {max_iterations} iterations",
        iterations=max_iterations,
    )
