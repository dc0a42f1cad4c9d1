"""Slack available to aperiodic work under rate-monotonic scheduling.

For the instance of task i released at r with deadline d = r + T_i, the
slack is the processor time that lower-priority or aperiodic work could take
without making any task of priority 1..i miss d. It is evaluated at the
release instants ("expirations") of all tasks that fall inside the window

    [d - R_i + C_i, d]

as

    slack(t) = d - F - sum_{k <= i} prop(t / T_k) * C_k

where prop is ceil or floor and F is the blocking time (always 0 here, no
resource sharing is modeled). The slack of the instance is the minimum over
the window, never negative.
"""

import enum
import logging
import math
from typing import Callable, List, Optional, Sequence

from rmsa.analysis import UNSCHEDULABLE
from rmsa.bounds import hyperperiod
from rmsa.models import Task

logger = logging.getLogger(__name__)


class ProportionMode(enum.Enum):
    """How releases of a task up to an instant are counted."""
    CEILING = "ceiling"
    FLOOR = "floor"

    @property
    def function(self) -> Callable[[float], int]:
        return math.ceil if self is ProportionMode.CEILING else math.floor


def task_proportion(task: Task, instant: float, mode: ProportionMode = ProportionMode.CEILING) -> float:
    """Demand of ``task`` up to ``instant``, counting releases with ``mode``."""
    if task.T <= 0:
        return 0
    return mode.function(instant / task.T) * task.C


def next_expiration(reference: float, period: float) -> float:
    """Return the smallest positive multiple of ``period`` at or after ``reference``."""
    if period <= 0:
        raise ValueError(f"period must be positive, got {period}")
    return max(1, math.ceil(reference / period)) * period


def slack_expirations(
    tasks: Sequence[Task],
    deadline: float,
    response_time: float,
    execution_time: float,
) -> List[float]:
    """Return the expiration instants inside the slack window of an instance.

    The window runs from ``deadline - response_time + execution_time`` up to
    ``deadline``; for every task only its first expiration in the window is
    taken.
    """
    lower = deadline - response_time + execution_time
    instants = set()
    for task in tasks:
        if task.T <= 0:
            continue
        instant = next_expiration(lower, task.T)
        if lower <= instant <= deadline:
            instants.add(instant)
    return sorted(instants)


def task_slack(
    tasks: Sequence[Task],
    index: int,
    response_time: float,
    release: float = 0,
    mode: ProportionMode = ProportionMode.CEILING,
    blocking: float = 0,
) -> float:
    """Return the slack of the instance of ``tasks[index]`` released at ``release``.

    Tasks without a bounded response time have no slack to give.
    """
    task = tasks[index]
    if response_time == UNSCHEDULABLE or task.T <= 0:
        return 0

    deadline = release + task.T
    instants = slack_expirations(tasks, deadline, response_time, task.C)
    if not instants:
        return 0

    level = tasks[:index + 1]
    slack = min(
        deadline - blocking - sum(task_proportion(k, t, mode) for k in level)
        for t in instants
    )
    return max(slack, 0)


def slacks(
    tasks: Sequence[Task],
    responses: Sequence[float],
    mode: ProportionMode = ProportionMode.CEILING,
) -> List[float]:
    """Return the slack of each task's first instance, index-aligned with ``tasks``."""
    return [task_slack(tasks, i, responses[i], 0, mode) for i in range(len(tasks))]


def slack_table(
    tasks: Sequence[Task],
    responses: Sequence[float],
    horizon: Optional[int] = None,
    mode: ProportionMode = ProportionMode.CEILING,
) -> List[List[float]]:
    """Return, per task, the slack of every instance released before ``horizon``.

    The horizon defaults to the hyperperiod, so that the table covers one
    full repetition of the schedule. Row i starts with ``slacks(...)[i]``.
    """
    if not tasks:
        return []
    if horizon is None:
        horizon = hyperperiod(tasks)

    table = []
    for i, task in enumerate(tasks):
        row = []
        if task.T > 0:
            release = 0
            while release < horizon:
                row.append(task_slack(tasks, i, responses[i], release, mode))
                release += task.T
        table.append(row)
    logger.debug("Slack table over %d time unit(s): %s", horizon, [len(row) for row in table])
    return table
