"""Discrete-time simulation of preemptive rate-monotonic scheduling.

Time is divided in unit cells. Every task releases its first instance at
cell 0 and the following ones at T, 2T, ... In every cell the pending task
with the highest priority (lowest index) runs for one unit.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from rmsa.bounds import hyperperiod
from rmsa.models import Task

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeadlineMiss:
    """An instance that had not completed by its absolute deadline."""
    task_id: int
    release: int
    deadline: float


@dataclass
class Schedule:
    """Result of a rate-monotonic simulation.

    Attributes:
        occupancy: One list of booleans per task (index-aligned with the
            task list), True where the task runs in that cell.
        order: Id of the task running in each cell, None for idle cells.
        deadline_misses: Instances that did not finish before their deadline.
        horizon: Number of simulated cells.
    """
    occupancy: List[List[bool]] = field(default_factory=list)
    order: List[Optional[int]] = field(default_factory=list)
    deadline_misses: List[DeadlineMiss] = field(default_factory=list)
    horizon: int = 0

    @property
    def schedulable(self) -> bool:
        return not self.deadline_misses

    def execution_order(self) -> List[int]:
        """Return the ids of the running tasks, skipping idle cells."""
        return [task_id for task_id in self.order if task_id is not None]

    def busy_cells(self, index: int) -> int:
        """Return how many cells the task at ``index`` occupied."""
        return sum(self.occupancy[index])

    def idle_cells(self) -> int:
        return self.order.count(None)


def simulate(
    tasks: Sequence[Task],
    horizon: Optional[int] = None,
    stop_when_idle: bool = False,
) -> Schedule:
    """Simulate RM scheduling of ``tasks``.

    Args:
        tasks: Tasks in priority order, highest first.
        horizon: Number of cells to simulate (defaults to the hyperperiod).
        stop_when_idle: End the simulation at the first cell where no task
            is pending, instead of running the full horizon. The check comes
            before the releases of that cell, so a release landing on the
            first idle cell is not simulated.

    Returns:
        A Schedule covering the simulated cells.
    """
    if not tasks:
        return Schedule()
    if horizon is None:
        horizon = hyperperiod(tasks)

    n = len(tasks)
    schedule = Schedule(occupancy=[[] for _ in range(n)])

    executed = [0] * n
    release = [0.0] * n
    next_release = [task.T for task in tasks]
    missed = [False] * n
    # zero-period and zero-cost tasks never execute
    pending = [task.T > 0 and task.C > 0 for task in tasks]

    cell = 0
    while cell < horizon:
        if stop_when_idle and not any(pending):
            break

        selected = None
        for i, task in enumerate(tasks):
            if pending[i] and not missed[i] and cell >= release[i] + task.D:
                _record_miss(schedule, task, release[i])
                missed[i] = True

            if task.T > 0 and cell == next_release[i]:
                if pending[i] and not missed[i]:
                    _record_miss(schedule, task, release[i])
                release[i] = next_release[i]
                next_release[i] += task.T
                executed[i] = 0
                missed[i] = False
                pending[i] = task.C > 0

            if selected is None and pending[i]:
                selected = task
                schedule.occupancy[i].append(True)
                executed[i] += 1
                if executed[i] >= task.C:
                    pending[i] = False
            else:
                schedule.occupancy[i].append(False)

        schedule.order.append(selected.id if selected is not None else None)
        cell += 1

    schedule.horizon = cell
    logger.debug(
        "Simulated %d cell(s): %d idle, %d deadline miss(es)",
        cell, schedule.idle_cells(), len(schedule.deadline_misses),
    )
    return schedule


def _record_miss(schedule: Schedule, task: Task, release: float) -> None:
    miss = DeadlineMiss(task_id=task.id, release=int(release), deadline=release + task.D)
    logger.debug("Task %d released at %d missed its deadline %g", task.id, miss.release, miss.deadline)
    schedule.deadline_misses.append(miss)
