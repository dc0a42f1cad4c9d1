"""Task systems and their memoized analyses."""

import logging
import threading
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Tuple

from rmsa import analysis, bounds, simulation, slack
from rmsa.config import AnalysisConfig
from rmsa.models import Task
from rmsa.parser import format_tasks, parse_tasks

logger = logging.getLogger(__name__)


class TaskSystem:
    """An immutable rate-monotonic task system.

    Tasks are kept in the order they were given, which is their priority
    order (highest first). Every analysis is computed on first access and
    then cached for the lifetime of the instance; a different system means a
    new instance.

    Example:
        >>> system = TaskSystem("(1,5,5),(1,7,7),(2,25,25)")
        >>> system.response_times
        [1.0, 2.0, 4.0]
    """

    def __init__(self, text: str = "", config: Optional[AnalysisConfig] = None) -> None:
        self._config = config or AnalysisConfig()
        self._tasks: Tuple[Task, ...] = parse_tasks(text, self._config.decimals)
        self._cache: Dict[str, Any] = {}
        self._lock = threading.RLock()

    @classmethod
    def from_text(cls, text: str, config: Optional[AnalysisConfig] = None) -> "TaskSystem":
        return cls(text, config)

    @classmethod
    def from_tasks(cls, tasks: Iterable[Task], config: Optional[AnalysisConfig] = None) -> "TaskSystem":
        """Build a system from existing tasks, renumbering them 1..n in order."""
        config = config or AnalysisConfig()
        system = cls("", config)
        system._tasks = tuple(
            Task(id=i, C=t.C, T=t.T, D=t.D, decimals=config.decimals)
            for i, t in enumerate(tasks, start=1)
        )
        return system

    def _memoized(self, key: str, compute: Callable[[], Any]) -> Any:
        with self._lock:
            if key not in self._cache:
                self._cache[key] = compute()
            return self._cache[key]

    @property
    def config(self) -> AnalysisConfig:
        return self._config

    @property
    def tasks(self) -> Tuple[Task, ...]:
        return self._tasks

    @property
    def n(self) -> int:
        return len(self._tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(self._tasks)

    def __getitem__(self, index: int) -> Task:
        return self._tasks[index]

    def index_of(self, task_id: int) -> int:
        """Return the position of the task with the given id."""
        for i, task in enumerate(self._tasks):
            if task.id == task_id:
                return i
        raise KeyError(task_id)

    # -- utilization bounds --

    @property
    def total_utilization(self) -> float:
        return self._memoized(
            "total_utilization",
            lambda: bounds.total_utilization(self._tasks, self._config.decimals),
        )

    @property
    def hyperperiod(self) -> int:
        return self._memoized("hyperperiod", lambda: bounds.hyperperiod(self._tasks))

    @property
    def liu_bound(self) -> float:
        return self._memoized("liu_bound", lambda: bounds.liu_bound(self.n))

    @property
    def is_schedulable_by_liu(self) -> bool:
        return self.total_utilization <= self.liu_bound

    @property
    def bini_bound(self) -> float:
        return self._memoized("bini_bound", lambda: bounds.bini_bound(self._tasks))

    @property
    def is_schedulable_by_bini(self) -> bool:
        return self.bini_bound <= bounds.BINI_LIMIT

    # -- fixed-point analyses --

    @property
    def response_times(self) -> List[float]:
        return list(self._memoized(
            "response_times",
            lambda: tuple(analysis.response_times(
                self._tasks, self._config.seed_mode, self._config.max_iterations,
            )),
        ))

    @property
    def is_schedulable_by_rta(self) -> bool:
        """True if every task has a bounded response time within its deadline."""
        return all(
            r != analysis.UNSCHEDULABLE and r <= task.D
            for task, r in zip(self._tasks, self.response_times)
        )

    @property
    def first_free_slot(self) -> int:
        return self._memoized(
            "first_free_slot",
            lambda: analysis.first_free_slot(
                self._tasks, self.response_times, self._config.free_slot_max_iterations,
            ),
        )

    # -- simulation and slack --

    @property
    def rm_schedule(self) -> simulation.Schedule:
        return self._memoized(
            "rm_schedule",
            lambda: simulation.simulate(self._tasks, self._config.horizon),
        )

    @property
    def _proportion(self) -> slack.ProportionMode:
        return slack.ProportionMode(self._config.proportion)

    @property
    def slacks(self) -> List[float]:
        return list(self._memoized(
            "slacks",
            lambda: tuple(slack.slacks(self._tasks, self.response_times, self._proportion)),
        ))

    @property
    def slack_table(self) -> List[List[float]]:
        table = self._memoized(
            "slack_table",
            lambda: tuple(
                tuple(row) for row in slack.slack_table(
                    self._tasks, self.response_times, self._config.horizon, self._proportion,
                )
            ),
        )
        return [list(row) for row in table]

    def summary(self) -> Dict[str, Any]:
        """Return the scalar analysis results as a plain dictionary."""
        result: Dict[str, Any] = {
            "n": self.n,
            "total_utilization": self.total_utilization,
        }
        if self.n:
            result.update(
                hyperperiod=self.hyperperiod,
                liu_bound=self.liu_bound,
                schedulable_by_liu=self.is_schedulable_by_liu,
                bini_bound=self.bini_bound,
                schedulable_by_bini=self.is_schedulable_by_bini,
                response_times=self.response_times,
                schedulable_by_rta=self.is_schedulable_by_rta,
                slacks=self.slacks,
            )
        return result

    def __repr__(self) -> str:
        return f"TaskSystem({format_tasks(self._tasks)!r})"
