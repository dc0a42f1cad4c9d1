"""Parser for the compact task-system notation.

A system is written as comma-separated ``(C,T,D)`` triples, e.g.::

    (1,5,5), (1,7,7), (2,25,25)

Whitespace is ignored everywhere. Tasks get ids 1..n in order of
appearance, and that order is taken as the priority order.
"""

import logging
import re
import sys
from typing import Iterable, List, Optional, Tuple

from rmsa.errors import MalformedSystemError
from rmsa.models import DEFAULT_DECIMALS, Task

logger = logging.getLogger(__name__)

TASK_PATTERN = re.compile(r"\((\d+),(\d+),(\d+)\)")


def parse_task(task_id: int, token: str, decimals: int = DEFAULT_DECIMALS, position: Optional[int] = None) -> Task:
    """Build a task from a single ``(C,T,D)`` token (whitespace already stripped)."""
    match = TASK_PATTERN.fullmatch(token)
    if match is None:
        raise MalformedSystemError(
            f"Invalid task {token!r}: expected (C,T,D) with integer fields",
            token=token,
            position=position,
        )
    c, t, d = (int(group) for group in match.groups())
    if max(c, t, d) > sys.float_info.max:
        raise MalformedSystemError(
            f"Invalid task {token!r}: field out of range",
            token=token,
            position=position,
        )
    return Task(id=task_id, C=c, T=t, D=d, decimals=decimals)


def parse_tasks(text: str, decimals: int = DEFAULT_DECIMALS) -> Tuple[Task, ...]:
    """Parse a whole system description into an ordered tuple of tasks.

    Raises:
        MalformedSystemError: If a triple does not match ``(int,int,int)``
            or the parentheses are unbalanced. No partial result is returned.
    """
    tasks: List[Task] = []
    depth = 0
    current: List[str] = []
    start = 0

    def flush() -> None:
        tasks.append(parse_task(len(tasks) + 1, "".join(current), decimals, position=start))
        current.clear()

    for position, char in enumerate(text):
        if char.isspace():
            continue
        if char == "(":
            if not current:
                start = position
            depth += 1
            current.append(char)
        elif char == ")":
            depth -= 1
            if depth < 0:
                raise MalformedSystemError("Unbalanced ')'", position=position)
            current.append(char)
        elif char == "," and depth == 0:
            flush()
        else:
            if not current:
                start = position
            current.append(char)

    if depth > 0:
        raise MalformedSystemError("Unbalanced '(' at end of input", position=len(text))

    # a single trailing separator leaves nothing to flush
    if current:
        flush()

    logger.debug("Parsed %d task(s)", len(tasks))
    return tuple(tasks)


def format_tasks(tasks: Iterable[Task]) -> str:
    """Render tasks back to the ``(C,T,D),...`` notation."""
    return ",".join(
        "(" + ",".join(_format_number(v) for v in (task.C, task.T, task.D)) + ")"
        for task in tasks
    )


def _format_number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else repr(float(value))
