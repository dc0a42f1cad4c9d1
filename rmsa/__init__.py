"""RMSA: Rate-Monotonic Schedulability Analysis.

This package analyzes periodic task systems under fixed-priority
rate-monotonic scheduling on a single processor: utilization bounds,
response-time analysis, a discrete-time schedule simulation and slack
computation for admitting aperiodic work.
"""

__version__ = "0.2.0"

from rmsa.models import Task
from rmsa.errors import (
    ConfigError,
    EmptySystemError,
    MalformedSystemError,
    NonConvergenceError,
    RmsaError,
)
from rmsa.config import AnalysisConfig, load_config
from rmsa.parser import parse_tasks
from rmsa.analysis import UNSCHEDULABLE, compute_response_time
from rmsa.slack import ProportionMode
from rmsa.system import TaskSystem

__all__ = [
    "Task",
    "TaskSystem",
    "AnalysisConfig",
    "load_config",
    "parse_tasks",
    "compute_response_time",
    "UNSCHEDULABLE",
    "ProportionMode",
    "RmsaError",
    "MalformedSystemError",
    "EmptySystemError",
    "NonConvergenceError",
    "ConfigError",
]
