"""Analysis settings and their YAML loader."""

from dataclasses import dataclass, fields, replace as dataclass_replace
from typing import Any, Dict, Optional

import yaml

from rmsa.errors import ConfigError
from rmsa.models import DEFAULT_DECIMALS

SEED_MODES = ("execution", "chained")
PROPORTION_MODES = ("ceiling", "floor")


@dataclass(frozen=True)
class AnalysisConfig:
    """Tunable parameters of the analysis engine.

    Attributes:
        decimals: Rounding precision of task parameters and utilizations.
        max_iterations: Cap of the response-time recurrence; a task that
            does not settle within it is reported as unschedulable.
        free_slot_max_iterations: Cap of the first-free-slot recurrence.
        seed_mode: "execution" seeds each task's recurrence with its own C,
            "chained" with the previous response time plus C.
        proportion: "ceiling" or "floor" release counting in the slack
            demand function.
        horizon: Simulation length in time units (None = hyperperiod).
    """
    decimals: int = DEFAULT_DECIMALS
    max_iterations: int = 50
    free_slot_max_iterations: int = 1000
    seed_mode: str = "execution"
    proportion: str = "ceiling"
    horizon: Optional[int] = None

    def __post_init__(self) -> None:
        if not isinstance(self.decimals, int) or self.decimals < 0:
            raise ConfigError(f"decimals must be a non-negative integer, got {self.decimals!r}")
        for name in ("max_iterations", "free_slot_max_iterations"):
            value = getattr(self, name)
            if not isinstance(value, int) or value < 1:
                raise ConfigError(f"{name} must be a positive integer, got {value!r}")
        if self.seed_mode not in SEED_MODES:
            raise ConfigError(f"seed_mode must be one of {SEED_MODES}, got {self.seed_mode!r}")
        if self.proportion not in PROPORTION_MODES:
            raise ConfigError(f"proportion must be one of {PROPORTION_MODES}, got {self.proportion!r}")
        if self.horizon is not None and (not isinstance(self.horizon, int) or self.horizon < 0):
            raise ConfigError(f"horizon must be a non-negative integer, got {self.horizon!r}")

    def replace(self, **overrides: Any) -> "AnalysisConfig":
        """Return a copy with the non-None overrides applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return dataclass_replace(self, **changes)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AnalysisConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")
        return cls(**data)


def load_config(path: str) -> AnalysisConfig:
    """Load analysis settings from a YAML file.

    The settings may sit at the top level or under an ``analysis`` key.
    An empty file yields the defaults.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read configuration file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return AnalysisConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: expected a mapping, got {type(data).__name__}")
    if "analysis" in data:
        data = data["analysis"] or {}
        if not isinstance(data, dict):
            raise ConfigError(f"{path}: 'analysis' must be a mapping")
    return AnalysisConfig.from_dict(data)
