"""Data models for periodic tasks."""

from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP, localcontext

DEFAULT_DECIMALS = 4


def round_to(value: float, decimals: int = DEFAULT_DECIMALS) -> float:
    """Round half away from zero, the way a calculator would.

    The built-in ``round`` uses banker's rounding, which would make
    ``round(0.125, 2)`` come out as 0.12.
    """
    number = Decimal(str(value))
    quantum = Decimal(1).scaleb(-decimals)
    # quantize needs room for every integral digit plus the decimals
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, number.adjusted() + decimals + 2)
        return float(number.quantize(quantum, rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class Task:
    """A periodic task of a rate-monotonic system.

    Attributes:
        id: 1-based position in the system, also the RM priority index
            (lower id = higher priority).
        C: Worst-case execution time.
        T: Period. A zero period means the task never executes.
        D: Relative deadline.
        decimals: Precision the timing parameters are rounded to.
        utilization: C/T (0 when T is 0), derived at construction.
    """
    id: int
    C: float
    T: float
    D: float
    decimals: int = field(default=DEFAULT_DECIMALS, repr=False, compare=False)
    utilization: float = field(init=False)

    def __post_init__(self) -> None:
        """Validate and round task parameters."""
        if self.id < 1:
            raise ValueError(f"Task id must be positive, got {self.id}")
        for name in ("C", "T", "D"):
            value = getattr(self, name)
            if value < 0:
                raise ValueError(f"Task {self.id}: {name} must be non-negative, got {value}")
            object.__setattr__(self, name, round_to(value, self.decimals))

        utilization = self.C / self.T if self.T > 0 else 0.0
        object.__setattr__(self, "utilization", round_to(utilization, self.decimals))

    @property
    def execution_time(self) -> float:
        return self.C

    @property
    def period(self) -> float:
        return self.T

    @property
    def deadline(self) -> float:
        return self.D

    def __str__(self) -> str:
        return f"Task({self.id}: C={self.C:g}, T={self.T:g}, D={self.D:g}, U={self.utilization:g})"
