"""Data models for cpugauge."""

from dataclasses import asdict, dataclass

# Categories that may contribute to ``total``. ``idle`` never does.
CATEGORIES: tuple[str, ...] = ("user", "nice", "system", "irq")


@dataclass(slots=True, frozen=True)
class CoreTimes:
    """Cumulative time one logical core spent in each category since boot."""

    user: float  # ms
    system: float  # ms
    irq: float = 0.0  # ms
    nice: float = 0.0  # ms
    idle: float = 0.0  # ms


@dataclass(slots=True, frozen=True)
class ProcessTimes:
    """Cumulative CPU time consumed by the current process."""

    user: float  # microseconds
    system: float  # microseconds


@dataclass(slots=True, frozen=True)
class CpuValues:
    """Usage percentages for one core, or averaged over all cores."""

    total: float = 0.0
    sys: float = 0.0
    user: float = 0.0
    irq: float = 0.0
    nice: float = 0.0


@dataclass(slots=True, frozen=True)
class ProcessUsage:
    """Usage percentages of the current process."""

    system: float = 0.0
    user: float = 0.0


@dataclass(slots=True, frozen=True)
class CpuUsage:
    """
    Whole-system usage plus the per-core breakdown.

    ``process`` is only populated when process tracking is enabled.
    """

    total: float = 0.0
    sys: float = 0.0
    user: float = 0.0
    irq: float = 0.0
    nice: float = 0.0
    cores: tuple[CpuValues, ...] = ()
    process: ProcessUsage | None = None

    @classmethod
    def zero(cls, core_count: int = 0, track_process: bool = False) -> "CpuUsage":
        """Build the all-zero report returned for a bootstrap cycle."""
        return cls(
            cores=tuple(CpuValues() for _ in range(core_count)),
            process=ProcessUsage() if track_process else None,
        )

    @property
    def values(self) -> CpuValues:
        """The whole-system rates without the per-core breakdown."""
        return CpuValues(
            total=self.total,
            sys=self.sys,
            user=self.user,
            irq=self.irq,
            nice=self.nice,
        )

    def as_dict(self) -> dict:
        """Plain-dict view, e.g. for JSON encoding by a metrics endpoint."""
        data = asdict(self)
        data["cores"] = list(data["cores"])
        if self.process is None:
            del data["process"]
        return data
