"""Stateful sampling cycle shared by the push and pull front ends."""

import threading
from collections.abc import Iterable
from enum import Enum

import structlog

from cpugauge.errors import ZeroOrNegativeIntervalError
from cpugauge.models import CATEGORIES, CoreTimes, CpuUsage, ProcessTimes
from cpugauge.rates import average, core_rates, process_rates
from cpugauge.sources import CounterSource

logger = structlog.get_logger(__name__)


class SamplerState(Enum):
    """Whether the sampler holds a previous snapshot to diff against."""

    UNINITIALIZED = "uninitialized"
    WARMED_UP = "warmed_up"


class Sampler:
    """
    Owns the previous counter snapshot and turns each new one into rates.

    A cycle captures counters, diffs them against the previous capture and
    then replaces the previous capture wholesale. Cycles are serialized with
    a lock, so one Sampler may be shared between threads.
    """

    def __init__(
        self,
        source: CounterSource | None = None,
        categories: Iterable[str] = CATEGORIES,
        track_process: bool = False,
    ) -> None:
        """
        Initialize the Sampler.

        Args:
            source: Where counters and timestamps come from. Defaults to psutil.
            categories: Categories to report and to sum into ``total``.
            track_process: Also report usage of the current process.
        """
        self._source = source or CounterSource()
        self._categories = tuple(categories)
        unknown = set(self._categories) - set(CATEGORIES)
        if unknown or not self._categories:
            raise ValueError(f"invalid category set: {self._categories!r}")
        self._track_process = track_process

        self._lock = threading.Lock()
        self._previous: list[CoreTimes] = []
        self._previous_timestamp: float | None = None
        self._previous_process: ProcessTimes | None = None

    @property
    def state(self) -> SamplerState:
        """Current position in the bootstrap state machine."""
        if self._previous:
            return SamplerState.WARMED_UP
        return SamplerState.UNINITIALIZED

    @property
    def core_count(self) -> int:
        """Number of cores in the previous snapshot."""
        return len(self._previous)

    @property
    def categories(self) -> tuple[str, ...]:
        return self._categories

    @property
    def track_process(self) -> bool:
        return self._track_process

    def reset(self) -> None:
        """Forget the previous snapshot; the next cycle bootstraps again."""
        with self._lock:
            self._previous = []
            self._previous_timestamp = None
            self._previous_process = None

    def sample(self, interval_ms: float | None = None) -> CpuUsage | None:
        """
        Run one sampling cycle.

        Args:
            interval_ms: Nominal time since the previous cycle. When None the
                elapsed time is measured with the source clock.

        Returns:
            The computed usage, or None on the bootstrap cycle.

        Raises:
            ZeroOrNegativeIntervalError: The elapsed time is not positive.
                The previous snapshot is kept for the next cycle.
        """
        with self._lock:
            cores = self._source.read_cores()
            timestamp = self._source.now()
            process = self._source.read_process() if self._track_process else None

            if not self._previous:
                self._store(cores, timestamp, process)
                logger.debug("sampler_bootstrapped", cores=len(cores))
                return None

            if interval_ms is None:
                interval_ms = timestamp - self._previous_timestamp
            if not interval_ms > 0:
                raise ZeroOrNegativeIntervalError(interval_ms)

            if len(cores) != len(self._previous):
                logger.warning(
                    "core_count_mismatch",
                    previous=len(self._previous),
                    current=len(cores),
                )

            # zip truncates to the cores present in both snapshots
            per_core = [
                core_rates(new, old, interval_ms, self._categories)
                for new, old in zip(cores, self._previous)
            ]
            whole = average(per_core)

            process_usage = None
            if process is not None and self._previous_process is not None:
                process_usage = process_rates(process, self._previous_process, interval_ms)

            self._store(cores, timestamp, process)

        return CpuUsage(
            total=whole.total,
            sys=whole.sys,
            user=whole.user,
            irq=whole.irq,
            nice=whole.nice,
            cores=tuple(per_core),
            process=process_usage,
        )

    def _store(
        self,
        cores: list[CoreTimes],
        timestamp: float,
        process: ProcessTimes | None,
    ) -> None:
        self._previous = list(cores)
        self._previous_timestamp = timestamp
        self._previous_process = process
