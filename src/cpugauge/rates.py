"""Delta-rate arithmetic over cumulative CPU counters."""

from collections.abc import Iterable, Sequence

from cpugauge.errors import ZeroOrNegativeIntervalError
from cpugauge.models import CATEGORIES, CoreTimes, CpuValues, ProcessTimes, ProcessUsage

# CoreTimes attribute -> CpuValues field
_FIELD_NAMES = {
    "user": "user",
    "nice": "nice",
    "system": "sys",
    "irq": "irq",
}


def _check_interval(interval_ms: float) -> None:
    if not interval_ms > 0:
        raise ZeroOrNegativeIntervalError(interval_ms)


def _delta(new: float, old: float) -> float:
    # Counters only move backwards across an OS restart; report no activity.
    return max(new - old, 0.0)


def core_rates(
    new: CoreTimes,
    old: CoreTimes,
    interval_ms: float,
    categories: Iterable[str] = CATEGORIES,
) -> CpuValues:
    """
    Compute usage percentages for one core from two counter snapshots.

    Args:
        new: Counters captured this cycle.
        old: Counters captured the previous cycle.
        interval_ms: Elapsed time between the two captures.
        categories: Categories to report and to sum into ``total``.

    Raises:
        ZeroOrNegativeIntervalError: If ``interval_ms`` is not positive.
    """
    _check_interval(interval_ms)

    rates: dict[str, float] = {}
    total_delta = 0.0
    for category in categories:
        delta = _delta(getattr(new, category), getattr(old, category))
        total_delta += delta
        rates[_FIELD_NAMES[category]] = delta / interval_ms * 100

    return CpuValues(total=total_delta / interval_ms * 100, **rates)


def average(cores: Sequence[CpuValues]) -> CpuValues:
    """Arithmetic mean of every field across cores. No cores averages to zero."""
    if not cores:
        return CpuValues()

    count = len(cores)
    return CpuValues(
        total=sum(core.total for core in cores) / count,
        sys=sum(core.sys for core in cores) / count,
        user=sum(core.user for core in cores) / count,
        irq=sum(core.irq for core in cores) / count,
        nice=sum(core.nice for core in cores) / count,
    )


def process_rates(new: ProcessTimes, old: ProcessTimes, interval_ms: float) -> ProcessUsage:
    """
    Compute usage percentages for the current process.

    Process counters are in microseconds while the interval is in
    milliseconds, hence the factor of 1000.

    Raises:
        ZeroOrNegativeIntervalError: If ``interval_ms`` is not positive.
    """
    _check_interval(interval_ms)

    interval_us = interval_ms * 1000
    return ProcessUsage(
        system=_delta(new.system, old.system) / interval_us * 100,
        user=_delta(new.user, old.user) / interval_us * 100,
    )
