"""Counter sources backed by psutil."""

import time
from collections.abc import Callable
from dataclasses import dataclass, field

import psutil

from cpugauge.models import CoreTimes, ProcessTimes


def read_core_counters() -> list[CoreTimes]:
    """
    Read cumulative per-core CPU times in milliseconds.

    psutil reports seconds. Fields a platform lacks (``nice`` on Windows,
    ``irq`` on macOS) read as zero; Windows names ``irq`` ``interrupt``.
    """
    counters: list[CoreTimes] = []
    for times in psutil.cpu_times(percpu=True):
        irq = getattr(times, "irq", getattr(times, "interrupt", 0.0))
        counters.append(
            CoreTimes(
                user=times.user * 1000,
                system=times.system * 1000,
                irq=irq * 1000,
                nice=getattr(times, "nice", 0.0) * 1000,
                idle=times.idle * 1000,
            )
        )
    return counters


def read_process_counters() -> ProcessTimes:
    """Read the current process' cumulative CPU times in microseconds."""
    times = psutil.Process().cpu_times()
    return ProcessTimes(user=times.user * 1_000_000, system=times.system * 1_000_000)


def monotonic_ms() -> float:
    """Milliseconds since an arbitrary fixed point."""
    return time.monotonic() * 1000


@dataclass(slots=True)
class CounterSource:
    """The three readers a sampler draws on. Swap any of them out in tests."""

    read_cores: Callable[[], list[CoreTimes]] = field(default=read_core_counters)
    read_process: Callable[[], ProcessTimes] = field(default=read_process_counters)
    now: Callable[[], float] = field(default=monotonic_ms)
