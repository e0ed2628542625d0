"""Shared fixtures for cpugauge tests."""

import pytest

from cpugauge.models import CoreTimes, ProcessTimes
from cpugauge.sources import CounterSource


class FakeCounters:
    """Counter source whose readings the test sets between cycles."""

    def __init__(self, core_count: int = 2) -> None:
        self.cores = [CoreTimes(user=0.0, system=0.0) for _ in range(core_count)]
        self.process = ProcessTimes(user=0.0, system=0.0)
        self.timestamp = 0.0
        self.core_reads = 0

    def set(self, *, now: float | None = None, user=None, system=None, process=None) -> None:
        """Replace the readings returned by the next cycle."""
        if now is not None:
            self.timestamp = now
        if user is not None:
            system = system or [0.0] * len(user)
            self.cores = [CoreTimes(user=u, system=s) for u, s in zip(user, system)]
        if process is not None:
            self.process = ProcessTimes(user=process[0], system=process[1])

    def read_cores(self) -> list[CoreTimes]:
        self.core_reads += 1
        return list(self.cores)

    def source(self) -> CounterSource:
        return CounterSource(
            read_cores=self.read_cores,
            read_process=lambda: self.process,
            now=lambda: self.timestamp,
        )


@pytest.fixture
def fake() -> FakeCounters:
    """A two-core fake counter source starting at zero."""
    return FakeCounters()
