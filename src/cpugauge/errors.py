"""Exceptions raised by cpugauge."""


class CpuGaugeError(Exception):
    """Base class for cpugauge errors."""


class ZeroOrNegativeIntervalError(CpuGaugeError, ValueError):
    """
    Elapsed time between two samples is not positive.

    Happens when the clock goes backwards or two samples land in the same
    clock tick. No rate can be derived from such a pair.
    """

    def __init__(self, interval_ms: float) -> None:
        self.interval_ms = interval_ms
        super().__init__(f"sampling interval must be positive, got {interval_ms!r} ms")
