"""On-demand CPU usage readout."""

from cpugauge.config import MonitorSettings, get_settings
from cpugauge.models import CpuUsage
from cpugauge.sampler import Sampler


class CpuUsageReader:
    """
    Returns CPU usage since the previous call.

    Rates are computed over the real elapsed time between calls, so they do
    not depend on how regularly the caller polls. The first call after
    construction returns an all-zero report.
    """

    def __init__(
        self,
        sampler: Sampler | None = None,
        settings: MonitorSettings | None = None,
    ) -> None:
        settings = settings or get_settings()
        self._sampler = sampler or Sampler(
            categories=settings.categories,
            track_process=settings.TRACK_PROCESS,
        )

    @property
    def sampler(self) -> Sampler:
        return self._sampler

    def get_usage(self) -> CpuUsage:
        """
        Sample the counters and return usage since the previous call.

        Raises:
            ZeroOrNegativeIntervalError: No time passed since the previous
                call (or the clock went backwards). The previous sample is
                kept, so the next call measures from it.
        """
        usage = self._sampler.sample()
        if usage is None:
            return CpuUsage.zero(self._sampler.core_count, self._sampler.track_process)
        return usage
