"""Timer-driven CPU monitor that pushes usage to subscribers."""

import threading
from collections.abc import Callable

import structlog

from cpugauge.config import MonitorSettings, get_settings
from cpugauge.errors import ZeroOrNegativeIntervalError
from cpugauge.models import CpuUsage
from cpugauge.sampler import Sampler

logger = structlog.get_logger(__name__)

DataCallback = Callable[[CpuUsage], object]


class CpuMonitor:
    """
    CPU monitor that samples on a fixed period and emits ``data`` events.

    Runs in a separate daemon thread. Correct values are available from the
    second readout on: the first tick only primes the sampler and emits
    nothing. Stopping halts future ticks but keeps the subscribers.
    """

    def __init__(
        self,
        sampler: Sampler | None = None,
        settings: MonitorSettings | None = None,
    ) -> None:
        """
        Initialize the CpuMonitor.

        Args:
            sampler: Sampler to drive. Built from settings when omitted.
            settings: Configuration; defaults to the environment.
        """
        self._settings = settings or get_settings()
        self._sampler = sampler or Sampler(
            categories=self._settings.categories,
            track_process=self._settings.TRACK_PROCESS,
        )
        self._period_ms = self._settings.PERIOD_MS
        self._listeners: list[DataCallback] = []
        self._listeners_lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def period_ms(self) -> int:
        """Milliseconds between ticks."""
        return self._period_ms

    @property
    def sampler(self) -> Sampler:
        return self._sampler

    @property
    def is_running(self) -> bool:
        """Check if the monitor thread is running."""
        return self._thread is not None and self._thread.is_alive()

    def on_data(self, callback: DataCallback) -> DataCallback:
        """Subscribe to usage reports. Returns the callback, so usable as a decorator."""
        with self._listeners_lock:
            self._listeners.append(callback)
        return callback

    def off_data(self, callback: DataCallback) -> None:
        """Unsubscribe a callback. Unknown callbacks are ignored."""
        with self._listeners_lock:
            if callback in self._listeners:
                self._listeners.remove(callback)

    def start(self, period_ms: int | None = None) -> "CpuMonitor":
        """
        Start monitoring and reporting readouts through ``data`` events.

        Args:
            period_ms: Milliseconds between readouts. Defaults to the
                configured period (1000 ms unless overridden).

        Raises:
            ValueError: If ``period_ms`` is not a positive integer.
        """
        if period_ms is not None:
            if isinstance(period_ms, bool) or not isinstance(period_ms, int) or period_ms <= 0:
                raise ValueError(f"period_ms must be a positive integer, got {period_ms!r}")
            self._period_ms = period_ms

        if self.is_running:
            return self

        # One event per run: a loop whose stop() did not join must stay stopped
        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self._poll_loop,
            args=(self._stop_event,),
            daemon=True,
            name="CpuMonitor",
        )
        self._thread.start()
        logger.info("monitor_started", period_ms=self._period_ms)
        return self

    def stop(self, timeout: float | None = 5.0) -> "CpuMonitor":
        """
        Stop monitoring. Safe to call repeatedly or before ``start``.

        Args:
            timeout: How long to wait for thread to stop (seconds).
        """
        self._stop_event.set()
        if self._thread is not None:
            if self._thread is not threading.current_thread():
                self._thread.join(timeout=timeout)
            self._thread = None
            logger.info("monitor_stopped")
        return self

    def _poll_loop(self, stop_event: threading.Event) -> None:
        """Main polling loop running in the background thread."""
        # Wait one period before every tick, like an interval timer
        while not stop_event.wait(timeout=self._period_ms / 1000):
            self._tick(stop_event)

    def _tick(self, stop_event: threading.Event | None = None) -> None:
        """Run one sampling cycle and broadcast its result."""
        if stop_event is None:
            stop_event = self._stop_event
        try:
            usage = self._sampler.sample(self._period_ms)
        except ZeroOrNegativeIntervalError as exc:
            logger.warning("tick_skipped", interval_ms=exc.interval_ms)
            return
        except Exception:
            logger.exception("tick_failed")
            return

        if usage is None or stop_event.is_set():
            return
        self._emit(usage)

    def _emit(self, usage: CpuUsage) -> None:
        with self._listeners_lock:
            listeners = list(self._listeners)

        for listener in listeners:
            try:
                listener(usage)
            except Exception:
                logger.exception("listener_failed", listener=getattr(listener, "__name__", repr(listener)))
