"""Tests for the delta-rate arithmetic."""

import math

import pytest

from cpugauge.errors import ZeroOrNegativeIntervalError
from cpugauge.models import CoreTimes, CpuValues, ProcessTimes, ProcessUsage
from cpugauge.rates import average, core_rates, process_rates


class TestCoreRates:
    """Tests for per-core rate computation."""

    def test_user_rate(self):
        """Test 500ms of user time over 1000ms is 50%."""
        old = CoreTimes(user=1000.0, system=0.0)
        new = CoreTimes(user=1500.0, system=0.0)

        rates = core_rates(new, old, 1000)

        assert rates == CpuValues(total=50.0, user=50.0)

    def test_all_categories(self):
        """Test every tracked category gets its own rate."""
        old = CoreTimes(user=100.0, system=200.0, irq=10.0, nice=5.0, idle=900.0)
        new = CoreTimes(user=300.0, system=300.0, irq=30.0, nice=25.0, idle=1900.0)

        rates = core_rates(new, old, 2000)

        assert rates.user == pytest.approx(10.0)
        assert rates.sys == pytest.approx(5.0)
        assert rates.irq == pytest.approx(1.0)
        assert rates.nice == pytest.approx(1.0)
        assert rates.total == pytest.approx(17.0)

    def test_idle_is_ignored(self):
        """Test idle time never shows up in total."""
        old = CoreTimes(user=0.0, system=0.0, idle=0.0)
        new = CoreTimes(user=0.0, system=0.0, idle=1000.0)

        assert core_rates(new, old, 1000).total == 0.0

    def test_total_matches_sum_of_categories(self):
        """Test total equals the sum of the individual category rates."""
        old = CoreTimes(user=12.5, system=3.25, irq=0.125, nice=7.0)
        new = CoreTimes(user=345.75, system=98.5, irq=4.875, nice=19.0)

        rates = core_rates(new, old, 777)

        assert rates.total == pytest.approx(rates.user + rates.sys + rates.irq + rates.nice)

    def test_category_subset(self):
        """Test untracked categories report zero and stay out of total."""
        old = CoreTimes(user=0.0, system=0.0, nice=0.0)
        new = CoreTimes(user=200.0, system=100.0, nice=300.0)

        rates = core_rates(new, old, 1000, categories=("user", "system"))

        assert rates.nice == 0.0
        assert rates.total == pytest.approx(30.0)

    def test_rates_non_negative(self):
        """Test non-decreasing counters never produce negative rates."""
        old = CoreTimes(user=10.0, system=10.0, irq=10.0, nice=10.0)
        for new in (old, CoreTimes(user=11.0, system=10.0, irq=12.0, nice=10.0)):
            rates = core_rates(new, old, 1)
            assert min(rates.total, rates.sys, rates.user, rates.irq, rates.nice) >= 0.0

    def test_counter_reset_clamped(self):
        """Test counters that went backwards (OS restart) clamp to zero."""
        old = CoreTimes(user=10_000_000.0, system=5_000_000.0)
        new = CoreTimes(user=100.0, system=5_000_500.0)

        rates = core_rates(new, old, 1000)

        assert rates.user == 0.0
        assert rates.sys == pytest.approx(50.0)
        assert rates.total == pytest.approx(50.0)

    @pytest.mark.parametrize("interval", [0, 0.0, -1, -1000.0])
    def test_non_positive_interval_raises(self, interval):
        """Test a non-positive interval is rejected rather than divided by."""
        times = CoreTimes(user=1.0, system=1.0)

        with pytest.raises(ZeroOrNegativeIntervalError) as excinfo:
            core_rates(times, times, interval)

        assert excinfo.value.interval_ms == interval

    def test_nan_interval_raises(self):
        """Test a NaN interval is rejected too."""
        times = CoreTimes(user=1.0, system=1.0)

        with pytest.raises(ZeroOrNegativeIntervalError):
            core_rates(times, times, math.nan)

    def test_interval_error_is_value_error(self):
        """Test callers catching ValueError also catch the interval error."""
        assert issubclass(ZeroOrNegativeIntervalError, ValueError)


class TestAverage:
    """Tests for averaging per-core rates."""

    def test_mean_of_cores(self):
        """Test the whole-system user rate is the mean of the per-core rates."""
        cores = [CpuValues(total=50.0, user=50.0), CpuValues(total=30.0, user=30.0)]

        whole = average(cores)

        assert whole.user == pytest.approx(40.0)
        assert whole.total == pytest.approx(40.0)

    def test_every_field_averaged(self):
        """Test each field is averaged independently."""
        cores = [
            CpuValues(total=10.0, sys=2.0, user=4.0, irq=6.0, nice=8.0),
            CpuValues(total=30.0, sys=4.0, user=8.0, irq=2.0, nice=0.0),
            CpuValues(total=20.0, sys=0.0, user=0.0, irq=1.0, nice=1.0),
        ]

        whole = average(cores)

        assert whole.total == pytest.approx(20.0)
        assert whole.sys == pytest.approx(2.0)
        assert whole.user == pytest.approx(4.0)
        assert whole.irq == pytest.approx(3.0)
        assert whole.nice == pytest.approx(3.0)

    def test_no_cores(self):
        """Test averaging nothing gives zeros, not NaN."""
        assert average([]) == CpuValues()


class TestProcessRates:
    """Tests for process-level rates."""

    def test_microsecond_conversion(self):
        """Test 1,000,000us of system time over 1000ms is 100%."""
        old = ProcessTimes(user=0.0, system=0.0)
        new = ProcessTimes(user=0.0, system=1_000_000.0)

        assert process_rates(new, old, 1000) == ProcessUsage(system=100.0, user=0.0)

    def test_user_rate(self):
        """Test user time uses the same conversion."""
        old = ProcessTimes(user=2_000_000.0, system=0.0)
        new = ProcessTimes(user=2_250_000.0, system=0.0)

        assert process_rates(new, old, 500).user == pytest.approx(50.0)

    def test_zero_interval_raises(self):
        """Test a zero interval is rejected."""
        times = ProcessTimes(user=1.0, system=1.0)

        with pytest.raises(ZeroOrNegativeIntervalError):
            process_rates(times, times, 0)
