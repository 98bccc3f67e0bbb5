"""Tests for pressure trend analysis."""

from datetime import timedelta

import pytest

from app.services.pressure_trend import (
    PressureTrendAnalyzer,
    TrendClassification,
    TrendResult,
    classify_slope,
)


def _feed_linear(analyzer, clock, slope, base=30.0, hours=(0.5, 1.0, 1.5, 2.0, 2.5, 3.0)):
    """Add samples at the given hours after the window cutoff, on a straight line."""
    cutoff = clock.now - timedelta(hours=analyzer.window_hours)
    for h in hours:
        analyzer.add_reading(base + slope * h, timestamp=cutoff + timedelta(hours=h))


class TestRegression:
    def test_linear_rising_series_gives_exact_slope(self, clock):
        analyzer = PressureTrendAnalyzer(clock=clock)
        _feed_linear(analyzer, clock, 0.05)
        result = analyzer.get_trend()
        assert result.classification is TrendClassification.RISING
        assert result.change_rate == pytest.approx(0.05)

    def test_linear_falling_series(self, clock):
        analyzer = PressureTrendAnalyzer(clock=clock)
        _feed_linear(analyzer, clock, -0.1)
        result = analyzer.get_trend()
        assert result.classification is TrendClassification.FALLING
        assert result.change_rate == pytest.approx(-0.1)

    def test_small_slope_is_steady(self, clock):
        analyzer = PressureTrendAnalyzer(clock=clock)
        _feed_linear(analyzer, clock, 0.01)
        result = analyzer.get_trend()
        assert result.classification is TrendClassification.STEADY
        assert result.change_rate == pytest.approx(0.01)

    def test_flat_series_is_steady_with_zero_rate(self, clock):
        analyzer = PressureTrendAnalyzer(clock=clock)
        _feed_linear(analyzer, clock, 0.0)
        result = analyzer.get_trend()
        assert result.classification is TrendClassification.STEADY
        assert result.change_rate == pytest.approx(0.0)

    def test_identical_timestamps_fall_back_to_steady(self, clock):
        """All samples at one instant: regression undefined, no ZeroDivisionError."""
        analyzer = PressureTrendAnalyzer(clock=clock)
        for p in (29.8, 30.1, 29.9, 30.4, 29.7, 30.0):
            analyzer.add_reading(p)
        assert analyzer.get_trend() == TrendResult(TrendClassification.STEADY, 0.0)

    def test_custom_threshold(self, clock):
        analyzer = PressureTrendAnalyzer(threshold=0.1, clock=clock)
        _feed_linear(analyzer, clock, 0.05)
        assert analyzer.get_trend().classification is TrendClassification.STEADY


class TestClassificationBoundary:
    def test_threshold_is_not_steady(self):
        assert classify_slope(0.02) is TrendClassification.RISING
        assert classify_slope(-0.02) is TrendClassification.FALLING

    def test_just_below_threshold_is_steady(self):
        assert classify_slope(0.019999) is TrendClassification.STEADY
        assert classify_slope(-0.019999) is TrendClassification.STEADY

    def test_zero_is_steady(self):
        assert classify_slope(0.0) is TrendClassification.STEADY


class TestInsufficientData:
    def test_empty_history(self, clock):
        analyzer = PressureTrendAnalyzer(clock=clock)
        assert analyzer.get_trend() == TrendResult(TrendClassification.INSUFFICIENT_DATA, 0.0)

    def test_below_min_samples_regardless_of_shape(self, clock):
        analyzer = PressureTrendAnalyzer(clock=clock)
        for i, p in enumerate((28.0, 31.5, 27.2, 32.9, 29.0)):
            analyzer.add_reading(p, timestamp=clock.now - timedelta(minutes=10 * i))
        result = analyzer.get_trend()
        assert result.classification is TrendClassification.INSUFFICIENT_DATA
        assert result.change_rate == 0

    def test_stale_samples_do_not_count(self, clock):
        """Old samples are purged, leaving too few inside the window."""
        analyzer = PressureTrendAnalyzer(clock=clock)
        for i in range(10):
            analyzer.add_reading(30.0 + i, timestamp=clock.now - timedelta(hours=4, minutes=i))
        for i in range(5):
            analyzer.add_reading(30.0, timestamp=clock.now - timedelta(minutes=i))

        result = analyzer.get_trend()
        assert result.classification is TrendClassification.INSUFFICIENT_DATA
        assert len(analyzer) == 5


class TestHistory:
    def test_capacity_evicts_oldest_first(self, clock):
        analyzer = PressureTrendAnalyzer(capacity=500, clock=clock)
        for i in range(501):
            analyzer.add_reading(float(i))
        assert len(analyzer) == 500
        assert [r.pressure for r in analyzer.readings] == [float(i) for i in range(1, 501)]

    def test_never_exceeds_capacity(self, clock):
        analyzer = PressureTrendAnalyzer(capacity=3, clock=clock)
        for i in range(10):
            analyzer.add_reading(float(i))
            assert len(analyzer) <= 3
        assert [r.pressure for r in analyzer.readings] == [7.0, 8.0, 9.0]

    def test_pruning_happens_on_trend_query(self, clock):
        analyzer = PressureTrendAnalyzer(clock=clock)
        for i in range(3):
            analyzer.add_reading(30.0)
        clock.advance(hours=3, seconds=1)
        assert len(analyzer) == 3
        analyzer.get_trend()
        assert len(analyzer) == 0

    def test_sample_at_cutoff_is_kept(self, clock):
        analyzer = PressureTrendAnalyzer(clock=clock)
        analyzer.add_reading(30.0, timestamp=clock.now - timedelta(hours=3))
        analyzer.get_trend()
        assert len(analyzer) == 1

    def test_reading_uses_clock_by_default(self, clock):
        analyzer = PressureTrendAnalyzer(clock=clock)
        analyzer.add_reading(29.92)
        assert analyzer.readings[0].timestamp == clock.now
        assert analyzer.readings[0].pressure == 29.92

    def test_zero_capacity_rejected(self):
        with pytest.raises(ValueError):
            PressureTrendAnalyzer(capacity=0)


class TestTrendResult:
    def test_wire_form(self):
        result = TrendResult(TrendClassification.RISING, 0.05)
        assert result.to_dict() == {"trend": "RISING", "changeRate": 0.05}
