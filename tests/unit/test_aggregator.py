"""
Unit tests for aggregation.

Tests:
- Reference scenario (1000 records / 100 MiB over 240 hours)
- Mean over history samples and week/month scaling
- Degenerate sample exclusion
- Order independence
- Rounding rule
"""

import itertools
from datetime import datetime, timezone

import pytest

from log_volume.aggregator import aggregate, aggregate_all, round_half_away
from log_volume.constants import WEEKS_PER_MONTH
from log_volume.exceptions import NoDataForAggregationError
from log_volume.samples import Sample

MIB = 1024 * 1024


def utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


class TestReferenceScenario:
    """1000 records and 100 MiB over ten days."""

    @pytest.fixture
    def average(self):
        sample = Sample("Application", 1000, 100 * MIB, utc(2025, 1, 1), utc(2025, 1, 11))
        return aggregate([sample], "Application")

    def test_hour_figures(self, average):
        assert average.avg_count_per_hour == 4.17
        assert average.avg_bytes_per_hour == 436906.67

    def test_day_week_month_figures(self, average):
        assert average.avg_count_per_day == 100.00
        assert average.avg_count_per_week == 700.00
        assert average.avg_count_per_month == 3033.33

    def test_bounds_and_count(self, average):
        assert average.oldest_record == utc(2025, 1, 1)
        assert average.newest_record == utc(2025, 1, 11)
        assert average.sample_count == 1
        assert average.degenerate_samples == 0


class TestHistoryMean:
    """Tests for averaging several samples."""

    def test_two_samples_average(self, make_sample):
        average = aggregate([make_sample(per_day=100), make_sample(per_day=200)], "TestLog")
        assert average.avg_count_per_day == 150.00
        assert average.sample_count == 2

    def test_bounds_span_all_samples(self, make_sample):
        samples = [
            make_sample(start=utc(2025, 1, 10), hours=12),
            make_sample(start=utc(2025, 1, 1), hours=48),
            make_sample(start=utc(2025, 1, 5), hours=240),
        ]
        average = aggregate(samples, "TestLog")
        assert average.oldest_record == utc(2025, 1, 1)
        assert average.newest_record == utc(2025, 1, 15)
        assert average.sample_count == 3

    def test_week_and_month_scale_from_day(self, make_sample):
        average = aggregate([make_sample(per_day=90), make_sample(per_day=45)], "TestLog")
        assert average.avg_count_per_week == round_half_away(67.5 * 7)
        assert average.avg_count_per_month == round_half_away(67.5 * 7 * WEEKS_PER_MONTH)
        assert average.avg_bytes_per_week == round_half_away(6750 * 7)

    def test_empty_raises(self):
        with pytest.raises(NoDataForAggregationError) as exc_info:
            aggregate([], "Nothing")
        assert exc_info.value.log_id == "Nothing"


class TestOrderIndependence:
    """Aggregation is a pure mean over the sample multiset."""

    def test_permutations_give_same_average(self, make_sample):
        samples = [
            make_sample(per_day=101, size_bytes=12345, start=utc(2025, 1, 1), hours=7),
            make_sample(per_day=33, size_bytes=999, start=utc(2025, 1, 3), hours=50),
            make_sample(per_day=250, size_bytes=77, start=utc(2025, 1, 2), hours=3),
            make_sample(per_day=1, size_bytes=1, start=utc(2025, 1, 9), hours=1000),
        ]
        results = {
            tuple(sorted(aggregate(list(order), "TestLog").to_dict().items()))
            for order in itertools.permutations(samples)
        }
        assert len(results) == 1


class TestDegenerateSamples:
    """Zero-width samples count for bounds but not for rates."""

    def test_excluded_from_mean(self, make_sample, degenerate_sample):
        average = aggregate([make_sample(per_day=100), degenerate_sample], "TestLog")
        assert average.avg_count_per_day == 100.00
        assert average.sample_count == 2
        assert average.degenerate_samples == 1

    def test_included_in_bounds(self, make_sample, degenerate_sample):
        average = aggregate([make_sample(start=utc(2025, 1, 1)), degenerate_sample], "TestLog")
        assert average.newest_record == utc(2025, 2, 1, 12)

    def test_all_degenerate_is_undefined(self, degenerate_sample, log_stream):
        average = aggregate([degenerate_sample, degenerate_sample], "TestLog")
        assert average.is_undefined
        assert average.avg_count_per_hour is None
        assert average.avg_bytes_per_month is None
        assert average.sample_count == 2
        assert "zero-width" in log_stream.getvalue()


class TestAggregateAll:
    """Tests for aggregating the requested logs."""

    def test_skips_logs_without_samples(self, make_sample, log_stream):
        averages = aggregate_all({"A": [make_sample(log_id="A")]}, ["A", "B"])
        assert list(averages) == ["A"]
        assert "Omitting" in log_stream.getvalue()

    def test_only_requested_logs(self, make_sample):
        samples = {"A": [make_sample(log_id="A")], "B": [make_sample(log_id="B")]}
        assert list(aggregate_all(samples, ["B"])) == ["B"]


class TestRounding:
    """Tests for round-half-away-from-zero."""

    @pytest.mark.parametrize("value,expected", [
        (2.345, 2.35),
        (2.335, 2.34),
        (-2.345, -2.35),
        (0.125, 0.13),
        (4.166666666, 4.17),
        (100.0, 100.0),
        (0.004, 0.0),
    ])
    def test_rounds_half_away_from_zero(self, value, expected):
        assert round_half_away(value) == expected

    @pytest.mark.parametrize("value", [4.17, 436906.67, 3033.33, 0.01, 123456789.99])
    def test_idempotent(self, value):
        once = round_half_away(value)
        assert round_half_away(once) == once

    def test_none_passes_through(self):
        assert round_half_away(None) is None

    def test_custom_places(self):
        assert round_half_away(1.23456, places=3) == 1.235

    @pytest.mark.parametrize("value,expected", [
        (1e30, 1e30),
        (-1e30, -1e30),
        (123456789012345678.0, 123456789012345678.0),
        (1000000000000000.5, 1000000000000000.5),
        (2.5e25, 2.5e25),
    ])
    def test_large_values_keep_magnitude(self, value, expected):
        assert round_half_away(value) == expected
