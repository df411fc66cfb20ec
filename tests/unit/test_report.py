"""Tests for console and JSON presentation."""

import json
import logging
from datetime import datetime
from io import StringIO

import pytest

from log_volume.aggregator import aggregate
from log_volume.collector import SampleCollector
from log_volume.estimator import EstimationResult
from log_volume.logging_config import configure_logging
from log_volume.report import format_bytes, format_count, print_report, render_json


@pytest.fixture
def report_stream():
    stream = StringIO()
    configure_logging(level=logging.WARNING, stream=StringIO(), report_stream=stream)
    yield stream
    configure_logging()


@pytest.fixture
def result(static_provider):
    report = SampleCollector(static_provider).collect_all(["Application", "Setup", "Empty"])
    return EstimationResult(
        averages_by_log={
            log_id: aggregate([sample], log_id) for log_id, sample in report.samples.items()
        },
        failures=report.failures,
    )


class TestFormatting:
    """Tests for number formatting."""

    @pytest.mark.parametrize("value,expected", [
        (0, "0.00 B"),
        (512, "512.00 B"),
        (1536, "1.50 KB"),
        (436906.67, "426.67 KB"),
        (100 * 1024 * 1024, "100.00 MB"),
        (3 * 1024 ** 4, "3.00 TB"),
        (None, "n/a"),
    ])
    def test_format_bytes(self, value, expected):
        assert format_bytes(value) == expected

    def test_format_count(self):
        assert format_count(3033.33) == "3,033.33"
        assert format_count(None) == "n/a"


class TestRenderJson:
    """Tests for the machine-readable output."""

    def test_keyed_by_log(self, result):
        data = json.loads(render_json(result))
        assert list(data) == ["Application", "Setup"]
        assert data["Application"]["avgCountPerWeek"] == 700.0
        assert data["Setup"]["avgCountPerHour"] is None


class TestPrintReport:
    """Tests for the console report."""

    def test_sections(self, result, report_stream):
        print_report(result, generated=datetime(2025, 1, 11, 9, 30))
        out = report_stream.getvalue()
        assert "Generated: 2025-01-11 09:30:00" in out
        assert "Time range: 2025-01-01 00:00:00 UTC to 2025-01-11 00:00:00 UTC" in out
        assert "3,033.33" in out
        assert "100.00 MB" not in out
        assert "Rate undefined" in out
        assert "Skipped logs" in out
        assert "Empty: Log has no records" in out

    def test_history_note(self, make_sample, report_stream):
        samples = [make_sample(per_day=100), make_sample(per_day=200)]
        result = EstimationResult(averages_by_log={"TestLog": aggregate(samples, "TestLog")})
        print_report(result)
        assert "Samples averaged: 2 (history)" in report_stream.getvalue()

    def test_totals_for_several_logs(self, make_sample, report_stream):
        result = EstimationResult(averages_by_log={
            "A": aggregate([make_sample(log_id="A", per_day=100)], "A"),
            "B": aggregate([make_sample(log_id="B", per_day=50)], "B"),
        })
        print_report(result)
        out = report_stream.getvalue()
        assert "TOTAL (2 logs)" in out
        assert "Records per day: 150.00" in out
