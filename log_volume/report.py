"""
Presentation of estimation results: console report and JSON output.
"""

import json
from datetime import datetime
from typing import Optional

from .estimator import EstimationResult
from .logging_config import get_report_logger
from .samples import AggregatedAverage, to_utc

_UNITS = ["B", "KB", "MB", "GB", "TB"]


def format_bytes(value: Optional[float]) -> str:
    """Human-readable byte size using binary multiples (1 KB = 1024 B)."""
    if value is None:
        return "n/a"
    size = float(value)
    for unit in _UNITS:
        if abs(size) < 1024 or unit == _UNITS[-1]:
            break
        size /= 1024
    return f"{size:,.2f} {unit}"


def format_time(value: datetime) -> str:
    return to_utc(value).strftime("%Y-%m-%d %H:%M:%S UTC")


def format_count(value: Optional[float]) -> str:
    if value is None:
        return "n/a"
    return f"{value:,.2f}"


def render_json(result: EstimationResult) -> str:
    """The averagesByLog mapping as indented JSON."""
    return json.dumps(result.to_dict(), indent=2)


def _log_section(report, average: AggregatedAverage) -> None:
    report.info("\n%s", average.log_id)
    report.info("-" * 70)
    report.info(
        "  Time range: %s to %s",
        format_time(average.oldest_record),
        format_time(average.newest_record),
    )
    if average.sample_count > 1:
        report.info("  Samples averaged: %d (history)", average.sample_count)
    if average.degenerate_samples:
        report.info(
            "  Zero-width samples excluded from rates: %d", average.degenerate_samples
        )
    if average.is_undefined:
        report.info("  Rate undefined: every sample covers a single instant")
        return

    report.info("  %-10s%18s%20s", "Period", "Records", "Size")
    rows = [
        ("Hour", average.avg_count_per_hour, average.avg_bytes_per_hour),
        ("Day", average.avg_count_per_day, average.avg_bytes_per_day),
        ("Week", average.avg_count_per_week, average.avg_bytes_per_week),
        ("Month", average.avg_count_per_month, average.avg_bytes_per_month),
    ]
    for period, count, size in rows:
        report.info("  %-10s%18s%20s", period, format_count(count), format_bytes(size))


def print_report(result: EstimationResult, generated: Optional[datetime] = None) -> None:
    """Write the console report through the report logger."""
    report = get_report_logger()
    generated = generated or datetime.now()

    report.info("=" * 70)
    report.info("LOG VOLUME ESTIMATE")
    report.info("Generated: %s", generated.strftime("%Y-%m-%d %H:%M:%S"))
    report.info("=" * 70)

    for average in result.averages_by_log.values():
        _log_section(report, average)

    defined = [a for a in result.averages_by_log.values() if not a.is_undefined]
    if len(defined) > 1:
        report.info("\n" + "=" * 70)
        report.info("TOTAL (%d logs)", len(defined))
        report.info("  Records per day: %s", format_count(sum(a.avg_count_per_day for a in defined)))
        report.info("  Size per day:    %s", format_bytes(sum(a.avg_bytes_per_day for a in defined)))

    if result.failures:
        report.info("\nSkipped logs:")
        for log_id, error in result.failures.items():
            report.info("  %s: %s", log_id, error.args[0] if error.args else error)

    report.info("=" * 70)
