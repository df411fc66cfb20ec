"""
Pytest configuration and shared fixtures for log volume estimation tests.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from io import StringIO

import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from log_volume.logging_config import configure_logging
from log_volume.providers import StaticMetadataProvider
from log_volume.samples import LogMetadata, Sample

MIB = 1024 * 1024


def utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


# =============================================================================
# LOGGING FIXTURES
# =============================================================================

@pytest.fixture
def log_stream():
    """Route diagnostics into a StringIO for inspection."""
    stream = StringIO()
    configure_logging(level=logging.DEBUG, stream=stream, report_stream=StringIO())
    yield stream
    configure_logging()


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================

@pytest.fixture
def ten_day_metadata():
    """1000 records / 100 MiB over 240 hours."""
    return LogMetadata(
        log_id="Application",
        record_count=1000,
        size_bytes=100 * MIB,
        oldest_timestamp=utc(2025, 1, 1),
        newest_timestamp=utc(2025, 1, 11),
    )


@pytest.fixture
def make_sample():
    """Factory for samples with a given per-day record rate over one day."""

    def _make(log_id="TestLog", per_day=100, size_bytes=None, start=None, hours=24):
        start = start or utc(2025, 1, 1)
        end = datetime.fromtimestamp(start.timestamp() + hours * 3600, tz=timezone.utc)
        count = int(per_day * hours / 24)
        return Sample(
            log_id=log_id,
            record_count=count,
            size_bytes=size_bytes if size_bytes is not None else count * 100,
            start_time=start,
            end_time=end,
        )

    return _make


@pytest.fixture
def degenerate_sample():
    """A single-record sample with a zero-width time range."""
    return Sample(
        log_id="TestLog",
        record_count=1,
        size_bytes=512,
        start_time=utc(2025, 2, 1, 12),
        end_time=utc(2025, 2, 1, 12),
    )


@pytest.fixture
def static_provider(ten_day_metadata):
    """Provider with one healthy, one single-record and one empty log."""
    return StaticMetadataProvider([
        ten_day_metadata,
        LogMetadata(
            log_id="Setup",
            record_count=1,
            size_bytes=2048,
            oldest_timestamp=utc(2025, 1, 5, 8),
            newest_timestamp=utc(2025, 1, 5, 8),
        ),
        LogMetadata(log_id="Empty", record_count=0, size_bytes=0),
    ])


# =============================================================================
# TEMPORARY FILE FIXTURES
# =============================================================================

@pytest.fixture
def history_path(tmp_path):
    """Path for a history file that does not exist yet."""
    return str(tmp_path / "history" / "log_volume_history.json")


@pytest.fixture
def sample_log_lines():
    """Text log lines spanning 2025-01-01T00:00 to 2025-01-01T06:00 UTC."""
    return [
        "2025-01-01T00:00:00.000Z INFO service started",
        "2025-01-01T01:30:00.000Z WARN disk usage at 80%",
        "    continuation of the previous record",
        "2025-01-01T03:00:00+01:00 INFO job finished",
        "2025-01-01T06:00:00Z INFO heartbeat",
    ]


@pytest.fixture
def temp_log_directory(tmp_path, sample_log_lines):
    """Directory holding a normal, a single-line, an empty and a reversed log."""
    log_dir = tmp_path / "logs"
    log_dir.mkdir()
    (log_dir / "app.log").write_text("\n".join(sample_log_lines) + "\n")
    (log_dir / "single.log").write_text("2025-01-01T00:00:00Z INFO only record\n")
    (log_dir / "empty.log").write_text("")
    (log_dir / "reversed.log").write_text(
        "2025-01-02T00:00:00Z first\n2025-01-01T00:00:00Z last\n"
    )
    return log_dir


@pytest.fixture
def metadata_file(tmp_path):
    """JSON inventory with two logs."""
    path = tmp_path / "inventory.json"
    path.write_text(json.dumps({
        "Application": {
            "recordCount": 1000,
            "sizeBytes": 100 * MIB,
            "oldestTimestamp": "2025-01-01T00:00:00Z",
            "newestTimestamp": "2025-01-11T00:00:00Z",
        },
        "Security": {
            "recordCount": 480,
            "sizeBytes": 48000,
            "oldestTimestamp": "2025-01-01T00:00:00Z",
            "newestTimestamp": "2025-01-02T00:00:00Z",
        },
    }))
    return str(path)
