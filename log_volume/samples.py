"""
Data classes for log volume estimation.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from .constants import HOURS_PER_DAY, SECONDS_PER_HOUR, TIMESTAMP_FORMAT, TIMESTAMP_PATTERN
from .exceptions import CollectionError


def to_utc(value: datetime) -> datetime:
    """Normalize a datetime to UTC. Naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_timestamp(value: datetime) -> str:
    """Format a datetime as sortable ISO 8601 UTC text (2025-01-01T00:00:00.000000Z).

    Microseconds are always written so every value has the same width.
    """
    value = to_utc(value)
    return f"{value.strftime(TIMESTAMP_FORMAT)}.{value.microsecond:06d}Z"


def parse_timestamp(text: str) -> Optional[datetime]:
    """Parse a leading ISO 8601 timestamp into a UTC datetime.

    Returns None if the text does not start with a valid timestamp.
    """
    if not text:
        return None
    match = TIMESTAMP_PATTERN.match(text.strip())
    if not match:
        return None
    date_part, time_part, fraction, offset = match.groups()
    try:
        parsed = datetime.strptime(f"{date_part}T{time_part}", TIMESTAMP_FORMAT)
    except ValueError:
        return None
    if fraction:
        parsed = parsed.replace(microsecond=int(fraction[1:].ljust(6, "0")))
    if offset and offset != "Z":
        sign = -1 if offset[0] == "-" else 1
        digits = offset[1:].replace(":", "")
        delta = timedelta(hours=int(digits[:2]), minutes=int(digits[2:]))
        parsed = parsed.replace(tzinfo=timezone(sign * delta))
    return to_utc(parsed)


@dataclass(frozen=True)
class LogMetadata:
    """Metadata a provider reports for one log.

    Attributes:
        log_id: Log identifier (name or path).
        record_count: Number of records in the log.
        size_bytes: Total size of the log in bytes.
        oldest_timestamp: Timestamp of the oldest record, if any.
        newest_timestamp: Timestamp of the newest record, if any.
    """

    log_id: str
    record_count: int
    size_bytes: float
    oldest_timestamp: Optional[datetime] = None
    newest_timestamp: Optional[datetime] = None


@dataclass(frozen=True)
class Sample:
    """One observation of a log's record count, size and time range.

    Rates are derived when the sample is built and stored with it. A sample
    whose time range has zero width is degenerate: its rates are None.
    Pass stored rates explicitly to rebuild a persisted sample as-is.

    Attributes:
        log_id: Log identifier.
        record_count: Number of records observed.
        size_bytes: Size of the log in bytes.
        start_time: Timestamp of the oldest record (UTC).
        end_time: Timestamp of the newest record (UTC).
        rate_count_per_hour: Records per hour, None if degenerate.
        rate_bytes_per_hour: Bytes per hour, None if degenerate.
        rate_count_per_day: Records per day, None if degenerate.
        rate_bytes_per_day: Bytes per day, None if degenerate.
    """

    log_id: str
    record_count: int
    size_bytes: float
    start_time: datetime
    end_time: datetime
    rate_count_per_hour: Optional[float] = None
    rate_bytes_per_hour: Optional[float] = None
    rate_count_per_day: Optional[float] = None
    rate_bytes_per_day: Optional[float] = None

    def __post_init__(self) -> None:
        if self.record_count < 0:
            raise CollectionError(f"Negative record count {self.record_count}", self.log_id)
        if not math.isfinite(self.size_bytes):
            raise CollectionError(f"Non-finite size {self.size_bytes}", self.log_id)
        if self.size_bytes < 0:
            raise CollectionError(f"Negative size {self.size_bytes}", self.log_id)

        start = to_utc(self.start_time)
        end = to_utc(self.end_time)
        if end < start:
            raise CollectionError(
                f"Newest record {format_timestamp(end)} precedes oldest record "
                f"{format_timestamp(start)}",
                self.log_id,
            )
        object.__setattr__(self, "start_time", start)
        object.__setattr__(self, "end_time", end)

        rates = self.rates()
        if any(rate is not None and not math.isfinite(rate) for rate in rates):
            raise CollectionError("Sample carries a non-finite rate", self.log_id)
        if end == start:
            if any(rate is not None for rate in rates):
                raise CollectionError("Zero-width sample cannot carry rates", self.log_id)
            return

        if all(rate is None for rate in rates):
            hours = (end - start).total_seconds() / SECONDS_PER_HOUR
            per_hour_count = self.record_count / hours
            per_hour_bytes = self.size_bytes / hours
            object.__setattr__(self, "rate_count_per_hour", per_hour_count)
            object.__setattr__(self, "rate_bytes_per_hour", per_hour_bytes)
            object.__setattr__(self, "rate_count_per_day", per_hour_count * HOURS_PER_DAY)
            object.__setattr__(self, "rate_bytes_per_day", per_hour_bytes * HOURS_PER_DAY)
        elif any(rate is None for rate in rates):
            raise CollectionError("Sample carries a partial set of rates", self.log_id)

    def rates(self) -> List[Optional[float]]:
        return [
            self.rate_count_per_hour,
            self.rate_bytes_per_hour,
            self.rate_count_per_day,
            self.rate_bytes_per_day,
        ]

    @property
    def is_degenerate(self) -> bool:
        """True when the time range has zero width and the rates are undefined."""
        return self.start_time == self.end_time

    @property
    def span_hours(self) -> float:
        return (self.end_time - self.start_time).total_seconds() / SECONDS_PER_HOUR

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the persisted JSON shape."""
        return {
            "logId": self.log_id,
            "recordCount": self.record_count,
            "sizeBytes": self.size_bytes,
            "startTime": format_timestamp(self.start_time),
            "endTime": format_timestamp(self.end_time),
            "rateCountPerHour": self.rate_count_per_hour,
            "rateBytesPerHour": self.rate_bytes_per_hour,
            "rateCountPerDay": self.rate_count_per_day,
            "rateBytesPerDay": self.rate_bytes_per_day,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Sample":
        """Rebuild a sample from its persisted JSON shape.

        Raises:
            KeyError: A required field is missing.
            TypeError: A timestamp is not a string.
            ValueError: A field has the wrong format or a non-finite value.
            CollectionError: The stored values are inconsistent.
        """
        start = _stored_timestamp(data, "startTime")
        end = _stored_timestamp(data, "endTime")
        return cls(
            log_id=str(data["logId"]),
            record_count=int(data["recordCount"]),
            size_bytes=float(data["sizeBytes"]),
            start_time=start,
            end_time=end,
            rate_count_per_hour=_optional_float(data.get("rateCountPerHour")),
            rate_bytes_per_hour=_optional_float(data.get("rateBytesPerHour")),
            rate_count_per_day=_optional_float(data.get("rateCountPerDay")),
            rate_bytes_per_day=_optional_float(data.get("rateBytesPerDay")),
        )


@dataclass(frozen=True)
class AggregatedAverage:
    """Rate estimate for one log, averaged over its samples.

    Averages are rounded to two places. They are None when every sample
    of the log is degenerate.
    """

    log_id: str
    oldest_record: datetime
    newest_record: datetime
    sample_count: int
    avg_count_per_hour: Optional[float]
    avg_bytes_per_hour: Optional[float]
    avg_count_per_day: Optional[float]
    avg_bytes_per_day: Optional[float]
    avg_count_per_week: Optional[float]
    avg_bytes_per_week: Optional[float]
    avg_count_per_month: Optional[float]
    avg_bytes_per_month: Optional[float]
    degenerate_samples: int = 0

    @property
    def is_undefined(self) -> bool:
        return self.avg_count_per_hour is None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "logId": self.log_id,
            "oldestRecord": format_timestamp(self.oldest_record),
            "newestRecord": format_timestamp(self.newest_record),
            "sampleCount": self.sample_count,
            "avgCountPerHour": self.avg_count_per_hour,
            "avgBytesPerHour": self.avg_bytes_per_hour,
            "avgCountPerDay": self.avg_count_per_day,
            "avgBytesPerDay": self.avg_bytes_per_day,
            "avgCountPerWeek": self.avg_count_per_week,
            "avgBytesPerWeek": self.avg_bytes_per_week,
            "avgCountPerMonth": self.avg_count_per_month,
            "avgBytesPerMonth": self.avg_bytes_per_month,
            "degenerateSamples": self.degenerate_samples,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AggregatedAverage":
        oldest = _stored_timestamp(data, "oldestRecord")
        newest = _stored_timestamp(data, "newestRecord")
        return cls(
            log_id=str(data["logId"]),
            oldest_record=oldest,
            newest_record=newest,
            sample_count=int(data["sampleCount"]),
            avg_count_per_hour=_optional_float(data.get("avgCountPerHour")),
            avg_bytes_per_hour=_optional_float(data.get("avgBytesPerHour")),
            avg_count_per_day=_optional_float(data.get("avgCountPerDay")),
            avg_bytes_per_day=_optional_float(data.get("avgBytesPerDay")),
            avg_count_per_week=_optional_float(data.get("avgCountPerWeek")),
            avg_bytes_per_week=_optional_float(data.get("avgBytesPerWeek")),
            avg_count_per_month=_optional_float(data.get("avgCountPerMonth")),
            avg_bytes_per_month=_optional_float(data.get("avgBytesPerMonth")),
            degenerate_samples=int(data.get("degenerateSamples", 0)),
        )


@dataclass
class PersistentState:
    """Unit of save/load for cross-run accumulation."""

    samples_by_log: Dict[str, List[Sample]] = field(default_factory=dict)
    averages_by_log: Dict[str, AggregatedAverage] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "samplesByLog": {
                log_id: [sample.to_dict() for sample in samples]
                for log_id, samples in self.samples_by_log.items()
            },
            "averagesByLog": {
                log_id: average.to_dict() for log_id, average in self.averages_by_log.items()
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PersistentState":
        """Rebuild the state from the persisted document.

        Raises:
            KeyError, TypeError, ValueError, CollectionError: on malformed input.
        """
        if not isinstance(data, dict):
            raise TypeError("History document must be a JSON object")
        raw_samples = data.get("samplesByLog") or {}
        raw_averages = data.get("averagesByLog") or {}
        if not isinstance(raw_samples, dict) or not isinstance(raw_averages, dict):
            raise TypeError("samplesByLog and averagesByLog must be JSON objects")

        samples_by_log: Dict[str, List[Sample]] = {}
        for log_id, entries in raw_samples.items():
            # A single-sample history may be stored as a bare object
            if isinstance(entries, dict):
                entries = [entries]
            if not isinstance(entries, list):
                raise TypeError(f"Samples for {log_id} must be a list")
            samples_by_log[log_id] = [Sample.from_dict(entry) for entry in entries]

        averages_by_log = {
            log_id: AggregatedAverage.from_dict(entry) for log_id, entry in raw_averages.items()
        }
        return cls(samples_by_log=samples_by_log, averages_by_log=averages_by_log)


def _stored_timestamp(data: Dict[str, Any], key: str) -> datetime:
    value = data[key]
    if not isinstance(value, str):
        raise TypeError(f"{key} must be a string, got {type(value).__name__}")
    parsed = parse_timestamp(value)
    if parsed is None:
        raise ValueError(f"Invalid {key} {value!r}")
    return parsed


def _optional_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    # json.load accepts NaN and Infinity literals
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"Non-finite value {value!r}")
    return number
