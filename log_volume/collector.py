"""
Sample collection: one Sample per log per execution.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from .exceptions import CollectionError
from .logging_config import get_logger
from .providers import MetadataProvider
from .samples import Sample

logger = get_logger(__name__)


@dataclass
class CollectionReport:
    """Per-log outcome of a collection pass.

    Attributes:
        samples: Collected samples keyed by log id.
        failures: Collection errors keyed by log id.
    """

    samples: Dict[str, Sample] = field(default_factory=dict)
    failures: Dict[str, CollectionError] = field(default_factory=dict)

    @property
    def has_samples(self) -> bool:
        return bool(self.samples)

    def as_history(self) -> Dict[str, List[Sample]]:
        """Current samples shaped like a history mapping, for merging."""
        return {log_id: [sample] for log_id, sample in self.samples.items()}


class SampleCollector:
    """Builds samples from the boundary metadata of each log."""

    def __init__(self, provider: MetadataProvider):
        self.provider = provider

    def collect(self, log_id: str) -> Sample:
        """Collect one sample for a log.

        A log with a single record, or whose boundary records share a
        timestamp, yields a degenerate sample rather than an error.

        Raises:
            CollectionError: If the log cannot be opened, has no records,
                lacks boundary timestamps or reports an inverted range.
        """
        try:
            metadata = self.provider.get_log_metadata(log_id)
        except CollectionError:
            raise
        except OSError as e:
            raise CollectionError(f"Cannot open log: {e}", log_id) from e

        if metadata.record_count <= 0:
            raise CollectionError("Log has no records", log_id)
        if metadata.oldest_timestamp is None or metadata.newest_timestamp is None:
            raise CollectionError("Log has no boundary record timestamps", log_id)

        sample = Sample(
            log_id=log_id,
            record_count=metadata.record_count,
            size_bytes=metadata.size_bytes,
            start_time=metadata.oldest_timestamp,
            end_time=metadata.newest_timestamp,
        )
        if sample.is_degenerate:
            logger.debug("Log %s has a zero-width time range; rates undefined", log_id)
        return sample

    def collect_all(self, log_ids: Iterable[str]) -> CollectionReport:
        """Collect a sample for each log, recording failures per log."""
        report = CollectionReport()
        for log_id in log_ids:
            if log_id in report.samples or log_id in report.failures:
                continue
            try:
                report.samples[log_id] = self.collect(log_id)
            except CollectionError as e:
                logger.warning("Skipping log: %s", e)
                report.failures[log_id] = e
        return report
