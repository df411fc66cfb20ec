"""
Run orchestration: collect samples, merge history, aggregate, persist.
"""

import os
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from .aggregator import aggregate_all
from .collector import CollectionReport, SampleCollector
from .constants import DEFAULT_HISTORY_FILENAME, HISTORY_PATH_ENV, KEEP_HISTORY_ENV
from .exceptions import CollectionError, ConfigurationError, NoValidLogsError, PersistenceError
from .history import HistoryStore, merge
from .logging_config import get_logger
from .providers import MetadataProvider
from .samples import AggregatedAverage, PersistentState, Sample

logger = get_logger(__name__)

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


@dataclass
class EstimatorConfig:
    """Settings for one estimation run.

    Attributes:
        history_path: Location of the history file.
        keep_history: Merge this run's samples into the history file.
        purge_history: Delete the history file before collecting.
    """

    history_path: str = DEFAULT_HISTORY_FILENAME
    keep_history: bool = False
    purge_history: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None) -> "EstimatorConfig":
        """Build a config from LOG_VOLUME_* environment variables.

        Raises:
            ConfigurationError: If LOG_VOLUME_KEEP_HISTORY is not a boolean.
        """
        environ = os.environ if environ is None else environ
        config = cls()
        history_path = environ.get(HISTORY_PATH_ENV)
        if history_path:
            config.history_path = os.path.expanduser(history_path)

        keep = environ.get(KEEP_HISTORY_ENV, "").strip().lower()
        if keep in _TRUE_VALUES:
            config.keep_history = True
        elif keep not in _FALSE_VALUES:
            raise ConfigurationError(
                f"{KEEP_HISTORY_ENV} must be a boolean, got {environ[KEEP_HISTORY_ENV]!r}"
            )
        return config


@dataclass
class EstimationResult:
    """Outcome of a run.

    Attributes:
        averages_by_log: Fresh averages for the requested logs.
        failures: Collection errors keyed by log id.
        stale_logs: Logs carried in history that were not requested this run.
        samples_by_log: Samples the averages were computed from.
    """

    averages_by_log: Dict[str, AggregatedAverage] = field(default_factory=dict)
    failures: Dict[str, CollectionError] = field(default_factory=dict)
    stale_logs: List[str] = field(default_factory=list)
    samples_by_log: Dict[str, List[Sample]] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """The averagesByLog mapping consumed by presentation."""
        return {log_id: average.to_dict() for log_id, average in self.averages_by_log.items()}


class LogVolumeEstimator:
    """Estimates per-log record and byte rates from boundary metadata."""

    def __init__(self, provider: MetadataProvider, config: Optional[EstimatorConfig] = None):
        self.config = config or EstimatorConfig()
        self.collector = SampleCollector(provider)
        self.store = HistoryStore(self.config.history_path)

    def run(self, log_ids: Iterable[str]) -> EstimationResult:
        """Run one estimation pass over the requested logs.

        Raises:
            NoValidLogsError: If every requested log failed collection.
            PersistenceError: If the history file cannot be saved or purged.
                On a failed save the computed result is attached as ``result``.
        """
        requested = list(dict.fromkeys(log_ids))

        if self.config.purge_history:
            self.store.purge()

        report = self.collector.collect_all(requested)
        if not report.has_samples:
            raise NoValidLogsError("No requested log could be sampled", requested)

        if not self.config.keep_history:
            samples_by_log = report.as_history()
            return EstimationResult(
                averages_by_log=aggregate_all(samples_by_log, requested),
                failures=dict(report.failures),
                samples_by_log=samples_by_log,
            )

        return self._run_with_history(requested, report)

    def _run_with_history(self, requested: List[str], report: CollectionReport) -> EstimationResult:
        stored = self.store.load_or_empty()
        samples_by_log = merge(report.as_history(), stored.samples_by_log)
        averages = aggregate_all(samples_by_log, requested)

        # Logs kept in history but not requested keep their last stored average
        stale_logs = [log_id for log_id in samples_by_log if log_id not in requested]
        persisted_averages = {
            log_id: stored.averages_by_log[log_id]
            for log_id in stale_logs
            if log_id in stored.averages_by_log
        }
        persisted_averages.update(averages)
        if stale_logs:
            logger.info(
                "Carrying %d unrequested logs in history without recomputing: %s",
                len(stale_logs),
                ", ".join(stale_logs),
            )

        result = EstimationResult(
            averages_by_log=averages,
            failures=dict(report.failures),
            stale_logs=stale_logs,
            samples_by_log={log_id: samples_by_log[log_id] for log_id in averages},
        )

        try:
            self.store.save(PersistentState(samples_by_log, persisted_averages))
        except PersistenceError as e:
            raise PersistenceError(str(e.args[0]), e.path, result=result) from e
        return result
