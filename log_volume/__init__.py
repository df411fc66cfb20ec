"""
Log Volume Estimator

Estimates how many records and bytes a set of logs generate per hour, day,
week and month by sampling only each log's oldest and newest record, with an
optional running average accumulated across executions.
"""

from .aggregator import aggregate, aggregate_all, round_half_away
from .collector import CollectionReport, SampleCollector
from .estimator import EstimationResult, EstimatorConfig, LogVolumeEstimator
from .exceptions import (
    CollectionError,
    ConfigurationError,
    LogNotFoundError,
    LogVolumeError,
    NoDataForAggregationError,
    NoValidLogsError,
    PersistenceError,
)
from .history import HistoryStore, merge
from .providers import MetadataProvider, StaticMetadataProvider, TextLogFileProvider
from .samples import AggregatedAverage, LogMetadata, PersistentState, Sample

__all__ = [
    # Orchestration
    "LogVolumeEstimator",
    "EstimatorConfig",
    "EstimationResult",
    # Data model
    "LogMetadata",
    "Sample",
    "AggregatedAverage",
    "PersistentState",
    # Collection
    "SampleCollector",
    "CollectionReport",
    "MetadataProvider",
    "StaticMetadataProvider",
    "TextLogFileProvider",
    # History
    "HistoryStore",
    "merge",
    # Aggregation
    "aggregate",
    "aggregate_all",
    "round_half_away",
    # Exceptions
    "LogVolumeError",
    "CollectionError",
    "LogNotFoundError",
    "PersistenceError",
    "NoValidLogsError",
    "NoDataForAggregationError",
    "ConfigurationError",
]

__version__ = "1.0.0"
