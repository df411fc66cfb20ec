"""
Custom exceptions for log volume estimation.

This module defines a hierarchy of exceptions for handling errors
specific to sample collection, history persistence and aggregation.
"""

from typing import Any, Optional, Sequence


class LogVolumeError(Exception):
    """Base exception for all log volume estimation errors."""

    pass


class CollectionError(LogVolumeError):
    """Raised when a sample cannot be collected for a log.

    Recoverable at the per-log level: the log is skipped and the
    remaining logs are still processed.

    Attributes:
        log_id: Identifier of the log that failed collection.
    """

    def __init__(self, message: str, log_id: Optional[str] = None) -> None:
        self.log_id = log_id
        super().__init__(message)

    def __str__(self) -> str:
        base = super().__str__()
        if self.log_id:
            return f"{base} (log: {self.log_id})"
        return base


class LogNotFoundError(CollectionError):
    """Raised by a metadata provider when the named log does not exist."""

    pass


class PersistenceError(LogVolumeError):
    """Raised when the history file cannot be read or written.

    Attributes:
        path: Path to the history file.
        result: Results computed before a failed save, if any.
    """

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        result: Optional[Any] = None,
    ) -> None:
        self.path = path
        self.result = result
        super().__init__(message)

    def __str__(self) -> str:
        base = super().__str__()
        if self.path:
            return f"{base} (file: {self.path})"
        return base


class NoValidLogsError(LogVolumeError):
    """Raised when every requested log failed collection.

    Attributes:
        requested: The log identifiers that were requested.
    """

    def __init__(self, message: str, requested: Optional[Sequence[str]] = None) -> None:
        self.requested = list(requested) if requested is not None else []
        super().__init__(message)

    def __str__(self) -> str:
        base = super().__str__()
        if self.requested:
            return f"{base} (requested: {', '.join(self.requested)})"
        return base


class NoDataForAggregationError(LogVolumeError):
    """Raised when a log has no samples to aggregate.

    Attributes:
        log_id: Identifier of the log without samples.
    """

    def __init__(self, message: str, log_id: Optional[str] = None) -> None:
        self.log_id = log_id
        super().__init__(message)

    def __str__(self) -> str:
        base = super().__str__()
        if self.log_id:
            return f"{base} (log: {self.log_id})"
        return base


class ConfigurationError(LogVolumeError):
    """Raised for configuration-related errors."""

    pass
