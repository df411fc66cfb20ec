"""
Metadata providers: the inbound interface the collector reads logs through.

A provider answers ``get_log_metadata(log_id)`` with a LogMetadata, or raises
LogNotFoundError when the log does not exist. Providers only ever read the
boundary records of a log, never its full contents.
"""

import json
import os
from typing import Dict, Iterable, List, Optional, Protocol

import numpy as np

from .constants import BOUNDARY_WINDOW_SIZE, READ_CHUNK_SIZE
from .exceptions import ConfigurationError, LogNotFoundError
from .logging_config import get_logger
from .samples import LogMetadata, parse_timestamp

logger = get_logger(__name__)

NEWLINE = ord("\n")


class MetadataProvider(Protocol):
    """Anything that can report boundary metadata for a named log."""

    def get_log_metadata(self, log_id: str) -> LogMetadata:
        ...


class StaticMetadataProvider:
    """Serves metadata from an in-memory mapping.

    Used for inventories exported from another system and for dry runs.
    """

    def __init__(self, metadata: Optional[Iterable[LogMetadata]] = None):
        self._metadata: Dict[str, LogMetadata] = {}
        for entry in metadata or []:
            self.add(entry)

    def add(self, entry: LogMetadata) -> None:
        self._metadata[entry.log_id] = entry

    def get_log_metadata(self, log_id: str) -> LogMetadata:
        try:
            return self._metadata[log_id]
        except KeyError:
            raise LogNotFoundError("Log not found", log_id) from None

    def log_ids(self) -> List[str]:
        return list(self._metadata)

    @classmethod
    def from_json_file(cls, path: str) -> "StaticMetadataProvider":
        """Load an inventory document.

        The document maps log ids to objects with ``recordCount``,
        ``sizeBytes``, ``oldestTimestamp`` and ``newestTimestamp``.

        Raises:
            ConfigurationError: If the file cannot be read or is malformed.
        """
        try:
            with open(path, "r", encoding="utf-8") as f:
                document = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Cannot read metadata file {path}: {e}") from e

        if not isinstance(document, dict):
            raise ConfigurationError(f"Metadata file {path} must contain a JSON object")

        provider = cls()
        for log_id, entry in document.items():
            try:
                provider.add(
                    LogMetadata(
                        log_id=log_id,
                        record_count=int(entry["recordCount"]),
                        size_bytes=float(entry["sizeBytes"]),
                        oldest_timestamp=parse_timestamp(entry.get("oldestTimestamp") or ""),
                        newest_timestamp=parse_timestamp(entry.get("newestTimestamp") or ""),
                    )
                )
            except (KeyError, TypeError, ValueError) as e:
                raise ConfigurationError(f"Invalid metadata for {log_id} in {path}: {e}") from e
        logger.debug("Loaded metadata for %d logs from %s", len(provider._metadata), path)
        return provider


class TextLogFileProvider:
    """Reads metadata from plain-text log files with one record per line.

    Each line is a record. The record count comes from counting line
    terminators in binary chunks; only the first and last timestamped
    records are decoded and parsed.
    """

    def __init__(self, base_dir: Optional[str] = None, encoding: str = "utf-8"):
        self.base_dir = base_dir
        self.encoding = encoding

    def resolve(self, log_id: str) -> str:
        if os.path.isabs(log_id) or not self.base_dir:
            return log_id
        return os.path.join(self.base_dir, log_id)

    def get_log_metadata(self, log_id: str) -> LogMetadata:
        path = self.resolve(log_id)
        if not os.path.isfile(path):
            raise LogNotFoundError(f"Log file not found: {path}", log_id)

        size = os.path.getsize(path)
        with open(path, "rb") as f:
            record_count = self.count_records(f, size)
            oldest = self.read_first_timestamp(f)
            newest = self.read_last_timestamp(f, size)

        return LogMetadata(
            log_id=log_id,
            record_count=record_count,
            size_bytes=float(size),
            oldest_timestamp=oldest,
            newest_timestamp=newest,
        )

    def count_records(self, f, size: int) -> int:
        """Count line terminators, plus a trailing unterminated line."""
        f.seek(0)
        count = 0
        last_byte = None
        while True:
            chunk = f.read(READ_CHUNK_SIZE)
            if not chunk:
                break
            count += int(np.count_nonzero(np.frombuffer(chunk, dtype=np.uint8) == NEWLINE))
            last_byte = chunk[-1]
        if size and last_byte != NEWLINE:
            count += 1
        return count

    def read_first_timestamp(self, f):
        f.seek(0)
        for raw in f:
            ts = parse_timestamp(raw.decode(self.encoding, errors="replace"))
            if ts is not None:
                return ts
            # Boundary record must be near the head; give up past the window
            if f.tell() > BOUNDARY_WINDOW_SIZE:
                break
        return None

    def read_last_timestamp(self, f, size: int):
        window = min(size, BOUNDARY_WINDOW_SIZE)
        f.seek(size - window)
        tail = f.read(window)
        lines = tail.splitlines()
        # The first line of a partial window may be cut mid-record
        if window < size and lines:
            lines = lines[1:]
        for raw in reversed(lines):
            ts = parse_timestamp(raw.decode(self.encoding, errors="replace"))
            if ts is not None:
                return ts
        return None

