"""
History store: persists samples and averages across executions.

The store is a single JSON document holding ``samplesByLog`` and
``averagesByLog``. Samples are appended in collection order and only ever
removed by purging the whole file. There is no locking: two runs that load
before either saves will lose one run's samples.
"""

import json
import os
import tempfile
from typing import Dict, List, Mapping

from .exceptions import CollectionError, PersistenceError
from .logging_config import get_logger
from .samples import PersistentState, Sample

logger = get_logger(__name__)


def merge(
    current: Mapping[str, List[Sample]],
    stored: Mapping[str, List[Sample]],
) -> Dict[str, List[Sample]]:
    """Merge this run's samples into stored history.

    Logs in both get ``stored + current`` in append order. Logs only in
    ``stored`` are carried through unchanged. Neither input is mutated.
    """
    merged: Dict[str, List[Sample]] = {log_id: list(samples) for log_id, samples in stored.items()}
    for log_id, samples in current.items():
        merged[log_id] = merged.get(log_id, []) + list(samples)
    return merged


class HistoryStore:
    """JSON-file backed store of samples and averages."""

    merge = staticmethod(merge)

    def __init__(self, path: str):
        self.path = path

    def exists(self) -> bool:
        return os.path.isfile(self.path)

    def load_state(self) -> PersistentState:
        """Load the full persisted state.

        Returns:
            An empty state if no history file exists.

        Raises:
            PersistenceError: If the file is unreadable or corrupted.
        """
        if not self.exists():
            return PersistentState()

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                document = json.load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise PersistenceError(f"Cannot read history: {e}", self.path) from e

        try:
            state = PersistentState.from_dict(document)
        except (KeyError, TypeError, ValueError, CollectionError) as e:
            raise PersistenceError(f"Corrupted history: {e}", self.path) from e

        logger.debug(
            "Loaded %d samples for %d logs from %s",
            sum(len(samples) for samples in state.samples_by_log.values()),
            len(state.samples_by_log),
            self.path,
        )
        return state

    def load(self) -> Dict[str, List[Sample]]:
        """Load stored samples keyed by log id."""
        return self.load_state().samples_by_log

    def load_or_empty(self) -> PersistentState:
        """Load the state, falling back to an empty one on a corrupt file."""
        try:
            return self.load_state()
        except PersistenceError as e:
            logger.warning("Ignoring unreadable history, starting fresh: %s", e)
            return PersistentState()

    def save(self, state: PersistentState) -> None:
        """Overwrite the history file with the given state.

        The document is written to a temporary file beside the target
        and moved into place, so a crash never leaves a truncated file.

        Raises:
            PersistenceError: If the file cannot be written.
        """
        directory = os.path.dirname(os.path.abspath(self.path))
        tmp_path = None
        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(prefix=".history-", suffix=".tmp", dir=directory)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(state.to_dict(), f, indent=2)
                f.write("\n")
            os.replace(tmp_path, self.path)
            tmp_path = None
        except OSError as e:
            raise PersistenceError(f"Cannot write history: {e}", self.path) from e
        finally:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.unlink(tmp_path)

        logger.debug("Saved history for %d logs to %s", len(state.samples_by_log), self.path)

    def purge(self) -> bool:
        """Delete the history file.

        Returns:
            True if a file was removed, False if there was none.

        Raises:
            PersistenceError: If the file exists but cannot be removed.
        """
        try:
            os.remove(self.path)
        except FileNotFoundError:
            return False
        except OSError as e:
            raise PersistenceError(f"Cannot purge history: {e}", self.path) from e
        logger.info("Purged history file %s", self.path)
        return True
