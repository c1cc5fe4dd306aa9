"""Best-effort persistence for the allocation state.

A store holds one JSON record keyed under `STORAGE_KEY`. Stores raise
`StorageError` on failure; `load_state` and the planner catch and log it,
so a broken store only means the session is not durable.
"""

import json
import logging
import os
from abc import ABC, abstractmethod
from typing import Optional

from model.AllocationState import AllocationState


logger = logging.getLogger(__name__)

STORAGE_KEY = 'savings_allocation_data_v2'

# Default directory for saved records (at workspace root)
DEFAULT_DATA_DIR = os.path.normpath(os.path.join(os.path.dirname(__file__), '..', '..', 'allocation-data'))


class StorageError(Exception):
    """Raised when a record cannot be read or written."""


class MalformedRecordError(StorageError):
    """Raised when a stored record cannot be decoded."""


class AllocationStore(ABC):
    """Storage capability for the single saved allocation record."""

    @abstractmethod
    def load(self) -> Optional[dict]:
        """Return the saved record, or None if nothing has been saved."""
        pass

    @abstractmethod
    def save(self, record: dict) -> None:
        """Persist the record, replacing any previous one."""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Remove the saved record."""
        pass


class JsonFileAllocationStore(AllocationStore):
    """Stores the record as `<directory>/<STORAGE_KEY>.json`."""

    def __init__(self, directory: Optional[str] = None):
        self.directory = directory or DEFAULT_DATA_DIR
        self.path = os.path.join(self.directory, f"{STORAGE_KEY}.json")

    def load(self) -> Optional[dict]:
        if not os.path.exists(self.path):
            return None
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                return json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise MalformedRecordError(f"Saved allocation data in {self.path} is not valid JSON: {e}") from e
        except OSError as e:
            raise StorageError(f"Could not read {self.path}: {e}") from e

    def save(self, record: dict) -> None:
        try:
            os.makedirs(self.directory, exist_ok=True)
            # Write then rename so a failed write never truncates the last good record
            tmp_path = self.path + '.tmp'
            with open(tmp_path, 'w', encoding='utf-8') as f:
                json.dump(record, f, indent=2)
            os.replace(tmp_path, self.path)
        except (OSError, TypeError, ValueError) as e:
            raise StorageError(f"Could not write {self.path}: {e}") from e

    def clear(self) -> None:
        try:
            if os.path.exists(self.path):
                os.remove(self.path)
        except OSError as e:
            raise StorageError(f"Could not remove {self.path}: {e}") from e


class InMemoryAllocationStore(AllocationStore):
    """Keeps the record in memory; used for tests and throwaway sessions."""

    def __init__(self, record: Optional[dict] = None):
        self.record = record

    def load(self) -> Optional[dict]:
        return self.record

    def save(self, record: dict) -> None:
        # Round-trip through JSON so the stored copy matches what a file would hold
        self.record = json.loads(json.dumps(record))

    def clear(self) -> None:
        self.record = None


def load_state(store: Optional[AllocationStore]) -> AllocationState:
    """Load the saved allocation state, falling back to defaults.

    Missing fields are filled from defaults by `AllocationState.from_record`.
    A malformed or unreadable record is logged and discarded; this function
    never raises.
    """
    if store is None:
        return AllocationState()

    try:
        record = store.load()
    except StorageError as e:
        logger.warning("Failed to load saved data, using defaults: %s", e)
        return AllocationState()

    if record is None:
        return AllocationState()

    try:
        return AllocationState.from_record(record)
    except ValueError as e:
        logger.warning("Discarding malformed saved data, using defaults: %s", e)
        return AllocationState()
