import copy
import itertools
import logging
import threading
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from csv2json.exceptions import NotFoundError
from csv2json.storage.abstract_store import AbstractRecordStore, StoredRecordView

logger = logging.getLogger(__name__)


class MemoryRecordStore(AbstractRecordStore):
    """
    In-process record store

    Keeps batches in a dict guarded by a lock. Records are copied on the way
    in and out so callers cannot mutate stored data.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.config = config or {}
        self._lock = threading.Lock()
        self._ids = itertools.count(1)
        self._batches: Dict[int, StoredRecordView] = {}

    def save_batch(self, name: str, records: Sequence[Dict[str, str]]) -> int:
        batch = StoredRecordView(
            id=0,
            name=name,
            records=[dict(r) for r in records],
            created_at=datetime.now(timezone.utc)
        )
        with self._lock:
            batch.id = next(self._ids)
            self._batches[batch.id] = batch
        logger.debug(f"Stored batch {batch.id} ({name!r}, {len(batch.records)} records) in memory")
        return batch.id

    def get_all(self) -> List[StoredRecordView]:
        with self._lock:
            batches = [self._batches[k] for k in sorted(self._batches)]
        return [copy.deepcopy(b) for b in batches]

    def get_by_id(self, batch_id: int) -> StoredRecordView:
        with self._lock:
            batch = self._batches.get(batch_id)
        if batch is None:
            raise NotFoundError(batch_id)
        return copy.deepcopy(batch)

    def close(self) -> None:
        with self._lock:
            self._batches.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._batches)
