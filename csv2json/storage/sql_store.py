import logging
from datetime import timezone
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from csv2json.db.connection import Database
from csv2json.db.models import CSVBatch
from csv2json.exceptions import NotFoundError, StorageError
from csv2json.storage.abstract_store import AbstractRecordStore, StoredRecordView

logger = logging.getLogger(__name__)

# Driver imports and SQLite directory creation happen on first connect
BACKEND_ERRORS = (SQLAlchemyError, ImportError, OSError)


def _to_view(batch: CSVBatch) -> StoredRecordView:
    created_at = batch.created_at
    if created_at is not None and created_at.tzinfo is None:
        # SQLite drops the offset; values are always written in UTC
        created_at = created_at.replace(tzinfo=timezone.utc)
    return StoredRecordView(
        id=batch.id,
        name=batch.filename,
        records=batch.records,
        created_at=created_at
    )


class SQLRecordStore(AbstractRecordStore):
    """
    Record store backed by a relational database through SQLAlchemy

    Each batch is one row of the 'csv_data' table. Every operation runs in
    its own session, so the store can be shared between threads.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None, db: Optional[Database] = None):
        """
        Initialize the SQL store

        Args:
            config: Storage configuration (type, sqlite/postgres settings)
            db: Optional pre-built Database, mainly for tests
        """
        self.config = config or {}
        self.db = db or Database(self.config)

    def initialize(self) -> None:
        try:
            self.db.initialize()
        except BACKEND_ERRORS as e:
            raise StorageError(f"failed to initialize database schema: {e}") from e

    def ping(self) -> None:
        try:
            self.db.connect()
        except BACKEND_ERRORS as e:
            raise StorageError(f"failed to connect to database: {e}") from e

    def save_batch(self, name: str, records: Sequence[Dict[str, str]]) -> int:
        try:
            with self.db.transaction() as session:
                batch = CSVBatch(filename=name or '')
                batch.records = list(records)
                session.add(batch)
                session.flush()
                batch_id = batch.id
        except BACKEND_ERRORS as e:
            raise StorageError(f"failed to save to database: {e}") from e
        logger.debug(f"Stored batch {batch_id} ({name!r}, {len(records)} records)")
        return batch_id

    def get_all(self) -> List[StoredRecordView]:
        try:
            with self.db.transaction() as session:
                batches = session.execute(select(CSVBatch).order_by(CSVBatch.id)).scalars().all()
                return [_to_view(b) for b in batches]
        except BACKEND_ERRORS as e:
            raise StorageError(f"failed to retrieve data: {e}") from e

    def get_by_id(self, batch_id: int) -> StoredRecordView:
        try:
            with self.db.transaction() as session:
                batch = session.get(CSVBatch, batch_id)
                if batch is None:
                    raise NotFoundError(batch_id)
                return _to_view(batch)
        except BACKEND_ERRORS as e:
            raise StorageError(f"failed to retrieve data for id {batch_id}: {e}") from e

    def close(self) -> None:
        self.db.close()

    def __repr__(self) -> str:
        return f"SQLRecordStore({self.db.url.split('@')[-1]!r})"
