from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence


@dataclass
class StoredRecordView:
    """A persisted batch of records as returned by a store"""

    id: int
    name: str
    records: List[Dict[str, str]] = field(default_factory=list)
    created_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            'id': self.id,
            'filename': self.name,
            'data': self.records,
            'created_at': self.created_at.isoformat() if self.created_at else None
        }


class AbstractRecordStore(ABC):
    """
    Abstract base class for record stores

    Defines the persistence interface the conversion service depends on.
    Implementations can use different backends (memory, SQL, etc.).
    """

    @abstractmethod
    def save_batch(self, name: str, records: Sequence[Dict[str, str]]) -> int:
        """
        Persist records as one named batch

        Args:
            name: Batch name (usually the uploaded file name)
            records: Records to persist

        Returns:
            Generated batch identifier

        Raises:
            StorageError: On any backend failure
        """
        pass

    @abstractmethod
    def get_all(self) -> List[StoredRecordView]:
        """
        Get every stored batch

        Raises:
            StorageError: If the store is unavailable
        """
        pass

    @abstractmethod
    def get_by_id(self, batch_id: int) -> StoredRecordView:
        """
        Get one stored batch

        Raises:
            NotFoundError: If no batch has this identifier
            StorageError: If the store is unavailable
        """
        pass

    def initialize(self) -> None:
        """Prepare the backend (create schema, etc.)"""
        pass

    def close(self) -> None:
        """Release backend resources"""
        pass

    def ping(self) -> None:
        """
        Check that the backend is reachable

        Raises:
            StorageError: If it is not
        """
        pass
