"""
Store port

The conversion service holds a StorePort that is either Configured (wraps a
record store) or Unconfigured (no persistence). Callers pick the variant at
construction time instead of checking for a missing store on every call.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Sequence

from csv2json.exceptions import StoreNotConfiguredError
from csv2json.storage.abstract_store import AbstractRecordStore, StoredRecordView


class StorePort(ABC):
    """Optional persistence capability"""

    configured: bool = False

    @staticmethod
    def of(store: Optional[AbstractRecordStore]) -> 'StorePort':
        """Wrap a store, or return the unconfigured port when store is None"""
        if store is None:
            return Unconfigured()
        return Configured(store)

    @property
    @abstractmethod
    def mode(self) -> str:
        """Name of the persistence mode, reported by the health command"""
        pass

    @abstractmethod
    def save(self, name: str, records: Sequence[Dict[str, str]]) -> Optional[int]:
        """Persist records; returns the batch id, or None when nothing is stored"""
        pass

    @abstractmethod
    def get_all(self) -> List[StoredRecordView]:
        pass

    @abstractmethod
    def get_by_id(self, batch_id: int) -> StoredRecordView:
        pass

    def close(self) -> None:
        pass


class Configured(StorePort):
    """Port backed by a record store"""

    configured = True

    def __init__(self, store: AbstractRecordStore):
        if not isinstance(store, AbstractRecordStore):
            raise TypeError(f"Store must inherit from AbstractRecordStore, got {type(store).__name__}")
        self.store = store

    @property
    def mode(self) -> str:
        return type(self.store).__name__

    def save(self, name: str, records: Sequence[Dict[str, str]]) -> Optional[int]:
        return self.store.save_batch(name, records)

    def get_all(self) -> List[StoredRecordView]:
        return self.store.get_all()

    def get_by_id(self, batch_id: int) -> StoredRecordView:
        return self.store.get_by_id(batch_id)

    def close(self) -> None:
        self.store.close()

    def __repr__(self) -> str:
        return f"Configured({self.store!r})"


class Unconfigured(StorePort):
    """Port with no store: saves are skipped, queries fail"""

    @property
    def mode(self) -> str:
        return 'unconfigured'

    def save(self, name: str, records: Sequence[Dict[str, str]]) -> Optional[int]:
        return None

    def get_all(self) -> List[StoredRecordView]:
        raise StoreNotConfiguredError()

    def get_by_id(self, batch_id: int) -> StoredRecordView:
        raise StoreNotConfiguredError()

    def __repr__(self) -> str:
        return "Unconfigured()"
