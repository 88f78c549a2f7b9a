from csv2json.storage.abstract_store import AbstractRecordStore, StoredRecordView
from csv2json.storage.store_port import Configured, StorePort, Unconfigured
from csv2json.storage.memory_store import MemoryRecordStore
from csv2json.storage.sql_store import SQLRecordStore
from csv2json.storage.store_factory import StoreFactory

__all__ = [
    'AbstractRecordStore', 'StoredRecordView',
    'StorePort', 'Configured', 'Unconfigured',
    'MemoryRecordStore', 'SQLRecordStore', 'StoreFactory',
]
