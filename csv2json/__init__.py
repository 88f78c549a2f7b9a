"""
csv2json - CSV to JSON conversion library

Converts CSV input into a JSON array of objects (one per row, keys in header
order, values as strings) and optionally persists the parsed records through
a pluggable store.

Basic usage:
    from csv2json import ConversionService

    # Convert-only mode
    service = ConversionService()
    json_bytes = service.convert(b"name,age\\nAlice,30")

    # Convert and persist
    from csv2json import MemoryRecordStore, StorePort

    service = ConversionService(store=StorePort.of(MemoryRecordStore()))
    json_bytes = service.convert(open('people.csv', 'rb'), name='people.csv')
    print(service.get_all_data())
"""

from csv2json.exceptions import (
    Csv2JsonError, EndOfInput, FormatError, StorageError,
    StoreNotConfiguredError, NotFoundError, ConfigurationError
)
from csv2json.processors import MismatchPolicy, encode_records, map_records, parse_csv
from csv2json.services import ConversionResult, ConversionService
from csv2json.storage import (
    AbstractRecordStore, Configured, MemoryRecordStore, SQLRecordStore,
    StoreFactory, StorePort, StoredRecordView, Unconfigured
)
from csv2json.config import Csv2JsonConfig

__all__ = [
    'ConversionService', 'ConversionResult',
    'parse_csv', 'map_records', 'encode_records', 'MismatchPolicy',
    'StorePort', 'Configured', 'Unconfigured', 'AbstractRecordStore', 'StoredRecordView',
    'MemoryRecordStore', 'SQLRecordStore', 'StoreFactory',
    'Csv2JsonConfig',
    'Csv2JsonError', 'EndOfInput', 'FormatError', 'StorageError',
    'StoreNotConfiguredError', 'NotFoundError', 'ConfigurationError',
]

__version__ = '1.0.0'
