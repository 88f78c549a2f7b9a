"""
csv2json processors

The three pipeline stages:
- CSV reader (raw rows)
- Record mapper (header-bound records)
- JSON encoder (array of objects)
"""

from csv2json.processors.csv_reader import CSVReader, parse_csv, read_table
from csv2json.processors.record_mapper import MismatchPolicy, Record, bind_row, map_records
from csv2json.processors.json_encoder import decode_records, encode_records

__all__ = [
    'CSVReader', 'parse_csv', 'read_table',
    'MismatchPolicy', 'Record', 'bind_row', 'map_records',
    'encode_records', 'decode_records',
]
