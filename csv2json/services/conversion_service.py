import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from csv2json.processors.csv_reader import DEFAULT_ENCODING, CSVSource, read_table
from csv2json.processors.json_encoder import encode_records
from csv2json.processors.record_mapper import MismatchPolicy, map_records
from csv2json.storage.abstract_store import StoredRecordView
from csv2json.storage.store_port import StorePort, Unconfigured

logger = logging.getLogger(__name__)


@dataclass
class ConversionResult:
    """Result of one CSV to JSON conversion"""
    content: bytes
    name: str = ''
    record_count: int = 0
    columns: List[str] = field(default_factory=list)
    batch_id: Optional[int] = None

    @property
    def persisted(self) -> bool:
        return self.batch_id is not None

    def metadata(self) -> Dict[str, Any]:
        return {
            'input_format': 'csv',
            'output_format': 'json',
            'name': self.name,
            'record_count': self.record_count,
            'columns': self.columns,
            'batch_id': self.batch_id,
            'size': len(self.content)
        }


class ConversionService:
    """
    Converts CSV input to JSON and optionally persists the parsed records

    The service is stateless between calls. When built with a Configured
    store port, a conversion only succeeds if the records were also saved;
    with the default Unconfigured port it is a pure function of its input.
    """

    def __init__(
        self,
        store: Optional[StorePort] = None,
        mismatch_policy: Union[MismatchPolicy, str] = MismatchPolicy.REJECT,
        indent: Optional[int] = None,
        encoding: str = DEFAULT_ENCODING
    ):
        """
        Initialize conversion service

        Args:
            store: Store port; Unconfigured() when omitted
            mismatch_policy: Policy for rows whose field count differs from the header
            indent: JSON indentation, compact output when None
            encoding: Encoding used to decode binary input
        """
        self.store = store if store is not None else Unconfigured()
        self.mismatch_policy = MismatchPolicy.parse(mismatch_policy)
        self.indent = indent
        self.encoding = encoding

    @classmethod
    def from_config(cls, config, store: Optional[StorePort] = None) -> 'ConversionService':
        """
        Create a service from a Csv2JsonConfig (or any object with dot-notation get)

        The store port is not created here; pass one built by StoreFactory.
        """
        return cls(
            store=store,
            mismatch_policy=config.get('conversion.mismatch_policy', MismatchPolicy.REJECT.value),
            indent=config.get('output.indent'),
            encoding=config.get('conversion.encoding', DEFAULT_ENCODING)
        )

    def process(self, source: CSVSource, name: str = '') -> ConversionResult:
        """
        Convert CSV input to JSON and save the records if a store is configured

        Args:
            source: CSV bytes, text, or stream
            name: Batch name used when saving (usually the file name)

        Returns:
            ConversionResult with the JSON content and conversion metadata

        Raises:
            EndOfInput: If the input has no rows
            FormatError: On malformed input; nothing is saved
            StorageError: If saving fails; no JSON is returned
        """
        header, rows = read_table(source, encoding=self.encoding)
        records = list(map_records(header, rows, self.mismatch_policy))
        content = encode_records(records, indent=self.indent)

        batch_id = self.store.save(name, records)

        logger.debug(f"Converted {name or '<stream>'}: {len(records)} records, {len(content)} bytes of JSON")
        return ConversionResult(
            content=content,
            name=name,
            record_count=len(records),
            columns=list(dict.fromkeys(header)),
            batch_id=batch_id
        )

    def convert(self, source: CSVSource, name: str = '') -> bytes:
        """Convert CSV input to JSON bytes; see process()"""
        return self.process(source, name).content

    def process_file(self, path: Union[str, os.PathLike], name: Optional[str] = None) -> ConversionResult:
        """
        Convert a CSV file

        Args:
            path: Path to the CSV file
            name: Batch name, defaults to the file's base name

        Raises:
            FileNotFoundError: If the file does not exist
        """
        path = Path(path)
        with open(path, 'rb') as f:
            return self.process(f, name if name is not None else path.name)

    def convert_file(self, path: Union[str, os.PathLike], name: Optional[str] = None) -> bytes:
        """Convert a CSV file to JSON bytes; see process_file()"""
        return self.process_file(path, name).content

    def get_all_data(self) -> List[StoredRecordView]:
        """
        Get every stored batch

        Raises:
            StoreNotConfiguredError: If no store is configured
            StorageError: If the store fails
        """
        return self.store.get_all()

    def get_data_by_id(self, batch_id: int) -> StoredRecordView:
        """
        Get one stored batch

        Raises:
            StoreNotConfiguredError: If no store is configured
            NotFoundError: If no batch has this identifier
            StorageError: If the store fails
        """
        return self.store.get_by_id(batch_id)

    def close(self) -> None:
        self.store.close()
