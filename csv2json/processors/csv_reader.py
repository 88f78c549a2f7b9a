"""
CSV reader

Turns a byte or character stream into a lazy sequence of rows. Rows are
plain lists of field strings; nothing is trimmed or type converted.
"""

import csv
import io
from typing import BinaryIO, Iterator, List, Optional, TextIO, Tuple, Union

from csv2json.exceptions import EndOfInput, FormatError

DEFAULT_ENCODING = 'utf-8-sig'

CSVSource = Union[bytes, bytearray, str, BinaryIO, TextIO]


class CommaDialect(csv.Dialect):
    """RFC 4180 style dialect: comma separated, double-quote quoting, strict"""
    delimiter = ','
    quotechar = '"'
    escapechar = None
    doublequote = True
    skipinitialspace = False
    lineterminator = '\r\n'
    quoting = csv.QUOTE_MINIMAL
    strict = True


def _open_text(source: CSVSource, encoding: str) -> Tuple[TextIO, Optional[io.TextIOWrapper]]:
    """
    Wrap a source as a text stream suitable for csv.reader

    Returns the text stream and, when one had to be created, the
    TextIOWrapper that must be detached once reading is done so the
    caller's binary stream is left open.
    """
    if isinstance(source, str):
        return io.StringIO(source, newline=''), None
    if isinstance(source, (bytes, bytearray)):
        source = io.BytesIO(bytes(source))
    if isinstance(source, io.TextIOBase):
        return source, None
    wrapper = io.TextIOWrapper(source, encoding=encoding, newline='')
    return wrapper, wrapper


def _normalize(row: List[str]) -> List[str]:
    # quoted fields keep embedded line breaks; store them as LF
    return [field.replace('\r\n', '\n') if '\r' in field else field for field in row]


class CSVReader:
    """
    Single-pass reader over one CSV input

    The first non-blank row is the header. Iterating the reader yields the
    remaining rows; once exhausted it cannot be restarted.

    Usage:
        reader = CSVReader(stream)
        header = reader.read_header()
        for row in reader:
            ...
    """

    def __init__(self, source: CSVSource, encoding: str = DEFAULT_ENCODING):
        self.encoding = encoding
        self._text, self._wrapper = _open_text(source, encoding)
        self._reader = csv.reader(self._text, dialect=CommaDialect)
        self._consumed = False
        self.header: Optional[List[str]] = None
        self.row_index = -1

    @property
    def line_num(self) -> int:
        """Physical line number of the last line read"""
        return self._reader.line_num

    def _next_row(self) -> Optional[List[str]]:
        while True:
            try:
                row = next(self._reader)
            except StopIteration:
                return None
            except csv.Error as e:
                raise FormatError(
                    f"malformed CSV on line {self.line_num}: {e}",
                    row_index=self.row_index + 1,
                    line=self.line_num
                ) from e
            except UnicodeDecodeError as e:
                raise FormatError(
                    f"input is not valid {self.encoding} near line {self.line_num + 1}: {e.reason}",
                    row_index=self.row_index + 1,
                    line=self.line_num + 1
                ) from e
            if row:
                self.row_index += 1
                return _normalize(row)

    def read_header(self) -> List[str]:
        """
        Read the header row

        Raises:
            EndOfInput: If the input contains no rows at all
            FormatError: If the header line itself is malformed
        """
        if self.header is not None:
            return self.header
        try:
            row = self._next_row()
        except FormatError:
            self.close()
            raise
        if row is None:
            self.close()
            raise EndOfInput()
        self.header = row
        return row

    def __iter__(self) -> Iterator[List[str]]:
        if self._consumed:
            raise RuntimeError("CSVReader is single-pass and has already been iterated")
        self._consumed = True
        return self._rows()

    def _rows(self) -> Iterator[List[str]]:
        try:
            self.read_header()
            while True:
                row = self._next_row()
                if row is None:
                    return
                yield row
        finally:
            self.close()

    def close(self) -> None:
        """Release the text wrapper without closing the caller's stream"""
        if self._wrapper is not None:
            wrapper, self._wrapper = self._wrapper, None
            try:
                wrapper.detach()
            except ValueError:
                # already detached or closed by the caller
                pass


def parse_csv(source: CSVSource, encoding: str = DEFAULT_ENCODING) -> Iterator[List[str]]:
    """
    Parse CSV input into a lazy sequence of rows, header first

    The header is read eagerly so that empty input fails immediately;
    the remaining rows are produced on demand.

    Args:
        source: Bytes, text, or a binary/text stream
        encoding: Encoding used to decode binary input

    Returns:
        Single-pass iterator of rows (lists of field strings)

    Raises:
        EndOfInput: If the input contains no rows
        FormatError: On malformed quoting or undecodable bytes
    """
    reader = CSVReader(source, encoding=encoding)
    header = reader.read_header()
    rows = iter(reader)

    def _chain() -> Iterator[List[str]]:
        yield header
        yield from rows

    return _chain()


def read_table(source: CSVSource, encoding: str = DEFAULT_ENCODING) -> Tuple[List[str], Iterator[List[str]]]:
    """Return the header and a lazy iterator over the data rows"""
    reader = CSVReader(source, encoding=encoding)
    header = reader.read_header()
    return header, iter(reader)
