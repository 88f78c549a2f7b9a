"""
csv2json exceptions

Error taxonomy shared by the conversion pipeline, the store port and the CLI.
"""

from dataclasses import dataclass
from typing import List, Optional


class Csv2JsonError(Exception):
    """Base exception for csv2json"""
    pass


class EndOfInput(Csv2JsonError):
    """Raised when the input holds no readable rows (not even a header)"""

    def __init__(self, message: str = "EOF: input contains no CSV rows"):
        super().__init__(message)


@dataclass(frozen=True)
class RowMismatch:
    """A data row whose field count differs from the header"""
    row_index: int
    expected: int
    actual: int

    def __str__(self) -> str:
        return f"row {self.row_index}: expected {self.expected} fields, got {self.actual}"


class FormatError(Csv2JsonError):
    """
    Raised on malformed CSV input

    Covers quoting errors, undecodable bytes and row/header field-count
    mismatches. ``row_index`` counts logical rows with the header at 0;
    ``line`` is the physical line number reported by the reader.
    """

    def __init__(
        self,
        message: str,
        row_index: Optional[int] = None,
        line: Optional[int] = None,
        expected: Optional[int] = None,
        actual: Optional[int] = None,
        mismatches: Optional[List[RowMismatch]] = None
    ):
        super().__init__(message)
        self.row_index = row_index
        self.line = line
        self.expected = expected
        self.actual = actual
        self.mismatches = list(mismatches or [])

    @classmethod
    def from_mismatches(cls, mismatches: List[RowMismatch]) -> 'FormatError':
        """Build a single error describing every mismatched row"""
        first = mismatches[0]
        details = "; ".join(str(m) for m in mismatches)
        return cls(
            f"wrong number of fields ({details})",
            row_index=first.row_index,
            expected=first.expected,
            actual=first.actual,
            mismatches=mismatches
        )

    @property
    def row_indices(self) -> List[int]:
        if self.mismatches:
            return [m.row_index for m in self.mismatches]
        return [self.row_index] if self.row_index is not None else []


class StorageError(Csv2JsonError):
    """Raised when the configured store fails to save or retrieve"""
    pass


class StoreNotConfiguredError(Csv2JsonError):
    """Raised when a retrieval is attempted with no store configured"""

    def __init__(self, message: str = "database not initialized"):
        super().__init__(message)


class NotFoundError(Csv2JsonError):
    """Raised when no stored batch has the requested identifier"""

    def __init__(self, batch_id):
        super().__init__(f"no CSV data found with id {batch_id}")
        self.batch_id = batch_id


class ConfigurationError(Csv2JsonError):
    """Raised on invalid or unreadable configuration"""
    pass
