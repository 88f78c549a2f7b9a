"""
Record mapper

Binds the header to each data row and yields one ordered dict per row.
Values stay strings.
"""

from enum import Enum
from typing import Dict, Iterable, Iterator, List

from csv2json.exceptions import ConfigurationError, FormatError, RowMismatch

Record = Dict[str, str]


class MismatchPolicy(str, Enum):
    """What to do with a row whose field count differs from the header"""
    REJECT = "reject"
    PAD_TRUNCATE = "pad_truncate"

    @classmethod
    def parse(cls, value) -> 'MismatchPolicy':
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            allowed = ", ".join(p.value for p in cls)
            raise ConfigurationError(f"Unknown mismatch policy: {value!r} (expected one of {allowed})")


def bind_row(header: List[str], row: List[str]) -> Record:
    """Zip a header with a row; duplicate column names keep the last value"""
    record: Record = {}
    for name, value in zip(header, row):
        record[name] = value
    return record


def _fit(row: List[str], width: int) -> List[str]:
    if len(row) < width:
        return row + [''] * (width - len(row))
    return row[:width]


def map_records(
    header: List[str],
    rows: Iterable[List[str]],
    policy: MismatchPolicy = MismatchPolicy.REJECT
) -> Iterator[Record]:
    """
    Map data rows to records

    Rows are numbered from 1 (the header is row 0). Under REJECT, the first
    mismatched row stops record output; the remaining rows are still read so
    that the raised FormatError lists every mismatched row.

    Args:
        header: Column names
        rows: Data rows, header excluded
        policy: Field-count mismatch policy

    Yields:
        One dict per row, keys in header order

    Raises:
        FormatError: On a field-count mismatch under REJECT, or on malformed
            input reported by the row source
    """
    width = len(header)
    mismatches: List[RowMismatch] = []
    row_iter = iter(rows)

    for row_index, row in enumerate(row_iter, start=1):
        if len(row) == width:
            yield bind_row(header, row)
        elif policy is MismatchPolicy.PAD_TRUNCATE:
            yield bind_row(header, _fit(row, width))
        else:
            mismatches.append(RowMismatch(row_index, width, len(row)))
            break

    if not mismatches:
        return

    try:
        for row_index, row in enumerate(row_iter, start=mismatches[0].row_index + 1):
            if len(row) != width:
                mismatches.append(RowMismatch(row_index, width, len(row)))
    except FormatError as e:
        raise FormatError.from_mismatches(mismatches) from e
    raise FormatError.from_mismatches(mismatches)
