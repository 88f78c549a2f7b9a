"""
JSON encoder

Serializes records as a UTF-8 JSON array of objects.
"""

import json
from typing import Dict, Iterable, List, Optional


def encode_records(records: Iterable[Dict[str, str]], indent: Optional[int] = None) -> bytes:
    """
    Encode records as JSON bytes

    Keys keep their insertion (header) order and values are emitted as JSON
    strings. Non-ASCII text is written as UTF-8 rather than \\u escapes.
    An empty sequence encodes as ``[]``.

    Args:
        records: Records to encode
        indent: Optional indentation for pretty output; compact when None

    Returns:
        UTF-8 encoded JSON array
    """
    data: List[Dict[str, str]] = records if isinstance(records, list) else list(records)
    separators = (',', ':') if indent is None else (',', ': ')
    return json.dumps(data, ensure_ascii=False, indent=indent, separators=separators).encode('utf-8')


def decode_records(content: bytes) -> List[Dict[str, str]]:
    """Decode JSON produced by encode_records back into records"""
    return json.loads(content.decode('utf-8'))
