import json

from csv2json.processors.json_encoder import decode_records, encode_records


def test_empty_sequence_encodes_as_empty_array():
    assert encode_records([]) == b'[]'


def test_compact_output():
    records = [
        {'name': 'Alice', 'age': '30', 'city': 'NYC'},
        {'name': 'Bob', 'age': '25', 'city': 'LA'},
    ]
    assert encode_records(records) == (
        b'[{"name":"Alice","age":"30","city":"NYC"},{"name":"Bob","age":"25","city":"LA"}]'
    )


def test_key_order_is_kept():
    content = encode_records([{'z': '1', 'a': '2', 'm': '3'}])
    assert content == b'[{"z":"1","a":"2","m":"3"}]'


def test_quotes_and_control_characters_are_escaped():
    content = encode_records([{'q': 'say "hi"', 'c': '\x01', 'n': 'a\nb', 'b': 'back\\slash'}])
    assert content == b'[{"q":"say \\"hi\\"","c":"\\u0001","n":"a\\nb","b":"back\\\\slash"}]'
    assert json.loads(content) == [{'q': 'say "hi"', 'c': '\x01', 'n': 'a\nb', 'b': 'back\\slash'}]


def test_non_ascii_is_written_as_utf8():
    content = encode_records([{'name': '名前', 'emoji': '\U0001F600'}])
    assert '名前'.encode('utf-8') in content
    assert '\U0001F600'.encode('utf-8') in content
    assert b'\\u' not in content


def test_indent():
    content = encode_records([{'a': '1'}], indent=2)
    assert content == b'[\n  {\n    "a": "1"\n  }\n]'


def test_accepts_generators():
    records = ({'i': str(i)} for i in range(3))
    assert encode_records(records) == b'[{"i":"0"},{"i":"1"},{"i":"2"}]'


def test_decode_records():
    assert decode_records('[{"name":"José"}]'.encode('utf-8')) == [{'name': 'José'}]
