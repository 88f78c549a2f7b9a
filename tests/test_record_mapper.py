import pytest

from csv2json.exceptions import ConfigurationError, FormatError
from csv2json.processors.record_mapper import MismatchPolicy, bind_row, map_records


class TestMapRecords:
    """Header binding"""

    def test_keys_follow_header_order(self):
        records = list(map_records(['a', 'b', 'c'], [['1', '2', '3']]))
        assert records == [{'a': '1', 'b': '2', 'c': '3'}]
        assert list(records[0].keys()) == ['a', 'b', 'c']

    def test_values_are_not_converted(self):
        records = list(map_records(['n', 'price', 'flag', 'empty'], [['30', '19.99', 'true', '']]))
        assert records[0] == {'n': '30', 'price': '19.99', 'flag': 'true', 'empty': ''}
        assert all(isinstance(v, str) for v in records[0].values())

    def test_row_order_is_preserved(self):
        rows = [[str(i)] for i in range(50, 0, -1)]
        records = list(map_records(['id'], rows))
        assert [r['id'] for r in records] == [str(i) for i in range(50, 0, -1)]

    def test_no_rows(self):
        assert list(map_records(['a', 'b'], [])) == []

    def test_duplicate_header_last_value_wins(self):
        record = bind_row(['a', 'b', 'a'], ['1', '2', '3'])
        assert record == {'a': '3', 'b': '2'}
        assert list(record.keys()) == ['a', 'b']

    def test_accepts_lazy_rows(self):
        rows = (['x', 'y'] for _ in range(3))
        assert len(list(map_records(['a', 'b'], rows))) == 3


class TestRejectPolicy:
    """Field-count mismatches under the default policy"""

    def test_reports_every_mismatched_row(self):
        with pytest.raises(FormatError, match="wrong number of fields") as exc_info:
            list(map_records(['name', 'age'], [['Alice', '30', 'extra'], ['Bob']]))

        error = exc_info.value
        assert error.row_indices == [1, 2]
        assert [(m.expected, m.actual) for m in error.mismatches] == [(2, 3), (2, 1)]
        assert error.row_index == 1
        assert error.expected == 2
        assert error.actual == 3

    def test_valid_rows_after_a_mismatch_are_not_reported(self):
        rows = [['1', '2'], ['3'], ['4', '5'], ['6', '7', '8']]
        with pytest.raises(FormatError) as exc_info:
            list(map_records(['a', 'b'], rows))
        assert exc_info.value.row_indices == [2, 4]

    def test_records_before_the_mismatch_are_yielded(self):
        records = map_records(['a', 'b'], [['1', '2'], ['3']])
        assert next(records) == {'a': '1', 'b': '2'}
        with pytest.raises(FormatError):
            next(records)

    def test_no_records_after_the_mismatch(self):
        seen = []
        with pytest.raises(FormatError):
            for record in map_records(['a'], [['1'], ['2', 'x'], ['3']]):
                seen.append(record)
        assert seen == [{'a': '1'}]

    def test_parse_error_while_collecting_mismatches(self):
        parse_error = FormatError("malformed CSV on line 4", row_index=3, line=4)

        def rows():
            yield ['1', '2', '3']
            yield ['4']
            raise parse_error

        with pytest.raises(FormatError) as exc_info:
            list(map_records(['a', 'b'], rows()))
        assert exc_info.value.row_indices == [1, 2]
        assert exc_info.value.__cause__ is parse_error

    def test_message_names_rows_and_counts(self):
        with pytest.raises(FormatError) as exc_info:
            list(map_records(['a', 'b'], [['1', '2', '3']]))
        assert "row 1: expected 2 fields, got 3" in str(exc_info.value)


class TestPadTruncatePolicy:
    """Best-effort alignment"""

    def test_short_rows_are_padded(self):
        records = list(map_records(['a', 'b', 'c'], [['1']], MismatchPolicy.PAD_TRUNCATE))
        assert records == [{'a': '1', 'b': '', 'c': ''}]

    def test_long_rows_are_truncated(self):
        records = list(map_records(['a'], [['1', '2', '3']], MismatchPolicy.PAD_TRUNCATE))
        assert records == [{'a': '1'}]

    def test_mismatch_scenario(self):
        records = list(map_records(
            ['name', 'age'],
            [['Alice', '30', 'extra'], ['Bob']],
            MismatchPolicy.PAD_TRUNCATE
        ))
        assert records == [{'name': 'Alice', 'age': '30'}, {'name': 'Bob', 'age': ''}]


class TestMismatchPolicyParse:

    def test_parse_values(self):
        assert MismatchPolicy.parse('reject') is MismatchPolicy.REJECT
        assert MismatchPolicy.parse('PAD_TRUNCATE') is MismatchPolicy.PAD_TRUNCATE
        assert MismatchPolicy.parse(MismatchPolicy.REJECT) is MismatchPolicy.REJECT

    def test_unknown_value(self):
        with pytest.raises(ConfigurationError, match="Unknown mismatch policy"):
            MismatchPolicy.parse('pad')
