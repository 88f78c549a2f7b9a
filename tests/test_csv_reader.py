"""
Tests for the CSV reader.

Tests:
1. Quoting, escaping and embedded line breaks
2. Line ending normalization
3. Whitespace preservation
4. Empty input and blank lines
5. Malformed input
6. Stream handling (lazy, single-pass, caller's stream left open)
"""

import io

import pytest

from csv2json.exceptions import EndOfInput, FormatError
from csv2json.processors.csv_reader import CSVReader, parse_csv, read_table


class TestQuoting:
    """Quoted fields and escapes"""

    def test_quoted_comma_and_doubled_quote(self):
        rows = list(parse_csv('"x","a,b","y""z"'))
        assert rows == [['x', 'a,b', 'y"z']]

    def test_quoted_field_with_embedded_newline(self):
        rows = list(parse_csv('name,note\n"Alice","line1\nline2"\n'))
        assert rows[1] == ['Alice', 'line1\nline2']

    def test_embedded_crlf_is_normalized(self):
        rows = list(parse_csv('name,note\r\n"Alice","line1\r\nline2"\r\n'))
        assert rows[1] == ['Alice', 'line1\nline2']

    def test_quoted_empty_field(self):
        rows = list(parse_csv('a,b\n"",x\n'))
        assert rows[1] == ['', 'x']


class TestLineEndings:
    """CRLF and LF both end a record"""

    def test_lf(self):
        assert list(parse_csv('a,b\n1,2\n')) == [['a', 'b'], ['1', '2']]

    def test_crlf(self):
        assert list(parse_csv('a,b\r\n1,2\r\n')) == [['a', 'b'], ['1', '2']]

    def test_no_trailing_newline(self):
        assert list(parse_csv('a,b\n1,2')) == [['a', 'b'], ['1', '2']]

    def test_mixed_line_endings(self):
        assert list(parse_csv(b'a,b\r\n1,2\n3,4\r\n')) == [['a', 'b'], ['1', '2'], ['3', '4']]


class TestWhitespace:
    """Unquoted whitespace is preserved"""

    def test_leading_and_trailing_spaces_kept(self):
        rows = list(parse_csv('name,age\n  Alice  ,  30  \n'))
        assert rows[1] == ['  Alice  ', '  30  ']

    def test_spaces_around_header_kept(self):
        header, _ = read_table(' name , age\n')
        assert header == [' name ', ' age']


class TestEmptyInput:
    """Empty input policy"""

    def test_zero_bytes_raises_end_of_input_immediately(self):
        with pytest.raises(EndOfInput, match="EOF"):
            parse_csv(b'')

    def test_empty_string_raises_end_of_input(self):
        with pytest.raises(EndOfInput):
            parse_csv('')

    def test_blank_lines_only_raises_end_of_input(self):
        with pytest.raises(EndOfInput):
            parse_csv('\n\r\n\n')

    def test_header_only(self):
        assert list(parse_csv('name,age,city')) == [['name', 'age', 'city']]

    def test_blank_lines_between_rows_are_skipped(self):
        rows = list(parse_csv('a,b\n\n1,2\n\n\n3,4\n'))
        assert rows == [['a', 'b'], ['1', '2'], ['3', '4']]


class TestMalformedInput:
    """Malformed quoting and undecodable bytes"""

    def test_unterminated_quote(self):
        rows = parse_csv('a,b\n"abc,d\n')
        with pytest.raises(FormatError, match="malformed CSV") as exc_info:
            list(rows)
        assert exc_info.value.row_index == 1

    def test_text_after_closing_quote_in_header(self):
        with pytest.raises(FormatError):
            parse_csv('"ab"c,d\n1,2\n')

    def test_text_after_closing_quote_in_row(self):
        with pytest.raises(FormatError) as exc_info:
            list(parse_csv('a,b\n1,2\n"x"y,3\n'))
        assert exc_info.value.line == 3

    def test_invalid_utf8(self):
        with pytest.raises(FormatError, match="not valid"):
            list(parse_csv(b'a,b\n\xff\xfe,1\n'))


class TestEncoding:
    """Decoding of binary input"""

    def test_utf8_bom_is_stripped(self):
        header, _ = read_table(b'\xef\xbb\xbfname,age\nAlice,30\n')
        assert header == ['name', 'age']

    def test_four_byte_characters(self):
        rows = list(parse_csv('emoji\n\U0001F600\U00010348\n'.encode('utf-8')))
        assert rows[1] == ['\U0001F600\U00010348']

    def test_cjk_and_cyrillic(self):
        rows = list(parse_csv('name,city\n名前,東京\nПривет,Москва'.encode('utf-8')))
        assert rows[1:] == [['名前', '東京'], ['Привет', 'Москва']]

    def test_custom_encoding(self):
        rows = list(parse_csv('name\nJosé\n'.encode('latin-1'), encoding='latin-1'))
        assert rows[1] == ['José']


class TestStreams:
    """Stream sources and iteration"""

    def test_binary_stream_is_left_open(self):
        stream = io.BytesIO(b'a,b\n1,2\n')
        rows = list(parse_csv(stream))
        assert rows == [['a', 'b'], ['1', '2']]
        assert not stream.closed

    def test_binary_stream_left_open_after_error(self):
        stream = io.BytesIO(b'a,b\n"1,2\n')
        with pytest.raises(FormatError):
            list(parse_csv(stream))
        assert not stream.closed

    def test_text_stream(self):
        rows = list(parse_csv(io.StringIO('a,b\n1,2\n', newline='')))
        assert rows == [['a', 'b'], ['1', '2']]

    def test_rows_are_single_pass(self):
        rows = parse_csv('a\n1\n2\n')
        assert list(rows) == [['a'], ['1'], ['2']]
        assert list(rows) == []

    def test_reader_cannot_be_iterated_twice(self):
        reader = CSVReader('a\n1\n')
        assert list(reader) == [['1']]
        with pytest.raises(RuntimeError, match="single-pass"):
            iter(reader)

    def test_rows_are_lazy(self):
        # the malformed row is only reached when consumed
        rows = parse_csv('a,b\n1,2\n"3,4\n')
        assert next(rows) == ['a', 'b']
        assert next(rows) == ['1', '2']
        with pytest.raises(FormatError):
            next(rows)

    def test_reader_tracks_row_index(self):
        reader = CSVReader('a\n\n1\n2\n')
        assert reader.read_header() == ['a']
        assert reader.row_index == 0
        list(reader)
        assert reader.row_index == 2
