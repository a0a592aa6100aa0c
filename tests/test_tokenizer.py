import pytest

from playlist_csv.tokenizer import parse, scan, to_csv


@pytest.mark.parametrize("text", [
    "a,b\nc,d\n",
    "a,b\r\nc,d\r\n",
    "a,b\rc,d\r",
    "a,b\r\nc,d",
    "a,b\nc,d\r\n",
])
def test_line_endings_are_interchangeable(text):
    assert parse(text) == [["a", "b"], ["c", "d"]]


def test_quoted_delimiter_kept_whole():
    assert parse('a,"b,c",d') == [["a", "b,c", "d"]]


def test_doubled_quotes_collapse():
    assert parse('"she said ""hi"""') == [['she said "hi"']]


def test_quoted_newline_stays_in_field():
    assert parse('"line1\nline2",x') == [["line1\nline2", "x"]]
    assert parse('"line1\r\nline2",x\r\n') == [["line1\r\nline2", "x"]]


def test_blank_lines_are_skipped():
    assert parse("a,b\n\nc,d\n") == [["a", "b"], ["c", "d"]]
    assert parse("\n\r\n\na,b\n\n\n") == [["a", "b"]]


def test_trailing_delimiter_gives_empty_field():
    assert parse("a,b,\n") == [["a", "b", ""]]


def test_lone_delimiter_line_gives_two_empty_fields():
    assert parse(",\n") == [["", ""]]


def test_last_row_without_newline():
    assert parse("a,b") == [["a", "b"]]


def test_empty_input():
    assert parse("") == []
    assert parse("\r\n\r\n") == []


def test_ragged_rows_are_kept():
    result = scan("a,b,c\nd\ne,f\n")
    assert result.rows == [["a", "b", "c"], ["d"], ["e", "f"]]
    assert result.max_columns == 3
    assert result.ragged_rows == 2


def test_empty_quoted_field_inside_row():
    assert parse('a,"",b\n') == [["a", "", "b"]]


def test_empty_quoted_line_produces_no_row():
    # the quotes leave nothing buffered, so the newline is swallowed like a blank line
    assert parse('""\na\n') == [["a"]]


def test_text_after_closing_quote_joins_field():
    assert parse('"ab"cd,e\n') == [["abcd", "e"]]


def test_quote_mid_field_enters_quoted_mode():
    result = scan('ab"c,d"e,f\n')
    assert result.rows == [["abc,de", "f"]]
    assert result.stray_quotes == 1
    assert result.unterminated_quote is False


def test_unterminated_quote_keeps_preceding_fields():
    result = scan('a,"b')
    assert result.rows == [["a", "b"]]
    assert result.unterminated_quote is True


def test_unterminated_quote_swallows_rest_of_input():
    assert parse('a,"b\nc,d\n') == [["a", "b\nc,d\n"]]


def test_custom_delimiter():
    assert parse("a\tb\t\"c\td\"\n", delimiter="\t") == [["a", "b", "c\td"]]
    assert parse("a,b;c\n", delimiter=";") == [["a,b", "c"]]


@pytest.mark.parametrize("delimiter", ["", ",,", '"', "\n", "\r"])
def test_invalid_delimiter(delimiter):
    with pytest.raises(ValueError):
        parse("a,b", delimiter=delimiter)


def test_reparse_simple_rows():
    rows = [["title", "url"], ["one", "two"], ["three", "", "four"]]
    assert parse(to_csv(rows)) == rows


def test_to_csv_quotes_special_fields():
    rows = [["a,b", 'say "x"', "l1\nl2"]]
    assert to_csv(rows) == '"a,b","say ""x""","l1\nl2"\n'
    assert parse(to_csv(rows)) == rows


def test_parse_calls_are_independent():
    assert parse('"open') == [["open"]]
    assert parse("a,b\n") == [["a", "b"]]
