"""Tests for quote-aware record parsing."""

import pytest

from testpad_converter.errors import ConvertException
from testpad_converter.parsing import (
    MAX_INDENT,
    PhysicalLines,
    assemble_record,
    locate_schema,
    match_schema_line,
    parse_entry,
    split_line,
)
from testpad_converter.schemas import ColumnSchema


def test_split_line_without_delimiters():
    """Test a line with no commas is one field."""
    assert split_line("plain text") == ["plain text"]
    assert split_line('odd "quote') == ['odd "quote']


def test_split_line_simple():
    """Test splitting unquoted fields."""
    assert split_line("a,b,c") == ["a", "b", "c"]
    assert split_line("a,b,") == ["a", "b", ""]
    assert split_line(",") == ["", ""]


def test_split_line_keeps_quoted_commas():
    """Test commas inside quotes are not separators."""
    assert split_line('1,2,"one, two",x') == ["1", "2", '"one, two"', "x"]
    assert split_line('"a,b","c,d"') == ['"a,b"', '"c,d"']


def test_split_line_field_count_matches_unquoted_commas():
    """Test field count equals unquoted commas plus one."""
    lines = [
        '1,1,"x, y, z",end',
        '"",",",","',
        'a,"b,c",d,"e,f,g",h',
    ]
    for line in lines:
        inside = False
        unquoted = 0
        for char in line:
            if char == '"':
                inside = not inside
            elif char == "," and not inside:
                unquoted += 1
        assert len(split_line(line)) == unquoted + 1


def test_split_line_odd_quotes():
    """Test unbalanced quotes need more input."""
    assert split_line('1,1,"open, text') == []


def test_assemble_record_consumes_nothing_when_complete():
    """Test complete records leave the source untouched."""
    lines = PhysicalLines(["next\n"])
    fields, raw = assemble_record("1,2,x,y", 1, lines, 4, "a.csv")
    assert fields == ["1", "2", "x", "y"]
    assert raw == "1,2,x,y"
    assert lines.line_index == 0
    assert lines.read() == "next"


def test_assemble_record_joins_embedded_line_break():
    """Test a quoted field spanning two physical lines."""
    lines = PhysicalLines(['1,1,x,"hello\n', 'world"\n', "1,2,x,after\n"])
    first = lines.read()
    fields, raw = assemble_record(first, lines.line_index, lines, 4, "a.csv")
    assert fields == ["1", "1", "x", '"hello\nworld"']
    assert raw == '1,1,x,"hello\nworld"'
    assert lines.line_index == 2


def test_assemble_record_exhausted():
    """Test running out of lines reports the starting line."""
    lines = PhysicalLines(["header\n", '1,1,x,"never closed\n', "more\n"])
    lines.read()
    first = lines.read()
    with pytest.raises(ConvertException) as exc_info:
        assemble_record(first, lines.line_index, lines, 4, "a.csv")
    assert exc_info.value.error.line_index == 2
    assert exc_info.value.error.path == "a.csv"


def test_assemble_record_too_many_fields():
    """Test records wider than the schema are errors."""
    lines = PhysicalLines([])
    with pytest.raises(ConvertException):
        assemble_record("1,1,x,y,z", 1, lines, 4, "a.csv")


def test_match_schema_line():
    """Test detecting schema lines."""
    schema = match_schema_line("a,indent,b,text")
    assert schema == ColumnSchema(indent_index=1, text_index=3, field_count=4)

    schema = match_schema_line("indent,text")
    assert (schema.indent_index, schema.text_index, schema.field_count) == (0, 1, 2)

    assert match_schema_line("text,indent") is None
    assert match_schema_line("indented,text") is None
    assert match_schema_line("indent,textual") is None
    assert match_schema_line("1,1,x,hello") is None


def test_locate_schema_takes_last_consecutive_match():
    """Test nested export sections resolve to the last schema line."""
    lines = PhysicalLines([
        "Testpad export\n",
        "project,name\n",
        "a,indent,b,text\n",
        "id,indent,c,text,d\n",
        "1,1,x,hello,z\n",
        "2,2,x,world,z\n",
    ])
    schema, first = locate_schema(lines)
    assert schema.indent_index == 1
    assert schema.text_index == 3
    assert schema.field_count == 5
    assert first == "1,1,x,hello,z"
    assert lines.line_index == 5


def test_locate_schema_missing():
    """Test files without schema lines."""
    schema, first = locate_schema(PhysicalLines(["a,b\n", "1,2\n"]))
    assert schema is None
    assert first is None


def test_locate_schema_at_end_of_file():
    """Test a schema line with no data after it."""
    schema, first = locate_schema(PhysicalLines(["a,indent,b,text\n"]))
    assert schema is not None
    assert first is None


def test_parse_entry():
    """Test building outline entries."""
    schema = ColumnSchema(indent_index=1, text_index=3, field_count=4)
    entry = parse_entry(["1", "3", "x", "deep"], schema, "a.csv", 7, "1,3,x,deep")
    assert entry.depth == 3
    assert entry.text == "deep"


@pytest.mark.parametrize(
    "indent", ["abc", "", "-1", '"2"', "1.5", "1025", "99999999999999999999", "9" * 5000]
)
def test_parse_entry_rejects_bad_indent(indent):
    """Test non-numeric indent values."""
    schema = ColumnSchema(indent_index=1, text_index=3, field_count=4)
    raw = f"1,{indent},x,text"
    with pytest.raises(ConvertException) as exc_info:
        parse_entry(["1", indent, "x", "text"], schema, "a.csv", 7, raw)
    assert exc_info.value.error.line_index == 7
    assert exc_info.value.error.line == raw


def test_parse_entry_accepts_deepest_indent():
    """Test the largest allowed indent."""
    schema = ColumnSchema(indent_index=0, text_index=1, field_count=2)
    entry = parse_entry([str(MAX_INDENT), "deep"], schema, "a.csv", 2, f"{MAX_INDENT},deep")
    assert entry.depth == MAX_INDENT
    assert entry.render() == "\t" * (MAX_INDENT - 1) + "deep\n"
