"""Quote-aware record parsing for exported Testpad CSV files."""

from __future__ import annotations

import re
from typing import Iterable, Iterator, List, Optional, Tuple

from .errors import ConvertException
from .schemas import ColumnSchema, OutlineEntry
from .utils import split_naive, strip_newline


DELIMITER = ","
QUOTE = '"'
INDENT_COLUMN = "indent"
TEXT_COLUMN = "text"

_INDENT_RE = re.compile(r"[0-9]+")
# Deepest outline level accepted; deeper indents are syntax errors
MAX_INDENT = 1024


class PhysicalLines:
    """Line source that remembers the 1-based number of the last line read."""

    def __init__(self, lines: Iterable[str]):
        self._lines: Iterator[str] = iter(lines)
        self.line_index = 0

    def read(self) -> Optional[str]:
        line = next(self._lines, None)
        if line is None:
            return None
        self.line_index += 1
        return strip_newline(line)


def split_line(line: str, delimiter: str = DELIMITER, quote: str = QUOTE) -> List[str]:
    """
    Split a line on the delimiter, ignoring delimiters between quote pairs.

    Quote characters stay in the field text. An odd number of quotes
    yields an empty list: the record continues on the next physical line.
    """
    delimiters: List[int] = []
    quotes: List[int] = []
    for index, char in enumerate(line):
        if char == delimiter:
            delimiters.append(index)
        elif char == quote:
            quotes.append(index)

    if not delimiters:
        return [line]
    if len(quotes) % 2:
        return []

    for opening, closing in zip(quotes[::2], quotes[1::2]):
        delimiters = [index for index in delimiters if not opening < index < closing]

    fields: List[str] = []
    start = 0
    for index in delimiters:
        fields.append(line[start:index])
        start = index + 1
    fields.append(line[start:])
    return fields


def assemble_record(
    first_line: str,
    line_index: int,
    lines: PhysicalLines,
    field_count: int,
    path: str,
) -> Tuple[List[str], str]:
    """
    Join physical lines until they split into exactly ``field_count`` fields.

    Returns:
        (fields, raw_record_text)

    Raises:
        ConvertException: the source ran out first, or the record has too many fields
    """
    raw = first_line
    fields = split_line(raw)
    while len(fields) < field_count:
        line = lines.read()
        if line is None:
            raise ConvertException.syntax(path, line_index, raw)
        raw = f"{raw}\n{line}"
        fields = split_line(raw)

    if len(fields) != field_count:
        raise ConvertException.syntax(path, line_index, raw)
    return fields, raw


def match_schema_line(line: str) -> Optional[ColumnSchema]:
    """Return column positions if the line names both indent and text columns."""
    fields = split_naive(line, DELIMITER)
    if INDENT_COLUMN not in fields:
        return None
    indent_index = fields.index(INDENT_COLUMN)
    try:
        text_index = fields.index(TEXT_COLUMN, indent_index + 1)
    except ValueError:
        return None
    return ColumnSchema(
        indent_index=indent_index,
        text_index=text_index,
        field_count=len(fields),
    )


def locate_schema(lines: PhysicalLines) -> Tuple[Optional[ColumnSchema], Optional[str]]:
    """
    Skip the preamble and find the last of consecutive schema lines.

    Returns:
        (schema, first_data_line); schema is None when no schema line exists,
        first_data_line is None when the file ends right after the schema.
    """
    schema: Optional[ColumnSchema] = None
    line = lines.read()
    while line is not None:
        candidate = match_schema_line(line)
        if candidate is not None:
            schema = candidate
        elif schema is not None:
            return schema, line
        line = lines.read()
    return schema, None


def parse_entry(
    fields: List[str],
    schema: ColumnSchema,
    path: str,
    line_index: int,
    raw: str,
) -> OutlineEntry:
    """Build an outline entry from an assembled record."""
    try:
        indent = fields[schema.indent_index]
        text = fields[schema.text_index]
    except IndexError:
        raise ConvertException.syntax(path, line_index, raw) from None

    if (
        not _INDENT_RE.fullmatch(indent)
        or len(indent.lstrip("0")) > len(str(MAX_INDENT))
        or int(indent) > MAX_INDENT
    ):
        raise ConvertException.syntax(path, line_index, raw)
    return OutlineEntry(depth=int(indent), text=text)
