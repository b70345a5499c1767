"""
CSV tokenizer for UDisc scorecard exports.

Splits raw CSV text into a header row and data rows. Lines are trimmed and
blank lines dropped before tokenizing, so each physical line is one record.
"""

import logging
import re
from typing import List

from disc_tracker.errors import MalformedInput
from disc_tracker.models.scorecard import RawCsvTable


logger = logging.getLogger(__name__)

_LINE_BREAK = re.compile(r'\r?\n')


def split_csv_line(line: str) -> List[str]:
    r'''
    Split one CSV line into fields.

    Any double quote toggles a quoted span, even mid-field, and commas
    inside a span do not split. A doubled quote inside a span is a
    literal quote character. Quote characters themselves are dropped.

    Args:
        line: A single line of CSV text

    Returns:
        List of raw (untrimmed) field values

    Examples:
        >>> split_csv_line('a,"Course, ""The Bend""",b')
        ['a', 'Course, "The Bend"', 'b']
        >>> split_csv_line('Alice,Maple "Hill, North",3')
        ['Alice', 'Maple Hill, North', '3']
    '''
    fields = []
    current = []
    in_quotes = False
    i = 0
    length = len(line)

    while i < length:
        ch = line[i]
        if ch == '"':
            if in_quotes and i + 1 < length and line[i + 1] == '"':
                current.append('"')
                i += 1
            else:
                in_quotes = not in_quotes
        elif ch == ',' and not in_quotes:
            fields.append(''.join(current))
            current = []
        else:
            current.append(ch)
        i += 1

    fields.append(''.join(current))
    return fields


def tokenize(text: str) -> RawCsvTable:
    """
    Tokenize CSV text into headers and row mappings.

    Args:
        text: Full CSV file content

    Returns:
        RawCsvTable with trimmed headers and trimmed row values. Missing
        trailing fields map to "", surplus fields are ignored, and a
        repeated header keeps the value of its last column.

    Raises:
        MalformedInput: If there is no header row or no data rows
    """
    lines = [line.strip() for line in _LINE_BREAK.split(text)]
    lines = [line for line in lines if line]

    if len(lines) < 2:
        raise MalformedInput("CSV appears to have no data rows")

    headers = [h.strip() for h in split_csv_line(lines[0].lstrip('\ufeff'))]
    if not any(headers):
        raise MalformedInput("CSV appears to have no headers")

    rows = []
    for line in lines[1:]:
        values = split_csv_line(line)
        row = {}
        for idx, header in enumerate(headers):
            row[header] = values[idx].strip() if idx < len(values) else ''
        rows.append(row)

    logger.debug("Tokenized CSV: %d columns, %d rows", len(headers), len(rows))
    return RawCsvTable(headers=headers, rows=rows)
