"""Lenient delimited-text scanning for marketplace exports.

Exports carry quoted fields with embedded commas, doubled quotes and
multi-paragraph descriptions, so a plain ``str.split`` on newlines breaks
records apart. Both scanners here never raise on malformed input: an
unterminated quote simply swallows the rest of the text into the current
record or field.
"""
from __future__ import annotations

from typing import List

QUOTE = '"'


def split_records(text: str) -> List[str]:
    """Split full file text into logical records.

    Newlines inside quoted values stay in the record. Doubled quotes inside a
    quoted value are kept raw so :func:`split_fields` can decode them.
    Carriage returns are dropped. The header record is returned too; callers
    discard index 0.
    """
    records: List[str] = []
    current: List[str] = []
    in_quotes = False
    i = 0
    n = len(text)

    while i < n:
        ch = text[i]
        if ch == QUOTE:
            if in_quotes and i + 1 < n and text[i + 1] == QUOTE:
                current.append(QUOTE * 2)
                i += 2
                continue
            in_quotes = not in_quotes
            current.append(ch)
        elif ch == "\n" and not in_quotes:
            record = "".join(current).strip()
            if record:
                records.append(record)
            current = []
        elif ch == "\r":
            pass
        else:
            current.append(ch)
        i += 1

    record = "".join(current).strip()
    if record:
        records.append(record)
    return records


def split_fields(record: str) -> List[str]:
    """Split one logical record into unescaped field values.

    No field-count validation happens here; short rows are the row mapper's
    concern.
    """
    fields: List[str] = []
    current: List[str] = []
    in_quotes = False
    i = 0
    n = len(record)

    while i < n:
        ch = record[i]
        if ch == QUOTE:
            if in_quotes and i + 1 < n and record[i + 1] == QUOTE:
                current.append(QUOTE)
                i += 2
                continue
            in_quotes = not in_quotes
        elif ch == "," and not in_quotes:
            fields.append("".join(current))
            current = []
        else:
            current.append(ch)
        i += 1

    fields.append("".join(current))
    return fields


def iter_rows(text: str, skip_header: bool = True) -> List[List[str]]:
    """Records of ``text`` decoded into fields, header dropped by default."""
    records = split_records(text)
    if skip_header:
        records = records[1:]
    return [split_fields(r) for r in records]
