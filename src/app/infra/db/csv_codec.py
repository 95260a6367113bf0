# src/app/infra/db/csv_codec.py
"""
CSV encoding for record collections.

A collection is a header line followed by one line per record. Values are
always strings; quoting follows RFC 4180 (minimal quoting, doubled quote
characters, CRLF line endings), so delimiters, quotes and line breaks inside
values survive a decode/encode round trip. Records must carry at least one
field; a field-less record has no CSV representation.

An empty collection encodes to the empty string. Decoding the empty string
or a header-only blob yields an empty list.
"""
from __future__ import annotations

import csv
import io
from typing import Iterable, Sequence

from src.app.domain.errors import CodecError
from src.app.domain.models import Record

_DIALECT = {
    "delimiter": ",",
    "quotechar": '"',
    "lineterminator": "\r\n",
    "quoting": csv.QUOTE_MINIMAL,
}


def decode(text: str) -> list[Record]:
    """Parse a CSV blob into records keyed by the header row."""
    if text.startswith("\ufeff"):
        text = text[1:]
    if not text.strip():
        return []

    reader = csv.reader(io.StringIO(text, newline=""), strict=True, **_DIALECT)
    records: list[Record] = []
    try:
        header = next(reader)
        if len(set(header)) != len(header):
            raise CodecError("Duplicate column names in header", line=1)
        for row in reader:
            if not row:
                continue
            if len(row) != len(header):
                raise CodecError(
                    f"Expected {len(header)} columns, found {len(row)}",
                    line=reader.line_num,
                )
            records.append(dict(zip(header, row)))
    except csv.Error as e:
        raise CodecError(f"Malformed CSV: {e}", line=reader.line_num) from e
    return records


def encode(records: Sequence[Record]) -> str:
    """Serialize records header-first; the header comes from the first record."""
    if not records:
        return ""

    header = list(records[0].keys())
    if not header:
        raise CodecError("Records must have at least one field")
    expected = set(header)
    buffer = io.StringIO(newline="")
    writer = csv.writer(buffer, **_DIALECT)
    writer.writerow(header)
    for index, record in enumerate(records):
        if set(record.keys()) != expected:
            raise CodecError(f"Record {index} does not match header fields {header}")
        writer.writerow([_as_text(record[name]) for name in header])
    return buffer.getvalue()


def _as_text(value: object) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def encode_bytes(records: Iterable[Record]) -> bytes:
    return encode(list(records)).encode("utf-8")


def decode_bytes(body: bytes) -> list[Record]:
    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError as e:
        raise CodecError(f"Collection is not valid UTF-8: {e}") from e
    return decode(text)
