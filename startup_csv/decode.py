"""
Decoder for comma separated startup record files.

Pipeline:
- split the text into lines (LF or CRLF, never a lone CR)
- split each line into fields, honoring double-quote quoting
- normalize the header line into lookup keys
- pair every data line with the header keys

Malformed input never raises. Anything odd is recorded as a warning in the
report and decoding carries on. The only exception is strict mode, which
rejects header names that collide after normalization.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Optional

from .rules import DELIMITER, MISSING_PLACEHOLDER, QUOTE
from .upload import read_upload_text

logger = logging.getLogger(__name__)

_LINE_BREAK = re.compile(r"\r?\n")
_WHITESPACE = re.compile(r"\s+")
_NON_KEY = re.compile(r"[^a-z0-9]")


class HeaderKeyCollisionError(ValueError):
    """Raised in strict mode when two header names normalize to the same key."""

    def __init__(self, collisions: Dict[str, List[str]]):
        self.collisions = collisions
        details = "; ".join(f"{key!r} <- {names}" for key, names in collisions.items())
        super().__init__(f"Header names collide after normalization: {details}")


def split_lines(text: str) -> List[str]:
    return _LINE_BREAK.split(text.strip())


def scan_fields(line: str) -> tuple[List[str], bool]:
    """
    Split one line into trimmed fields.

    Returns the fields and whether the line ended inside an open quote. An
    unterminated quote simply captures the rest of the line.
    """
    fields: List[str] = []
    buf: List[str] = []
    in_quotes = False
    i = 0
    n = len(line)

    while i < n:
        ch = line[i]
        if ch == QUOTE:
            if in_quotes and i + 1 < n and line[i + 1] == QUOTE:
                # doubled quote inside a quoted field is a literal quote
                buf.append(QUOTE)
                i += 2
                continue
            in_quotes = not in_quotes
        elif ch == DELIMITER and not in_quotes:
            fields.append("".join(buf).strip())
            buf = []
        else:
            buf.append(ch)
        i += 1

    fields.append("".join(buf).strip())
    return fields, in_quotes


def split_fields(line: str) -> List[str]:
    fields, _ = scan_fields(line)
    return fields


def header_key(display: str) -> str:
    """Lookup key for a header: lower case, ASCII letters and digits only."""
    return _NON_KEY.sub("", _WHITESPACE.sub("", display.lower()))


def _key_collisions(headers: List[str], keys: List[str]) -> Dict[str, List[str]]:
    seen: Dict[str, List[str]] = {}
    for display, key in zip(headers, keys):
        seen.setdefault(key, []).append(display)
    return {key: names for key, names in seen.items() if len(names) > 1}


def decode_with_report(
    text: str, *, strict: bool = False
) -> tuple[List[str], List[str], List[dict], List[dict]]:
    """
    Decode text into headers, keys, records and a list of warnings.

    Records are dicts of the form {"id": "1", "values": {key: value}} where
    id is the 1-based index of the data row.

    A header line needs a line break after it to count. Blank input or a
    single unterminated line yields an empty result.
    """
    warnings: list[dict] = []

    if "\n" not in text.lstrip():
        warnings.append({
            "row": None,
            "column": None,
            "issue": "insufficient_input",
            "value": None,
            "action": "empty_result",
        })
        logger.debug("decode: fewer than 2 lines, returning empty result")
        return [], [], [], warnings

    lines = split_lines(text)

    headers, unterminated = scan_fields(lines[0])
    if unterminated:
        warnings.append({
            "row": None,
            "column": None,
            "issue": "unterminated_quote",
            "value": lines[0],
            "action": "captured_to_end_of_line",
        })
        logger.warning("decode: unterminated quote in header line")

    keys = [header_key(h) for h in headers]

    collisions = _key_collisions(headers, keys)
    if collisions:
        if strict:
            raise HeaderKeyCollisionError(collisions)
        for key, names in collisions.items():
            warnings.append({
                "row": None,
                "column": key,
                "issue": "header_key_collision",
                "value": ", ".join(names),
                "action": "last_value_wins",
            })
            logger.warning("decode: headers %s share key %r, last value wins", names, key)

    width = len(keys)
    records: list[dict] = []

    for index, line in enumerate(lines[1:]):
        row = index + 1
        values, unterminated = scan_fields(line)

        if unterminated:
            warnings.append({
                "row": row,
                "column": None,
                "issue": "unterminated_quote",
                "value": line,
                "action": "captured_to_end_of_line",
            })
            logger.warning("decode: unterminated quote in row %s", row)

        if len(values) < width:
            warnings.append({
                "row": row,
                "column": None,
                "issue": "row_too_short",
                "value": str(len(values)),
                "action": f"padded_to_{width}",
            })
            logger.warning("decode: row %s has %s fields, expected %s", row, len(values), width)
        elif len(values) > width:
            warnings.append({
                "row": row,
                "column": None,
                "issue": "row_too_long",
                "value": str(len(values)),
                "action": f"truncated_to_{width}",
            })
            logger.warning("decode: row %s has %s fields, expected %s", row, len(values), width)

        mapping: Dict[str, str] = {}
        for pos, key in enumerate(keys):
            mapping[key] = values[pos] if pos < len(values) else ""

        records.append({"id": str(row), "values": mapping})

    logger.debug("decode: %s columns, %s rows, %s warnings", width, len(records), len(warnings))
    return headers, keys, records, warnings


def decode(text: str, *, strict: bool = False) -> tuple[List[str], List[dict]]:
    """Decode text into (header display names, records)."""
    headers, _, records, _ = decode_with_report(text, strict=strict)
    return headers, records


def table_rows(keys: List[str], records: List[dict], placeholder: str = MISSING_PLACEHOLDER) -> List[List[str]]:
    """Cells for a table view, one row per record, placeholder for absent or empty values."""
    return [
        [record["values"].get(key) or placeholder for key in keys]
        for record in records
    ]


def decode_csv_text(
    text: str,
    *,
    strict: bool = False,
    encoding: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Decode text and wrap it in the API's response envelope.
    """
    headers, keys, records, warnings = decode_with_report(text, strict=strict)

    return {
        "result": {
            "headers": headers,
            "keys": keys,
            "records": records,
        },
        "report": {
            "summary": {
                "rows": len(records),
                "columns": len(headers),
                "warnings": len(warnings),
                "strict": strict,
            },
            "encoding": encoding or {},
            "warnings": warnings,
        },
    }


def decode_csv_bytes(raw: bytes, *, strict: bool = False) -> Dict[str, Any]:
    text, enc_report = read_upload_text(raw)
    return decode_csv_text(text, strict=strict, encoding=enc_report)
