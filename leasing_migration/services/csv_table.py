"""Delimited text codec for the intermediate vehicle table.

The writer quotes only when it has to: a value containing a quote, comma or
line break is wrapped in quotes and its quotes are doubled. ``parse_table`` is the
exact inverse, including quoted fields that span several lines.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Sequence

from leasing_migration.parsers.vehicle_export import ColumnSet

PRIORITY_COLUMNS = ("Title", "Image URL", "Brand", "Category", "modello", "versione", "canone_mensile", "sku")

DELIMITER = ","
QUOTE = '"'
NEEDS_QUOTES = (QUOTE, DELIMITER, "\n", "\r")


def resolve_column_order(columns: Iterable[str], priority: Sequence[str] = PRIORITY_COLUMNS) -> List[str]:
    if isinstance(columns, ColumnSet):
        return columns.ordered(priority)
    return ColumnSet(columns).ordered(priority)


def escape_field(value: Any) -> str:
    if value is None:
        return ""
    text = str(value).replace(QUOTE, QUOTE * 2)
    if any(token in text for token in NEEDS_QUOTES):
        text = f"{QUOTE}{text}{QUOTE}"
    return text


def serialize(
    records: Iterable[Mapping[str, Any]],
    columns: Iterable[str],
    priority: Sequence[str] = PRIORITY_COLUMNS,
) -> str:
    header = resolve_column_order(columns, priority)
    lines = [DELIMITER.join(escape_field(name) for name in header)]
    for record in records:
        lines.append(DELIMITER.join(escape_field(record.get(name)) for name in header))
    return "\n".join(lines)


def write_table(path: str | Path, content: str) -> Path:
    """Write ``content`` so that ``path`` is either untouched or complete."""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", dir=target.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
            handle.write(content)
        os.replace(tmp_name, target)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    return target


def _scan_records(content: str) -> List[List[str]]:
    records: List[List[str]] = []
    fields: List[str] = []
    buffer: List[str] = []
    in_quotes = False
    index = 0
    length = len(content)

    while index < length:
        char = content[index]
        if in_quotes:
            if char == QUOTE:
                if index + 1 < length and content[index + 1] == QUOTE:
                    buffer.append(QUOTE)
                    index += 2
                    continue
                in_quotes = False
            else:
                buffer.append(char)
        elif char == QUOTE:
            in_quotes = True
        elif char == DELIMITER:
            fields.append("".join(buffer))
            buffer = []
        elif char == "\n":
            fields.append("".join(buffer))
            records.append(fields)
            fields, buffer = [], []
        elif char == "\r" and index + 1 < length and content[index + 1] == "\n":
            pass
        else:
            buffer.append(char)
        index += 1

    if buffer or fields:
        fields.append("".join(buffer))
        records.append(fields)

    return [fields for fields in records if fields != [""]]


def parse_table(content: str) -> List[Dict[str, str]]:
    """Parse text produced by :func:`serialize` back into one dict per row."""
    scanned = _scan_records(content)
    if not scanned:
        return []

    header = [name.strip() for name in scanned[0]]
    rows: List[Dict[str, str]] = []
    for fields in scanned[1:]:
        rows.append({name: fields[i] if i < len(fields) else "" for i, name in enumerate(header)})
    return rows
