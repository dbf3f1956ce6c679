"""Result rendering as a table or newline-delimited JSON."""

from __future__ import annotations

import datetime as dt
import json
from collections.abc import Sequence
from enum import Enum
from typing import Any, TextIO

from rich.console import Console
from rich.table import Table
from rich.text import Text

from ghsql.storage.cache import Value

TABLE_MAX_WIDTH = 4096


class Format(str, Enum):
    TABLE = "table"
    JSON = "json"

    @classmethod
    def parse(cls, value: str) -> "Format":
        normalized = value.strip().lower()
        if normalized in {"t", "table"}:
            return cls.TABLE
        if normalized in {"j", "json"}:
            return cls.JSON
        raise ValueError(f"Unknown format: {value}")

    def render(self, stream: TextIO, labels: Sequence[str], rows: Sequence[Sequence[Value]]) -> None:
        if self is Format.TABLE:
            print_as_table(stream, labels, rows)
        else:
            print_as_json(stream, labels, rows)


def print_as_table(stream: TextIO, labels: Sequence[str], rows: Sequence[Sequence[Value]]) -> None:
    table = Table(show_lines=False)
    for label in labels:
        table.add_column(Text(label), overflow="fold")
    for row in rows:
        table.add_row(*(Text(table_cell(value)) for value in row))
    # Wide enough for the natural table width; long cells are not folded.
    Console(file=stream, width=TABLE_MAX_WIDTH, highlight=False).print(table)


def table_cell(value: Value) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, list):
        return ", ".join(table_cell(item) for item in value)
    return str(value)


def print_as_json(stream: TextIO, labels: Sequence[str], rows: Sequence[Sequence[Value]]) -> None:
    for row in rows:
        record = {label: json_value(value) for label, value in zip(labels, row)}
        stream.write(json.dumps(record, ensure_ascii=False))
        stream.write("\n")


def json_value(value: Value) -> Any:
    if isinstance(value, list):
        return [json_value(item) for item in value]
    if isinstance(value, (dt.date, dt.datetime)):
        return value.isoformat()
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value
