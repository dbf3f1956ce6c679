"""SQL execution against a storage backend through an in-memory SQLite database.

Each statement runs on a fresh SQLite copy of every table. Reads return the
result set; UPDATE and DELETE are diffed against the copy afterwards and the
differences are pushed back through the storage's `update` and `delete`.
"""

from __future__ import annotations

import datetime as dt
import json
import logging
import re
import sqlite3
from dataclasses import dataclass, field
from typing import Any, Union

from ghsql.errors import EngineError, UnsupportedStatementError
from ghsql.storage.cache import Row, Value
from ghsql.storage.project_storage import Storage
from ghsql.storage.schema import DataType, Schema

logger = logging.getLogger(__name__)

READ_KEYWORDS = {"SELECT", "WITH", "VALUES", "EXPLAIN"}
WRITE_KEYWORDS = {"UPDATE", "DELETE"}

_SQLITE_TYPES = {
    DataType.INT: "INTEGER",
    DataType.FLOAT: "REAL",
    DataType.BOOLEAN: "INTEGER",
}

_LEADING_NOISE_RE = re.compile(r"^(?:\s+|--[^\n]*(?:\n|$)|/\*.*?\*/)*", re.DOTALL)
_KEYWORD_RE = re.compile(r"[A-Za-z]+")


@dataclass(frozen=True)
class SelectPayload:
    labels: list[str]
    rows: list[list[Value]]


@dataclass(frozen=True)
class UpdatePayload:
    count: int


@dataclass(frozen=True)
class DeletePayload:
    count: int


Payload = Union[SelectPayload, UpdatePayload, DeletePayload]


@dataclass
class _LoadedTable:
    schema: Schema
    keys: list[str] = field(default_factory=list)
    rows: list[Row] = field(default_factory=list)
    json_columns: set[int] = field(default_factory=set)
    bool_columns: set[int] = field(default_factory=set)

    def encoded_rows(self) -> dict[int, tuple[Any, ...]]:
        return {
            index + 1: tuple(_encode(value) for value in row) for index, row in enumerate(self.rows)
        }

    def decode(self, column: int, value: Any) -> Value:
        if column in self.json_columns:
            return _decode_json_list(value)
        if column in self.bool_columns and isinstance(value, int):
            return bool(value)
        return value


@dataclass
class _TableChanges:
    table_name: str
    updated: list[tuple[str, Row]] = field(default_factory=list)
    deleted: list[str] = field(default_factory=list)


class SQLEngine:
    def __init__(self, storage: Storage) -> None:
        self.storage = storage

    def execute(self, statement: str) -> Payload:
        keyword = leading_keyword(statement)
        if keyword not in READ_KEYWORDS | WRITE_KEYWORDS:
            raise UnsupportedStatementError(
                f"unsupported statement: {keyword or 'empty statement'}"
            )

        conn = sqlite3.connect(":memory:")
        try:
            try:
                tables = self._materialize(conn)
                cursor = conn.execute(statement)
                if cursor.description is not None:
                    return self._select_payload(cursor, tables)
            except sqlite3.Error as exc:
                raise EngineError(str(exc)) from exc

            count = max(cursor.rowcount, 0)
            changes = self._collect_changes(conn, tables)
            self._apply_changes(changes)
            if keyword == "DELETE":
                return DeletePayload(count=count)
            return UpdatePayload(count=count)
        finally:
            conn.close()

    def _materialize(self, conn: sqlite3.Connection) -> dict[str, _LoadedTable]:
        tables: dict[str, _LoadedTable] = {}
        for table_name in self.storage.table_names:
            schema = self.storage.fetch_schema(table_name)
            if schema is None:
                continue
            loaded = _LoadedTable(schema=schema)
            for index, column in enumerate(schema.column_defs):
                if column.data_type is DataType.LIST:
                    loaded.json_columns.add(index)
                elif column.data_type is DataType.BOOLEAN:
                    loaded.bool_columns.add(index)
            for key, row in self.storage.scan(table_name):
                loaded.keys.append(key)
                loaded.rows.append(row)
                loaded.json_columns.update(
                    index for index, value in enumerate(row) if isinstance(value, list)
                )

            columns_sql = ", ".join(
                f"{_quote(column.name)} {_SQLITE_TYPES.get(column.data_type, '')}".rstrip()
                for column in schema.column_defs
            )
            conn.execute(f"CREATE TABLE {_quote(table_name)} ({columns_sql})")
            placeholders = ", ".join("?" for _ in range(len(schema.column_defs) + 1))
            conn.executemany(
                f"INSERT INTO {_quote(table_name)} "
                f"(rowid, {', '.join(_quote(name) for name in schema.column_names)}) "
                f"VALUES ({placeholders})",
                [(rowid, *encoded) for rowid, encoded in loaded.encoded_rows().items()],
            )
            tables[table_name] = loaded
        return tables

    def _select_payload(
        self, cursor: sqlite3.Cursor, tables: dict[str, _LoadedTable]
    ) -> SelectPayload:
        labels = [description[0] for description in cursor.description]
        json_names: set[str] = set()
        bool_names: set[str] = set()
        for loaded in tables.values():
            names = loaded.schema.column_names
            json_names.update(names[index] for index in loaded.json_columns)
            bool_names.update(names[index] for index in loaded.bool_columns)

        rows: list[list[Value]] = []
        for raw in cursor.fetchall():
            row: list[Value] = []
            for label, value in zip(labels, raw):
                if label in json_names:
                    value = _decode_json_list(value)
                elif label in bool_names and value in (0, 1) and not isinstance(value, float):
                    value = bool(value)
                row.append(value)
            rows.append(row)
        return SelectPayload(labels=labels, rows=rows)

    def _collect_changes(
        self, conn: sqlite3.Connection, tables: dict[str, _LoadedTable]
    ) -> list[_TableChanges]:
        all_changes: list[_TableChanges] = []
        for table_name, loaded in tables.items():
            before = loaded.encoded_rows()
            after = {
                row[0]: tuple(row[1:])
                for row in conn.execute(f"SELECT rowid, * FROM {_quote(table_name)}")
            }
            inserted = set(after) - set(before)
            if inserted:
                raise UnsupportedStatementError(f"insert into {table_name} is not supported")

            changes = _TableChanges(table_name=table_name)
            for rowid, encoded in before.items():
                key = loaded.keys[rowid - 1]
                if rowid not in after:
                    changes.deleted.append(key)
                    continue
                new_encoded = after[rowid]
                if new_encoded == encoded:
                    continue
                new_row = list(loaded.rows[rowid - 1])
                for column, (old_value, new_value) in enumerate(zip(encoded, new_encoded)):
                    if old_value != new_value:
                        new_row[column] = loaded.decode(column, new_value)
                changes.updated.append((key, new_row))
            if changes.updated or changes.deleted:
                all_changes.append(changes)
        return all_changes

    def _apply_changes(self, changes: list[_TableChanges]) -> None:
        for change in changes:
            if change.updated:
                logger.debug("Pushing %d updated rows to %s", len(change.updated), change.table_name)
                self.storage.update(change.table_name, change.updated)
            if change.deleted:
                logger.debug("Pushing %d deleted rows to %s", len(change.deleted), change.table_name)
                self.storage.delete(change.table_name, change.deleted)


def leading_keyword(statement: str) -> str:
    remainder = _LEADING_NOISE_RE.sub("", statement, count=1)
    match = _KEYWORD_RE.match(remainder)
    return match.group(0).upper() if match else ""


def _quote(identifier: str) -> str:
    return '"' + identifier.replace('"', '""') + '"'


def _encode(value: Value) -> Any:
    if isinstance(value, list):
        return json.dumps(value, ensure_ascii=False)
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (dt.date, dt.datetime)):
        return value.isoformat()
    return value


def _decode_json_list(value: Any) -> Value:
    if not isinstance(value, str) or not value.startswith("["):
        return value
    try:
        decoded = json.loads(value)
    except ValueError:
        return value
    return decoded if isinstance(decoded, list) else value


__all__ = [
    "DeletePayload",
    "Payload",
    "SQLEngine",
    "SelectPayload",
    "UpdatePayload",
    "leading_keyword",
]
