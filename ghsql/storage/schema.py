"""Relational schemas for the `items`, `options`, and `iterations` tables."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from ghsql.storage.fields import Field

ITEMS_TABLE = "items"
OPTIONS_TABLE = "options"
ITERATIONS_TABLE = "iterations"
TABLE_NAMES = (ITEMS_TABLE, OPTIONS_TABLE, ITERATIONS_TABLE)


class DataType(str, Enum):
    TEXT = "TEXT"
    INT = "INT"
    FLOAT = "FLOAT"
    LIST = "LIST"
    BOOLEAN = "BOOLEAN"
    DATE = "DATE"


@dataclass(frozen=True)
class ColumnDef:
    name: str
    data_type: DataType
    nullable: bool = False


@dataclass(frozen=True)
class Schema:
    table_name: str
    column_defs: tuple[ColumnDef, ...]

    @property
    def column_names(self) -> list[str]:
        return [column.name for column in self.column_defs]


_RESERVED_COLUMN_DEFS = (
    ColumnDef("id", DataType.TEXT),
    ColumnDef("Repository", DataType.TEXT, nullable=True),
    ColumnDef("Issue", DataType.INT, nullable=True),
    ColumnDef("Title", DataType.TEXT),
    ColumnDef("Assignees", DataType.LIST, nullable=True),
    ColumnDef("Labels", DataType.LIST, nullable=True),
)

RESERVED_COLUMN_COUNT = len(_RESERVED_COLUMN_DEFS)


def items_schema(fields: Sequence[Field]) -> Schema:
    # Custom fields are text regardless of kind; values are cast only on write.
    field_column_defs = tuple(
        ColumnDef(field.name, DataType.TEXT, nullable=True) for field in fields
    )
    return Schema(table_name=ITEMS_TABLE, column_defs=_RESERVED_COLUMN_DEFS + field_column_defs)


def options_schema() -> Schema:
    return Schema(
        table_name=OPTIONS_TABLE,
        column_defs=(
            ColumnDef("field_id", DataType.TEXT),
            ColumnDef("id", DataType.TEXT),
            ColumnDef("name", DataType.TEXT),
        ),
    )


def iterations_schema() -> Schema:
    return Schema(
        table_name=ITERATIONS_TABLE,
        column_defs=(
            ColumnDef("field_id", DataType.TEXT),
            ColumnDef("id", DataType.TEXT),
            ColumnDef("title", DataType.TEXT),
            ColumnDef("start_date", DataType.TEXT),
            ColumnDef("duration", DataType.INT),
            ColumnDef("is_completed", DataType.BOOLEAN),
        ),
    )
