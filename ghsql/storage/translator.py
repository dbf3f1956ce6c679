"""Translation of relational column writes into field-value update inputs."""

from __future__ import annotations

import datetime as dt
import logging
import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from ghsql.errors import (
    ImpossibleCastError,
    IncompatibleDataTypeError,
    ReadonlyColumnError,
    StorageError,
)
from ghsql.models.graphql_contracts import ProjectV2FieldValueInput
from ghsql.storage.cache import ProjectSnapshot, Row, Value
from ghsql.storage.fields import (
    RESERVED_COLUMNS,
    Field,
    FieldType,
    IterationKind,
    NormalKind,
    SingleSelectKind,
    UnknownFieldKindError,
)
from ghsql.storage.schema import RESERVED_COLUMN_COUNT

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FieldUpdate:
    item_id: str
    field: Field
    value: ProjectV2FieldValueInput


def check_reserved_columns(new_row: Sequence[Value], cached_row: Sequence[Value]) -> None:
    for name, new_value, cached_value in zip(
        RESERVED_COLUMNS, new_row[:RESERVED_COLUMN_COUNT], cached_row[:RESERVED_COLUMN_COUNT]
    ):
        if new_value is None and cached_value is None:
            continue
        if new_value == cached_value:
            continue
        raise ReadonlyColumnError(name)


def translate_value(field: Field, new_value: Value) -> ProjectV2FieldValueInput:
    """Build the update input for one field; `None` clears the field."""
    if new_value is None:
        return ProjectV2FieldValueInput()

    kind = field.kind
    if isinstance(kind, NormalKind):
        return _translate_normal(field, kind, new_value)
    if isinstance(kind, SingleSelectKind):
        option = kind.option_by_name(_as_text(new_value))
        if option is None:
            raise ImpossibleCastError(field.name, new_value)
        return ProjectV2FieldValueInput(single_select_option_id=option.id)
    if isinstance(kind, IterationKind):
        text = _as_text(new_value)
        iteration = kind.iteration_by_title(text) or kind.iteration_by_id(text)
        if iteration is None:
            raise ImpossibleCastError(field.name, new_value)
        return ProjectV2FieldValueInput(iteration_id=iteration.id)
    raise UnknownFieldKindError(kind)


def _translate_normal(field: Field, kind: NormalKind, new_value: Value) -> ProjectV2FieldValueInput:
    field_type = kind.field_type
    if field_type is FieldType.DATE:
        return ProjectV2FieldValueInput(date=_as_date(new_value))
    if field_type is FieldType.NUMBER:
        try:
            number = float(new_value)  # type: ignore[arg-type]
        except (TypeError, ValueError) as exc:
            raise IncompatibleDataTypeError("FLOAT", new_value) from exc
        # NaN and infinities have no JSON encoding.
        if not math.isfinite(number):
            raise IncompatibleDataTypeError("FLOAT", new_value)
        return ProjectV2FieldValueInput(number=number)
    if field_type in {FieldType.TEXT, FieldType.TITLE}:
        return ProjectV2FieldValueInput(text=_as_text(new_value))
    logger.debug("Field %s has unsupported type %s for writes", field.name, kind.type_name)
    raise ReadonlyColumnError(field.name)


def _as_date(value: Value) -> str:
    if isinstance(value, dt.datetime):
        return value.date().isoformat()
    if isinstance(value, dt.date):
        return value.isoformat()
    if isinstance(value, str):
        try:
            return dt.date.fromisoformat(value.strip()).isoformat()
        except ValueError as exc:
            raise IncompatibleDataTypeError("DATE", value) from exc
    raise IncompatibleDataTypeError("DATE", value)


def _as_text(value: Value) -> str:
    if isinstance(value, list):
        return ", ".join(str(v) for v in value)
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    return str(value)


def plan_item_updates(
    snapshot: ProjectSnapshot,
    rows: Iterable[tuple[str, Sequence[Value]]],
) -> list[FieldUpdate]:
    """Validate a whole update batch and list the field writes it requires.

    Rows whose key is not in the snapshot are skipped. Any reserved-column
    change or failed cast rejects the batch before anything is sent.
    """
    width = RESERVED_COLUMN_COUNT + len(snapshot.fields)
    updates: list[FieldUpdate] = []
    for item_id, new_row in rows:
        cached_row = snapshot.find_row(item_id)
        if cached_row is None:
            logger.debug("Skipping update of unknown item %s", item_id)
            continue
        if len(new_row) != width:
            raise StorageError(
                f"row for item {item_id} has {len(new_row)} columns, expected {width}",
                reason_code="row_width_mismatch",
            )
        check_reserved_columns(new_row, cached_row)
        updates.extend(_changed_fields(snapshot.fields, item_id, new_row, cached_row))
    return updates


def _changed_fields(
    fields: Sequence[Field],
    item_id: str,
    new_row: Sequence[Value],
    cached_row: Row,
) -> list[FieldUpdate]:
    changed: list[FieldUpdate] = []
    for field, new_value, cached_value in zip(
        fields, new_row[RESERVED_COLUMN_COUNT:], cached_row[RESERVED_COLUMN_COUNT:]
    ):
        if new_value is None and cached_value is None:
            continue
        if new_value == cached_value:
            continue
        changed.append(
            FieldUpdate(item_id=item_id, field=field, value=translate_value(field, new_value))
        )
    return changed
