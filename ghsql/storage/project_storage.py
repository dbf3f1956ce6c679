"""Storage backend exposing one GitHub project as `items`, `options`, and `iterations`."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Protocol

from ghsql.errors import (
    DecodeError,
    ReadonlyTableError,
    RemoteError,
    StorageError,
    TransportError,
    UnknownTableError,
)
from ghsql.github.graphql_client import GraphQLClient
from ghsql.github.queries import DELETE_ITEM, UPDATE_ITEM_FIELD
from ghsql.models.graphql_contracts import DeleteItemData, UpdateItemFieldData
from ghsql.storage.cache import CacheSlot, ProjectSnapshot, Row, Value
from ghsql.storage.fetcher import ProjectFetcher
from ghsql.storage.fields import IterationKind, SingleSelectKind
from ghsql.storage.schema import (
    ITEMS_TABLE,
    ITERATIONS_TABLE,
    OPTIONS_TABLE,
    TABLE_NAMES,
    Schema,
    items_schema,
    iterations_schema,
    options_schema,
)
from ghsql.storage.translator import FieldUpdate, plan_item_updates

logger = logging.getLogger(__name__)


class Storage(Protocol):
    """Contract a SQL engine uses to read and mutate tables."""

    table_names: tuple[str, ...]

    def fetch_schema(self, table_name: str) -> Schema | None: ...

    def scan(self, table_name: str) -> list[tuple[str, Row]]: ...

    def update(self, table_name: str, rows: Sequence[tuple[str, Sequence[Value]]]) -> None: ...

    def delete(self, table_name: str, keys: Sequence[str]) -> None: ...


class ProjectStorage:
    table_names = TABLE_NAMES

    def __init__(
        self,
        owner: str,
        project_number: int,
        client: GraphQLClient,
        max_pages: int | None = None,
    ) -> None:
        self.owner = owner
        self.project_number = project_number
        self.client = client
        self.fetcher = ProjectFetcher(
            client, owner=owner, project_number=project_number, max_pages=max_pages
        )
        self._cache = CacheSlot()

    @property
    def cache(self) -> CacheSlot:
        return self._cache

    def load(self) -> ProjectSnapshot:
        """Populate the cache now instead of on first access."""
        return self._cache.get_or_populate(self._fetch_snapshot)

    def fetch_schema(self, table_name: str) -> Schema | None:
        snapshot = self.load()
        if table_name == ITEMS_TABLE:
            return items_schema(snapshot.fields)
        if table_name == OPTIONS_TABLE:
            return options_schema()
        if table_name == ITERATIONS_TABLE:
            return iterations_schema()
        return None

    def scan(self, table_name: str) -> list[tuple[str, Row]]:
        snapshot = self.load()
        if table_name == ITEMS_TABLE:
            return [(key, _copy_row(row)) for key, row in snapshot.items]
        if table_name == OPTIONS_TABLE:
            return scan_options(snapshot)
        if table_name == ITERATIONS_TABLE:
            return scan_iterations(snapshot)
        raise UnknownTableError(table_name)

    def update(self, table_name: str, rows: Sequence[tuple[str, Sequence[Value]]]) -> None:
        self._ensure_writable(table_name)
        snapshot = self._drain_cache()
        updates = plan_item_updates(snapshot, rows)
        logger.info("Updating %d field values in %s", len(updates), snapshot.project_id)
        for update in updates:
            self._update_item_field(snapshot.project_id, update)

    def delete(self, table_name: str, keys: Sequence[str]) -> None:
        self._ensure_writable(table_name)
        snapshot = self._drain_cache()
        logger.info("Deleting %d items from %s", len(keys), snapshot.project_id)
        for item_id in keys:
            self._delete_item(snapshot.project_id, item_id)

    def _ensure_writable(self, table_name: str) -> None:
        if table_name in (OPTIONS_TABLE, ITERATIONS_TABLE):
            raise ReadonlyTableError(table_name)
        if table_name != ITEMS_TABLE:
            raise UnknownTableError(table_name)

    def _drain_cache(self) -> ProjectSnapshot:
        # The remote project is the source of truth after a mutation.
        snapshot = self._cache.take()
        if snapshot is None:
            snapshot = self._fetch_snapshot()
        return snapshot

    def _fetch_snapshot(self) -> ProjectSnapshot:
        try:
            return self.fetcher.fetch_snapshot()
        except (TransportError, DecodeError, RemoteError) as exc:
            raise StorageError(f"Failed to fetch project data: {exc}") from exc

    def _update_item_field(self, project_id: str, update: FieldUpdate) -> None:
        variables = {
            "projectId": project_id,
            "itemId": update.item_id,
            "fieldId": update.field.id,
            "value": update.value.to_variables(),
        }
        logger.debug(
            "Setting %s on %s to %s", update.field.name, update.item_id, variables["value"]
        )
        try:
            response = self.client.execute(UPDATE_ITEM_FIELD, variables, UpdateItemFieldData)
            response.raise_for_errors()
        except (TransportError, DecodeError, RemoteError) as exc:
            raise StorageError(
                f"Failed to update {update.field.name} of {update.item_id}: {exc}"
            ) from exc

    def _delete_item(self, project_id: str, item_id: str) -> None:
        variables = {"projectId": project_id, "itemId": item_id}
        try:
            response = self.client.execute(DELETE_ITEM, variables, DeleteItemData)
            response.raise_for_errors()
        except (TransportError, DecodeError, RemoteError) as exc:
            raise StorageError(f"Failed to delete {item_id}: {exc}") from exc


def _copy_row(row: Row) -> Row:
    return [list(value) if isinstance(value, list) else value for value in row]


def scan_options(snapshot: ProjectSnapshot) -> list[tuple[str, Row]]:
    rows: list[tuple[str, Row]] = []
    for field in snapshot.fields:
        if not isinstance(field.kind, SingleSelectKind):
            continue
        for option in field.kind.options:
            rows.append((option.id, [field.id, option.id, option.name]))
    return rows


def scan_iterations(snapshot: ProjectSnapshot) -> list[tuple[str, Row]]:
    rows: list[tuple[str, Row]] = []
    for field in snapshot.fields:
        if not isinstance(field.kind, IterationKind):
            continue
        for is_completed, iterations in (
            (False, field.kind.iterations),
            (True, field.kind.completed_iterations),
        ):
            for iteration in iterations:
                rows.append(
                    (
                        iteration.id,
                        [
                            field.id,
                            iteration.id,
                            iteration.title,
                            iteration.start_date,
                            iteration.duration,
                            is_completed,
                        ],
                    )
                )
    return rows
