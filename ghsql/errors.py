"""Error taxonomy shared by the GraphQL client, storage adapter, and engine."""

from __future__ import annotations


class GhsqlError(RuntimeError):
    def __init__(self, message: str, reason_code: str = "ghsql_error") -> None:
        super().__init__(message)
        self.reason_code = reason_code


class TransportError(GhsqlError):
    """The GitHub API could not be reached or answered with a failure status."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message, reason_code="transport_failure")
        self.status = status


class DecodeError(GhsqlError):
    """The response body did not match the expected shape."""

    def __init__(self, message: str, remote_messages: str = "") -> None:
        if remote_messages:
            message = f"{message}: {remote_messages}"
        super().__init__(message, reason_code="decode_failure")
        self.remote_messages = remote_messages


class RemoteError(GhsqlError):
    """A well-formed error list returned by the GitHub API."""

    def __init__(self, messages: list[str]) -> None:
        super().__init__(" / ".join(messages), reason_code="remote_error")
        self.messages = list(messages)


class StorageError(GhsqlError):
    def __init__(self, message: str, reason_code: str = "storage_error") -> None:
        super().__init__(message, reason_code=reason_code)


class ProjectNotFoundError(StorageError):
    def __init__(self, owner: str, project_number: int) -> None:
        super().__init__(
            f"No such user or organization project: {owner}/{project_number}",
            reason_code="project_not_found",
        )
        self.owner = owner
        self.project_number = project_number


class PaginationLimitError(StorageError):
    def __init__(self, max_pages: int) -> None:
        super().__init__(
            f"Item listing exceeded {max_pages} pages", reason_code="pagination_limit"
        )
        self.max_pages = max_pages


class UnknownTableError(StorageError):
    def __init__(self, table_name: str) -> None:
        super().__init__(f"unknown table: {table_name}", reason_code="unknown_table")
        self.table_name = table_name


class SchemaViolation(StorageError):
    """A write was rejected before any remote call was issued for it."""


class ReadonlyTableError(SchemaViolation):
    def __init__(self, table_name: str) -> None:
        super().__init__("readonly table", reason_code="readonly_table")
        self.table_name = table_name


class ReadonlyColumnError(SchemaViolation):
    def __init__(self, column_name: str) -> None:
        super().__init__(f"readonly column: {column_name}", reason_code="readonly_column")
        self.column_name = column_name


class IncompatibleDataTypeError(SchemaViolation):
    def __init__(self, data_type: str, value: object) -> None:
        super().__init__(
            f"incompatible data type: {value!r} is not a valid {data_type}",
            reason_code="incompatible_data_type",
        )
        self.data_type = data_type
        self.value = value


class ImpossibleCastError(SchemaViolation):
    def __init__(self, column_name: str, value: object) -> None:
        super().__init__(
            f"impossible cast: {value!r} is not an option of {column_name}",
            reason_code="impossible_cast",
        )
        self.column_name = column_name
        self.value = value


class EngineError(GhsqlError):
    def __init__(self, message: str, reason_code: str = "engine_error") -> None:
        super().__init__(message, reason_code=reason_code)


class UnsupportedStatementError(EngineError):
    def __init__(self, message: str) -> None:
        super().__init__(message, reason_code="unsupported_statement")


__all__ = [
    "DecodeError",
    "EngineError",
    "GhsqlError",
    "ImpossibleCastError",
    "IncompatibleDataTypeError",
    "PaginationLimitError",
    "ProjectNotFoundError",
    "ReadonlyColumnError",
    "ReadonlyTableError",
    "RemoteError",
    "SchemaViolation",
    "StorageError",
    "TransportError",
    "UnknownTableError",
    "UnsupportedStatementError",
]
