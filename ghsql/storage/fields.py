"""Custom-field metadata of a GitHub project."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Union

from ghsql.models.graphql_contracts import FieldNode, IterationNode, ProjectFieldsNode

logger = logging.getLogger(__name__)

RESERVED_COLUMNS = ("id", "Repository", "Issue", "Title", "Assignees", "Labels")

# Built-in GitHub columns surfaced as plain fields that have no custom semantics.
BUILTIN_FIELD_NAMES = {
    "Title",
    "Labels",
    "Milestone",
    "Assignees",
    "Linked Pull Requests",
    "Reviewers",
    "Repository",
}


class FieldType(str, Enum):
    ASSIGNEES = "ASSIGNEES"
    DATE = "DATE"
    LABELS = "LABELS"
    LINKED_PULL_REQUESTS = "LINKED_PULL_REQUESTS"
    MILESTONE = "MILESTONE"
    NUMBER = "NUMBER"
    REPOSITORY = "REPOSITORY"
    REVIEWERS = "REVIEWERS"
    TEXT = "TEXT"
    TITLE = "TITLE"
    TRACKED_BY = "TRACKED_BY"
    TRACKS = "TRACKS"
    OTHER = "OTHER"

    @classmethod
    def parse(cls, value: str | None) -> "FieldType":
        try:
            return cls(value or "")
        except ValueError:
            return cls.OTHER


WRITABLE_FIELD_TYPES = {FieldType.DATE, FieldType.NUMBER, FieldType.TEXT, FieldType.TITLE}


@dataclass(frozen=True)
class FieldOption:
    id: str
    name: str


@dataclass(frozen=True)
class FieldIteration:
    id: str
    title: str
    duration: int
    start_date: str


@dataclass(frozen=True)
class NormalKind:
    field_type: FieldType
    raw_type: str = ""

    @property
    def writable(self) -> bool:
        return self.field_type in WRITABLE_FIELD_TYPES

    @property
    def type_name(self) -> str:
        return self.raw_type or self.field_type.value


@dataclass(frozen=True)
class SingleSelectKind:
    options: tuple[FieldOption, ...]

    def option_by_name(self, name: str) -> FieldOption | None:
        for option in self.options:
            if option.name == name:
                return option
        return None


@dataclass(frozen=True)
class IterationKind:
    duration: int
    start_day: int
    iterations: tuple[FieldIteration, ...]
    completed_iterations: tuple[FieldIteration, ...]

    def all_iterations(self) -> tuple[FieldIteration, ...]:
        return self.iterations + self.completed_iterations

    def iteration_by_title(self, title: str) -> FieldIteration | None:
        for iteration in self.all_iterations():
            if iteration.title == title:
                return iteration
        return None

    def iteration_by_id(self, iteration_id: str) -> FieldIteration | None:
        for iteration in self.all_iterations():
            if iteration.id == iteration_id:
                return iteration
        return None


FieldKind = Union[NormalKind, SingleSelectKind, IterationKind]


@dataclass(frozen=True)
class Field:
    id: str
    name: str
    kind: FieldKind


class UnknownFieldKindError(TypeError):
    def __init__(self, kind: object) -> None:
        super().__init__(f"unknown field kind: {type(kind).__name__}")


def fields_from_project(project: ProjectFieldsNode) -> list[Field]:
    """Convert a `ProjectV2.fields` listing into ordered column definitions."""
    fields: list[Field] = []
    # SQL column names compare case-insensitively.
    taken = {name.casefold() for name in RESERVED_COLUMNS}
    for node in project.fields.values():
        converted = _field_from_node(node)
        if converted is None:
            continue
        key = converted.name.casefold()
        if key in taken:
            logger.debug("Skipping field %s: name collides with another column", converted.name)
            continue
        taken.add(key)
        fields.append(converted)
    return fields


def _field_from_node(node: FieldNode) -> Field | None:
    if node.id is None or node.name is None:
        return None

    if node.typename == "ProjectV2IterationField":
        configuration = node.configuration
        if configuration is None:
            return Field(
                id=node.id,
                name=node.name,
                kind=IterationKind(duration=0, start_day=0, iterations=(), completed_iterations=()),
            )
        return Field(
            id=node.id,
            name=node.name,
            kind=IterationKind(
                duration=configuration.duration,
                start_day=configuration.start_day,
                iterations=tuple(_iteration(it) for it in configuration.iterations),
                completed_iterations=tuple(
                    _iteration(it) for it in configuration.completed_iterations
                ),
            ),
        )

    if node.typename == "ProjectV2SingleSelectField":
        options = tuple(FieldOption(id=opt.id, name=opt.name) for opt in node.options or [])
        return Field(id=node.id, name=node.name, kind=SingleSelectKind(options=options))

    if node.typename == "ProjectV2Field":
        if node.name in BUILTIN_FIELD_NAMES:
            return None
        return Field(
            id=node.id,
            name=node.name,
            kind=NormalKind(field_type=FieldType.parse(node.data_type), raw_type=node.data_type or ""),
        )

    logger.debug("Skipping field %s of unsupported type %s", node.name, node.typename)
    return None


def _iteration(node: IterationNode) -> FieldIteration:
    return FieldIteration(
        id=node.id,
        title=node.title,
        duration=node.duration,
        start_date=node.start_date,
    )
