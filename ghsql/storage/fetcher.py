"""Bulk read of project fields and items into relational rows."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from ghsql.errors import PaginationLimitError, ProjectNotFoundError
from ghsql.github.graphql_client import GraphQLClient
from ghsql.github.queries import LIST_FIELDS, LIST_ITEMS
from ghsql.models.graphql_contracts import (
    ItemContent,
    ItemFieldValue,
    ListFieldsData,
    ListItemsData,
    ProjectItem,
)
from ghsql.storage.cache import ProjectSnapshot, Row, Value
from ghsql.storage.fields import (
    Field,
    IterationKind,
    NormalKind,
    SingleSelectKind,
    UnknownFieldKindError,
    fields_from_project,
)

logger = logging.getLogger(__name__)

UNKNOWN_VALUE = "Unknown"


class ProjectFetcher:
    def __init__(
        self,
        client: GraphQLClient,
        owner: str,
        project_number: int,
        max_pages: int | None = None,
    ) -> None:
        self.client = client
        self.owner = owner
        self.project_number = project_number
        self.max_pages = max_pages

    def list_fields(self) -> tuple[str, list[Field]]:
        variables = {"owner": self.owner, "projectNumber": self.project_number}
        # Exactly one of organization/user resolves, so partial errors are expected.
        response = self.client.execute(LIST_FIELDS, variables, ListFieldsData)
        project = response.data.project()
        if project is None:
            raise ProjectNotFoundError(self.owner, self.project_number)
        fields = fields_from_project(project)
        logger.debug("Project %s has %d custom fields", project.id, len(fields))
        return project.id, fields

    def list_items(self, project_id: str) -> list[ProjectItem]:
        items: list[ProjectItem] = []
        after: str | None = None
        pages = 0
        while True:
            if self.max_pages is not None and pages >= self.max_pages:
                raise PaginationLimitError(self.max_pages)
            variables = {"projectId": project_id, "after": after}
            response = self.client.execute(LIST_ITEMS, variables, ListItemsData)
            pages += 1
            node = response.data.node
            if node is None or node.typename != "ProjectV2" or node.items is None:
                response.raise_for_errors()
                raise ProjectNotFoundError(self.owner, self.project_number)

            page_items = [item for item in node.items.nodes or [] if item is not None]
            items.extend(page_items)
            page_info = node.items.page_info
            logger.debug(
                "Fetched page %d with %d items (cursor=%s, has_next_page=%s)",
                pages,
                len(page_items),
                page_info.end_cursor,
                page_info.has_next_page,
            )
            if page_info.end_cursor is None or not page_info.has_next_page:
                break
            after = page_info.end_cursor
        return items

    def fetch_snapshot(self) -> ProjectSnapshot:
        project_id, fields = self.list_fields()
        items = self.list_items(project_id)
        rows = tuple(build_item_row(item, fields) for item in items)
        logger.info("Loaded %d items and %d fields from %s", len(rows), len(fields), project_id)
        return ProjectSnapshot(project_id=project_id, fields=tuple(fields), items=rows)


def build_item_row(item: ProjectItem, fields: Sequence[Field]) -> tuple[str, Row]:
    key = item.id
    content = item.content
    title = content.title if content is not None else ""
    if content is None:
        repository, issue, assignees, labels = None, None, None, None
    else:
        repository, issue, assignees, labels = _content_columns(content)

    reserved: Row = [key, repository, issue, title, assignees, labels]
    values = item.field_values.values()
    field_columns: Row = []
    for field in fields:
        value = next((v for v in values if v.field_id == field.id), None)
        field_columns.append(None if value is None else field_cell(field, value))
    return key, reserved + field_columns


def field_cell(field: Field, value: ItemFieldValue) -> Value:
    kind = field.kind
    if isinstance(kind, NormalKind):
        return _normal_value(value)
    if isinstance(kind, SingleSelectKind):
        if value.name is None:
            return None
        option = kind.option_by_name(value.name)
        return option.name if option is not None else UNKNOWN_VALUE
    if isinstance(kind, IterationKind):
        if value.title is None:
            return None
        iteration = kind.iteration_by_title(value.title)
        return iteration.title if iteration is not None else UNKNOWN_VALUE
    raise UnknownFieldKindError(kind)


def _content_columns(content: ItemContent) -> tuple[Value, Value, Value, Value]:
    assignees = [user.login for user in content.assignees.values()] if content.assignees else []
    if content.typename == "DraftIssue":
        return None, None, assignees, []
    labels = [label.name for label in content.labels.values()] if content.labels else []
    repository = content.repository.name_with_owner if content.repository else None
    return repository, content.number, assignees, labels


def _normal_value(value: ItemFieldValue) -> Value:
    typename = value.typename
    if typename == "ProjectV2ItemFieldDateValue":
        return value.date
    if typename == "ProjectV2ItemFieldNumberValue":
        return value.number
    if typename == "ProjectV2ItemFieldTextValue":
        return value.text
    if typename == "ProjectV2ItemFieldMilestoneValue":
        return value.milestone.title if value.milestone else None
    if typename == "ProjectV2ItemFieldRepositoryValue":
        return value.repository.name if value.repository else None
    if typename == "ProjectV2ItemFieldLabelValue":
        return _non_empty([label.name for label in value.labels.values()] if value.labels else [])
    if typename == "ProjectV2ItemFieldPullRequestValue":
        return _non_empty(
            [pr.title for pr in value.pull_requests.values()] if value.pull_requests else []
        )
    if typename == "ProjectV2ItemFieldReviewerValue":
        names = [r.display_name() for r in value.reviewers.values()] if value.reviewers else []
        return _non_empty([name for name in names if name])
    if typename == "ProjectV2ItemFieldUserValue":
        return _non_empty([user.login for user in value.users.values()] if value.users else [])
    logger.debug("Ignoring field value of type %s", typename)
    return None


def _non_empty(values: list[str]) -> list[str] | None:
    return values or None
