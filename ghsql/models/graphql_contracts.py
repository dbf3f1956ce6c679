"""Pydantic contracts for GitHub Projects (v2) GraphQL requests and responses."""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field


NodeT = TypeVar("NodeT")


class _Contract(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class Connection(_Contract, Generic[NodeT]):
    nodes: list[NodeT | None] | None = None

    def values(self) -> list[NodeT]:
        return [node for node in self.nodes or [] if node is not None]


class GraphQLError(_Contract):
    message: str
    path: list[str | int] | None = None


class GraphQLErrorList(_Contract):
    errors: list[GraphQLError] = Field(default_factory=list)

    def error_msgs(self) -> str:
        return " / ".join(error.message for error in self.errors)


# list fields


class IterationNode(_Contract):
    id: str
    title: str
    duration: int
    start_date: str = Field(alias="startDate")


class IterationConfiguration(_Contract):
    duration: int = 0
    start_day: int = Field(default=0, alias="startDay")
    iterations: list[IterationNode] = Field(default_factory=list)
    completed_iterations: list[IterationNode] = Field(
        default_factory=list, alias="completedIterations"
    )


class OptionNode(_Contract):
    id: str
    name: str


class FieldNode(_Contract):
    """One entry of `ProjectV2.fields`; which members are set depends on `typename`."""

    typename: str = Field(alias="__typename")
    id: str | None = None
    name: str | None = None
    data_type: str | None = Field(default=None, alias="dataType")
    configuration: IterationConfiguration | None = None
    options: list[OptionNode] | None = None


class ProjectFieldsNode(_Contract):
    id: str
    fields: Connection[FieldNode] = Field(default_factory=Connection)


class ProjectOwnerNode(_Contract):
    project_v2: ProjectFieldsNode | None = Field(default=None, alias="projectV2")


class ListFieldsData(_Contract):
    organization: ProjectOwnerNode | None = None
    user: ProjectOwnerNode | None = None

    def project(self) -> ProjectFieldsNode | None:
        for owner in (self.organization, self.user):
            if owner is not None and owner.project_v2 is not None:
                return owner.project_v2
        return None


# list items


class LoginNode(_Contract):
    login: str


class NameNode(_Contract):
    name: str


class TitleNode(_Contract):
    title: str


class ReviewerNode(_Contract):
    typename: str = Field(default="", alias="__typename")
    login: str | None = None
    name: str | None = None

    def display_name(self) -> str | None:
        if self.typename == "User":
            return self.login
        if self.typename == "Team":
            return self.name
        return None


class RepositoryRef(_Contract):
    name_with_owner: str = Field(alias="nameWithOwner")


class ItemContent(_Contract):
    """Issue, pull request, or draft issue linked to a project item."""

    typename: str = Field(alias="__typename")
    title: str = ""
    number: int | None = None
    repository: RepositoryRef | None = None
    assignees: Connection[LoginNode] | None = None
    labels: Connection[NameNode] | None = None


class FieldRef(_Contract):
    id: str | None = None


class ItemFieldValue(_Contract):
    """One entry of `ProjectV2Item.fieldValues`; members depend on `typename`."""

    typename: str = Field(alias="__typename")
    field: FieldRef | None = None
    date: str | None = None
    title: str | None = None
    iteration_id: str | None = Field(default=None, alias="iterationId")
    labels: Connection[NameNode] | None = None
    milestone: TitleNode | None = None
    number: float | None = None
    pull_requests: Connection[TitleNode] | None = Field(default=None, alias="pullRequests")
    repository: NameNode | None = None
    reviewers: Connection[ReviewerNode] | None = None
    name: str | None = None
    option_id: str | None = Field(default=None, alias="optionId")
    text: str | None = None
    users: Connection[LoginNode] | None = None

    @property
    def field_id(self) -> str | None:
        return self.field.id if self.field is not None else None


class ProjectItem(_Contract):
    id: str
    content: ItemContent | None = None
    field_values: Connection[ItemFieldValue] = Field(
        default_factory=Connection, alias="fieldValues"
    )


class PageInfo(_Contract):
    end_cursor: str | None = Field(default=None, alias="endCursor")
    has_next_page: bool = Field(default=False, alias="hasNextPage")


class ItemConnection(_Contract):
    page_info: PageInfo = Field(default_factory=PageInfo, alias="pageInfo")
    nodes: list[ProjectItem | None] | None = None


class ProjectItemsNode(_Contract):
    typename: str = Field(alias="__typename")
    items: ItemConnection | None = None


class ListItemsData(_Contract):
    node: ProjectItemsNode | None = None


# mutations


class ProjectV2FieldValueInput(_Contract):
    """`ProjectV2FieldValue` input; an instance with nothing set clears the field."""

    date: str | None = None
    iteration_id: str | None = Field(default=None, alias="iterationId")
    number: float | None = None
    single_select_option_id: str | None = Field(default=None, alias="singleSelectOptionId")
    text: str | None = None

    def to_variables(self) -> dict[str, object]:
        return self.model_dump(by_alias=True, exclude_none=True)

    def is_clear(self) -> bool:
        return not self.to_variables()


class UpdatedItemRef(_Contract):
    id: str


class UpdateItemFieldPayload(_Contract):
    project_v2_item: UpdatedItemRef | None = Field(default=None, alias="projectV2Item")


class UpdateItemFieldData(_Contract):
    update_project_v2_item_field_value: UpdateItemFieldPayload | None = Field(
        default=None, alias="updateProjectV2ItemFieldValue"
    )


class DeleteItemPayload(_Contract):
    deleted_item_id: str | None = Field(default=None, alias="deletedItemId")


class DeleteItemData(_Contract):
    delete_project_v2_item: DeleteItemPayload | None = Field(
        default=None, alias="deleteProjectV2Item"
    )
