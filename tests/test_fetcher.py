from __future__ import annotations

import pytest

from github_fakes import (
    FakeProjectAPI,
    draft_item,
    issue_item,
    iteration_field,
    iteration_value,
    number_value,
    plain_field,
    single_select_field,
    single_select_value,
    text_value,
)

from ghsql.errors import PaginationLimitError, ProjectNotFoundError
from ghsql.github.graphql_client import GraphQLClient
from ghsql.models.graphql_contracts import ItemFieldValue
from ghsql.storage.fetcher import UNKNOWN_VALUE, ProjectFetcher, field_cell
from ghsql.storage.fields import Field, FieldType, NormalKind


def _fetcher(api: FakeProjectAPI, max_pages: int | None = None) -> ProjectFetcher:
    return ProjectFetcher(GraphQLClient(api), owner="octo", project_number=1, max_pages=max_pages)


def test_list_items_follows_cursor_across_pages() -> None:
    api = FakeProjectAPI(
        fields=[plain_field("F_points", "Points", "NUMBER")],
        item_pages=[
            [issue_item("PVTI_1", number=1), issue_item("PVTI_2", number=2)],
            [issue_item("PVTI_3", number=3)],
        ],
    )

    snapshot = _fetcher(api).fetch_snapshot()

    assert [key for key, _ in snapshot.items] == ["PVTI_1", "PVTI_2", "PVTI_3"]
    afters = [call["variables"]["after"] for call in api.calls_for("ListItems")]
    assert afters == [None, "cursor-1"]
    assert all(call["variables"]["projectId"] == "PVT_project" for call in api.calls_for("ListItems"))


def test_empty_project_yields_no_rows() -> None:
    api = FakeProjectAPI(fields=[], item_pages=[[]])

    snapshot = _fetcher(api).fetch_snapshot()

    assert snapshot.fields == ()
    assert snapshot.items == ()


def test_page_cap_stops_runaway_listing() -> None:
    api = FakeProjectAPI(fields=[], item_pages=[[issue_item("A")], [issue_item("B")], [issue_item("C")]])

    with pytest.raises(PaginationLimitError) as excinfo:
        _fetcher(api, max_pages=2).fetch_snapshot()

    assert excinfo.value.max_pages == 2
    assert len(api.calls_for("ListItems")) == 2


def test_missing_project_raises_not_found() -> None:
    api = FakeProjectAPI(fields=[], item_pages=[[]], owner_kind="missing")

    with pytest.raises(ProjectNotFoundError):
        _fetcher(api).list_fields()


def test_builtin_and_reserved_name_fields_are_not_columns() -> None:
    api = FakeProjectAPI(
        fields=[
            plain_field("F_title", "Title", "TITLE"),
            plain_field("F_labels", "Labels", "LABELS"),
            plain_field("F_repo", "Repository", "REPOSITORY"),
            single_select_field("F_issue", "Issue", [("O1", "x")]),
            plain_field("F_estimate", "Estimate", "NUMBER"),
        ],
        item_pages=[[]],
    )

    _, fields = _fetcher(api).list_fields()

    assert [field.name for field in fields] == ["Estimate"]
    assert fields[0].kind == NormalKind(field_type=FieldType.NUMBER, raw_type="NUMBER")


def test_field_names_colliding_case_insensitively_are_skipped() -> None:
    api = FakeProjectAPI(
        fields=[
            plain_field("F_ext", "ID", "TEXT"),
            plain_field("F_labels", "labels", "TEXT"),
            plain_field("F_status", "Status", "TEXT"),
            single_select_field("F_status_2", "STATUS", [("O1", "x")]),
            plain_field("F_due", "Due", "DATE"),
        ],
        item_pages=[[]],
    )

    _, fields = _fetcher(api).list_fields()

    assert [(field.id, field.name) for field in fields] == [("F_status", "Status"), ("F_due", "Due")]


def test_draft_issue_row_has_no_repository_or_labels() -> None:
    api = FakeProjectAPI(
        fields=[plain_field("F_notes", "Notes", "TEXT")],
        item_pages=[[draft_item("PVTI_d", "Write docs", assignees=["bob"], values=[text_value("F_notes", "soon")])]],
    )

    (item,) = _fetcher(api).fetch_snapshot().items

    assert item == ("PVTI_d", ["PVTI_d", None, None, "Write docs", ["bob"], [], "soon"])


def test_pull_request_rows_carry_repository_and_number() -> None:
    api = FakeProjectAPI(
        fields=[],
        item_pages=[[issue_item("PVTI_pr", repo="octo/api", number=42, title="Add cache", typename="PullRequest")]],
    )

    (item,) = _fetcher(api).fetch_snapshot().items

    assert item[1] == ["PVTI_pr", "octo/api", 42, "Add cache", [], []]


def test_values_without_matching_option_or_iteration_show_unknown() -> None:
    api = FakeProjectAPI(
        fields=[
            single_select_field("F_status", "Status", [("OPT_todo", "Todo")]),
            iteration_field("F_sprint", "Sprint", iterations=[("IT_1", "Sprint 1")]),
            plain_field("F_points", "Points", "NUMBER"),
        ],
        item_pages=[
            [
                issue_item(
                    "PVTI_1",
                    values=[
                        single_select_value("F_status", "Archived", "OPT_gone"),
                        iteration_value("F_sprint", "Sprint 0", "IT_0"),
                        number_value("F_points", None),
                    ],
                )
            ]
        ],
    )

    (item,) = _fetcher(api).fetch_snapshot().items

    assert item[1][6:] == [UNKNOWN_VALUE, UNKNOWN_VALUE, None]


def test_field_cell_reads_list_valued_builtin_types() -> None:
    field = Field(id="F_rev", name="Review", kind=NormalKind(field_type=FieldType.REVIEWERS))
    value = ItemFieldValue.model_validate(
        {
            "__typename": "ProjectV2ItemFieldReviewerValue",
            "field": {"id": "F_rev"},
            "reviewers": {
                "nodes": [
                    {"__typename": "User", "login": "alice"},
                    {"__typename": "Team", "name": "core"},
                    {"__typename": "Mannequin"},
                ]
            },
        }
    )

    assert field_cell(field, value) == ["alice", "core"]


def test_field_cell_empty_list_value_is_null() -> None:
    field = Field(id="F_users", name="Owners", kind=NormalKind(field_type=FieldType.OTHER))
    value = ItemFieldValue.model_validate(
        {"__typename": "ProjectV2ItemFieldUserValue", "field": {"id": "F_users"}, "users": {"nodes": []}}
    )

    assert field_cell(field, value) is None
