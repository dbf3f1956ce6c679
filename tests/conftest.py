from __future__ import annotations

import pytest

from github_fakes import (
    FakeProjectAPI,
    iteration_field,
    issue_item,
    iteration_value,
    note_item,
    number_value,
    plain_field,
    single_select_field,
    single_select_value,
    text_value,
)

from ghsql.github.graphql_client import GraphQLClient
from ghsql.storage.project_storage import ProjectStorage


@pytest.fixture
def board_api() -> FakeProjectAPI:
    """A small board: points, notes, status, sprint, plus a read-only reviewers column."""
    fields = [
        plain_field("F_title", "Title", "TITLE"),
        plain_field("F_points", "Points", "NUMBER"),
        plain_field("F_notes", "Notes", "TEXT"),
        plain_field("F_due", "Due", "DATE"),
        plain_field("F_tracks", "Tracks", "TRACKS"),
        single_select_field("F_status", "Status", [("OPT_todo", "Todo"), ("OPT_done", "Done")]),
        iteration_field(
            "F_sprint",
            "Sprint",
            iterations=[("IT_2", "Sprint 2")],
            completed=[("IT_1", "Sprint 1")],
        ),
    ]
    items = [
        issue_item(
            "PVTI_1",
            repo="octo/repo",
            number=7,
            title="Fix login",
            assignees=["alice"],
            labels=["bug"],
            values=[
                number_value("F_points", 3.0),
                text_value("F_notes", "urgent"),
                single_select_value("F_status", "Todo", "OPT_todo"),
                iteration_value("F_sprint", "Sprint 1", "IT_1"),
            ],
        ),
        note_item("PVTI_2"),
    ]
    return FakeProjectAPI(fields=fields, item_pages=[items])


@pytest.fixture
def board_storage(board_api: FakeProjectAPI) -> ProjectStorage:
    return ProjectStorage("octo", 1, GraphQLClient(board_api))
