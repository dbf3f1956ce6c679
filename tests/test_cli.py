from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from github_fakes import FakeProjectAPI

from ghsql import cli
from ghsql.github.graphql_client import GraphQLClient

runner = CliRunner()


@pytest.fixture
def fake_client(monkeypatch: pytest.MonkeyPatch, board_api: FakeProjectAPI) -> FakeProjectAPI:
    for name in ("GHSQL_TRANSPORT", "GHSQL_LOG_LEVEL", "GHSQL_HTTP_TIMEOUT_S", "GHSQL_MAX_PAGES"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(cli, "build_client_from_settings", lambda settings: GraphQLClient(board_api))
    monkeypatch.setattr(cli, "configure_logging", lambda level: None)
    return board_api


def test_execute_select_as_json(fake_client: FakeProjectAPI) -> None:
    result = runner.invoke(
        cli.app, ["octo", "1", "-e", "SELECT id, Points FROM items ORDER BY id", "-o", "j"], env={}
    )

    assert result.exit_code == 0, result.output
    assert [json.loads(line) for line in result.stdout.splitlines()] == [
        {"id": "PVTI_1", "Points": 3.0},
        {"id": "PVTI_2", "Points": None},
    ]


def test_execute_update_sends_mutation(fake_client: FakeProjectAPI) -> None:
    result = runner.invoke(
        cli.app, ["octo", "1", "--execute", "UPDATE items SET Notes = 'done' WHERE Issue = 7"], env={}
    )

    assert result.exit_code == 0, result.output
    assert len(fake_client.calls_for("UpdateItemField")) == 1


def test_execute_error_exits_non_zero(fake_client: FakeProjectAPI) -> None:
    result = runner.invoke(cli.app, ["octo", "1", "-e", "INSERT INTO items (id) VALUES ('x')"], env={})

    assert result.exit_code == 1


def test_unknown_output_format_is_a_usage_error(fake_client: FakeProjectAPI) -> None:
    result = runner.invoke(cli.app, ["octo", "1", "-e", "SELECT 1", "-o", "csv"], env={})

    assert result.exit_code == 2
    assert fake_client.calls == []


def test_invalid_settings_exit_with_usage_code(fake_client: FakeProjectAPI) -> None:
    result = runner.invoke(cli.app, ["octo", "1", "-e", "SELECT 1"], env={"GHSQL_TRANSPORT": "carrier-pigeon"})

    assert result.exit_code == 2
    assert fake_client.calls == []


def test_missing_project_fails_before_running_statements(fake_client: FakeProjectAPI) -> None:
    fake_client.owner_kind = "missing"

    result = runner.invoke(cli.app, ["ghost", "9", "-e", "SELECT 1"], env={})

    assert result.exit_code == 1
    assert fake_client.calls_for("ListItems") == []


def test_project_number_must_be_an_integer(fake_client: FakeProjectAPI) -> None:
    result = runner.invoke(cli.app, ["octo", "one"], env={})

    assert result.exit_code == 2
