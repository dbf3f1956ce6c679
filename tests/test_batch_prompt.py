from __future__ import annotations

import io
import json

from rich.console import Console

from github_fakes import FakeProjectAPI, issue_item, plain_field

from ghsql.batch import Batch, BatchOptions, payload_summary
from ghsql.engine.sql_engine import DeletePayload, SelectPayload, SQLEngine, UpdatePayload
from ghsql.github.graphql_client import GraphQLClient
from ghsql.output import Format
from ghsql.prompt import Prompt, PromptOptions
from ghsql.storage.project_storage import ProjectStorage


def _console(stream: io.StringIO) -> Console:
    return Console(file=stream, width=200, highlight=False, color_system=None)


def test_payload_summary() -> None:
    assert payload_summary(SelectPayload(labels=[], rows=[])) is None
    assert payload_summary(UpdatePayload(count=1)) == "1 row updated"
    assert payload_summary(DeletePayload(count=3)) == "3 rows deleted"


def test_batch_prints_select_result(board_storage: ProjectStorage) -> None:
    stdout, stderr = io.StringIO(), io.StringIO()
    options = BatchOptions(format=Format.JSON, statement="SELECT id, Labels FROM items ORDER BY id")

    code = Batch(options, SQLEngine(board_storage), stdout=stdout, stderr=stderr).run()

    assert code == 0
    assert [json.loads(line) for line in stdout.getvalue().splitlines()] == [
        {"id": "PVTI_1", "Labels": ["bug"]},
        {"id": "PVTI_2", "Labels": None},
    ]
    assert stderr.getvalue() == ""


def test_batch_reports_write_summary_on_stderr(
    board_api: FakeProjectAPI, board_storage: ProjectStorage
) -> None:
    stdout, stderr = io.StringIO(), io.StringIO()
    options = BatchOptions(format=Format.TABLE, statement="DELETE FROM items WHERE id = 'PVTI_2'")

    code = Batch(options, SQLEngine(board_storage), stdout=stdout, stderr=stderr).run()

    assert code == 0
    assert stdout.getvalue() == ""
    assert stderr.getvalue() == "1 row deleted\n"
    assert len(board_api.calls_for("DeleteItem")) == 1


def test_batch_reports_errors_and_exit_code(board_storage: ProjectStorage) -> None:
    stdout, stderr = io.StringIO(), io.StringIO()
    options = BatchOptions(format=Format.TABLE, statement="UPDATE items SET Repository = 'x'")

    code = Batch(options, SQLEngine(board_storage), stdout=stdout, stderr=stderr).run()

    assert code == 1
    assert stderr.getvalue() == "SQL execution error: readonly column: Repository\n"


def test_prompt_runs_statements_until_exit(board_storage: ProjectStorage) -> None:
    out, err = io.StringIO(), io.StringIO()
    lines = io.StringIO(
        "SELECT id FROM items WHERE Issue = 7\n"
        "\n"
        "UPDATE items SET Status = 'Nope'\n"
        "UPDATE items SET Points = 8 WHERE id = 'PVTI_1'\n"
        "exit\n"
        "SELECT 'never'\n"
    )
    prompt = Prompt(
        PromptOptions(format=Format.JSON, use_pager=False),
        SQLEngine(board_storage),
        console=_console(out),
        error_console=_console(err),
        input_stream=lines,
    )

    assert prompt.run() == 0

    output = out.getvalue()
    assert '{"id": "PVTI_1"}' in output
    assert "1 row updated" in output
    assert "never" not in output
    assert "SQL execution error: impossible cast" in err.getvalue()


def test_prompt_ends_at_end_of_input(board_storage: ProjectStorage) -> None:
    out = io.StringIO()
    prompt = Prompt(
        PromptOptions(format=Format.TABLE, use_pager=False),
        SQLEngine(board_storage),
        console=_console(out),
        error_console=_console(io.StringIO()),
        input_stream=io.StringIO("SELECT Title FROM items WHERE id = 'PVTI_1'\n"),
    )

    assert prompt.run() == 0
    assert "Fix login" in out.getvalue()


def test_batch_runs_on_project_with_field_named_like_reserved_column() -> None:
    api = FakeProjectAPI(fields=[plain_field("F_ext", "ID", "TEXT")], item_pages=[[issue_item("PVTI_1")]])
    stdout, stderr = io.StringIO(), io.StringIO()
    options = BatchOptions(format=Format.JSON, statement="SELECT * FROM items")

    engine = SQLEngine(ProjectStorage("octo", 1, GraphQLClient(api)))

    code = Batch(options, engine, stdout=stdout, stderr=stderr).run()

    assert code == 0, stderr.getvalue()
    (record,) = [json.loads(line) for line in stdout.getvalue().splitlines()]
    assert record["id"] == "PVTI_1"
