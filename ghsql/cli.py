"""ghsql CLI."""

from __future__ import annotations

import logging
import sys

import typer

from ghsql.batch import Batch, BatchOptions
from ghsql.engine.sql_engine import SQLEngine
from ghsql.errors import GhsqlError
from ghsql.github.graphql_client import build_client_from_settings
from ghsql.output import Format
from ghsql.prompt import Prompt, PromptOptions
from ghsql.shared.settings import get_settings
from ghsql.storage.project_storage import ProjectStorage

logger = logging.getLogger(__name__)

app = typer.Typer(add_completion=False, help="ghsql: query and update GitHub Projects with SQL")


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


@app.command()
def main(
    owner: str = typer.Argument(..., help="User or organization that owns the project"),
    project_number: int = typer.Argument(..., help="Project number"),
    execute: str = typer.Option("", "--execute", "-e", help="SQL statement to execute"),
    output: str = typer.Option(
        "table", "--output", "-o", help='"table", "json" or these initials'
    ),
) -> None:
    """Open a SQL prompt on a GitHub project, or run one statement with --execute."""
    try:
        output_format = Format.parse(output)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--output") from exc

    try:
        settings = get_settings()
    except ValueError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=2) from exc
    configure_logging(settings.log_level)

    client = build_client_from_settings(settings)
    storage = ProjectStorage(owner, project_number, client, max_pages=settings.max_pages)
    try:
        storage.load()
    except GhsqlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    engine = SQLEngine(storage)
    if execute:
        code = Batch(BatchOptions(format=output_format, statement=execute), engine).run()
    else:
        code = Prompt(PromptOptions(format=output_format), engine).run()
    if code:
        raise typer.Exit(code=code)


if __name__ == "__main__":
    app()
