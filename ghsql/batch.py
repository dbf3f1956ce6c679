"""Run a single statement and print its result."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import TextIO

from ghsql.engine.sql_engine import DeletePayload, Payload, SelectPayload, SQLEngine
from ghsql.errors import GhsqlError
from ghsql.output import Format


@dataclass(frozen=True)
class BatchOptions:
    format: Format
    statement: str


def payload_summary(payload: Payload) -> str | None:
    if isinstance(payload, SelectPayload):
        return None
    verb = "deleted" if isinstance(payload, DeletePayload) else "updated"
    noun = "row" if payload.count == 1 else "rows"
    return f"{payload.count} {noun} {verb}"


class Batch:
    def __init__(
        self,
        options: BatchOptions,
        engine: SQLEngine,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
    ) -> None:
        self.options = options
        self.engine = engine
        self.stdout = stdout or sys.stdout
        self.stderr = stderr or sys.stderr

    def run(self) -> int:
        try:
            payload = self.engine.execute(self.options.statement)
        except GhsqlError as exc:
            self.stderr.write(f"SQL execution error: {exc}\n")
            return 1

        if isinstance(payload, SelectPayload):
            self.options.format.render(self.stdout, payload.labels, payload.rows)
        else:
            self.stderr.write(f"{payload_summary(payload)}\n")
        self.stdout.flush()
        return 0
