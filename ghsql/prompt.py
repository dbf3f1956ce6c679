"""Interactive statement prompt."""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import TextIO

from rich.console import Console

from ghsql.batch import payload_summary
from ghsql.engine.sql_engine import SelectPayload, SQLEngine
from ghsql.errors import GhsqlError
from ghsql.output import Format

try:
    import readline  # noqa: F401  (line editing and session history for input())
except ImportError:  # pragma: no cover - not available on Windows
    readline = None

logger = logging.getLogger(__name__)

PROMPT = "ghsql> "
EXIT_COMMANDS = {"exit", "quit", "\\q"}


@dataclass(frozen=True)
class PromptOptions:
    format: Format
    use_pager: bool = True


class Prompt:
    def __init__(
        self,
        options: PromptOptions,
        engine: SQLEngine,
        console: Console | None = None,
        error_console: Console | None = None,
        input_stream: TextIO | None = None,
    ) -> None:
        self.options = options
        self.engine = engine
        self.console = console or Console(highlight=False)
        self.error_console = error_console or Console(stderr=True, highlight=False)
        self.input_stream = input_stream

    def run(self) -> int:
        while True:
            try:
                if not self.readline():
                    return 0
            except (KeyboardInterrupt, EOFError):
                self.console.print()
                return 0

    def readline(self) -> bool:
        """Handle one line of input; returns False when the session should end."""
        line = self._read_line().strip()
        if not line:
            return True
        if line.lower() in EXIT_COMMANDS:
            return False

        try:
            payload = self.engine.execute(line)
        except GhsqlError as exc:
            logger.debug("Statement failed: %s", line, exc_info=True)
            self.error_console.print(f"SQL execution error: {exc}", markup=False)
            return True

        if isinstance(payload, SelectPayload):
            self._show(payload)
        else:
            self.console.print(payload_summary(payload), markup=False)
        return True

    def _read_line(self) -> str:
        raw = self.console.input(PROMPT, stream=self.input_stream)
        if self.input_stream is not None and raw == "":
            raise EOFError
        return raw

    def _show(self, payload: SelectPayload) -> None:
        buffer = io.StringIO()
        self.options.format.render(buffer, payload.labels, payload.rows)
        if self.options.use_pager:
            with self.console.pager():
                self.console.out(buffer.getvalue(), highlight=False, end="")
        else:
            self.console.out(buffer.getvalue(), highlight=False, end="")
