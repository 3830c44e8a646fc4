"""Read-only predicates over the last command's output."""

from __future__ import annotations

import re
from typing import Pattern

from .errors import MissingCommandResult
from .runner import CommandResult, CommandRunner


class OutputAssertions:
    """Predicates over ``runner.last_result``.

    They return booleans and never raise, except when no command has been
    run yet (MissingCommandResult).
    """

    def __init__(self, runner: CommandRunner):
        self.runner = runner

    @property
    def result(self) -> CommandResult:
        result = self.runner.last_result
        if result is None:
            raise MissingCommandResult()
        return result

    def contains_text(self, text: str) -> bool:
        return text in self.result.output

    def contains_line(self, line: str) -> bool:
        """True when some output line equals *line* exactly."""
        pattern = re.compile(f"^{re.escape(line)}$", re.MULTILINE)
        return pattern.search(self.result.output) is not None

    def matches(self, pattern: str | Pattern[str]) -> bool:
        """True when *pattern* matches anywhere; ``^``/``$`` anchor on lines."""
        if isinstance(pattern, str):
            pattern = re.compile(pattern, re.MULTILINE)
        return pattern.search(self.result.output) is not None

    def exit_code_is(self, code: int) -> bool:
        return self.result.exit_code == code
