"""Exception taxonomy for the harness.

Every error is raised where it is detected and carries its full diagnostic
payload; nothing here is retried or recovered internally.
"""

from __future__ import annotations

from typing import Optional


class HarnessError(Exception):
    """Base class for all harness errors."""


class CommandFailure(HarnessError):
    """Raised when a command exits non-zero and failures were not allowed."""

    def __init__(self, command: str, output: str, exit_code: int):
        self.command = command
        self.output = output
        self.exit_code = exit_code
        super().__init__(
            f"Command failed: `{command}`\n"
            f"output: {output}\n"
            f"exit: {exit_code}"
        )


class ConfigurationError(HarnessError):
    """Raised for contradictory or incomplete manifest configuration."""


class PathEscapeError(HarnessError):
    """Raised when a requested path resolves outside its project root."""

    def __init__(self, project: str, sub_path: Optional[str] = None):
        self.project = project
        self.sub_path = sub_path
        if sub_path is None:
            msg = f"Project name {project!r} is outside of the projects directory"
        else:
            msg = f"{sub_path} is outside of the app {project!r}"
        super().__init__(msg)


class LookupFailure(HarnessError):
    """Raised when a structured-output lookup does not find exactly one element."""

    def __init__(self, selector: str, count: int = 0):
        self.selector = selector
        self.count = count
        if count == 0:
            msg = f"Unable to find element matching {selector!r}"
        else:
            msg = f"Ambiguous match, found {count} elements matching {selector!r}"
        super().__init__(msg)


class MissingCommandResult(HarnessError):
    """Raised when output is inspected before any command has been run."""

    def __init__(self) -> None:
        super().__init__("No command has been run yet; run a command before asserting on its output")
