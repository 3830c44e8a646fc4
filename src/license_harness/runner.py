"""Blocking command execution with captured output."""

from __future__ import annotations

import logging
import shlex
import subprocess
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Sequence

from .env import clean_environment, merged_environment
from .errors import CommandFailure

logger = logging.getLogger("license_harness.runner")

COMMAND_NOT_FOUND = 127


@dataclass(frozen=True)
class CommandResult:
    """Snapshot of the most recently executed command."""

    command: tuple[str, ...]
    directory: Path
    output: str
    exit_code: int
    duration: float = 0.0

    @property
    def command_line(self) -> str:
        return shlex.join(self.command)

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0


def as_argv(command: str | Sequence[str]) -> tuple[str, ...]:
    """Normalize a command to an argument tuple without involving a shell."""
    if isinstance(command, str):
        argv = tuple(shlex.split(command))
    else:
        argv = tuple(str(c) for c in command)
    if not argv:
        raise ValueError("Cannot run an empty command")
    return argv


class CommandRunner:
    """Runs commands in a working directory and records the latest result.

    ``last_result`` is replaced on every successful (or allowed-to-fail) run
    and is never merged with a previous result.
    """

    def __init__(self, *, inherit_env: bool = False):
        self.inherit_env = inherit_env
        self.last_result: Optional[CommandResult] = None

    def run(
        self,
        command: str | Sequence[str],
        directory: str | Path,
        allow_failure: bool = False,
        *,
        clean_env: bool = False,
        discard_stderr: bool = False,
        env: Optional[dict[str, str]] = None,
        on_log: Optional[Callable[[str], None]] = None,
    ) -> str:
        """Run *command* in *directory* and return its combined output.

        Raises:
            CommandFailure: the command exited non-zero and ``allow_failure``
                is false.
            NotADirectoryError: *directory* does not exist.
        """
        argv = as_argv(command)
        cwd = Path(directory)
        if not cwd.is_dir():
            raise NotADirectoryError(f"Working directory does not exist: {cwd}")

        if clean_env:
            run_env = clean_environment(explicit_env=env, inherit=self.inherit_env)
        else:
            run_env = merged_environment(env)

        command_line = shlex.join(argv)
        logger.debug("Running: %s (cwd=%s, clean_env=%s)", command_line, cwd, clean_env)
        t0 = time.monotonic()
        exit_code, output = self._execute(argv, cwd, run_env, discard_stderr, on_log)
        elapsed = time.monotonic() - t0

        if exit_code != 0:
            tail = "\n".join(output.splitlines()[-15:]) or "(no output)"
            logger.warning(
                "Command failed (exit=%d) in %.1fs: %s\nOutput tail:\n%s",
                exit_code, elapsed, command_line, tail,
            )
            if not allow_failure:
                raise CommandFailure(command_line, output.rstrip(), exit_code)
        else:
            logger.info("Command succeeded (exit=0) in %.1fs: %s", elapsed, command_line)

        self.last_result = CommandResult(
            command=argv,
            directory=cwd,
            output=output,
            exit_code=exit_code,
            duration=elapsed,
        )
        return output

    def _execute(
        self,
        argv: tuple[str, ...],
        cwd: Path,
        env: dict[str, str],
        discard_stderr: bool,
        on_log: Optional[Callable[[str], None]],
    ) -> tuple[int, str]:
        try:
            proc = subprocess.Popen(
                list(argv),
                cwd=str(cwd),
                env=env,
                stdout=subprocess.PIPE,
                stderr=subprocess.DEVNULL if discard_stderr else subprocess.STDOUT,
                stdin=subprocess.DEVNULL,
                text=True,
                errors="replace",
            )
        except FileNotFoundError:
            # Report a missing executable the way a shell does
            msg = f"{argv[0]}: command not found"
            logger.error(msg)
            return COMMAND_NOT_FOUND, msg + "\n"
        except PermissionError as e:
            msg = f"{argv[0]}: {e.strerror or 'permission denied'}"
            logger.error(msg)
            return 126, msg + "\n"

        logger.debug("Process started pid=%d", proc.pid)
        chunks: list[str] = []
        try:
            if proc.stdout:
                for line in proc.stdout:
                    chunks.append(line)
                    if on_log:
                        try:
                            on_log(line.rstrip("\n"))
                        except Exception:
                            pass
            rc = proc.wait()
        finally:
            if proc.stdout:
                proc.stdout.close()
        return rc, "".join(chunks)
