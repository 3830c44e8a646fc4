"""One scenario's worth of harness state."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Sequence

from .assertions import OutputAssertions
from .config import HarnessConfig
from .runner import CommandResult, CommandRunner
from .sandbox import SandboxManager
from .scaffolder import ProjectScaffolder
from .structured import StructuredOutput

logger = logging.getLogger("license_harness.harness")


class Harness:
    """Wires sandbox, runner, scaffolder and assertions together.

    A step-definition layer creates one Harness per scenario:

        harness = Harness(config)
        harness.scaffolder.create_app("python-pip")
        harness.run_scanner()
        assert harness.output.contains_text("argparse")
    """

    def __init__(self, config: Optional[HarnessConfig] = None):
        self.config = config or HarnessConfig()
        self.sandbox = SandboxManager(self.config.sandbox_path)
        self.runner = CommandRunner(inherit_env=self.config.inherit_env)
        self.scaffolder = ProjectScaffolder(self.config, self.sandbox, self.runner)
        self.output = OutputAssertions(self.runner)
        self.html = StructuredOutput(self.output)

    @property
    def last_result(self) -> Optional[CommandResult]:
        return self.runner.last_result

    def app_path(self, sub_path: Optional[str] = None, project: Optional[str] = None) -> Path:
        return self.sandbox.resolve(project or self.config.app_name, sub_path)

    def execute_command(self, command: str | Sequence[str], project: Optional[str] = None) -> str:
        """Run *command* in the app with a clean environment; failures are allowed."""
        directory = self.app_path(project=project)
        return self.runner.run(command, directory, allow_failure=True, clean_env=True)

    def run_scanner(self, *extra_args: str, project: Optional[str] = None) -> str:
        """Run the license scanner in the app directory."""
        argv = self.config.scanner_argv + tuple(extra_args)
        logger.info("Running scanner: %s", " ".join(argv))
        return self.execute_command(argv, project=project)
