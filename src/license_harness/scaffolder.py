"""Per-ecosystem sample project scaffolding."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Any, Iterable, Optional

from .config import HarnessConfig
from .ecosystems import (
    Dependency,
    Ecosystem,
    EcosystemSpec,
    InstallStep,
    ManifestInit,
    gemspec_string,
    get_ecosystem,
)
from .errors import ConfigurationError
from .runner import CommandRunner
from .sandbox import SandboxManager

logger = logging.getLogger("license_harness.scaffolder")


class ProjectScaffolder:
    """Creates manifests, appends dependencies and runs install steps.

    All ecosystem specifics come from the ecosystem registry; this class only
    knows the three ways a manifest can be initialised.
    """

    def __init__(self, config: HarnessConfig, sandbox: SandboxManager, runner: CommandRunner):
        self.config = config
        self.sandbox = sandbox
        self.runner = runner

    def _project(self, project: Optional[str]) -> str:
        return project or self.config.app_name

    # ------------------------------------------------------------------
    # Projects
    # ------------------------------------------------------------------

    def create_empty_project(self, name: Optional[str] = None) -> Path:
        """Reset the sandbox and create one empty project directory."""
        project = self._project(name)
        self.sandbox.reset()
        return self.sandbox.ensure_project(project)

    def create_app(
        self,
        ecosystem: Ecosystem | str,
        dependencies: Optional[Iterable[Dependency | str]] = None,
        *,
        name: Optional[str] = None,
        install: bool = True,
    ) -> Path:
        """Reset the sandbox and build a sample app for *ecosystem*.

        Without *dependencies* the ecosystem's default dependency is used.
        """
        spec = get_ecosystem(ecosystem)
        project = self._project(name)
        self.sandbox.project_path(project)
        if dependencies is None:
            deps = spec.default_dependencies(self.config)
        else:
            deps = [Dependency.from_spec(d) for d in dependencies]
        if deps and not spec.editable:
            raise ConfigurationError(
                f"{spec.kind.value} manifests come from a fixture; dependencies cannot be added"
            )

        logger.info("Creating %s app %r with %d dependencies", spec.kind.value, project, len(deps))
        self.sandbox.reset()
        self.initialize_manifest(spec.kind, project)
        for dep in deps:
            self.add_dependency(spec.kind, dep, project)
        if install:
            self.install(spec.kind, project)
        return self.sandbox.project_path(project)

    # ------------------------------------------------------------------
    # Manifests
    # ------------------------------------------------------------------

    def initialize_manifest(self, ecosystem: Ecosystem | str, project: Optional[str] = None) -> Path:
        """Bring an empty (or fixture) manifest into existence and return its path."""
        spec = get_ecosystem(ecosystem)
        project = self._project(project)
        self.sandbox.project_path(project)

        if spec.init is ManifestInit.COMMAND:
            argv = [arg.format(name=project) for arg in spec.init_command]
            self.sandbox.projects_path.mkdir(parents=True, exist_ok=True)
            self.runner.run(argv, self.sandbox.projects_path, clean_env=True)
            self.sandbox.ensure_project(project)
        else:
            self.sandbox.ensure_project(project)
            if spec.init is ManifestInit.FIXTURE:
                self._copy_fixture(spec, project)
            else:
                self.sandbox.resolve(project, spec.manifest).touch()
        return self.sandbox.resolve(project, spec.manifest)

    def add_dependency(
        self,
        ecosystem: Ecosystem | str,
        dependency: Dependency | str,
        project: Optional[str] = None,
    ) -> str:
        """Append one dependency declaration to the manifest; return the line."""
        spec = get_ecosystem(ecosystem)
        project = self._project(project)
        if not spec.editable:
            raise ConfigurationError(
                f"{spec.kind.value} manifests come from a fixture; dependencies cannot be added"
            )
        dep = Dependency.from_spec(dependency)
        if dep.path is not None and not spec.supports_local:
            raise ConfigurationError(f"{spec.kind.value} does not support local path dependencies")

        line = spec.render_line(dep, project)
        manifest = self.sandbox.resolve(project, spec.manifest)
        with open(manifest, "a", encoding="utf-8") as f:
            f.write(line + "\n")
        logger.debug("[%s] %s += %s", project, spec.manifest, line)
        return line

    def _copy_fixture(self, spec: EcosystemSpec, project: str) -> Path:
        source = self.config.fixtures_path / spec.manifest
        if not source.is_file():
            raise ConfigurationError(f"Fixture manifest not found: {source}")
        dest = self.sandbox.resolve(project, spec.manifest)
        shutil.copy2(source, dest)
        logger.debug("[%s] Copied fixture %s", project, source)
        return dest

    # ------------------------------------------------------------------
    # Install
    # ------------------------------------------------------------------

    def install(self, ecosystem: Ecosystem | str, project: Optional[str] = None) -> None:
        """Run the ecosystem's install steps in the project directory."""
        spec = get_ecosystem(ecosystem)
        directory = self.sandbox.project_path(self._project(project))
        if not spec.install_steps:
            logger.debug("%s has no install step", spec.kind.value)
        for step in spec.install_steps:
            self._run_step(step, directory)

    def _run_step(self, step: InstallStep, directory: Path) -> None:
        kwargs = {"clean_env": step.clean_env, "discard_stderr": step.discard_stderr}
        argv = step.argv
        if step.fallback:
            self.runner.run(argv, directory, allow_failure=True, **kwargs)
            if self.runner.last_result.succeeded:
                return
            logger.info("%s failed, falling back to %s", " ".join(argv), " ".join(step.fallback))
            argv = step.fallback
        self.runner.run(argv, directory, allow_failure=step.tolerate_failure, **kwargs)

    # ------------------------------------------------------------------
    # Local dependencies
    # ------------------------------------------------------------------

    def create_gem(self, gem_name: str, **options: Any) -> Path:
        """Write ``projects/<gem>/<gem>.gemspec`` for a local test gem.

        The options are validated before anything touches the disk.
        """
        content = gemspec_string(gem_name, options)
        gem_dir = self.sandbox.project_path(gem_name)
        gemspec = self.sandbox.resolve(gem_name, f"{gem_name}.gemspec")
        gem_dir.mkdir(parents=True, exist_ok=True)
        gemspec.write_text(content, encoding="utf-8")
        logger.info("Created gemspec %s", gemspec)
        return gemspec

    def depend_on_local_gem(self, gem_name: str, project: Optional[str] = None, **options: Any) -> str:
        """Make the app depend on a gem in the sandbox by path, then bundle."""
        dep = Dependency(gem_name, path=self.sandbox.project_path(gem_name), options=options)
        line = self.add_dependency(Ecosystem.RUBY_BUNDLE, dep, project)
        self.install(Ecosystem.RUBY_BUNDLE, project)
        return line

    def depend_on_local_project(
        self,
        ecosystem: Ecosystem | str,
        other: str,
        project: Optional[str] = None,
        *,
        install: bool = True,
    ) -> str:
        """Declare a path dependency on another project already in the sandbox."""
        spec = get_ecosystem(ecosystem)
        if not spec.supports_local:
            raise ConfigurationError(f"{spec.kind.value} does not support local path dependencies")
        if not self.sandbox.project_exists(other):
            raise ConfigurationError(f"Local project {other!r} has not been created")

        dep = Dependency(other, path=self.sandbox.project_path(other))
        line = self.add_dependency(spec.kind, dep, project)
        if install:
            self.install(spec.kind, project)
        return line
