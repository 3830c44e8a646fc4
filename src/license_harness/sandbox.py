"""Sandbox manager for disposable sample projects."""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path
from typing import Optional

from .errors import PathEscapeError

logger = logging.getLogger("license_harness.sandbox")


def _is_strict_descendant(path: Path, base: Path) -> bool:
    return path != base and path.is_relative_to(base)


class SandboxManager:
    """Owns ``<sandbox>/projects`` and every project path derived from it.

    Paths are normalized lexically (no symlink resolution, no filesystem
    access), so escaping a project is detected before anything is touched.
    """

    def __init__(self, sandbox_path: str | Path):
        self.sandbox_path = Path(os.path.normpath(Path(sandbox_path).absolute()))

    @property
    def projects_path(self) -> Path:
        return self.sandbox_path / "projects"

    def reset(self) -> None:
        """Remove every project and recreate an empty projects directory."""
        if self.projects_path.exists():
            logger.debug("Removing %s", self.projects_path)
            shutil.rmtree(self.projects_path)
        self.projects_path.mkdir(parents=True)
        logger.debug("Sandbox reset: %s", self.projects_path)

    def project_path(self, project: str) -> Path:
        """Return the root of *project*, which must sit directly in ``projects``."""
        path = Path(os.path.normpath(self.projects_path / project))
        if path.parent != self.projects_path:
            raise PathEscapeError(project)
        return path

    def resolve(self, project: str, sub_path: Optional[str | Path] = None) -> Path:
        """Return an absolute path inside *project*.

        With *sub_path*, the normalized result must be a strict descendant of
        the project root; anything else raises PathEscapeError.
        """
        base = self.project_path(project)
        if sub_path is None:
            return base

        path = Path(os.path.normpath(base / sub_path))
        if not _is_strict_descendant(path, base):
            raise PathEscapeError(project, str(sub_path))
        return path

    def ensure_project(self, project: str) -> Path:
        path = self.project_path(project)
        path.mkdir(parents=True, exist_ok=True)
        return path

    def project_exists(self, project: str) -> bool:
        return self.project_path(project).is_dir()

    def clean_project(self, project: str) -> None:
        """Remove one project directory."""
        path = self.project_path(project)
        if path.exists():
            shutil.rmtree(path)

    def list_projects(self) -> list[str]:
        if not self.projects_path.is_dir():
            return []
        return sorted(p.name for p in self.projects_path.iterdir() if p.is_dir())
