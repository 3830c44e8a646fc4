"""Configuration for the license harness."""

import os
import shlex
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv

ENV_PREFIX = "LICENSE_HARNESS_"

DEFAULT_APP_NAME = "my_app"
DEFAULT_SCANNER_COMMAND = ("license_finder", "--quiet")

_TRUTHY = {"1", "true", "yes", "on"}


def _as_command(value) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return tuple(shlex.split(value))
    return tuple(str(v) for v in value)


@dataclass
class HarnessConfig:
    """Where the harness lives on disk and what it runs.

    ``sandbox_path`` and ``fixtures_path`` default to ``<root>/tmp`` and
    ``<root>/spec/fixtures``. ``scanner_source`` is the path the Ruby sample
    app uses to depend on the scanner gem; it defaults to the root.
    """
    root_path: Path = field(default_factory=Path.cwd)
    sandbox_path: Optional[Path] = None
    fixtures_path: Optional[Path] = None
    app_name: str = DEFAULT_APP_NAME
    scanner_command: tuple[str, ...] = DEFAULT_SCANNER_COMMAND
    exec_prefix: tuple[str, ...] = ()
    scanner_source: Optional[Path] = None
    inherit_env: bool = False

    def __post_init__(self) -> None:
        self.root_path = Path(self.root_path).resolve()
        self.sandbox_path = self._under_root(self.sandbox_path, Path("tmp"))
        self.fixtures_path = self._under_root(self.fixtures_path, Path("spec") / "fixtures")
        self.scanner_source = self._under_root(self.scanner_source, Path("."))
        self.scanner_command = _as_command(self.scanner_command)
        self.exec_prefix = _as_command(self.exec_prefix)
        if not self.scanner_command:
            raise ValueError("scanner_command must not be empty")

    def _under_root(self, value: Optional[Path | str], default: Path) -> Path:
        p = Path(value) if value else default
        if not p.is_absolute():
            p = self.root_path / p
        return Path(os.path.normpath(p))

    @property
    def projects_path(self) -> Path:
        return self.sandbox_path / "projects"

    @property
    def scanner_argv(self) -> tuple[str, ...]:
        return self.exec_prefix + self.scanner_command

    @classmethod
    def from_dict(cls, data: dict, base_path: Optional[Path] = None) -> "HarnessConfig":
        """Create configuration from a dictionary (e.g. parsed YAML)."""
        data = dict(data or {})
        root = data.get("root_path") or data.get("root") or "."
        root_path = Path(root)
        if not root_path.is_absolute() and base_path is not None:
            root_path = base_path / root_path
        return cls(
            root_path=root_path,
            sandbox_path=data.get("sandbox_path"),
            fixtures_path=data.get("fixtures_path"),
            app_name=data.get("app_name", DEFAULT_APP_NAME),
            scanner_command=data.get("scanner_command", DEFAULT_SCANNER_COMMAND),
            exec_prefix=data.get("exec_prefix", ()),
            scanner_source=data.get("scanner_source"),
            inherit_env=bool(data.get("inherit_env", False)),
        )

    @classmethod
    def from_env(cls, env: Optional[dict[str, str]] = None) -> "HarnessConfig":
        src = os.environ if env is None else env

        def clean(key: str) -> Optional[str]:
            value = src.get(ENV_PREFIX + key)
            if value is None:
                return None
            v = str(value).strip()
            return v or None

        scanner = clean("SCANNER")
        return cls(
            root_path=Path(clean("ROOT") or Path.cwd()),
            sandbox_path=clean("SANDBOX"),
            fixtures_path=clean("FIXTURES"),
            app_name=clean("APP_NAME") or DEFAULT_APP_NAME,
            scanner_command=scanner if scanner else DEFAULT_SCANNER_COMMAND,
            exec_prefix=clean("EXEC_PREFIX") or (),
            scanner_source=clean("SCANNER_SOURCE"),
            inherit_env=(clean("INHERIT_ENV") or "").lower() in _TRUTHY,
        )

    @classmethod
    def from_yaml(cls, path: Path) -> "HarnessConfig":
        """Load harness configuration from a YAML file."""
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        return cls.from_dict(data, base_path=Path(path).parent)

    def to_dict(self) -> dict:
        return {
            "root_path": str(self.root_path),
            "sandbox_path": str(self.sandbox_path),
            "fixtures_path": str(self.fixtures_path),
            "app_name": self.app_name,
            "scanner_command": list(self.scanner_command),
            "exec_prefix": list(self.exec_prefix),
            "scanner_source": str(self.scanner_source),
            "inherit_env": self.inherit_env,
        }

    def to_yaml(self, path: Path) -> None:
        """Save configuration to a YAML file."""
        with open(path, "w") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)


def load_config(path: Optional[str | Path] = None) -> HarnessConfig:
    """Load configuration from a YAML file, or from the environment.

    A ``.env`` file in the working directory is loaded first without
    overriding variables that are already set.
    """
    load_dotenv(Path.cwd() / ".env", override=False)
    if path is None:
        return HarnessConfig.from_env()
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    return HarnessConfig.from_yaml(path)
