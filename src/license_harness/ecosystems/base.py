"""Ecosystem definitions shared by every manifest format."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Optional

if TYPE_CHECKING:
    from ..config import HarnessConfig


class Ecosystem(str, Enum):
    """Dependency ecosystem a sample project is modelled after."""

    RUBY_BUNDLE = "ruby-bundle"
    PYTHON_PIP = "python-pip"
    NODE_NPM = "node-npm"
    BOWER = "bower"
    MAVEN = "maven"
    GRADLE = "gradle"
    COCOAPODS = "cocoapods"

    @classmethod
    def parse(cls, value: "Ecosystem | str") -> "Ecosystem":
        """Accept an Ecosystem or its value, case-insensitive, ``_`` for ``-``."""
        if isinstance(value, cls):
            return value
        key = str(value or "").strip().lower().replace("_", "-")
        try:
            return cls(key)
        except ValueError:
            known = ", ".join(e.value for e in cls)
            raise ValueError(f"Unknown ecosystem: {value!r} (known: {known})") from None


class ManifestInit(str, Enum):
    """How an empty manifest comes into existence."""

    TOUCH = "touch"  # create an empty file
    FIXTURE = "fixture"  # copy the prebuilt file from the fixtures directory
    COMMAND = "command"  # run the ecosystem's generator in the projects directory


@dataclass
class Dependency:
    """A dependency declaration before it is rendered for a manifest."""

    name: str
    version: Optional[str] = None
    path: Optional[Path] = None
    options: dict[str, Any] = field(default_factory=dict)
    raw: Optional[str] = None  # the text as given, for manifests that take it verbatim

    @classmethod
    def from_spec(cls, spec: "str | Dependency") -> "Dependency":
        """Parse ``name==version``, ``name@version`` or a bare name.

        The stripped text is kept in ``raw``.
        """
        if isinstance(spec, Dependency):
            return spec
        text = str(spec).strip()
        if not text:
            raise ValueError("Empty dependency specification")
        if "==" in text:
            name, version = text.split("==", 1)
            return cls(name=name.strip(), version=version.strip() or None, raw=text)
        if "@" in text[1:]:  # a leading @ is an npm scope
            name, version = text.rsplit("@", 1)
            return cls(name=name.strip(), version=version.strip() or None, raw=text)
        return cls(name=text, raw=text)


@dataclass(frozen=True)
class InstallStep:
    """One install invocation.

    ``fallback`` runs only when ``argv`` exits non-zero, and its own failure
    is then subject to ``tolerate_failure``.
    """

    argv: tuple[str, ...]
    fallback: Optional[tuple[str, ...]] = None
    tolerate_failure: bool = False
    discard_stderr: bool = False
    clean_env: bool = False

    def describe(self) -> str:
        text = " ".join(self.argv)
        if self.fallback:
            text += " || " + " ".join(self.fallback)
        return text


def _no_defaults(config: "HarnessConfig") -> list[Dependency]:
    return []


@dataclass(frozen=True)
class EcosystemSpec:
    """Everything the scaffolder needs to know about one ecosystem."""

    kind: Ecosystem
    manifest: str
    init: ManifestInit = ManifestInit.TOUCH
    init_command: tuple[str, ...] = ()
    render_line: Optional[Callable[[Dependency, str], str]] = None
    install_steps: tuple[InstallStep, ...] = ()
    default_dependencies: Callable[["HarnessConfig"], list[Dependency]] = _no_defaults
    supports_local: bool = False

    @property
    def editable(self) -> bool:
        """Whether dependencies can be appended to the manifest."""
        return self.render_line is not None
