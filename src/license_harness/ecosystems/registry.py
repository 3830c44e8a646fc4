"""Ecosystem registry – the single table the scaffolder dispatches through."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .base import Dependency, Ecosystem, EcosystemSpec, InstallStep, ManifestInit
from .manifests import bower_line, gem_line, npm_line, pip_line

if TYPE_CHECKING:
    from ..config import HarnessConfig


def _scanner_gem(config: "HarnessConfig") -> list[Dependency]:
    return [Dependency("license_finder", path=config.scanner_source)]


ECOSYSTEM_REGISTRY: dict[Ecosystem, EcosystemSpec] = {
    Ecosystem.RUBY_BUNDLE: EcosystemSpec(
        kind=Ecosystem.RUBY_BUNDLE,
        manifest="Gemfile",
        init=ManifestInit.COMMAND,
        init_command=("bundle", "gem", "{name}"),
        render_line=gem_line,
        install_steps=(
            InstallStep(("bundle", "check"), fallback=("bundle", "install"), clean_env=True),
        ),
        default_dependencies=_scanner_gem,
        supports_local=True,
    ),
    Ecosystem.PYTHON_PIP: EcosystemSpec(
        kind=Ecosystem.PYTHON_PIP,
        manifest="requirements.txt",
        render_line=pip_line,
        install_steps=(InstallStep(("pip", "install", "-r", "requirements.txt")),),
        default_dependencies=lambda _config: [Dependency("argparse", "1.2.1")],
        supports_local=True,
    ),
    Ecosystem.NODE_NPM: EcosystemSpec(
        kind=Ecosystem.NODE_NPM,
        manifest="package.json",
        render_line=npm_line,
        install_steps=(InstallStep(("npm", "install"), tolerate_failure=True, discard_stderr=True),),
        default_dependencies=lambda _config: [Dependency("http-server", "0.6.1")],
        supports_local=True,
    ),
    Ecosystem.BOWER: EcosystemSpec(
        kind=Ecosystem.BOWER,
        manifest="bower.json",
        render_line=bower_line,
        install_steps=(InstallStep(("bower", "install"), tolerate_failure=True, discard_stderr=True),),
        default_dependencies=lambda _config: [Dependency("gmaps", "0.2.30")],
        supports_local=True,
    ),
    Ecosystem.MAVEN: EcosystemSpec(
        kind=Ecosystem.MAVEN,
        manifest="pom.xml",
        init=ManifestInit.FIXTURE,
        install_steps=(InstallStep(("mvn", "install")),),
    ),
    Ecosystem.GRADLE: EcosystemSpec(
        kind=Ecosystem.GRADLE,
        manifest="build.gradle",
        init=ManifestInit.FIXTURE,
    ),
    Ecosystem.COCOAPODS: EcosystemSpec(
        kind=Ecosystem.COCOAPODS,
        manifest="Podfile",
        init=ManifestInit.FIXTURE,
        install_steps=(InstallStep(("pod", "install", "--no-integrate")),),
    ),
}


def get_ecosystem(kind: Ecosystem | str) -> EcosystemSpec:
    """Return the registered spec for *kind* (an Ecosystem or its value)."""
    spec = ECOSYSTEM_REGISTRY.get(Ecosystem.parse(kind))
    if spec is None:
        raise ValueError(f"No ecosystem registered for: {kind}")
    return spec


def list_ecosystems() -> list[EcosystemSpec]:
    return list(ECOSYSTEM_REGISTRY.values())
