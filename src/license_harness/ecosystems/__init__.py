"""Ecosystems a sample project can be scaffolded for."""

from .base import Dependency, Ecosystem, EcosystemSpec, InstallStep, ManifestInit
from .manifests import gemspec_string, ruby_literal, validate_gemspec_options
from .registry import ECOSYSTEM_REGISTRY, get_ecosystem, list_ecosystems

__all__ = [
    "Dependency",
    "Ecosystem",
    "EcosystemSpec",
    "InstallStep",
    "ManifestInit",
    "ECOSYSTEM_REGISTRY",
    "gemspec_string",
    "get_ecosystem",
    "list_ecosystems",
    "ruby_literal",
    "validate_gemspec_options",
]
