"""Manifest line renderers and Ruby source generation."""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any

from ..errors import ConfigurationError
from .base import Dependency

_SYMBOL_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*[?!]?$")

_RUBY_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\t": "\\t",
    "\r": "\\r",
}

GEMSPEC_LICENSE_KEYS = ("license", "licenses")


# ---------------------------------------------------------------------------
# Ruby literals
# ---------------------------------------------------------------------------

def _ruby_string(value: str) -> str:
    out = "".join(_RUBY_ESCAPES.get(ch, ch) for ch in value)
    return '"' + out.replace("#{", "\\#{") + '"'


def ruby_literal(value: Any) -> str:
    """Render a Python value as the equivalent Ruby literal (``inspect`` style)."""
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return repr(value)
    if isinstance(value, Path):
        return _ruby_string(str(value))
    if isinstance(value, str):
        return _ruby_string(value)
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(ruby_literal(v) for v in value) + "]"
    if isinstance(value, dict):
        return ruby_hash(value)
    raise TypeError(f"Cannot render {type(value).__name__} as a Ruby literal")


def ruby_hash(options: dict[str, Any]) -> str:
    """Render a hash with symbol keys, e.g. ``{:path=>"/src"}``."""
    items = []
    for key, value in options.items():
        k = str(key)
        key_literal = f":{k}" if _SYMBOL_RE.match(k) else _ruby_string(k)
        items.append(f"{key_literal}=>{ruby_literal(value)}")
    return "{" + ", ".join(items) + "}"


# ---------------------------------------------------------------------------
# Per-ecosystem dependency lines
# ---------------------------------------------------------------------------

def gem_line(dep: Dependency, project: str) -> str:
    """``gem "name"`` with an optional version and options hash."""
    options = dict(dep.options)
    if dep.path is not None:
        options["path"] = str(dep.path)
    parts = [ruby_literal(dep.name)]
    if dep.version:
        parts.append(ruby_literal(dep.version))
    if options:
        parts.append(ruby_hash(options))
    return "gem " + ", ".join(parts)


def pip_line(dep: Dependency, project: str) -> str:
    if dep.path is not None:
        return f"-e {dep.path}"
    if dep.raw is not None:
        return dep.raw
    if dep.version:
        return f"{dep.name}=={dep.version}"
    return dep.name


def _node_version(dep: Dependency) -> str:
    if dep.path is not None:
        return f"file:{dep.path}"
    return dep.version or "*"


def npm_line(dep: Dependency, project: str) -> str:
    return '{"dependencies" : {%s: %s}}' % (json.dumps(dep.name), json.dumps(_node_version(dep)))


def bower_line(dep: Dependency, project: str) -> str:
    version = str(dep.path) if dep.path is not None else (dep.version or "*")
    return '{"name": %s, "dependencies" : {%s: %s}}' % (
        json.dumps(project),
        json.dumps(dep.name),
        json.dumps(version),
    )


# ---------------------------------------------------------------------------
# Gemspec generation
# ---------------------------------------------------------------------------

def validate_gemspec_options(options: dict[str, Any]) -> str:
    """Check gemspec options and return the license key in use.

    Raises:
        ConfigurationError: both or neither of ``license``/``licenses`` are
            given. Other option names are ignored.
    """
    present = [k for k in GEMSPEC_LICENSE_KEYS if k in options]
    if len(present) > 1:
        raise ConfigurationError("Can't specify both `license` and `licenses`")
    if not present:
        raise ConfigurationError("A gemspec needs either `license` or `licenses`")
    return present[0]


def gemspec_string(gem_name: str, options: dict[str, Any]) -> str:
    """Render a ``Gem::Specification`` block for a local test gem."""
    license_key = validate_gemspec_options(options)

    fields = [
        ("name", gem_name),
        ("version", options.get("version") or "0.0.0"),
        ("author", "Cucumber"),
        ("summary", options.get("summary", "") or ""),
        (license_key, options[license_key]),
        ("description", options.get("description", "") or ""),
        ("homepage", options.get("homepage") or ""),
    ]
    lines = ["Gem::Specification.new do |s|"]
    lines += [f"  s.{key} = {ruby_literal(value)}" for key, value in fields]
    lines.append("end")
    return "\n".join(lines) + "\n"
