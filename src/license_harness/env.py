"""Clean-environment helpers for child processes.

The harness itself usually runs inside a virtualenv (and sometimes under
``bundle exec``). Package managers and the scanner invoked from a scenario
must behave as if they were run standalone, so the configuration those tools
read from the environment is not passed through.
"""

import os
from typing import Optional


# ---------------------------------------------------------------------------
# Ecosystem-manager configuration that must not leak into child processes
# ---------------------------------------------------------------------------

_DENY_KEYS = {
    "RUBYOPT",
    "RUBYLIB",
    "VIRTUAL_ENV",
    "VIRTUAL_ENV_PROMPT",
    "PYTHONPATH",
    "PYTHONHOME",
    "PYTHONSTARTUP",
    "__PYVENV_LAUNCHER__",
    "PIPENV_ACTIVE",
    "NODE_PATH",
}

_DENY_PREFIXES = (
    "BUNDLE_",
    "BUNDLER_",
    "GEM_",
    "PIP_",
    "npm_config_",
    "NPM_CONFIG_",
    "npm_package_",
    "npm_lifecycle_",
    "CONDA_",
    "POETRY_",
    "UV_",
    "LICENSE_HARNESS_",
)


def _is_denied(key: str) -> bool:
    if key in _DENY_KEYS:
        return True
    return any(key.startswith(p) for p in _DENY_PREFIXES)


def _strip_virtualenv_from_path(path_value: str, venv: Optional[str]) -> str:
    if not venv:
        return path_value
    venv_norm = os.path.normpath(venv)
    kept = []
    for entry in path_value.split(os.pathsep):
        if not entry:
            continue
        entry_norm = os.path.normpath(entry)
        if entry_norm == venv_norm or entry_norm.startswith(venv_norm + os.sep):
            continue
        kept.append(entry)
    return os.pathsep.join(kept)


def clean_environment(
    parent_env: Optional[dict[str, str]] = None,
    explicit_env: Optional[dict[str, str]] = None,
    *,
    inherit: bool = False,
) -> dict[str, str]:
    """Return a child environment without inherited ecosystem configuration.

    Args:
        parent_env: Environment to filter (defaults to ``os.environ``).
        explicit_env: Variables the caller wants set; they are applied last
            and are never filtered.
        inherit: Skip filtering entirely and return the parent environment
            merged with ``explicit_env``.
    """
    parent = dict(os.environ if parent_env is None else parent_env)
    out: dict[str, str] = {}

    if inherit:
        out = {str(k): str(v) for k, v in parent.items() if v is not None}
    else:
        for k, v in parent.items():
            if k is None or v is None:
                continue
            kk = str(k)
            if _is_denied(kk):
                continue
            out[kk] = str(v)
        if "PATH" in out:
            out["PATH"] = _strip_virtualenv_from_path(out["PATH"], parent.get("VIRTUAL_ENV"))

    for k, v in (explicit_env or {}).items():
        if k is None or v is None:
            continue
        out[str(k)] = str(v)
    return out


def merged_environment(explicit_env: Optional[dict[str, str]] = None) -> dict[str, str]:
    """Return the current environment with ``explicit_env`` applied on top."""
    run_env = os.environ.copy()
    for k, v in (explicit_env or {}).items():
        if k is None or v is None:
            continue
        run_env[str(k)] = str(v)
    return run_env
