from __future__ import annotations

import sys
from pathlib import Path

import pytest
from dotenv import load_dotenv

_PROJECT_ROOT = Path(__file__).resolve().parents[1]
_SRC = (_PROJECT_ROOT / "src").resolve()
if str(_SRC) not in sys.path:
    sys.path.insert(0, str(_SRC))

# Local overrides such as LICENSE_HARNESS_EXEC_PREFIX for end-to-end runs
load_dotenv(_PROJECT_ROOT / ".env", override=False)

from license_harness.config import HarnessConfig  # noqa: E402
from license_harness.harness import Harness  # noqa: E402
from license_harness.runner import CommandRunner  # noqa: E402


PROJECT_ROOT = _PROJECT_ROOT


class RecordingRunner(CommandRunner):
    """CommandRunner that records argv instead of spawning processes.

    ``responses`` maps the first two argv items (joined by a space) to an
    ``(exit_code, output)`` pair; anything else succeeds with no output.
    """

    def __init__(self, responses: dict[str, tuple[int, str]] | None = None, **kwargs):
        super().__init__(**kwargs)
        self.responses = dict(responses or {})
        self.calls: list[dict] = []

    def _execute(self, argv, cwd, env, discard_stderr, on_log):
        self.calls.append({"argv": list(argv), "cwd": cwd, "env": env, "discard_stderr": discard_stderr})
        key = " ".join(argv[:2])
        return self.responses.get(key, (0, ""))

    @property
    def argvs(self) -> list[list[str]]:
        return [c["argv"] for c in self.calls]


@pytest.fixture
def config(tmp_path: Path) -> HarnessConfig:
    return HarnessConfig(
        root_path=PROJECT_ROOT,
        sandbox_path=tmp_path / "tmp",
        scanner_source=tmp_path / "scanner",
    )


@pytest.fixture
def harness(config: HarnessConfig) -> Harness:
    return Harness(config)
