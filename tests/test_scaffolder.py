"""Tests for ProjectScaffolder, with install commands recorded instead of run."""

from pathlib import Path

import pytest

from conftest import RecordingRunner
from license_harness.config import HarnessConfig
from license_harness.ecosystems import Dependency, Ecosystem
from license_harness.errors import CommandFailure, ConfigurationError, PathEscapeError
from license_harness.sandbox import SandboxManager
from license_harness.scaffolder import ProjectScaffolder


def _scaffolder(config: HarnessConfig, responses=None) -> tuple[ProjectScaffolder, RecordingRunner]:
    runner = RecordingRunner(responses)
    return ProjectScaffolder(config, SandboxManager(config.sandbox_path), runner), runner


def _bundle_gem_side_effect(scaffolder: ProjectScaffolder, runner: RecordingRunner) -> None:
    """Make the recorded ``bundle gem`` call create the Gemfile it would generate."""
    original = runner._execute

    def _execute(argv, cwd, env, discard_stderr, on_log):
        if list(argv[:2]) == ["bundle", "gem"]:
            app = Path(cwd) / argv[2]
            app.mkdir(parents=True, exist_ok=True)
            (app / "Gemfile").write_text('source "https://rubygems.org"\n\ngemspec\n')
        return original(argv, cwd, env, discard_stderr, on_log)

    runner._execute = _execute


# ---------------------------------------------------------------------------
# Line-based ecosystems
# ---------------------------------------------------------------------------

def test_create_python_app(config: HarnessConfig) -> None:
    scaffolder, runner = _scaffolder(config)
    app = scaffolder.create_app(Ecosystem.PYTHON_PIP)

    assert app == config.projects_path / "my_app"
    assert (app / "requirements.txt").read_text() == "argparse==1.2.1\n"
    assert runner.argvs == [["pip", "install", "-r", "requirements.txt"]]
    assert runner.calls[0]["cwd"] == app


def test_create_node_app_tolerates_install_failure(config: HarnessConfig) -> None:
    scaffolder, runner = _scaffolder(config, {"npm install": (1, "npm ERR! registry down")})
    app = scaffolder.create_app("node-npm")

    assert (app / "package.json").read_text() == '{"dependencies" : {"http-server": "0.6.1"}}\n'
    assert runner.argvs == [["npm", "install"]]
    assert runner.calls[0]["discard_stderr"] is True
    assert runner.last_result.exit_code == 1


def test_create_bower_app(config: HarnessConfig) -> None:
    scaffolder, runner = _scaffolder(config, {"bower install": (1, "")})
    app = scaffolder.create_app("bower")

    assert (app / "bower.json").read_text() == '{"name": "my_app", "dependencies" : {"gmaps": "0.2.30"}}\n'
    assert runner.argvs == [["bower", "install"]]


def test_pip_install_failure_is_fatal(config: HarnessConfig) -> None:
    scaffolder, _ = _scaffolder(config, {"pip install": (1, "No matching distribution\n")})
    with pytest.raises(CommandFailure) as exc:
        scaffolder.create_app("python-pip")
    assert exc.value.command == "pip install -r requirements.txt"
    assert exc.value.exit_code == 1
    assert exc.value.output == "No matching distribution"


def test_create_app_with_explicit_dependencies_and_no_install(config: HarnessConfig) -> None:
    scaffolder, runner = _scaffolder(config)
    app = scaffolder.create_app("python-pip", ["requests==2.0.0", Dependency("six")], install=False)

    assert (app / "requirements.txt").read_text() == "requests==2.0.0\nsix\n"
    assert runner.calls == []


def test_add_dependency_appends(config: HarnessConfig) -> None:
    scaffolder, _ = _scaffolder(config)
    scaffolder.create_empty_project()
    scaffolder.initialize_manifest("python-pip")
    scaffolder.add_dependency("python-pip", "argparse==1.2.1")
    scaffolder.add_dependency("python-pip", "six==1.9.0")

    manifest = config.projects_path / "my_app" / "requirements.txt"
    assert manifest.read_text() == "argparse==1.2.1\nsix==1.9.0\n"


def test_create_app_resets_previous_projects(config: HarnessConfig) -> None:
    scaffolder, _ = _scaffolder(config)
    scaffolder.create_app("python-pip", name="first", install=False)
    scaffolder.create_app("python-pip", name="second", install=False)
    assert scaffolder.sandbox.list_projects() == ["second"]


# ---------------------------------------------------------------------------
# Fixture-based ecosystems
# ---------------------------------------------------------------------------

@pytest.mark.parametrize(
    "kind, manifest, install",
    [
        ("maven", "pom.xml", [["mvn", "install"]]),
        ("gradle", "build.gradle", []),
        ("cocoapods", "Podfile", [["pod", "install", "--no-integrate"]]),
    ],
)
def test_fixture_ecosystems_copy_fixture(config: HarnessConfig, kind: str, manifest: str, install) -> None:
    scaffolder, runner = _scaffolder(config)
    app = scaffolder.create_app(kind)

    assert (app / manifest).read_bytes() == (config.fixtures_path / manifest).read_bytes()
    assert runner.argvs == install


def test_fixture_ecosystems_reject_dependencies(config: HarnessConfig) -> None:
    scaffolder, _ = _scaffolder(config)
    with pytest.raises(ConfigurationError):
        scaffolder.create_app("maven", ["junit==4.11"])
    with pytest.raises(ConfigurationError):
        scaffolder.add_dependency("gradle", "junit==4.11")


def test_missing_fixture(tmp_path: Path) -> None:
    config = HarnessConfig(root_path=tmp_path)
    scaffolder, _ = _scaffolder(config)
    with pytest.raises(ConfigurationError, match="Fixture manifest not found"):
        scaffolder.create_app("cocoapods")


# ---------------------------------------------------------------------------
# Ruby
# ---------------------------------------------------------------------------

def test_create_ruby_app(config: HarnessConfig) -> None:
    scaffolder, runner = _scaffolder(config)
    _bundle_gem_side_effect(scaffolder, runner)
    app = scaffolder.create_app("ruby-bundle")

    assert runner.argvs == [["bundle", "gem", "my_app"], ["bundle", "check"]]
    assert runner.calls[0]["cwd"] == config.projects_path
    gemfile = (app / "Gemfile").read_text()
    assert gemfile.endswith(f'gem "license_finder", {{:path=>"{config.scanner_source}"}}\n')


def test_bundle_check_falls_back_to_install(config: HarnessConfig) -> None:
    scaffolder, runner = _scaffolder(config, {"bundle check": (1, "missing gems")})
    scaffolder.create_empty_project()
    scaffolder.install("ruby-bundle")

    assert runner.argvs == [["bundle", "check"], ["bundle", "install"]]


def test_bundle_runs_with_clean_env(config: HarnessConfig, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BUNDLE_GEMFILE", "/harness/Gemfile")
    scaffolder, runner = _scaffolder(config)
    scaffolder.create_empty_project()
    scaffolder.install("ruby-bundle")

    assert "BUNDLE_GEMFILE" not in runner.calls[0]["env"]


def test_create_gem_writes_gemspec(config: HarnessConfig) -> None:
    scaffolder, _ = _scaffolder(config)
    scaffolder.sandbox.reset()
    path = scaffolder.create_gem("gpl_gem", license="GPL")

    assert path == config.projects_path / "gpl_gem" / "gpl_gem.gemspec"
    assert 's.license = "GPL"' in path.read_text()


def test_create_gem_with_both_license_keys_writes_nothing(config: HarnessConfig) -> None:
    scaffolder, runner = _scaffolder(config)
    scaffolder.sandbox.reset()

    with pytest.raises(ConfigurationError):
        scaffolder.create_gem("bad_gem", license="MIT", licenses=["GPL"])

    assert not (config.projects_path / "bad_gem").exists()
    assert runner.calls == []


def test_create_gem_exactly_one_license_key_never_raises(config: HarnessConfig) -> None:
    scaffolder, _ = _scaffolder(config)
    scaffolder.create_gem("one", license="MIT")
    scaffolder.create_gem("many", licenses=["MIT", "GPL"])


def test_depend_on_local_gem(config: HarnessConfig) -> None:
    scaffolder, runner = _scaffolder(config)
    scaffolder.create_empty_project()
    scaffolder.create_gem("gpl_gem", license="GPL")

    line = scaffolder.depend_on_local_gem("gpl_gem", groups=["test"])

    gem_dir = config.projects_path / "gpl_gem"
    assert line == f'gem "gpl_gem", {{:groups=>["test"], :path=>"{gem_dir}"}}'
    assert (config.projects_path / "my_app" / "Gemfile").read_text() == line + "\n"
    assert runner.argvs == [["bundle", "check"]]


# ---------------------------------------------------------------------------
# Local projects
# ---------------------------------------------------------------------------

def test_depend_on_local_project_npm(config: HarnessConfig) -> None:
    scaffolder, runner = _scaffolder(config)
    scaffolder.create_empty_project()
    scaffolder.sandbox.ensure_project("shared_lib")
    scaffolder.initialize_manifest("node-npm")

    line = scaffolder.depend_on_local_project("node-npm", "shared_lib")

    lib = config.projects_path / "shared_lib"
    assert line == '{"dependencies" : {"shared_lib": "file:%s"}}' % lib
    assert runner.argvs == [["npm", "install"]]


def test_depend_on_local_project_requires_existing_project(config: HarnessConfig) -> None:
    scaffolder, _ = _scaffolder(config)
    scaffolder.create_empty_project()
    with pytest.raises(ConfigurationError, match="has not been created"):
        scaffolder.depend_on_local_project("python-pip", "nope")


def test_depend_on_local_project_unsupported(config: HarnessConfig) -> None:
    scaffolder, _ = _scaffolder(config)
    scaffolder.create_empty_project()
    with pytest.raises(ConfigurationError, match="local path"):
        scaffolder.depend_on_local_project("maven", "my_app")


def test_project_names_are_bounded(config: HarnessConfig) -> None:
    scaffolder, _ = _scaffolder(config)
    with pytest.raises(PathEscapeError):
        scaffolder.create_gem("../outside", license="MIT")


@pytest.mark.parametrize("ecosystem", ["ruby-bundle", "python-pip", "maven"])
def test_escaping_app_name_runs_nothing(config: HarnessConfig, ecosystem: str) -> None:
    scaffolder, runner = _scaffolder(config)
    with pytest.raises(PathEscapeError):
        scaffolder.create_app(ecosystem, name="../escape")

    assert runner.calls == []
    assert not (config.sandbox_path / "escape").exists()


def test_initialize_manifest_checks_name_before_generator(config: HarnessConfig) -> None:
    scaffolder, runner = _scaffolder(config)
    with pytest.raises(PathEscapeError):
        scaffolder.initialize_manifest("ruby-bundle", "../escape")
    assert runner.calls == []


def test_pip_direct_reference_is_written_verbatim(config: HarnessConfig) -> None:
    scaffolder, _ = _scaffolder(config)
    app = scaffolder.create_app(
        "python-pip",
        ["pkg @ https://example.com/pkg-1.0.tar.gz", "git+https://host/x@v1#egg=x"],
        install=False,
    )

    assert (app / "requirements.txt").read_text() == (
        "pkg @ https://example.com/pkg-1.0.tar.gz\ngit+https://host/x@v1#egg=x\n"
    )
