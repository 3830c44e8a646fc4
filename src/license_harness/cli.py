"""CLI for the license harness."""

import sys
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import __version__
from .config import load_config
from .ecosystems import Ecosystem, list_ecosystems
from .errors import HarnessError
from .harness import Harness
from .log_config import setup_logging


console = Console()


def _fail(e: Exception) -> None:
    console.print(f"[red]Error: {escape(str(e))}[/red]")
    sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="license-harness")
@click.option("--config", "config_path", type=click.Path(exists=True), help="Harness YAML config")
@click.option("--verbose", "-v", is_flag=True, help="Echo log records to stderr")
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[str], verbose: bool):
    """License harness – provision sample projects and run the license scanner."""
    setup_logging(level="DEBUG" if verbose else "INFO", console=verbose)
    ctx.obj = Harness(load_config(config_path))


@cli.command()
def ecosystems():
    """List supported ecosystems."""
    table = Table(title="Ecosystems")
    table.add_column("Ecosystem", style="cyan")
    table.add_column("Manifest")
    table.add_column("Init")
    table.add_column("Install")

    for spec in list_ecosystems():
        install = "; ".join(step.describe() for step in spec.install_steps) or "-"
        table.add_row(spec.kind.value, spec.manifest, spec.init.value, install)

    console.print(table)


@cli.command()
@click.pass_obj
def reset(harness: Harness):
    """Remove every sample project from the sandbox."""
    harness.sandbox.reset()
    console.print(f"[green]✓ Sandbox reset:[/green] {harness.sandbox.projects_path}")


@cli.command()
@click.argument("ecosystem", type=click.Choice([e.value for e in Ecosystem]))
@click.option("--dep", "-d", "deps", multiple=True, help="Dependency, e.g. name==1.0 or name@1.0")
@click.option("--name", "-n", default=None, help="Project name (default: configured app name)")
@click.option("--no-install", is_flag=True, help="Skip the install step")
@click.pass_obj
def scaffold(harness: Harness, ecosystem: str, deps: tuple, name: Optional[str], no_install: bool):
    """Create a sample app for ECOSYSTEM."""
    try:
        path = harness.scaffolder.create_app(
            ecosystem,
            list(deps) if deps else None,
            name=name,
            install=not no_install,
        )
    except (HarnessError, ValueError) as e:
        _fail(e)
    console.print(f"[green]✓ Created {ecosystem} app:[/green] {path}")


@cli.command()
@click.option("--name", "-n", default=None, help="Project name (default: configured app name)")
@click.pass_obj
def scan(harness: Harness, name: Optional[str]):
    """Run the license scanner in a sample app and exit with its exit code."""
    try:
        output = harness.run_scanner(project=name)
    except (HarnessError, NotADirectoryError) as e:
        _fail(e)
    click.echo(output, nl=False)
    sys.exit(harness.last_result.exit_code)


@cli.command()
@click.argument("gem_name")
@click.option("--license", "license_", default=None, help="Single license")
@click.option("--licenses", multiple=True, help="One of several licenses (repeatable)")
@click.option("--summary", default=None)
@click.option("--description", default=None)
@click.option("--version", "gem_version", default=None)
@click.option("--homepage", default=None)
@click.pass_obj
def gemspec(
    harness: Harness,
    gem_name: str,
    license_: Optional[str],
    licenses: tuple,
    summary: Optional[str],
    description: Optional[str],
    gem_version: Optional[str],
    homepage: Optional[str],
):
    """Write a local test gem's gemspec into the sandbox."""
    options = {}
    if license_ is not None:
        options["license"] = license_
    if licenses:
        options["licenses"] = list(licenses)
    for key, value in (
        ("summary", summary),
        ("description", description),
        ("version", gem_version),
        ("homepage", homepage),
    ):
        if value is not None:
            options[key] = value

    try:
        path = harness.scaffolder.create_gem(gem_name, **options)
    except HarnessError as e:
        _fail(e)
    console.print(f"[green]✓ Wrote[/green] {path}")


def main():
    cli()


if __name__ == "__main__":
    main()
