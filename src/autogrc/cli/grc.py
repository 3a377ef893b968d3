"""AutoGRC (grc) - Compliance scoring dashboard from the command line."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import click

SORT_DIRECTIONS = ["ascending", "descending"]


def _descending(direction: str | None) -> bool | None:
    if direction is None:
        return None
    return direction == "descending"


@click.group()
def grc_cli() -> None:
    """AutoGRC - Compliance scoring across applications and frameworks."""


@grc_cli.command()
@click.option("--project", "-p", type=click.Path(exists=True), required=True, help="Project path")
def init(project: str) -> None:
    """Initialize AutoGRC in a project."""
    from ..core.dashboard import initialize_project

    initialize_project(Path(project))


@grc_cli.command()
@click.option("--project", "-p", type=click.Path(exists=True), required=True, help="Project path")
@click.option("--snapshot", type=str, help="Snapshot file or directory (overrides config)")
@click.option("--output-format", "-f", type=click.Choice(["markdown", "json", "junit"]))
@click.option("--match", type=click.Choice(["control", "mapped-from"]), help="Assessment attribution")
@click.option("--ci", is_flag=True, help="CI mode: enable exit codes")
def score(
    project: str,
    snapshot: str | None,
    output_format: str | None,
    match: str | None,
    ci: bool,
) -> None:
    """Score every application against every framework.

    Example: grc score -p ./grc-data -f json --ci
    """
    from ..core.dashboard import run_scorecard

    exit_code = run_scorecard(
        project_path=Path(project),
        output_format=output_format,
        ci=ci,
        match=match,
        snapshot=snapshot,
    )
    if ci or exit_code > 10:
        sys.exit(exit_code)


@grc_cli.command()
@click.option("--project", "-p", type=click.Path(exists=True), required=True, help="Project path")
@click.option("--snapshot", type=str, help="Snapshot file or directory (overrides config)")
def domains(project: str, snapshot: str | None) -> None:
    """Show compliant and non-compliant applications per master domain."""
    from ..core.dashboard import run_domains

    sys.exit(run_domains(project_path=Path(project), snapshot=snapshot))


@grc_cli.command()
@click.option("--project", "-p", type=click.Path(exists=True), required=True, help="Project path")
@click.option("--snapshot", type=str, help="Snapshot file or directory (overrides config)")
@click.option("--domain", "-d", type=str, help="Only show one master domain")
@click.option("--sort-key", type=str, help="Control field to sort by (default: ID)")
@click.option("--sort", "direction", type=click.Choice(SORT_DIRECTIONS))
def compare(
    project: str,
    snapshot: str | None,
    domain: str | None,
    sort_key: str | None,
    direction: str | None,
) -> None:
    """Compare master framework controls with their mapped controls."""
    from ..core.dashboard import run_compare

    sys.exit(run_compare(
        project_path=Path(project),
        domain=domain,
        sort_key=sort_key,
        descending=_descending(direction),
        snapshot=snapshot,
    ))


@grc_cli.command()
@click.option("--project", "-p", type=click.Path(exists=True), required=True, help="Project path")
@click.option("--snapshot", type=str, help="Snapshot file or directory (overrides config)")
@click.option("--sort-key", type=str, help="Control field to sort by (default: ID)")
@click.option("--sort", "direction", type=click.Choice(SORT_DIRECTIONS))
def unmapped(
    project: str,
    snapshot: str | None,
    sort_key: str | None,
    direction: str | None,
) -> None:
    """List controls of other frameworks not mapped to the master framework."""
    from ..core.dashboard import run_unmapped

    sys.exit(run_unmapped(
        project_path=Path(project),
        sort_key=sort_key,
        descending=_descending(direction),
        snapshot=snapshot,
    ))


@grc_cli.command("ssl-scan")
@click.argument("host")
@click.option("--project", "-p", type=click.Path(exists=True), help="Project path (for ssllabs config)")
def ssl_scan(host: str, project: str | None) -> None:
    """Run an SSL Labs assessment of HOST.

    Example: grc ssl-scan example.com
    """
    from ..core.dashboard import run_ssl_scan

    sys.exit(asyncio.run(run_ssl_scan(host, Path(project) if project else None)))


def main() -> None:
    grc_cli()


if __name__ == "__main__":
    main()
