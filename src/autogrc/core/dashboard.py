"""Dashboard orchestration behind the ``grc`` commands.

Loads the project config and store snapshot, runs the scoring engine and
renders results to the console and report files. Every ``run_*`` function
returns a process exit code.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.table import Table

from .. import __version__
from ..formatters.json_export import build_scorecard_document, export_scorecards_json
from ..formatters.junit import export_junit_results
from ..formatters.markdown import generate_dashboard_report
from ..integrations.ssllabs import SslLabsClient, SslLabsError
from ..mapping.resolver import compare_frameworks, unmapped_controls
from ..models.records import Snapshot
from ..models.scores import ComplianceStatus
from .aggregator import AssessmentMatch
from .classifier import classify
from .config import CONFIG_DIR, get_effective_config, resolve_reports_dir, resolve_snapshot_path
from .domains import partition_domains
from .snapshot import SnapshotError, load_snapshot
from .summarizer import (
    application_kpis,
    dashboard_summary,
    framework_compliance,
    framework_overview,
    score_applications,
)

console = Console()

EXIT_BAD_INPUT = 11
EXIT_NOT_FOUND = 12
EXIT_SCAN_FAILED = 13

STATUS_COLORS = {"compliant": "green", "warning": "yellow", "critical": "red"}


def initialize_project(project_path: Path) -> None:
    """Initialize .autogrc directory structure in a project."""
    grc_dir = project_path / CONFIG_DIR
    (grc_dir / "reports").mkdir(parents=True, exist_ok=True)

    config_path = grc_dir / "config.yaml"
    if not config_path.exists():
        config_path.write_text(
            "# AutoGRC project configuration\n"
            "\n"
            f"autogrc_version: \"{__version__}\"\n"
            "\n"
            "project:\n"
            f'  name: "{project_path.name}"\n'
            "\n"
            "data:\n"
            "  snapshot: data\n"
            "  match: control\n",
            encoding="utf-8",
        )

    console.print(f"  [green]Initialized[/green] {CONFIG_DIR}/ in {project_path.name}")


def get_exit_code(status: ComplianceStatus, config: dict) -> int:
    """Map an overall compliance status to a CI exit code."""
    exit_codes = config.get("ci", {}).get("exit_codes", {})
    return int(exit_codes.get(status.value, 0))


def _load(
    project_path: Path,
    cli_overrides: Optional[dict] = None,
) -> tuple[Optional[dict], Optional[Snapshot]]:
    project_path = Path(project_path).resolve()
    if not project_path.exists():
        console.print(f"  [red]ERROR[/red] Project path does not exist: {project_path}")
        return None, None

    config = get_effective_config(project_path, cli_overrides=cli_overrides)
    snapshot_path = resolve_snapshot_path(config)
    try:
        snapshot = load_snapshot(snapshot_path)
    except SnapshotError as e:
        console.print(f"  [red]ERROR[/red] {e}")
        return config, None

    masters = [f for f in snapshot.frameworks if f.master]
    if len(masters) > 1:
        console.print(
            f"  [yellow]WARN[/yellow] {len(masters)} frameworks flagged as master, "
            f"using {masters[0].name}"
        )

    console.print(
        f"  [green]OK[/green] Snapshot: {len(snapshot.applications)} applications, "
        f"{len(snapshot.frameworks)} frameworks, {len(snapshot.controls)} controls, "
        f"{len(snapshot.assessments)} assessments, {len(snapshot.mappings)} mappings"
    )
    return config, snapshot


def _status_text(status: ComplianceStatus, score: int) -> str:
    color = STATUS_COLORS[status.value]
    return f"[{color}]{score}%[/{color}]"


def run_scorecard(
    project_path: Path,
    output_format: Optional[str] = None,
    ci: bool = False,
    match: Optional[str] = None,
    snapshot: Optional[str] = None,
) -> int:
    """Score every application and write the dashboard report. Returns exit code."""
    overrides: dict = {}
    if output_format:
        overrides.setdefault("output", {})["format"] = output_format
    if match:
        overrides.setdefault("data", {})["match"] = match
    if snapshot:
        overrides.setdefault("data", {})["snapshot"] = snapshot

    config, data = _load(project_path, overrides or None)
    if data is None:
        return EXIT_NOT_FOUND

    try:
        match_mode = AssessmentMatch(config["data"].get("match", "control"))
    except ValueError:
        console.print(f"  [red]ERROR[/red] Unknown assessment match mode: {config['data'].get('match')}")
        return EXIT_BAD_INPUT

    is_ci = ci or bool(os.environ.get("CI") or os.environ.get("GITHUB_ACTIONS"))
    project_name = config.get("project", {}).get("name") or Path(project_path).resolve().name

    scorecards = score_applications(
        data.applications, data.frameworks, data.controls, data.assessments, match_mode
    )
    summary = dashboard_summary(data, scorecards)
    kpis = application_kpis(scorecards)
    domains = partition_domains(data.applications, data.frameworks, data.controls, data.assessments)
    overview = framework_overview(data.frameworks, data.controls, data.assessments)
    compliance = framework_compliance(data.frameworks, data.controls, data.assessments, match_mode)

    fw_table = Table(title="Framework Compliance")
    fw_table.add_column("Framework")
    fw_table.add_column("Compliance", justify="right")
    fw_table.add_column("Passed", justify="right")
    fw_table.add_column("Partial", justify="right")
    fw_table.add_column("Controls", justify="right")
    for fs in compliance:
        fw_table.add_row(
            fs.framework_name,
            _status_text(fs.status, fs.score),
            str(fs.passed_controls),
            str(fs.partial_controls),
            str(fs.total_controls),
        )

    table = Table(title="Application Compliance")
    table.add_column("Application")
    for fw in data.frameworks:
        table.add_column(fw.name, justify="right")
    table.add_column("Overall", justify="right")
    for sc in scorecards:
        cells = [_status_text(fs.status, fs.score) for fs in sc.framework_scores]
        table.add_row(sc.application.name, *cells, _status_text(sc.status, sc.overall_score))
    console.print()
    console.print(fw_table)
    console.print(table)

    reports_dir = resolve_reports_dir(config)
    reports_dir.mkdir(parents=True, exist_ok=True)

    output_format = config.get("output", {}).get("format", "markdown")
    if output_format == "json":
        document = build_scorecard_document(
            scorecards, summary, domains, project_name, compliance=compliance
        )
        path = export_scorecards_json(document, reports_dir / "compliance-report.json")
        console.print(f"  [green]OK[/green] JSON report: {path}")
    else:
        report = generate_dashboard_report(
            scorecards, summary, kpis, overview, domains,
            project_name=project_name, compliance=compliance,
        )
        path = reports_dir / "COMPLIANCE-REPORT.md"
        path.write_text(report, encoding="utf-8")
        console.print(f"  [green]OK[/green] Report: {path}")

    if output_format == "junit" or is_ci:
        junit_result = export_junit_results(
            scorecards,
            reports_dir / "compliance-results.xml",
            fail_on=config.get("ci", {}).get("fail_on"),
            project_name=project_name,
        )
        console.print(
            f"  [green]OK[/green] JUnit XML: {junit_result['total_tests']} tests, "
            f"{junit_result['failures']} failures"
        )

    status = classify(summary.overall_compliance)
    color = STATUS_COLORS[status.value]
    console.print(f"\n  [{color}]Overall compliance: {summary.overall_compliance}% ({status.value})[/{color}]")

    exit_code = get_exit_code(status, config)
    if is_ci:
        console.print(f"  CI Mode: Exiting with code {exit_code}")
    return exit_code


def run_domains(project_path: Path, snapshot: Optional[str] = None) -> int:
    """Print compliant/non-compliant applications per master domain."""
    overrides = {"data": {"snapshot": snapshot}} if snapshot else None
    _, data = _load(project_path, overrides)
    if data is None:
        return EXIT_NOT_FOUND

    master = data.master_framework
    if master is None:
        console.print("  [yellow]WARN[/yellow] No master framework found")
        return 0

    domains = partition_domains(data.applications, data.frameworks, data.controls, data.assessments)

    table = Table(title=f"Domain Compliance ({master.name})")
    table.add_column("Domain")
    table.add_column("Controls", justify="right")
    table.add_column("Compliant", style="green")
    table.add_column("Non-Compliant", style="red")
    for d in domains:
        table.add_row(
            d.domain,
            str(d.total_controls),
            ", ".join(a.name for a in d.compliant_applications) or "-",
            ", ".join(a.name for a in d.non_compliant_applications) or "-",
        )
    console.print(table)
    return 0


def _mapping_overrides(
    snapshot: Optional[str],
    sort_key: Optional[str],
    descending: Optional[bool],
) -> Optional[dict]:
    overrides: dict = {}
    if snapshot:
        overrides["data"] = {"snapshot": snapshot}
    if sort_key:
        overrides.setdefault("mapping", {})["sort_key"] = sort_key
    if descending is not None:
        overrides.setdefault("mapping", {})["descending"] = descending
    return overrides or None


def run_compare(
    project_path: Path,
    domain: Optional[str] = None,
    sort_key: Optional[str] = None,
    descending: Optional[bool] = None,
    snapshot: Optional[str] = None,
) -> int:
    """Print the master-vs-others mapping comparison."""
    config, data = _load(project_path, _mapping_overrides(snapshot, sort_key, descending))
    if data is None:
        return EXIT_NOT_FOUND

    master = data.master_framework
    if master is None:
        console.print("  [yellow]WARN[/yellow] No master framework found")
        return 0

    others = data.other_frameworks
    try:
        comparison = compare_frameworks(
            master, others, data.controls, data.mappings,
            sort_key=config["mapping"]["sort_key"],
            descending=bool(config["mapping"]["descending"]),
        )
    except ValueError as e:
        console.print(f"  [red]ERROR[/red] {e}")
        return EXIT_BAD_INPUT

    for entry in comparison:
        if domain and entry.domain != domain:
            continue
        table = Table(title=entry.domain)
        table.add_column(f"{master.name} (Master)")
        for fw in others:
            table.add_column(fw.name)
        for row in entry.rows:
            cells = [
                ", ".join(c.code for c in row.mapped_controls.get(fw.id, []))
                for fw in others
            ]
            table.add_row(row.master_control.code, *cells)
        console.print(table)
    return 0


def run_unmapped(
    project_path: Path,
    sort_key: Optional[str] = None,
    descending: Optional[bool] = None,
    snapshot: Optional[str] = None,
) -> int:
    """Print controls of other frameworks with no mapping to the master."""
    config, data = _load(project_path, _mapping_overrides(snapshot, sort_key, descending))
    if data is None:
        return EXIT_NOT_FOUND

    master = data.master_framework
    if master is None:
        console.print("  [yellow]WARN[/yellow] No master framework found")
        return 0

    try:
        unmapped = unmapped_controls(
            master, data.other_frameworks, data.controls, data.mappings,
            sort_key=config["mapping"]["sort_key"],
            descending=bool(config["mapping"]["descending"]),
        )
    except ValueError as e:
        console.print(f"  [red]ERROR[/red] {e}")
        return EXIT_BAD_INPUT

    if not unmapped:
        console.print(f"  [green]OK[/green] Every control is mapped to {master.name}")
        return 0

    for entry in unmapped:
        table = Table(title=f"{entry.framework.name}: {entry.total_unmapped} unmapped controls")
        table.add_column("Domain")
        table.add_column("Control ID")
        table.add_column("Control Description")
        for domain_name, controls in entry.by_domain.items():
            for index, control in enumerate(controls):
                table.add_row(domain_name if index == 0 else "", control.code, control.description)
        console.print(table)
    return 0


async def run_ssl_scan(host: str, project_path: Optional[Path] = None) -> int:
    """Run an SSL Labs assessment of ``host`` and print the grades."""
    config = get_effective_config(Path(project_path or ".").resolve())
    client = SslLabsClient(config.get("ssllabs", {}))

    console.print(f"  [cyan]Analyzing {host}...[/cyan]")
    try:
        result = await client.analyze(host)
    except SslLabsError as e:
        console.print(f"  [red]ERROR[/red] {e}")
        return EXIT_SCAN_FAILED

    table = Table(title=f"SSL Labs: {result.host}")
    table.add_column("IP Address")
    table.add_column("Server")
    table.add_column("Grade")
    table.add_column("Status")
    for ep in result.endpoints:
        table.add_row(ep.ip_address, ep.server_name or "", ep.grade or "-", ep.status_message or "")
    console.print(table)
    if result.lowest_grade:
        console.print(f"  Lowest grade: [bold]{result.lowest_grade}[/bold]")
    return 0
