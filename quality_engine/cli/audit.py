"""Typer CLI for security audit reports.

Commands:
    - summary: 카테고리별 점수, 실패 항목, 파생 SecurityMetrics
    - export: Markdown 보고서 출력
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.panel import Panel
from rich.table import Table

from quality_engine.analysis.audit import (
    build_audit_response,
    needs_human_review,
    render_audit_markdown,
    security_metrics_from_audit,
    security_summary,
    sort_by_severity,
)
from quality_engine.cli._common import (
    BADGE_COLORS,
    SEVERITY_COLORS,
    configure_logging,
    console,
    load_or_exit,
)
from quality_engine.config.config_loader import AuditInput
from quality_engine.models.audit import ExportRequest
from quality_engine.models.types import CheckStatus

app = typer.Typer(no_args_is_help=True)

_CHECK_STATUS_COLORS: dict[CheckStatus, str] = {
    CheckStatus.PASSED: "green",
    CheckStatus.FAILED: "red",
    CheckStatus.NOT_APPLICABLE: "dim",
    CheckStatus.PENDING: "yellow",
}


@app.command()
def summary(
    checklist_file: Annotated[Path, typer.Argument(help="Checklist + audit statuses (YAML/JSON)")],
) -> None:
    """감사 요약: 카테고리 점수와 실패 항목."""
    configure_logging(verbose=False)
    data = load_or_exit(checklist_file, AuditInput)

    response = build_audit_response(data.audit, data.items, data.checks)
    metrics = security_metrics_from_audit(
        response.checks,
        is_verified=data.is_verified,
        has_formal_audit=data.has_formal_audit,
    )
    audit = response.audit
    card = security_summary(response)

    lines = [
        f"[bold]Auditor:[/bold] {card.auditor}",
        f"[bold]Date:[/bold] {card.audit_date:%Y-%m-%d}",
        f"[bold]Overall score:[/bold] {card.overall_score:.1f} / 100",
        f"[bold]Badge:[/bold] [{BADGE_COLORS[card.score_badge]}]{card.score_badge}[/]",
        f"[bold]Findings (C/H/M/L):[/bold] {metrics.critical_findings}/"
        f"{metrics.high_findings}/{metrics.medium_findings}/{metrics.low_findings}",
        f"[bold]Auto-detected:[/bold] {response.auto_detected_count}",
    ]
    console.print(Panel("\n".join(lines), title=f"Security Audit: {audit.contract_id}"))

    if response.category_scores:
        table = Table(show_header=True, header_style="bold", title="Category Scores")
        table.add_column("Category", style="cyan")
        table.add_column("Score", justify="right")
        table.add_column("Passed", justify="right")
        table.add_column("Failed C/H", justify="right")
        for cs in response.category_scores:
            table.add_row(
                cs.category.label,
                f"{cs.score:.1f}",
                f"{cs.passed}/{cs.total}",
                f"{cs.failed_critical}/{cs.failed_high}",
            )
        console.print(table)

    open_checks = [
        c
        for c in response.checks
        if c.status in (CheckStatus.FAILED, CheckStatus.PENDING)
    ]
    if not open_checks:
        console.print("[green]No failed or pending checks.[/green]")
        return

    review_ids = {item.id for item in data.items if needs_human_review(item.detection)}
    table = Table(show_header=True, header_style="bold", title=f"Open Checks ({len(open_checks)})")
    table.add_column("ID", style="bold")
    table.add_column("Severity", justify="center")
    table.add_column("Status", justify="center")
    table.add_column("Review", justify="center")
    table.add_column("Title", min_width=20)
    for c in sort_by_severity(open_checks):
        sev_color = SEVERITY_COLORS[c.severity]
        status_color = _CHECK_STATUS_COLORS[c.status]
        table.add_row(
            c.id,
            f"[{sev_color}]{c.severity}[/]",
            f"[{status_color}]{c.status}[/]",
            "manual" if c.id in review_ids else "-",
            c.title,
        )
    console.print(table)


@app.command()
def export(
    checklist_file: Annotated[Path, typer.Argument(help="Checklist + audit statuses (YAML/JSON)")],
    failures_only: Annotated[
        bool, typer.Option("--failures-only", help="Only include failed checks")
    ] = False,
    no_descriptions: Annotated[
        bool, typer.Option("--no-descriptions", help="Omit check descriptions")
    ] = False,
    output: Annotated[
        Path | None, typer.Option("--output", "-o", help="Write to file instead of stdout")
    ] = None,
) -> None:
    """Markdown 감사 보고서 출력."""
    configure_logging(verbose=False)
    data = load_or_exit(checklist_file, AuditInput)

    response = build_audit_response(data.audit, data.items, data.checks)
    markdown = render_audit_markdown(
        response,
        ExportRequest(include_descriptions=not no_descriptions, failures_only=failures_only),
    )

    if output is None:
        typer.echo(markdown, nl=False)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(markdown, encoding="utf-8")
    console.print(f"[green]Report written to {output}[/green]")
