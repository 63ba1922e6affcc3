"""Typer CLI for quality scoring.

Commands:
    - score: 지표 스냅샷으로 품질 점수 계산 (게이트, 카테고리 비교 포함)
    - trend: 저장된 품질 레코드의 추이

Rules Applied:
    - #15 Logging Standards: Loguru, structured logging
    - #18 Typer CLI: Annotated syntax, Rich UI
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import pandas as pd
import typer
from rich.panel import Panel
from rich.table import Table

from quality_engine.analysis.trends import quality_trend, quality_trend_frame
from quality_engine.cli._common import (
    BADGE_COLORS,
    configure_logging,
    console,
    load_or_exit,
    print_failure,
    settings_or_exit,
)
from quality_engine.config.config_loader import EngineConfig, QualityHistoryInput, QualityInput
from quality_engine.core.exceptions import QualityEngineError
from quality_engine.models.quality import (
    CategoryBenchmark,
    ComputeQualityRequest,
    QualityResponse,
    ThresholdCheckResult,
)
from quality_engine.models.types import QualityBadge
from quality_engine.services.quality_service import QualityService

app = typer.Typer(no_args_is_help=True)


@app.command()
def score(
    metrics_file: Annotated[Path, typer.Argument(help="Metric snapshot (YAML/JSON)")],
    config_file: Annotated[
        Path | None, typer.Option("--config", "-c", help="Engine config YAML (weights, gate)")
    ] = None,
    category: Annotated[
        str | None, typer.Option("--category", help="Peer category (overrides the file)")
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-V", help="Debug logging")] = False,
) -> None:
    """품질 점수 계산.

    Example:
        uv run python main.py quality score metrics.yaml
        uv run python main.py quality score metrics.yaml -c engine.yaml --category defi
    """
    configure_logging(verbose=verbose)

    settings = settings_or_exit()
    data = load_or_exit(metrics_file, QualityInput)
    if config_file is not None:
        config = load_or_exit(config_file, EngineConfig)
    else:
        try:
            config = EngineConfig.from_settings(settings)
        except QualityEngineError as e:
            print_failure(str(e))
            raise typer.Exit(code=1) from e

    service = QualityService(settings=settings, default_weights=config.weights)
    try:
        response = service.compute(
            data.contract_id,
            ComputeQualityRequest(version=data.version),
            data.metrics,
            threshold=data.threshold or config.threshold,
            category=category or data.category,
            peer_scores=data.peer_scores,
        )
    except QualityEngineError as e:
        print_failure(str(e))
        raise typer.Exit(code=1) from e

    _print_breakdown(response)
    if response.threshold_result is not None:
        _print_threshold(response.threshold_result)
    if response.benchmark is not None:
        _print_category(response.benchmark)

    if response.threshold_result is not None and not response.threshold_result.passed:
        raise typer.Exit(code=1)


@app.command()
def trend(
    records_file: Annotated[Path, typer.Argument(help="Stored quality records (YAML/JSON)")],
) -> None:
    """품질 레코드 추이 (계산 시각 순)."""
    configure_logging(verbose=False)
    history = load_or_exit(records_file, QualityHistoryInput)

    df = quality_trend_frame(quality_trend(history.records))
    if df.empty:
        console.print("[yellow]No quality records found.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold", title=f"Quality Trend ({len(df)})")
    table.add_column("Computed", style="dim", width=16)
    table.add_column("Version", style="bold")
    table.add_column("Overall", justify="right")
    table.add_column("Δ", justify="right")
    table.add_column("Code", justify="right")
    table.add_column("Test", justify="right")
    table.add_column("Doc", justify="right")
    table.add_column("Security", justify="right")
    table.add_column("Badge", justify="center")

    for row in df.itertuples(index=False):
        delta = "-" if pd.isna(row.overall_delta) else f"{row.overall_delta:+.1f}"
        badge = QualityBadge(row.badge)
        table.add_row(
            f"{row.computed_at:%Y-%m-%d %H:%M}",
            row.contract_version,
            f"{row.overall_score:.1f}",
            delta,
            f"{row.code_score:.1f}",
            f"{row.test_score:.1f}",
            f"{row.doc_score:.1f}",
            f"{row.security_score:.1f}",
            f"[{BADGE_COLORS[badge]}]{badge}[/]",
        )
    console.print(table)


# ─── Rendering ────────────────────────────────────────────────────────


def _print_breakdown(response: QualityResponse) -> None:
    record = response.record
    breakdown = response.breakdown
    color = BADGE_COLORS[response.badge]

    table = Table(
        show_header=True,
        header_style="bold",
        title=f"Quality: {record.contract_id} @ {record.contract_version}",
    )
    table.add_column("Dimension", style="cyan")
    table.add_column("Score", justify="right")
    table.add_row("Code", f"{breakdown.code_score:.2f}")
    table.add_row("Tests", f"{breakdown.test_score:.2f}")
    table.add_row("Docs", f"{breakdown.doc_score:.2f}")
    table.add_row("Security", f"{breakdown.security_score:.2f}")
    table.add_row("[bold]Overall[/bold]", f"[bold]{breakdown.overall_score:.2f}[/bold]")
    console.print(table)
    console.print(f"Badge: [{color}]{response.badge}[/]")


def _print_threshold(result: ThresholdCheckResult) -> None:
    if result.passed:
        console.print(Panel("[green]All minimums met[/green]", title="Quality Gate: PASSED"))
        return

    table = Table(show_header=True, header_style="bold", title="Quality Gate: FAILED")
    table.add_column("Dimension", style="red")
    table.add_column("Required", justify="right")
    table.add_column("Actual", justify="right")
    table.add_column("Gap", justify="right")
    for v in result.violations:
        table.add_row(v.dimension, f"{v.required:.1f}", f"{v.actual:.1f}", f"{v.gap:.1f}")
    console.print(table)


def _print_category(benchmark: CategoryBenchmark) -> None:
    position = "above" if benchmark.above_average else "at or below"
    lines = [
        f"[bold]Peers:[/bold] {benchmark.peer_count}",
        f"[bold]Average:[/bold] {benchmark.category_avg_score:.2f}",
        f"[bold]P25 / P75 / P95:[/bold] {benchmark.category_p25_score:.2f} / "
        f"{benchmark.category_p75_score:.2f} / {benchmark.category_p95_score:.2f}",
        f"[bold]This contract:[/bold] {benchmark.this_contract_score:.2f} "
        f"({position} average)",
        f"[bold]Percentile rank:[/bold] {benchmark.percentile_rank:.1f}",
    ]
    console.print(Panel("\n".join(lines), title=f"Category: {benchmark.category}"))
