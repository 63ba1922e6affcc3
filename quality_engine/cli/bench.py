"""Typer CLI for benchmark analysis.

Commands:
    - analyze: 벤치마크 세션 집계 및 회귀 감지
    - summary: 컨트랙트별 벤치마크 대시보드 요약

Rules Applied:
    - #15 Logging Standards: Loguru, structured logging
    - #18 Typer CLI: Annotated syntax, Rich UI
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.panel import Panel
from rich.table import Table

from quality_engine.analysis.trends import benchmark_trend, summarize_benchmarks
from quality_engine.cli._common import (
    configure_logging,
    console,
    load_or_exit,
    print_failure,
    settings_or_exit,
)
from quality_engine.config.config_loader import BenchmarkHistoryInput, BenchmarkSessionInput
from quality_engine.core.exceptions import QualityEngineError
from quality_engine.models.benchmark import (
    BenchmarkComparison,
    BenchmarkRecord,
    PerformanceAlert,
)
from quality_engine.models.types import BenchmarkStatus
from quality_engine.services.benchmark_service import BenchmarkService

app = typer.Typer(no_args_is_help=True)

_STATUS_COLORS: dict[BenchmarkStatus, str] = {
    BenchmarkStatus.PENDING: "yellow",
    BenchmarkStatus.RUNNING: "cyan",
    BenchmarkStatus.COMPLETED: "green",
    BenchmarkStatus.FAILED: "red",
}


@app.command()
def analyze(
    session_file: Annotated[Path, typer.Argument(help="Benchmark session (record + runs)")],
    history_file: Annotated[
        Path | None, typer.Option("--history", help="Stored sessions for the baseline")
    ] = None,
    threshold: Annotated[
        float | None,
        typer.Option("--threshold", "-t", help="Regression alert threshold (%)"),
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-V", help="Debug logging")] = False,
) -> None:
    """벤치마크 세션 집계 및 베이스라인 대비 회귀 감지.

    Example:
        uv run python main.py bench analyze session.yaml --history history.yaml
        uv run python main.py bench analyze session.yaml --history history.yaml -t 5
    """
    configure_logging(verbose=verbose)

    settings = settings_or_exit()
    session = load_or_exit(session_file, BenchmarkSessionInput)
    history = (
        load_or_exit(history_file, BenchmarkHistoryInput)
        if history_file is not None
        else BenchmarkHistoryInput()
    )

    try:
        response = BenchmarkService(settings=settings).finalize_session(
            session.record,
            session.runs,
            history.records,
            alert_threshold_pct=threshold,
        )
    except QualityEngineError as e:
        print_failure(str(e))
        raise typer.Exit(code=1) from e

    record = response.benchmark
    if record.status == BenchmarkStatus.FAILED:
        print_failure(record.error_message or "Benchmark failed")
        raise typer.Exit(code=1)

    _print_stats(record, len(response.runs))
    if response.comparison is None:
        console.print("[dim]No baseline session; comparison skipped.[/dim]")
    else:
        _print_comparison(response.comparison)
    if response.alert is not None:
        _print_alert(response.alert)


@app.command()
def summary(
    history_file: Annotated[Path, typer.Argument(help="Stored sessions and alerts")],
    contract_id: Annotated[str, typer.Option("--contract", "-c", help="Contract ID")],
    method: Annotated[
        str | None, typer.Option("--method", "-m", help="Restrict the trend to one method")
    ] = None,
) -> None:
    """컨트랙트 벤치마크 요약 및 p95 추이."""
    configure_logging(verbose=False)
    history = load_or_exit(history_file, BenchmarkHistoryInput)

    result = summarize_benchmarks(contract_id, history.records, history.alerts)
    if result.total_benchmarks == 0:
        console.print(f"[yellow]No benchmarks found for {contract_id}.[/yellow]")
        return

    lines = [
        f"[bold]Sessions:[/bold] {result.total_benchmarks}",
        f"[bold]Methods:[/bold] {', '.join(result.methods_benchmarked)}",
        f"[bold]Active alerts:[/bold] {len(result.active_alerts)}",
    ]
    console.print(Panel("\n".join(lines), title=f"Benchmarks: {contract_id}"))

    if result.latest_benchmarks:
        table = Table(show_header=True, header_style="bold", title="Latest per Method")
        table.add_column("Method", style="cyan")
        table.add_column("Version")
        table.add_column("p95 (ms)", justify="right")
        table.add_column("avg (ms)", justify="right")
        for r in result.latest_benchmarks:
            avg = f"{r.stats.avg_ms:.3f}" if r.stats is not None else "-"
            table.add_row(r.method_name, r.contract_version, f"{r.p95_ms:.3f}", avg)
        console.print(table)

    for alert in result.active_alerts:
        _print_alert(alert)

    own = [r for r in history.records if r.contract_id == contract_id]
    points = benchmark_trend(own, method)
    if points:
        table = Table(show_header=True, header_style="bold", title="p95 Trend")
        table.add_column("Created", style="dim", width=16)
        table.add_column("Version")
        table.add_column("p95 (ms)", justify="right")
        table.add_column("min / max (ms)", justify="right")
        for p in points:
            table.add_row(
                f"{p.created_at:%Y-%m-%d %H:%M}",
                p.version,
                f"{p.p95_ms:.3f}",
                f"{p.min_ms:.3f} / {p.max_ms:.3f}",
            )
        console.print(table)


# ─── Rendering ────────────────────────────────────────────────────────


def _print_stats(record: BenchmarkRecord, run_count: int) -> None:
    color = _STATUS_COLORS[record.status]
    table = Table(
        show_header=True,
        header_style="bold",
        title=f"Benchmark: {record.method_name} @ {record.contract_version}",
    )
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Status", f"[{color}]{record.status}[/]")
    table.add_row("Runs", str(run_count))
    if record.stats is not None:
        table.add_row("min (ms)", f"{record.stats.min_ms:.3f}")
        table.add_row("avg (ms)", f"{record.stats.avg_ms:.3f}")
        table.add_row("max (ms)", f"{record.stats.max_ms:.3f}")
        table.add_row("stddev (ms)", f"{record.stats.stddev_ms:.3f}")
        table.add_row("p95 (ms)", f"{record.stats.p95_ms:.3f}")
        table.add_row("p99 (ms)", f"{record.stats.p99_ms:.3f}")
    console.print(table)


def _print_comparison(comparison: BenchmarkComparison) -> None:
    color = "red" if comparison.is_regression else "green"
    lines = [
        f"[bold]Baseline:[/bold] {comparison.previous_version} "
        f"(p95 {comparison.previous_p95_ms:.3f} ms)",
        f"[bold]Current p95:[/bold] {comparison.current_p95_ms:.3f} ms",
        f"[bold]Delta:[/bold] [{color}]{comparison.delta_ms:+.3f} ms "
        f"({comparison.delta_pct:+.2f}%)[/]",
    ]
    console.print(Panel("\n".join(lines), title="Baseline Comparison"))


def _print_alert(alert: PerformanceAlert) -> None:
    console.print(
        Panel(
            f"[red]{alert.method_name}: p95 {alert.baseline_p95_ms:.3f} -> "
            f"{alert.current_p95_ms:.3f} ms (+{alert.regression_pct:.2f}%, "
            f"threshold {alert.alert_threshold_pct:.1f}%)[/red]",
            title="[red bold]Performance Regression[/red bold]",
        )
    )
