"""CLI interface using Typer.

Available subcommands:
    - quality: Quality scoring and trends
    - bench: Benchmark aggregation and regression checks
    - audit: Security audit summaries and Markdown reports

Usage:
    uv run quality-engine quality score metrics.yaml --config engine.yaml
    uv run quality-engine bench analyze session.yaml --history history.yaml
    uv run quality-engine audit export audit.yaml --failures-only
"""

import typer


def create_app() -> typer.Typer:
    """Create the main CLI application with all sub-commands.

    Lazy import를 사용하여 각 서브커맨드 모듈을 필요할 때만 로드합니다.
    """
    from quality_engine.cli.audit import app as audit_app
    from quality_engine.cli.bench import app as bench_app
    from quality_engine.cli.quality import app as quality_app

    main_app = typer.Typer(
        name="quality-engine",
        help="Contract Quality Engine - quality scores, benchmarks and audits",
        no_args_is_help=True,
    )

    main_app.add_typer(quality_app, name="quality", help="Quality scoring and trends")
    main_app.add_typer(bench_app, name="bench", help="Benchmark aggregation and regression checks")
    main_app.add_typer(audit_app, name="audit", help="Security audit summaries and reports")

    return main_app


def main() -> None:
    """Entry point for the ``quality-engine`` console script."""
    app = create_app()
    app()
