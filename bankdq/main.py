from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import List, Optional

import typer

from bankdq.config import get_settings
from bankdq.orchestrator import available_checks, describe_checks, run_checks
from bankdq.reporter import print_records, print_run_summary
from bankdq.sources import available_sources, build_source
from bankdq.utils.logging import configure_logging

app = typer.Typer(help="Banking data quality & reconciliation CLI.")


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    quality = settings.quality
    typer.echo(
        f"DB={settings.db_user}@{settings.db_host}:{settings.db_port}/{settings.db_name} | "
        f"data_dir={settings.data_dir} results_dir={settings.results_dir}"
    )
    typer.echo(
        f"age=[{quality.min_age},{quality.max_age}] amount=(0,{quality.amount_ceiling:,.0f}] "
        f"iqr_k={quality.outlier_multiplier} "
        f"sigma={quality.warning_sigma}/{quality.exception_sigma} "
        f"variance>{quality.variance_threshold_pct}% "
        f"bands={quality.band_excellent}/{quality.band_good}/{quality.band_fair}"
    )


@app.command()
def checks() -> None:
    """
    List available checks.
    """
    for name, description in describe_checks().items():
        typer.echo(f"{name:<24} {description}")


@app.command()
def run(
    check: List[str] = typer.Option(
        ["all"],
        "--check",
        "-c",
        help="Check to run; repeat for several (see `checks`), or 'all'.",
    ),
    source: str = typer.Option(
        "csv",
        "--source",
        "-s",
        help=f"Where to read relations from ({', '.join(available_sources())}).",
    ),
    data_dir: Optional[Path] = typer.Option(
        None,
        "--data-dir",
        "-d",
        help="Directory holding customers.csv / transactions.csv (default from settings).",
    ),
    dsn: Optional[str] = typer.Option(None, "--dsn", help="Optional DSN override for Postgres."),
    results_dir: Optional[Path] = typer.Option(
        None, "--results-dir", help="Where to write results (default from settings)."
    ),
    no_persist: bool = typer.Option(False, "--no-persist", help="Do not write result files."),
    export_csv: bool = typer.Option(False, "--export-csv", help="Also write one CSV per check."),
    as_json: bool = typer.Option(False, "--json", help="Print raw JSON instead of tables."),
    limit: int = typer.Option(20, "--limit", help="Rows shown per check table (0 = all)."),
) -> None:
    """
    Load the relations once and run the selected checks against them.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)

    unknown = [c for c in check if c != "all" and c not in available_checks()]
    if unknown:
        typer.echo(f"Unknown check(s): {', '.join(unknown)}", err=True)
        raise typer.Exit(code=2)

    relation_source = build_source(source, data_dir=data_dir or settings.data_dir, dsn=dsn)
    results = run_checks(
        check_names=check,
        source=relation_source,
        config=settings.quality,
        results_dir=results_dir,
        persist=not no_persist,
        export_csv=export_csv,
    )

    if as_json:
        typer.echo(json.dumps(results, indent=2, default=str))
    else:
        for result in results:
            if not result.get("error"):
                print_records(result["check"], result["records"], limit=limit)
        print_run_summary(results)

    if any(r.get("error") for r in results):
        raise typer.Exit(code=1)


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
