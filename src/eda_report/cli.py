from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer

from .config import EdaConfig
from .errors import DatasetIOError, EdaError
from .loader import load_dataset
from .report import build_report, report_to_json

app = typer.Typer(add_completion=False, help="Descriptive EDA report for a CSV file")


@app.command()
def main(
    data: Path = typer.Argument(..., help="Path to the CSV file"),
    target: Optional[str] = typer.Option(
        None, "--target", help="Numeric column to average per categorical group"
    ),
):
    """
    Profile the dataset and print the JSON report to stdout.

    Thresholds come from EDA_* environment variables (see EdaConfig.from_env).
    Exit codes: 0 ok, 1 malformed data or bad target, 2 unreadable source.
    """
    cfg = EdaConfig.from_env()
    logging.basicConfig(
        level=getattr(logging, cfg.log_level),
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        dataset = load_dataset(data, cfg)
        report = build_report(dataset, cfg, target=target)
    except DatasetIOError as e:
        typer.echo(f"ERROR: {e}", err=True)
        raise typer.Exit(code=2)
    except EdaError as e:
        typer.echo(f"ERROR: {e}", err=True)
        raise typer.Exit(code=1)

    typer.echo(report_to_json(report), nl=False)
