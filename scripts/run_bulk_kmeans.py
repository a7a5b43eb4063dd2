#!/usr/bin/env python
from __future__ import annotations

from typing import Optional

import typer

from bulkkmeans.core.config import RunConfig
from bulkkmeans.core.errors import BulkKMeansError
from bulkkmeans.core.io import format_records
from bulkkmeans.core.log import get_logger
from bulkkmeans.pipeline import run_job

app = typer.Typer(add_completion=False)


@app.command()
def main(
    points: Optional[str] = typer.Option(None, help='Points file, one "x y" per line'),
    centroids: Optional[str] = typer.Option(None, help='Centroids file, one "id x y" per line'),
    output: Optional[str] = typer.Option(None, help="Output path; prints to stdout if omitted"),
    iterations: Optional[int] = typer.Option(None, help="Bulk rounds (default 10)"),
    k: Optional[int] = typer.Option(None, help="Fix the centroid id set to 1..k"),
    parallelism: Optional[int] = typer.Option(None, help="Assignment partitions"),
    strategy: Optional[str] = typer.Option(None, help="single_stage | two_stage"),
    emit: Optional[str] = typer.Option(None, help="points | centroids"),
    config: Optional[str] = typer.Option(None, help="YAML run config; flags override it"),
    log_level: Optional[str] = typer.Option(None, help="DEBUG, INFO, WARNING, ..."),
):
    try:
        base = RunConfig.from_yaml(config) if config else RunConfig()
        cfg = base.merged(
            points=points,
            centroids=centroids,
            output=output,
            iterations=iterations,
            k=k,
            parallelism=parallelism,
            strategy=strategy,
            emit=emit,
            log_level=log_level,
        )
        get_logger(cfg.log_level, cfg.log_file)
        out = run_job(cfg)
    except (BulkKMeansError, FileNotFoundError) as e:
        typer.echo(f"[bulkkmeans] error: {e}", err=True)
        raise typer.Exit(code=2)

    if out.path is None:
        typer.echo("Printing result to stdout. Use --output to specify output path.")
        typer.echo(format_records(out.ids, out.xy))
    else:
        typer.echo(f"[bulkkmeans] wrote {out.path}")


if __name__ == "__main__":
    app()
