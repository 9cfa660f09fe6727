#!/usr/bin/env python
"""
Score classifier predictions stored in a CSV file.

The CSV holds one row per instance with an actual and a predicted label, and
optionally a split column (e.g. a cross-validation fold). One confusion
matrix is accumulated per split and the report directory receives:
- metrics.csv: batch report with weighted precision, recall and F1 per split
- confusion_matrix_<split>.csv: raw counts of each split
- summary.json: per-class and aggregate metrics
- confusion_matrix.png: heatmap of the counts pooled over all splits
"""

import logging
from datetime import datetime
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np
import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from classifier_metrics.config import ReportSettings
from classifier_metrics.core import (
    build_confusion_matrices,
    load_predictions_csv,
)
from classifier_metrics.evaluation import (
    ConfusionMatrix,
    calculate_pooled_confusion_matrix,
    calculate_split_metrics,
    plot_confusion_matrix,
    to_batch_metrics_csv,
    to_summary_json,
)

# Plotting backends are chatty at debug level
logging.getLogger("matplotlib").setLevel(logging.WARNING)
logging.getLogger("PIL").setLevel(logging.WARNING)

console = Console(force_terminal=True)
app = typer.Typer()


def _format_metric(value: float) -> str:
    return "n/a" if np.isnan(value) else f"{value:.3f}"


def save_results(
    matrices: dict[str, ConfusionMatrix],
    output_dir: Path,
    params: dict[str, object],
    plot_dpi: int,
) -> None:
    """Save evaluation results to output directory."""
    output_dir.mkdir(parents=True, exist_ok=True)

    ordered = list(matrices.values())
    (output_dir / "metrics.csv").write_text(to_batch_metrics_csv(ordered))

    for name, matrix in matrices.items():
        (output_dir / f"confusion_matrix_{name}.csv").write_text(
            matrix.to_csv()
        )

    summary = to_summary_json(
        matrices, {**params, "timestamp": datetime.now().isoformat()}
    )
    (output_dir / "summary.json").write_text(summary)

    pooled = calculate_pooled_confusion_matrix(ordered)
    fig = plot_confusion_matrix(pooled)
    fig.savefig(output_dir / "confusion_matrix.png", dpi=plot_dpi)
    plt.close(fig)


@app.command()
def main(
    data: Path = typer.Argument(
        ...,
        help="CSV with one actual/predicted label pair per row",
    ),
    classes: str | None = typer.Option(
        None,
        "-c",
        "--classes",
        help="Comma-separated class names fixing the matrix order",
    ),
    output_dir: Path | None = typer.Option(
        None,
        "-o",
        "--output-dir",
        help="Output directory for results",
    ),
) -> None:
    """
    Evaluate classifier predictions and write metric reports.
    """
    settings = ReportSettings()

    if not data.exists():
        console.print(f"[red]Data file not found: {data}[/red]")
        raise typer.Exit(1)

    class_names = None
    if classes is not None:
        class_names = [c.strip() for c in classes.split(",") if c.strip()]

    try:
        predictions = load_predictions_csv(
            data,
            actual_column=settings.actual_column,
            predicted_column=settings.predicted_column,
            split_column=settings.split_column,
        )
        matrices = build_confusion_matrices(predictions, class_names)
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1) from e

    base_dir = output_dir if output_dir is not None else settings.output_dir
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    report_dir = base_dir / data.stem / timestamp

    first = next(iter(matrices.values()))
    console.print(
        Panel(
            f"[bold]Prediction Evaluation[/bold]\n\n"
            f"Input: [cyan]{data}[/cyan]\n"
            f"Instances: [cyan]{predictions.n_instances}[/cyan]\n"
            f"Classes: [cyan]{', '.join(first.class_names)}[/cyan]\n"
            f"Splits: [cyan]{len(matrices)}[/cyan]\n"
            f"Output: [cyan]{report_dir}[/cyan]",
            title="Configuration",
        )
    )

    params: dict[str, object] = {
        "data": str(data),
        "class_names": list(first.class_names),
        "split_names": list(matrices),
    }
    console.print("[dim]Saving results...[/dim]")
    save_results(matrices, report_dir, params, settings.plot_dpi)

    table = Table(title="Weighted Metrics")
    table.add_column("Split")
    table.add_column("Precision", justify="right")
    table.add_column("Recall", justify="right")
    table.add_column("F1", justify="right")
    splits = calculate_split_metrics(list(matrices.values()))
    for name, split in zip(matrices, splits):
        table.add_row(
            name,
            _format_metric(split.metrics.precision),
            _format_metric(split.metrics.recall),
            _format_metric(split.metrics.f1),
        )
    console.print(table)
    console.print(
        Panel(
            f"[bold green]Evaluation Complete[/bold green]\n\n"
            f"Output: [cyan]{report_dir}[/cyan]",
            title="Results",
        )
    )


if __name__ == "__main__":
    app()
