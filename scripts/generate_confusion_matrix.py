from pathlib import Path

import typer

from classifier_metrics.config import ReportSettings
from classifier_metrics.evaluation.plotting import plot_confusion_matrix
from classifier_metrics.evaluation.reporting import parse_matrix_csv


def main(input_path: Path) -> None:
    import matplotlib.pyplot as plt

    settings = ReportSettings()
    matrix = parse_matrix_csv(input_path.read_text())
    fig = plot_confusion_matrix(matrix, title=input_path.stem)
    fig.savefig(input_path.with_suffix(".png"), dpi=settings.plot_dpi)
    plt.close(fig)


if __name__ == "__main__":
    typer.run(main)
