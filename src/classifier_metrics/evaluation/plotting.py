"""
Plotting utilities for confusion matrix visualization.
"""

import numpy as np
from matplotlib.figure import Figure

from classifier_metrics.evaluation.confusion_matrix import ConfusionMatrix

GREEN = np.array([21, 214, 73]) / 255
RED = np.array([214, 82, 21]) / 255


def _format_percentage(num: float, decimals: int = 2) -> str:
    """This function shows significant zeros while avoiding trailing zeros"""
    if decimals < 1:
        raise ValueError("must specify at least 1 decimal")
    formatted = f"{num:.{decimals}f}".rstrip("0").rstrip(".")
    return f"{formatted}%"


def _cell_colors(normalized: np.ndarray) -> np.ndarray:
    """RGB colors: white to green on the diagonal, white to red elsewhere."""
    n = normalized.shape[0]
    colors = np.ones((n, n, 3))
    for i in range(n):
        for j in range(n):
            value = normalized[i, j]
            if i == j:
                colors[i, j] = 1 - value * (1 - GREEN)
            else:
                # Keep small but non-zero errors visible
                value = max(value, 0.1 * (value > 0))
                colors[i, j] = 1 - value * (1 - RED)
    return colors


def plot_confusion_matrix(
    matrix: ConfusionMatrix,
    title: str | None = None,
) -> Figure:
    """
    Create heatmap of a row-normalized confusion matrix.

    Each row is divided by its row sum (true-class normalization), so a cell
    shows the share of a class's instances that received each prediction.

    Args:
        matrix: Confusion matrix to draw.
        title: Figure title. Defaults to one giving the instance count.

    Returns:
        matplotlib Figure with heatmap.
    """
    import matplotlib.pyplot as plt

    normalized = matrix.normalized()
    n = matrix.n_classes
    size = max(6.0, 1.2 * n + 2)

    fig, ax = plt.subplots(figsize=(size, size * 0.75))
    ax.imshow(_cell_colors(normalized))

    ax.set_xticks(range(n))
    ax.set_yticks(range(n))
    ax.set_xticklabels(matrix.class_names, rotation=45, ha="right")
    ax.set_yticklabels(matrix.class_names)
    ax.set_xlabel("Predicted")
    ax.set_ylabel("Actual")

    for i in range(n):
        for j in range(n):
            ax.text(
                j,
                i,
                _format_percentage(100 * normalized[i, j]),
                ha="center",
                va="center",
                color="black",
                fontsize=12,
            )

    if title is None:
        title = f"Confusion Matrix (n={int(matrix.total)}, row-normalized)"
    ax.set_title(title)

    fig.tight_layout()
    return fig
