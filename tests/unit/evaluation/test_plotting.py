"""Tests for confusion matrix plotting."""

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import pytest  # noqa: E402

from classifier_metrics.evaluation.confusion_matrix import (  # noqa: E402
    ConfusionMatrix,
)
from classifier_metrics.evaluation.plotting import (  # noqa: E402
    _format_percentage,
    plot_confusion_matrix,
)


class TestFormatPercentage:
    def test_trims_trailing_zeros(self) -> None:
        assert _format_percentage(75.0) == "75%"
        assert _format_percentage(33.333333) == "33.33%"

    def test_requires_decimals(self) -> None:
        with pytest.raises(ValueError, match="at least 1 decimal"):
            _format_percentage(1.0, decimals=0)


class TestPlotConfusionMatrix:
    def test_labels_and_title(self) -> None:
        cm = ConfusionMatrix.from_predictions(
            ["cat", "dog", "bird"],
            ["cat", "cat", "dog", "bird"],
            ["cat", "dog", "dog", "cat"],
        )
        fig = plot_confusion_matrix(cm)
        ax = fig.axes[0]
        assert [t.get_text() for t in ax.get_yticklabels()] == [
            "cat",
            "dog",
            "bird",
        ]
        assert ax.get_title() == "Confusion Matrix (n=4, row-normalized)"
        assert len(ax.texts) == 9
        plt.close(fig)
