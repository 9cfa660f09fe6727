"""
Metrics computation across batches of evaluation splits.
"""

from collections.abc import Sequence

import numpy as np

from classifier_metrics.evaluation.confusion_matrix import ConfusionMatrix
from classifier_metrics.evaluation.data_models import (
    MetricsSummary,
    SplitMetrics,
)


def calculate_split_metrics(
    matrices: Sequence[ConfusionMatrix],
) -> tuple[SplitMetrics, ...]:
    """Summarize each split's confusion matrix, keeping input order.

    Args:
        matrices: One confusion matrix per split (e.g. cross-validation fold).

    Returns:
        SplitMetrics with zero-based split indices.
    """
    return tuple(
        SplitMetrics(split_index=i, metrics=matrix.summary())
        for i, matrix in enumerate(matrices)
    )


def _mean_ignoring_nan(values: Sequence[float]) -> float:
    array = np.asarray(values, dtype=np.float64)
    if np.isnan(array).all():
        return float("nan")
    return float(np.nanmean(array))


def calculate_mean_metrics(
    splits: Sequence[SplitMetrics],
) -> MetricsSummary:
    """Average precision, recall and F1 over several splits.

    Each metric is averaged separately and NaN values are left out of its
    mean; a metric that is NaN in every split stays NaN.

    Raises:
        ValueError: If splits is empty.
    """
    if not splits:
        raise ValueError("Cannot average empty splits")

    return MetricsSummary(
        precision=_mean_ignoring_nan([s.metrics.precision for s in splits]),
        recall=_mean_ignoring_nan([s.metrics.recall for s in splits]),
        f1=_mean_ignoring_nan([s.metrics.f1 for s in splits]),
    )


def calculate_pooled_confusion_matrix(
    matrices: Sequence[ConfusionMatrix],
) -> ConfusionMatrix:
    """Pool confusion matrices across multiple splits.

    Sums the counts cell by cell into a single matrix over the class list of
    the first split.

    Raises:
        ValueError: If matrices is empty or the class lists differ.
    """
    if not matrices:
        raise ValueError("Cannot pool empty matrices")

    class_names = matrices[0].class_names
    if any(m.class_names != class_names for m in matrices):
        raise ValueError("Cannot pool matrices with different classes")

    counts = np.sum([m.counts for m in matrices], axis=0)
    return ConfusionMatrix.from_counts(class_names, counts)
