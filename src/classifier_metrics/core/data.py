"""
CSV loading utilities for classifier predictions.
"""

import logging
from collections.abc import Sequence
from pathlib import Path

import pandas as pd

from classifier_metrics.core.data_models import LabeledPredictions
from classifier_metrics.evaluation.confusion_matrix import ConfusionMatrix

logger = logging.getLogger(__name__)

ALL_SPLITS = "all"


def load_predictions_csv(
    path: Path,
    actual_column: str = "actual",
    predicted_column: str = "predicted",
    split_column: str | None = "split",
) -> LabeledPredictions:
    """Load a CSV file with one actual/predicted label pair per row.

    The split column is optional: when it is absent from the file every row
    belongs to a single split.

    Raises:
        ValueError: If a label column is missing or a label is empty.
    """
    df = pd.read_csv(path, dtype=str, keep_default_na=False)

    for column in (actual_column, predicted_column):
        if column not in df.columns:
            raise ValueError(f"CSV must have '{column}' column")

    actual: list[str] = df[actual_column].tolist()
    predicted: list[str] = df[predicted_column].tolist()
    if any(label == "" for label in actual + predicted):
        raise ValueError("CSV has rows with an empty label")

    splits = None
    if split_column is not None and split_column in df.columns:
        splits = tuple(df[split_column].tolist())

    logger.info(f"Loaded {len(df)} predictions from {path}")
    return LabeledPredictions(
        actual=tuple(actual), predicted=tuple(predicted), splits=splits
    )


def build_confusion_matrices(
    predictions: LabeledPredictions,
    class_names: Sequence[str] | None = None,
) -> dict[str, ConfusionMatrix]:
    """Accumulate one confusion matrix per split.

    Args:
        predictions: Loaded label pairs.
        class_names: Class order for every matrix. Defaults to the labels
            in order of first appearance.

    Returns:
        Mapping of split name to matrix, in order of first appearance. Data
        without splits gives a single entry keyed by ``ALL_SPLITS``.

    Raises:
        ValueError: If there are no predictions or a label is not one of
            ``class_names``.
    """
    if predictions.n_instances == 0:
        raise ValueError("No predictions to evaluate")

    if class_names is None:
        class_names = predictions.class_names

    unknown = sorted(
        set(predictions.actual + predictions.predicted) - set(class_names)
    )
    if unknown:
        raise ValueError(f"Labels not in class list: {unknown}")

    if predictions.splits is None:
        return {
            ALL_SPLITS: ConfusionMatrix.from_predictions(
                class_names, predictions.actual, predictions.predicted
            )
        }

    matrices = {
        name: ConfusionMatrix(class_names) for name in predictions.split_names
    }
    for split, actual, predicted in zip(
        predictions.splits, predictions.actual, predictions.predicted
    ):
        matrices[split].increment(actual, predicted)
    return matrices
