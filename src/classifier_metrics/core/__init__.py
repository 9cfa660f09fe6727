"""
Core data loading for the classifier metrics package.

Turns labeled predictions on disk into confusion matrices that the
evaluation module can score.
"""

from classifier_metrics.core.data import (
    build_confusion_matrices,
    load_predictions_csv,
)
from classifier_metrics.core.data_models import LabeledPredictions

__all__ = [
    "LabeledPredictions",
    "build_confusion_matrices",
    "load_predictions_csv",
]
