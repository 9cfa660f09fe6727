"""
Evaluation module for classifier predictions.

This module provides tools for:
- Accumulating actual/predicted pairs in a multi-class confusion matrix
- Computing per-class and instance-weighted precision, recall and F1
- Rendering matrices and metrics as comma-separated text
- Visualizing confusion matrices
"""

from classifier_metrics.evaluation.confusion_matrix import ConfusionMatrix
from classifier_metrics.evaluation.data_models import (
    ClassMetrics,
    MetricsSummary,
    SplitMetrics,
)
from classifier_metrics.evaluation.exceptions import (
    ClassIndexOutOfRangeError,
    InvalidConfigurationError,
    MatrixFormatError,
    UnknownClassError,
)
from classifier_metrics.evaluation.metrics import (
    calculate_mean_metrics,
    calculate_pooled_confusion_matrix,
    calculate_split_metrics,
)
from classifier_metrics.evaluation.plotting import plot_confusion_matrix
from classifier_metrics.evaluation.reporting import (
    parse_matrix_csv,
    to_batch_metrics_csv,
    to_matrix_csv,
    to_metrics_csv,
    to_summary_json,
)

__all__ = [
    # Accumulator
    "ConfusionMatrix",
    # Data models
    "ClassMetrics",
    "MetricsSummary",
    "SplitMetrics",
    # Exceptions
    "ClassIndexOutOfRangeError",
    "InvalidConfigurationError",
    "MatrixFormatError",
    "UnknownClassError",
    # Metrics
    "calculate_mean_metrics",
    "calculate_pooled_confusion_matrix",
    "calculate_split_metrics",
    # Reporting
    "parse_matrix_csv",
    "to_batch_metrics_csv",
    "to_matrix_csv",
    "to_metrics_csv",
    "to_summary_json",
    # Plotting
    "plot_confusion_matrix",
]
