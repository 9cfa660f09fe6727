"""
Multi-class confusion matrix accumulator.

Rows hold the actual class and columns the predicted class. Counts are kept
as float64 and only ever increase. Classes may be addressed either by name or
by their zero-based position in the class list given at construction.
"""

import logging
import math
import operator
from collections import Counter
from collections.abc import Iterable, Sequence
from functools import reduce
from numbers import Integral
from types import MappingProxyType

import numpy as np
from numpy.typing import NDArray

from classifier_metrics.evaluation.data_models import (
    ClassMetrics,
    MetricsSummary,
)
from classifier_metrics.evaluation.exceptions import (
    ClassIndexOutOfRangeError,
    InvalidConfigurationError,
    UnknownClassError,
)

logger = logging.getLogger(__name__)

Label = str | int


def _divide(numerator: float, denominator: float) -> float:
    """Float division that yields NaN (or inf) instead of raising on zero."""
    with np.errstate(divide="ignore", invalid="ignore"):
        return float(np.float64(numerator) / np.float64(denominator))


def _harmonic_mean(precision: float, recall: float) -> float:
    return _divide(2 * precision * recall, precision + recall)


class ConfusionMatrix:
    """Confusion matrix over a fixed, ordered set of class names.

    Per-class metrics are available by passing a label to ``precision``,
    ``recall`` and ``f1``; calling them without a label gives the
    instance-weighted aggregate over all classes.

    Edge cases:
        - Precision is 0.0 for a class that was never predicted.
        - Recall is NaN for a class that never occurs, and so is its F1.
        - The aggregate recall skips NaN terms without re-normalizing the
          remaining weights.
    """

    def __init__(self, class_names: Sequence[str]) -> None:
        names = tuple(class_names)
        if not names:
            raise InvalidConfigurationError("class_names must not be empty")
        non_strings = [name for name in names if not isinstance(name, str)]
        if non_strings:
            raise InvalidConfigurationError(
                f"class names must be strings, got {non_strings!r}"
            )
        if "" in names:
            raise InvalidConfigurationError(
                "class names must not be empty strings"
            )
        duplicates = sorted(
            name for name, count in Counter(names).items() if count > 1
        )
        if duplicates:
            raise InvalidConfigurationError(
                f"class names must be unique, duplicated: {duplicates}"
            )

        self._class_names = names
        self._index = MappingProxyType(
            {name: i for i, name in enumerate(names)}
        )
        self._table: NDArray[np.float64] = np.zeros(
            (len(names), len(names)), dtype=np.float64
        )
        logger.debug(f"Created {len(names)}x{len(names)} confusion matrix")

    @classmethod
    def from_predictions(
        cls,
        class_names: Sequence[str],
        actual: Sequence[Label],
        predicted: Sequence[Label],
    ) -> "ConfusionMatrix":
        """Build a confusion matrix and record paired label sequences."""
        matrix = cls(class_names)
        matrix.increment_many(actual, predicted)
        return matrix

    @classmethod
    def from_counts(
        cls, class_names: Sequence[str], counts: NDArray[np.floating]
    ) -> "ConfusionMatrix":
        """Build a confusion matrix holding previously recorded counts.

        Raises:
            InvalidConfigurationError: If the class names are unusable.
            ValueError: If counts is not a square (n_classes, n_classes)
                table of finite non-negative values.
        """
        matrix = cls(class_names)
        table = np.asarray(counts, dtype=np.float64)
        expected = (matrix.n_classes, matrix.n_classes)
        if table.shape != expected:
            raise ValueError(
                f"counts must have shape {expected}, got {table.shape}"
            )
        if not np.isfinite(table).all():
            raise ValueError("counts must be finite")
        if (table < 0).any():
            raise ValueError(f"counts must be >= 0, got min {table.min()}")
        matrix._table = table.copy()
        return matrix

    @property
    def class_names(self) -> tuple[str, ...]:
        return self._class_names

    @property
    def n_classes(self) -> int:
        return len(self._class_names)

    @property
    def counts(self) -> NDArray[np.float64]:
        """Copy of the count table, shape (n_classes, n_classes)."""
        return self._table.copy()

    @property
    def total(self) -> float:
        """Number of recorded instances."""
        return float(self._table.sum())

    def __repr__(self) -> str:
        return (
            f"ConfusionMatrix(class_names={self._class_names!r}, "
            f"total={self.total})"
        )

    def index_of(self, label: Label) -> int:
        """Translate a class name or index into a validated index.

        Raises:
            UnknownClassError: If a name is not one of the class names.
            ClassIndexOutOfRangeError: If an index is outside [0, n_classes).
            TypeError: If the label is neither a string nor an integer.
        """
        if isinstance(label, str):
            try:
                return self._index[label]
            except KeyError:
                raise UnknownClassError(label, self._class_names) from None
        if isinstance(label, bool) or not isinstance(label, Integral):
            raise TypeError(
                f"label must be a class name or an integer index, "
                f"got {type(label).__name__}"
            )
        index = int(label)
        if not 0 <= index < self.n_classes:
            raise ClassIndexOutOfRangeError(index, self.n_classes)
        return index

    def _resolve_pair(
        self, actual: Label, predicted: Label
    ) -> tuple[int, int]:
        if isinstance(actual, str) != isinstance(predicted, str):
            raise TypeError(
                "actual and predicted must both be class names "
                "or both be indices"
            )
        return self.index_of(actual), self.index_of(predicted)

    def _increment_index(self, actual: int, predicted: int) -> None:
        self._table[actual, predicted] += 1

    def increment(self, actual: Label, predicted: Label) -> None:
        """Record one instance of ``actual`` predicted as ``predicted``."""
        self._increment_index(*self._resolve_pair(actual, predicted))

    def increment_many(
        self, actual: Iterable[Label], predicted: Iterable[Label]
    ) -> None:
        """Record paired sequences of labels.

        Every pair is validated before any count changes, so a bad label
        leaves the matrix untouched.
        """
        actual = list(actual)
        predicted = list(predicted)
        if len(actual) != len(predicted):
            raise ValueError(
                f"actual and predicted must have the same length, "
                f"got {len(actual)} and {len(predicted)}"
            )
        pairs = [self._resolve_pair(a, p) for a, p in zip(actual, predicted)]
        for a, p in pairs:
            self._increment_index(a, p)
        logger.debug(f"Recorded {len(pairs)} predictions")

    def count(self, actual: Label, predicted: Label) -> float:
        a, p = self._resolve_pair(actual, predicted)
        return float(self._table[a, p])

    def precision(self, label: Label | None = None) -> float:
        """Precision of one class, or the instance-weighted precision.

        A class that was never predicted has precision 0.0.
        """
        if label is None:
            return reduce(
                operator.add,
                (
                    self.precision(i) * self._class_ratio(i)
                    for i in range(self.n_classes)
                ),
            )
        index = self.index_of(label)
        tp = self._table[index, index]
        fp = self._table[:, index].sum() - tp
        return 0.0 if tp + fp == 0 else _divide(tp, tp + fp)

    def recall(self, label: Label | None = None) -> float:
        """Recall of one class, or the instance-weighted recall.

        A class that never occurs has NaN recall. The weighted recall drops
        NaN terms from the sum, and is NaN when nothing has been recorded.
        """
        if label is None:
            terms = [
                self.recall(i) * self._class_ratio(i)
                for i in range(self.n_classes)
            ]
            defined = [term for term in terms if not math.isnan(term)]
            if not defined:
                return math.nan
            return reduce(operator.add, defined)
        index = self.index_of(label)
        tp = self._table[index, index]
        fn = self._table[index].sum() - tp
        return _divide(tp, tp + fn)

    def f1(self, label: Label | None = None) -> float:
        """Harmonic mean of precision and recall, per class or aggregated."""
        return _harmonic_mean(self.precision(label), self.recall(label))

    def _class_ratio(self, index: int) -> float:
        """Share of all recorded instances whose actual class is ``index``."""
        return _divide(self._table[index].sum(), self._table.sum())

    def per_class_metrics(self) -> tuple[ClassMetrics, ...]:
        return tuple(
            ClassMetrics(
                name=name,
                precision=self.precision(i),
                recall=self.recall(i),
                f1=self.f1(i),
                support=int(self._table[i].sum()),
            )
            for i, name in enumerate(self._class_names)
        )

    def summary(self) -> MetricsSummary:
        return MetricsSummary(
            precision=self.precision(),
            recall=self.recall(),
            f1=self.f1(),
        )

    def normalized(self) -> NDArray[np.float64]:
        """Row-normalized copy of the counts; empty rows stay zero."""
        row_sums = self._table.sum(axis=1, keepdims=True)
        row_sums = np.where(row_sums == 0, 1, row_sums)
        result: NDArray[np.float64] = self._table / row_sums
        return result

    def to_metrics_csv(self) -> str:
        """Return ``precision,recall,f1`` for the weighted aggregates."""
        from classifier_metrics.evaluation.reporting import to_metrics_csv

        return to_metrics_csv(self)

    def to_csv(self) -> str:
        """Return the count table as CSV, actual classes down the rows."""
        from classifier_metrics.evaluation.reporting import to_matrix_csv

        return to_matrix_csv(self)
