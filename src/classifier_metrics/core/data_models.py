"""
Data models for labeled classifier predictions.
"""

from dataclasses import dataclass


def _unique_in_order(values: tuple[str, ...]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(values))


@dataclass(frozen=True)
class LabeledPredictions:
    """
    Actual and predicted class labels for a set of instances.

    Attributes:
        actual: True class of each instance.
        predicted: Predicted class of each instance.
        splits: Optional split name of each instance (e.g. a fold id).
    """

    actual: tuple[str, ...]
    predicted: tuple[str, ...]
    splits: tuple[str, ...] | None = None

    def __post_init__(self) -> None:
        if len(self.actual) != len(self.predicted):
            raise ValueError(
                f"actual and predicted must have the same length, "
                f"got {len(self.actual)} and {len(self.predicted)}"
            )
        if self.splits is not None and len(self.splits) != len(self.actual):
            raise ValueError(
                f"splits must have one entry per instance, "
                f"got {len(self.splits)} for {len(self.actual)} instances"
            )

    @property
    def n_instances(self) -> int:
        return len(self.actual)

    @property
    def class_names(self) -> tuple[str, ...]:
        """Labels in order of first appearance, actual labels first."""
        return _unique_in_order(self.actual + self.predicted)

    @property
    def split_names(self) -> tuple[str, ...]:
        """Split names in order of first appearance."""
        if self.splits is None:
            return ()
        return _unique_in_order(self.splits)
