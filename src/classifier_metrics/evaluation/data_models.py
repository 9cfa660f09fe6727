"""
Data models for evaluation summaries.

Metric values are plain floats and may be NaN where a metric is undefined
(for example recall for a class that never occurs). In JSON mode NaN is
written as null, since JSON has no NaN literal.
"""

import math

from pydantic import BaseModel, ConfigDict, Field, field_serializer


class MetricsSummary(BaseModel):
    """Instance-weighted aggregate metrics of one confusion matrix."""

    precision: float
    recall: float
    f1: float
    model_config = ConfigDict(frozen=True)

    @field_serializer("precision", "recall", "f1", when_used="json")
    def _nan_to_null(self, value: float) -> float | None:
        return None if math.isnan(value) else value


class ClassMetrics(MetricsSummary):
    """Metrics for a single class."""

    name: str
    support: int = Field(ge=0)


class SplitMetrics(BaseModel):
    """Aggregate metrics of one split in a batch of evaluations."""

    split_index: int = Field(ge=0)
    metrics: MetricsSummary
    model_config = ConfigDict(frozen=True)
