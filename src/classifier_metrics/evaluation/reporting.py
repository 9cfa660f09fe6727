"""
Comma-separated text views of confusion matrices.

Three shapes are produced:
- metrics row: ``precision,recall,f1`` for one matrix, no header
- matrix dump: ``A\\P,<class>,...`` header, then one count row per class
- batch report: ``Split #,Precision,Recall,F1`` header, then one row per split

A JSON summary of several splits is also provided.

Numbers use the shortest decimal that round-trips (``repr``), with NaN
written as ``NaN`` in CSV and as null in JSON. Nothing here touches the
filesystem.
"""

import csv
import io
import json
import math
from collections.abc import Mapping, Sequence

import numpy as np
import pandas as pd

from classifier_metrics.evaluation.confusion_matrix import ConfusionMatrix
from classifier_metrics.evaluation.exceptions import MatrixFormatError
from classifier_metrics.evaluation.metrics import (
    calculate_mean_metrics,
    calculate_pooled_confusion_matrix,
    calculate_split_metrics,
)

DELIMITER = ","
MATRIX_CORNER = "A\\P"
BATCH_HEADER = ("Split #", "Precision", "Recall", "F1")
NAN_TOKEN = "NaN"


def _format_number(value: float) -> str:
    if math.isnan(value):
        return NAN_TOKEN
    return repr(float(value))


def to_metrics_csv(matrix: ConfusionMatrix) -> str:
    """Render the weighted precision, recall and F1 of ``matrix``."""
    return DELIMITER.join(
        _format_number(value)
        for value in (matrix.precision(), matrix.recall(), matrix.f1())
    )


def to_matrix_csv(matrix: ConfusionMatrix) -> str:
    """Render the raw counts, one newline-terminated line per class."""
    lines = [DELIMITER.join((MATRIX_CORNER, *matrix.class_names))]
    for name, row in zip(matrix.class_names, matrix.counts):
        lines.append(
            DELIMITER.join((name, *(_format_number(v) for v in row)))
        )
    return "".join(f"{line}\n" for line in lines)


def to_batch_metrics_csv(matrices: Sequence[ConfusionMatrix]) -> str:
    """Render one metrics row per matrix, prefixed by its split index."""
    lines = [DELIMITER.join(BATCH_HEADER)]
    for i, matrix in enumerate(matrices):
        lines.append(DELIMITER.join((str(i), to_metrics_csv(matrix))))
    return "".join(f"{line}\n" for line in lines)


def parse_matrix_csv(text: str) -> ConfusionMatrix:
    """Rebuild a confusion matrix from the output of ``to_matrix_csv``.

    Fields are read verbatim, quote characters included. Class names that
    contain the delimiter or a line break cannot be read back.

    Raises:
        MatrixFormatError: If the text is not a well-formed matrix dump.
    """
    try:
        frame = pd.read_csv(
            io.StringIO(text),
            header=None,
            dtype=str,
            keep_default_na=False,
            quoting=csv.QUOTE_NONE,
        )
    except (pd.errors.EmptyDataError, pd.errors.ParserError) as e:
        raise MatrixFormatError(f"Malformed matrix CSV: {e}") from e

    header = frame.iloc[0].tolist()
    if len(header) < 2 or header[0] != MATRIX_CORNER:
        raise MatrixFormatError(
            f"Matrix CSV header must start with '{MATRIX_CORNER}'"
        )

    rows = frame.iloc[1:]
    class_names = [str(c) for c in header[1:]]
    row_names = rows.iloc[:, 0].tolist()
    if row_names != class_names:
        raise MatrixFormatError(
            f"Row classes {row_names} do not match header {class_names}"
        )

    try:
        counts = rows.iloc[:, 1:].apply(pd.to_numeric).to_numpy(
            dtype=np.float64
        )
    except (TypeError, ValueError) as e:
        raise MatrixFormatError(f"Non-numeric count in matrix CSV: {e}") from e

    if np.isnan(counts).any():
        raise MatrixFormatError("Matrix CSV has missing counts")

    try:
        return ConfusionMatrix.from_counts(class_names, counts)
    except ValueError as e:
        raise MatrixFormatError(str(e)) from e


def to_summary_json(
    matrices: Mapping[str, ConfusionMatrix],
    params: Mapping[str, object],
) -> str:
    """Render split, mean, pooled and per-class metrics as a JSON document.

    Undefined metrics are written as null, so the output is strict JSON.

    Raises:
        ValueError: If matrices is empty.
    """
    ordered = list(matrices.values())
    splits = calculate_split_metrics(ordered)
    pooled = calculate_pooled_confusion_matrix(ordered)
    summary = {
        "params": dict(params),
        "splits": [
            {"split": name, **s.model_dump(mode="json")}
            for name, s in zip(matrices, splits)
        ],
        "mean_metrics": calculate_mean_metrics(splits).model_dump(
            mode="json"
        ),
        "pooled_metrics": pooled.summary().model_dump(mode="json"),
        "per_class_metrics": [
            m.model_dump(mode="json") for m in pooled.per_class_metrics()
        ],
    }
    return json.dumps(summary, indent=2, allow_nan=False)
