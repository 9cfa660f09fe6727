"""Tests for CSV rendering and parsing of confusion matrices."""

import json

import numpy as np
import pytest

from classifier_metrics.evaluation.confusion_matrix import ConfusionMatrix
from classifier_metrics.evaluation.exceptions import MatrixFormatError
from classifier_metrics.evaluation.reporting import (
    parse_matrix_csv,
    to_batch_metrics_csv,
    to_matrix_csv,
    to_metrics_csv,
    to_summary_json,
)


def _cat_dog() -> ConfusionMatrix:
    return ConfusionMatrix.from_predictions(
        ["cat", "dog"],
        ["cat", "cat", "cat", "cat", "dog", "dog"],
        ["cat", "cat", "cat", "dog", "dog", "dog"],
    )


class TestMetricsCsv:
    def test_three_fields(self) -> None:
        cm = _cat_dog()
        fields = to_metrics_csv(cm).split(",")
        assert len(fields) == 3
        assert [float(f) for f in fields] == [
            cm.precision(),
            cm.recall(),
            cm.f1(),
        ]

    def test_no_trailing_newline(self) -> None:
        assert not to_metrics_csv(_cat_dog()).endswith("\n")

    def test_perfect(self) -> None:
        cm = ConfusionMatrix.from_predictions(["a"], ["a"], ["a"])
        assert to_metrics_csv(cm) == "1.0,1.0,1.0"

    def test_nan_rendered(self) -> None:
        assert to_metrics_csv(ConfusionMatrix(["a", "b"])) == "NaN,NaN,NaN"

    def test_method_matches_function(self) -> None:
        cm = _cat_dog()
        assert cm.to_metrics_csv() == to_metrics_csv(cm)


class TestMatrixCsv:
    def test_layout(self) -> None:
        assert to_matrix_csv(_cat_dog()) == (
            "A\\P,cat,dog\n" "cat,3.0,1.0\n" "dog,0.0,2.0\n"
        )

    def test_method_matches_function(self) -> None:
        cm = _cat_dog()
        assert cm.to_csv() == to_matrix_csv(cm)

    def test_round_trip_counts(self) -> None:
        rng = np.random.default_rng(3)
        names = ["alpha", "beta", "gamma", "delta"]
        cm = ConfusionMatrix.from_predictions(
            names,
            rng.integers(0, 4, size=50).tolist(),
            rng.integers(0, 4, size=50).tolist(),
        )
        parsed = parse_matrix_csv(to_matrix_csv(cm))
        assert parsed.class_names == cm.class_names
        np.testing.assert_array_equal(parsed.counts, cm.counts)

    def test_round_trip_keeps_quotes_in_names(self) -> None:
        cm = ConfusionMatrix.from_predictions(
            ['"x"', "it's"], ['"x"', "it's"], ["it's", "it's"]
        )
        parsed = parse_matrix_csv(to_matrix_csv(cm))
        assert parsed.class_names == ('"x"', "it's")
        np.testing.assert_array_equal(parsed.counts, cm.counts)


class TestBatchMetricsCsv:
    def test_two_splits(self) -> None:
        first = _cat_dog()
        second = ConfusionMatrix.from_predictions(["a", "b"], ["a"], ["b"])
        report = to_batch_metrics_csv([first, second])
        lines = report.splitlines()
        assert len(lines) == 3
        assert lines[0] == "Split #,Precision,Recall,F1"
        assert lines[1] == f"0,{to_metrics_csv(first)}"
        assert lines[2] == f"1,{to_metrics_csv(second)}"
        assert report.endswith("\n")

    def test_empty_batch_has_header_only(self) -> None:
        assert to_batch_metrics_csv([]) == "Split #,Precision,Recall,F1\n"


class TestParseMatrixCsv:
    def test_parses_dump(self) -> None:
        cm = parse_matrix_csv("A\\P,x,y\nx,1.0,2.0\ny,0.0,5.0\n")
        assert cm.class_names == ("x", "y")
        assert cm.count("x", "y") == 2.0
        assert cm.recall("y") == 1.0

    def test_numeric_class_names_stay_strings(self) -> None:
        cm = parse_matrix_csv("A\\P,1,2\n1,1.0,0.0\n2,0.0,1.0\n")
        assert cm.class_names == ("1", "2")

    def test_empty_text(self) -> None:
        with pytest.raises(MatrixFormatError):
            parse_matrix_csv("")

    def test_wrong_corner(self) -> None:
        with pytest.raises(MatrixFormatError, match="header must start"):
            parse_matrix_csv("X,a\na,1.0\n")

    def test_row_order_mismatch(self) -> None:
        with pytest.raises(MatrixFormatError, match="do not match header"):
            parse_matrix_csv("A\\P,a,b\nb,0.0,1.0\na,1.0,0.0\n")

    def test_non_numeric_count(self) -> None:
        with pytest.raises(MatrixFormatError, match="Non-numeric"):
            parse_matrix_csv("A\\P,a,b\na,x,0.0\nb,0.0,1.0\n")

    def test_missing_count(self) -> None:
        with pytest.raises(MatrixFormatError):
            parse_matrix_csv("A\\P,a,b\na,1.0\nb,0.0,1.0\n")

    def test_negative_count(self) -> None:
        with pytest.raises(MatrixFormatError, match="must be >= 0"):
            parse_matrix_csv("A\\P,a\na,-1.0\n")

    def test_empty_class_name_in_header(self) -> None:
        with pytest.raises(MatrixFormatError, match="empty strings"):
            parse_matrix_csv("A\\P,,b\n,1.0,0.0\nb,0.0,1.0\n")


def _reject_constant(token: str) -> float:
    raise ValueError(f"Non-standard JSON constant: {token}")


class TestSummaryJson:
    def test_absent_class_written_as_null(self) -> None:
        cm = ConfusionMatrix.from_predictions(
            ["a", "b", "c"], ["a", "a"], ["a", "b"]
        )
        text = to_summary_json({"all": cm}, {"data": "predictions.csv"})
        summary = json.loads(text, parse_constant=_reject_constant)
        per_class = {m["name"]: m for m in summary["per_class_metrics"]}
        assert per_class["c"]["recall"] is None
        assert per_class["c"]["f1"] is None
        assert per_class["c"]["precision"] == 0.0
        assert per_class["a"]["recall"] == 0.5
        assert summary["params"] == {"data": "predictions.csv"}

    def test_splits_keep_names_and_order(self) -> None:
        first = ConfusionMatrix.from_predictions(["a", "b"], ["a"], ["a"])
        second = ConfusionMatrix.from_predictions(["a", "b"], ["b"], ["a"])
        summary = json.loads(
            to_summary_json({"fold1": first, "fold0": second}, {}),
            parse_constant=_reject_constant,
        )
        assert [s["split"] for s in summary["splits"]] == ["fold1", "fold0"]
        assert [s["split_index"] for s in summary["splits"]] == [0, 1]
        assert summary["splits"][1]["metrics"]["f1"] is None
        assert summary["pooled_metrics"]["precision"] == 0.25

    def test_empty_raises(self) -> None:
        with pytest.raises(ValueError, match="Cannot pool empty matrices"):
            to_summary_json({}, {})
