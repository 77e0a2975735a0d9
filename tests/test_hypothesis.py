"""Tests for the one-sample hypothesis test evaluator."""

import json
import math

import numpy as np
import pytest
from scipy import stats as scipy_stats

from statlab.errors import DegenerateInputError, InvalidParameterError, UnsupportedOperationError
from statlab.schema import TestKind
from statlab.stats import hypothesis
from statlab.stats.hypothesis import (
    approximate_p_value,
    critical_value,
    describe_sample,
    evaluate,
)

EXAM_SCORES = [85, 92, 78, 96, 83, 89, 94, 87, 91, 88]


def test_exam_scores_reproduce_table_mode():
    result = evaluate(EXAM_SCORES, 85, significance_level=0.05)

    assert math.isclose(result.sample_mean, 88.3)
    assert result.sample_size == 10
    assert result.degrees_of_freedom == 9
    assert math.isclose(result.sample_std_dev, math.sqrt(28.9))
    # se = sqrt(28.9 / 10) = 1.7
    assert math.isclose(result.statistic, 3.3 / 1.7)
    # df = 9 falls in the lowest bracket of the table.
    assert result.critical_value == 2.776
    assert result.reject_null is False
    assert result.reject_null == (abs(result.statistic) > result.critical_value)
    assert math.isclose(
        result.p_value, 2 * (1 - result.statistic / (result.statistic + 3.0))
    )
    assert "fail to reject" in result.interpretation
    assert "α = 0.05" in result.interpretation
    assert "different from 85.0" in result.interpretation


def test_large_effect_rejects_null():
    result = evaluate([10.1, 10.2, 9.9, 10.0, 10.3, 10.1], 5.0, significance_level=0.01)

    assert result.reject_null is True
    assert result.critical_value == 3.747
    assert result.interpretation.startswith("At α = 0.01, we reject the null hypothesis.")
    assert "sufficient evidence" in result.interpretation


@pytest.mark.parametrize(
    "level,df,expected",
    [
        (0.05, 31, 1.96),
        (0.05, 30, 2.086),
        (0.05, 21, 2.086),
        (0.05, 20, 2.228),
        (0.05, 11, 2.228),
        (0.05, 10, 2.776),
        (0.01, 40, 2.576),
        (0.01, 25, 2.845),
        (0.01, 15, 3.169),
        (0.01, 2, 3.747),
        (0.10, 100, 1.645),
        (0.10, 22, 1.725),
        (0.10, 12, 1.812),
        (0.10, 1, 2.132),
    ],
)
def test_critical_value_brackets(level, df, expected):
    assert critical_value(level, df) == expected


def test_critical_value_rejects_untabulated_level():
    with pytest.raises(InvalidParameterError, match="0.01, 0.05 or 0.10"):
        critical_value(0.2, 5)


def test_approximate_p_value_formula():
    assert approximate_p_value(0.0, 4) == 2.0
    assert math.isclose(approximate_p_value(-2.0, 4), 2 * (1 - 2.0 / 4.0))


@pytest.mark.parametrize(
    "sample",
    [
        [1.0, 2.0, 3.0, 4.0, 5.5],
        list(np.linspace(0, 1, 25)),
        list(np.arange(40) * 0.37 + 2.0),
    ],
)
def test_reject_decision_matches_statistic(sample):
    for level in (0.01, 0.05, 0.10):
        result = evaluate(sample, 2.0, significance_level=level)
        assert result.reject_null == (abs(result.statistic) > result.critical_value)


def test_exact_mode_matches_scipy():
    result = evaluate(EXAM_SCORES, 85, significance_level=0.05, exact=True)
    reference = scipy_stats.ttest_1samp(EXAM_SCORES, popmean=85)

    assert math.isclose(result.statistic, float(reference.statistic))
    assert math.isclose(result.p_value, float(reference.pvalue))
    assert math.isclose(result.critical_value, float(scipy_stats.t.ppf(0.975, 9)))
    assert result.reject_null == (abs(result.statistic) > result.critical_value)


def test_exact_mode_accepts_any_level():
    result = evaluate(EXAM_SCORES, 85, significance_level=0.2, exact=True)
    assert math.isclose(result.critical_value, float(scipy_stats.t.ppf(0.9, 9)))
    assert result.reject_null is True

    with pytest.raises(InvalidParameterError):
        evaluate(EXAM_SCORES, 85, significance_level=1.5, exact=True)


def test_table_mode_rejects_untabulated_level():
    with pytest.raises(InvalidParameterError):
        evaluate(EXAM_SCORES, 85, significance_level=0.2)


@pytest.mark.parametrize("sample", [[], [42.0]])
def test_undersized_sample_raises(sample):
    with pytest.raises(InvalidParameterError, match="at least 2"):
        evaluate(sample, 0.0)


def test_non_finite_sample_raises():
    with pytest.raises(InvalidParameterError):
        evaluate([1.0, math.nan, 3.0], 0.0)


def test_constant_sample_is_degenerate():
    with pytest.raises(DegenerateInputError):
        evaluate([0.1, 0.1, 0.1, 0.1], 0.0)


@pytest.mark.parametrize("kind", [TestKind.Z_TEST, "chi-square"])
def test_declared_kinds_are_unsupported(kind):
    with pytest.raises(UnsupportedOperationError, match="not implemented"):
        evaluate(EXAM_SCORES, 85, test_kind=kind)


def test_unknown_kind_is_unsupported():
    with pytest.raises(UnsupportedOperationError):
        evaluate(EXAM_SCORES, 85, test_kind="anova")


def test_describe_sample():
    summary = describe_sample([2, 4, 4, 4, 5, 5, 7, 9])

    assert summary.n == 8
    assert math.isclose(summary.mean, 5.0)
    assert math.isclose(summary.variance, 32 / 7)
    assert math.isclose(summary.std_dev, math.sqrt(32 / 7))


def test_sample_summary_to_dict_uses_wire_names():
    payload = describe_sample([2, 4, 4, 4, 5, 5, 7, 9]).to_dict()

    assert set(payload) == {"mean", "variance", "stdDev", "n"}
    assert payload["n"] == 8
    assert payload["mean"] == pytest.approx(5.0)
    assert payload["stdDev"] == pytest.approx(math.sqrt(32 / 7))
    json.dumps(payload)


def test_evaluate_validates_sample_once(monkeypatch):
    calls = []
    original = hypothesis._as_sample

    def counting(sample):
        calls.append(sample)
        return original(sample)

    monkeypatch.setattr(hypothesis, "_as_sample", counting)
    evaluate(EXAM_SCORES, 85)

    assert len(calls) == 1


def test_result_to_dict_uses_wire_names():
    payload = evaluate(EXAM_SCORES, 85).to_dict()

    assert payload["testKind"] == "t-test"
    assert payload["sampleSize"] == 10
    assert payload["criticalValue"] == 2.776
    assert set(payload) >= {
        "statistic",
        "pValue",
        "criticalValue",
        "rejectNull",
        "interpretation",
        "sampleMean",
        "sampleStdDev",
    }
