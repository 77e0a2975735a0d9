"""One-sample hypothesis tests against a hypothesized population mean.

Only the one-sample t-test is implemented. By default the critical value
comes from a coarse four-bracket lookup table and the p-value from the
closed-form approximation ``2 * (1 - |t| / (|t| + sqrt(df)))``; both are
kept for compatibility with previously stored results. Passing
``exact=True`` switches both to the Student-t distribution from SciPy.
"""

from __future__ import annotations

import math
from typing import Dict, Sequence, Tuple, Union

import numpy as np
from scipy.stats import t as student_t

from ..errors import DegenerateInputError, InvalidParameterError, UnsupportedOperationError
from ..schema import HypothesisTestResult, SampleSummary, TestKind, coerce_enum

DEFAULT_SIGNIFICANCE_LEVEL = 0.05

# Critical |t| per significance level, for df brackets (>30, >20, >10, else).
_CRITICAL_VALUES: Dict[float, Tuple[float, float, float, float]] = {
    0.05: (1.96, 2.086, 2.228, 2.776),
    0.01: (2.576, 2.845, 3.169, 3.747),
    0.10: (1.645, 1.725, 1.812, 2.132),
}


def _as_sample(sample: Sequence[float]) -> np.ndarray:
    values = np.asarray(sample, dtype=float).ravel()
    if values.size < 2:
        raise InvalidParameterError(
            f"Sample must contain at least 2 values, got {values.size}; "
            "the sample standard deviation is undefined otherwise."
        )
    if not np.all(np.isfinite(values)):
        raise InvalidParameterError("Sample values must all be finite numbers.")
    return values


def describe_sample(sample: Sequence[float]) -> SampleSummary:
    """Return mean, variance (ddof=1), standard deviation and size of a sample.

    Raises:
        InvalidParameterError: If the sample has fewer than 2 values or any
            non-finite value.
    """
    return _summarize(_as_sample(sample))


def _summarize(values: np.ndarray) -> SampleSummary:
    n = int(values.size)
    mean = float(np.sum(values) / n)
    variance = float(np.sum((values - mean) ** 2) / (n - 1))
    return SampleSummary(mean=mean, variance=variance, std_dev=math.sqrt(variance), n=n)


def critical_value(significance_level: float, degrees_of_freedom: int) -> float:
    """Look up the two-sided critical |t| from the bracketed table.

    Args:
        significance_level (float): One of ``0.01``, ``0.05`` or ``0.10``.
        degrees_of_freedom (int): ``n - 1``.

    Raises:
        InvalidParameterError: If the significance level is not tabulated.
    """
    row = None
    for level, values in _CRITICAL_VALUES.items():
        if math.isclose(significance_level, level):
            row = values
            break
    if row is None:
        raise InvalidParameterError(
            f"Significance level must be one of 0.01, 0.05 or 0.10, got {significance_level}."
        )
    if degrees_of_freedom > 30:
        return row[0]
    if degrees_of_freedom > 20:
        return row[1]
    if degrees_of_freedom > 10:
        return row[2]
    return row[3]


def approximate_p_value(statistic: float, degrees_of_freedom: int) -> float:
    """Closed-form two-sided p-value approximation used in table mode.

    This is not the Student-t CDF: it returns 2 at ``statistic == 0``.
    """
    magnitude = abs(statistic)
    return 2.0 * (1.0 - magnitude / (magnitude + math.sqrt(degrees_of_freedom)))


def _exact_t(
    statistic: float, degrees_of_freedom: int, significance_level: float
) -> Tuple[float, float]:
    if not 0.0 < significance_level < 1.0:
        raise InvalidParameterError(
            f"Significance level must be in (0, 1), got {significance_level}."
        )
    crit = float(student_t.ppf(1.0 - significance_level / 2.0, degrees_of_freedom))
    p_value = float(2.0 * student_t.sf(abs(statistic), degrees_of_freedom))
    return crit, p_value


def interpret(reject_null: bool, significance_level: float, hypothesized_mean: float) -> str:
    if reject_null:
        return (
            f"At α = {significance_level}, we reject the null hypothesis. "
            "There is sufficient evidence that the population mean is different "
            f"from {hypothesized_mean}."
        )
    return (
        f"At α = {significance_level}, we fail to reject the null hypothesis. "
        "There is insufficient evidence that the population mean is different "
        f"from {hypothesized_mean}."
    )


def _one_sample_t_test(
    sample: Sequence[float],
    hypothesized_mean: float,
    significance_level: float,
    exact: bool,
) -> HypothesisTestResult:
    values = _as_sample(sample)
    summary = _summarize(values)
    if np.ptp(values) == 0 or summary.std_dev == 0:
        raise DegenerateInputError(
            "Sample has zero standard deviation; the t statistic is undefined."
        )

    statistic = (summary.mean - hypothesized_mean) / (summary.std_dev / math.sqrt(summary.n))
    dof = summary.n - 1

    if exact:
        crit, p_value = _exact_t(statistic, dof, significance_level)
    else:
        crit = critical_value(significance_level, dof)
        p_value = approximate_p_value(statistic, dof)

    reject_null = bool(abs(statistic) > crit)
    return HypothesisTestResult(
        statistic=float(statistic),
        p_value=float(p_value),
        critical_value=float(crit),
        reject_null=reject_null,
        interpretation=interpret(reject_null, significance_level, hypothesized_mean),
        sample_mean=summary.mean,
        sample_size=summary.n,
        sample_std_dev=summary.std_dev,
        degrees_of_freedom=dof,
        significance_level=float(significance_level),
        hypothesized_mean=float(hypothesized_mean),
        test_kind=TestKind.T_TEST,
    )


def evaluate(
    sample: Sequence[float],
    hypothesized_mean: float,
    significance_level: float = DEFAULT_SIGNIFICANCE_LEVEL,
    test_kind: Union[TestKind, str] = TestKind.T_TEST,
    exact: bool = False,
) -> HypothesisTestResult:
    """Test whether a sample's population mean differs from ``hypothesized_mean``.

    Args:
        sample (Sequence[float]): Observations; at least two finite values.
        hypothesized_mean (float): Population mean under the null hypothesis.
        significance_level (float, optional): ``0.01``, ``0.05`` or ``0.10``
            in table mode; any value in ``(0, 1)`` when ``exact``.
            Defaults to ``0.05``.
        test_kind (TestKind | str, optional): Only ``"t-test"`` is
            implemented. Defaults to ``TestKind.T_TEST``.
        exact (bool, optional): Use the Student-t quantile and survival
            function instead of the compatibility table and approximation.

    Returns:
        HypothesisTestResult: Statistic, p-value, critical value and decision.

    Raises:
        InvalidParameterError: If the sample is undersized or non-finite, or
            the significance level is not supported.
        DegenerateInputError: If every sample value is identical.
        UnsupportedOperationError: For ``z-test`` and ``chi-square``.
    """
    kind = coerce_enum(TestKind, test_kind)
    if not math.isfinite(float(hypothesized_mean)):
        raise InvalidParameterError(
            f"Hypothesized mean must be finite, got {hypothesized_mean}."
        )
    if kind is TestKind.T_TEST:
        return _one_sample_t_test(sample, float(hypothesized_mean), significance_level, exact)
    raise UnsupportedOperationError(f"Test kind '{kind.value}' is not implemented.")
