"""Ordinary least-squares fit of a straight line to paired observations.

The fit uses the closed-form sums rather than ``np.polyfit`` so slope and
intercept match values computed by earlier clients of this engine. The sums
are taken about the means, which is the textbook
``(n·Σxy − Σx·Σy) / (n·Σx² − (Σx)²)`` divided through by n but stays exact
for x values with a large common offset such as epoch timestamps:

    slope     = Sxy / Sxx,  Sxy = Σ(x − x̄)(y − ȳ),  Sxx = Σ(x − x̄)²
    intercept = ȳ − slope·x̄
    R²        = 1 − RSS / TSS,  TSS = Σ(y − ȳ)²

``correlation`` is ``√R²`` carrying the sign of the slope, which equals the
Pearson coefficient for simple linear regression.
"""

from __future__ import annotations

import math
from typing import Sequence, Tuple

import numpy as np

from ..errors import DegenerateInputError, InvalidParameterError
from ..schema import Prediction, RegressionResult

EQUATION_DECIMALS = 4


def _paired_arrays(xs: Sequence[float], ys: Sequence[float]) -> Tuple[np.ndarray, np.ndarray]:
    x_arr = np.asarray(xs, dtype=float).ravel()
    y_arr = np.asarray(ys, dtype=float).ravel()
    if x_arr.size != y_arr.size:
        raise InvalidParameterError(
            f"x and y must have the same length, got {x_arr.size} and {y_arr.size}."
        )
    if x_arr.size < 2:
        raise InvalidParameterError(
            f"Regression needs at least 2 points, got {x_arr.size}."
        )
    if not (np.all(np.isfinite(x_arr)) and np.all(np.isfinite(y_arr))):
        raise InvalidParameterError("x and y values must all be finite numbers.")
    return x_arr, y_arr


def format_equation(slope: float, intercept: float, decimals: int = EQUATION_DECIMALS) -> str:
    return f"y = {slope:.{decimals}f}x + {intercept:.{decimals}f}"


def fit(xs: Sequence[float], ys: Sequence[float]) -> RegressionResult:
    """Fit ``y = slope * x + intercept`` by ordinary least squares.

    Args:
        xs (Sequence[float]): Independent-variable values.
        ys (Sequence[float]): Dependent-variable values, same length as ``xs``.

    Returns:
        RegressionResult: Coefficients, goodness of fit and one prediction
        per input pair, in input order.

    Raises:
        InvalidParameterError: If lengths differ, fewer than two pairs are
            given, or any value is non-finite.
        DegenerateInputError: If every x value is identical.

    Note:
        When every y value is identical, TSS is zero. The fitted line is then
        exactly horizontal with zero residuals, so ``r_squared`` is reported
        as 1 and ``correlation`` as 0.
    """
    x_arr, y_arr = _paired_arrays(xs, ys)
    n = int(x_arr.size)

    mean_x = float(np.sum(x_arr)) / n
    mean_y = float(np.sum(y_arr)) / n
    dx = x_arr - mean_x
    dy = y_arr - mean_y

    # Centered sums; raw Σx² cancels for x with a large common offset.
    sxx = float(np.sum(dx * dx))
    sxy = float(np.sum(dx * dy))
    if np.ptp(x_arr) == 0 or sxx == 0:
        raise DegenerateInputError(
            "All x values are identical; the regression slope is undefined."
        )

    constant_y = bool(np.ptp(y_arr) == 0)
    if constant_y:
        slope = 0.0
        intercept = float(y_arr[0])
    else:
        slope = sxy / sxx
        intercept = mean_y - slope * mean_x

    y_hat = slope * x_arr + intercept
    residuals = y_arr - y_hat
    residual_ss = float(np.sum(residuals**2))

    if constant_y:
        r_squared = 1.0
    else:
        total_ss = float(np.sum(dy * dy))
        r_squared = 1.0 - residual_ss / total_ss

    # OLS keeps R² in [0, 1]; clip rounding noise before the square root.
    correlation = math.sqrt(min(max(r_squared, 0.0), 1.0)) * float(np.sign(slope))

    predictions = tuple(
        Prediction(x=float(x), y_predicted=float(yp), residual=float(r))
        for x, yp, r in zip(x_arr, y_hat, residuals)
    )
    return RegressionResult(
        slope=float(slope),
        intercept=float(intercept),
        r_squared=float(r_squared),
        correlation=float(correlation),
        n=n,
        equation=format_equation(slope, intercept),
        predictions=predictions,
    )
