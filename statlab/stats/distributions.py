"""Sample probability density and mass functions over a derived domain.

Each family produces an ordered list of :class:`~statlab.schema.SamplePoint`
(ascending x) whose length and spacing depend only on the parameters:

- normal: 200 equally spaced points over ``mean ± 4·stdDev``.
- binomial: one point per integer ``k`` in ``0..n``.
- poisson: integers from 0 up to ``max(20, ceil(λ + 5√λ))``, with the
  negligible right tail truncated.
- exponential: 200 equally spaced points over ``[0, 5/λ]``.

Mass functions are evaluated in log space through ``gammaln`` so large
``n``/``k`` stay finite; results for small inputs match the factorial form.
Values are returned at full precision; presentation rounding belongs to
:mod:`statlab.reporting`.
"""

from __future__ import annotations

import math
from typing import Callable, Dict, List, Mapping, Union

import numpy as np
from scipy.special import gammaln, xlog1py, xlogy

from ..errors import InvalidParameterError
from ..schema import DistributionFamily, SamplePoint, coerce_enum

NORMAL_POINTS = 200
NORMAL_RANGE_SIGMAS = 4.0
EXPONENTIAL_POINTS = 200
EXPONENTIAL_RANGE_MEANS = 5.0
POISSON_MIN_UPPER = 20
POISSON_TAIL_SIGMAS = 3.0
POISSON_RANGE_SIGMAS = 5.0
POISSON_TAIL_MASS = 0.001

FamilyLike = Union[DistributionFamily, str]


def normal_pdf(x, mean: float, std_dev: float):
    """Normal density ``1/(σ√(2π)) · exp(-(x-μ)²/(2σ²))``, vectorized over ``x``."""
    x_arr = np.asarray(x, dtype=float)
    coefficient = 1.0 / (std_dev * math.sqrt(2.0 * math.pi))
    return coefficient * np.exp(-((x_arr - mean) ** 2) / (2.0 * std_dev**2))


def binomial_pmf(k, n: int, p: float):
    """Binomial mass ``C(n,k) p^k (1-p)^(n-k)`` via log-gamma.

    ``xlogy``/``xlog1py`` treat ``0·log(0)`` as 0, so ``p`` of exactly 0 or 1
    puts all mass on ``k = 0`` or ``k = n``.
    """
    k_arr = np.asarray(k, dtype=float)
    log_coef = gammaln(n + 1.0) - gammaln(k_arr + 1.0) - gammaln(n - k_arr + 1.0)
    log_mass = log_coef + xlogy(k_arr, p) + xlog1py(n - k_arr, -p)
    return np.exp(log_mass)


def poisson_pmf(k, lam: float):
    """Poisson mass ``λ^k e^(-λ) / k!`` via log-gamma."""
    k_arr = np.asarray(k, dtype=float)
    return np.exp(xlogy(k_arr, lam) - lam - gammaln(k_arr + 1.0))


def exponential_pdf(x, lam: float):
    """Exponential density ``λ e^(-λx)`` for ``x >= 0``, 0 elsewhere."""
    x_arr = np.asarray(x, dtype=float)
    return np.where(x_arr >= 0, lam * np.exp(-lam * np.clip(x_arr, 0.0, None)), 0.0)


def _require(parameters: Mapping[str, float], name: str) -> float:
    if name not in parameters or parameters[name] is None:
        raise InvalidParameterError(f"Missing required parameter '{name}'.")
    try:
        value = float(parameters[name])
    except (TypeError, ValueError):
        raise InvalidParameterError(
            f"Parameter '{name}' must be a number, got {parameters[name]!r}."
        ) from None
    if not math.isfinite(value):
        raise InvalidParameterError(f"Parameter '{name}' must be finite, got {value}.")
    return value


def _to_points(x: np.ndarray, y: np.ndarray) -> List[SamplePoint]:
    return [SamplePoint(float(xi), float(yi)) for xi, yi in zip(x, y)]


def _sample_normal(parameters: Mapping[str, float]) -> List[SamplePoint]:
    mean = _require(parameters, "mean")
    std_dev = _require(parameters, "stdDev")
    if std_dev <= 0:
        raise InvalidParameterError(
            f"stdDev must be a positive number, got {std_dev}."
        )
    x = np.linspace(
        mean - NORMAL_RANGE_SIGMAS * std_dev,
        mean + NORMAL_RANGE_SIGMAS * std_dev,
        NORMAL_POINTS,
    )
    return _to_points(x, normal_pdf(x, mean, std_dev))


def _sample_binomial(parameters: Mapping[str, float]) -> List[SamplePoint]:
    n_value = _require(parameters, "n")
    p = _require(parameters, "p")
    if n_value <= 0 or not float(n_value).is_integer():
        raise InvalidParameterError(f"n must be a positive integer, got {n_value}.")
    if p < 0 or p > 1:
        raise InvalidParameterError(f"p must be between 0 and 1, got {p}.")
    n = int(n_value)
    k = np.arange(n + 1)
    return _to_points(k, binomial_pmf(k, n, p))


def poisson_upper_bound(lam: float) -> int:
    """Largest ``k`` considered before tail truncation."""
    return max(POISSON_MIN_UPPER, math.ceil(lam + POISSON_RANGE_SIGMAS * math.sqrt(lam)))


def _sample_poisson(parameters: Mapping[str, float]) -> List[SamplePoint]:
    lam = _require(parameters, "lambda")
    if lam <= 0:
        raise InvalidParameterError(f"lambda must be a positive number, got {lam}.")
    k = np.arange(poisson_upper_bound(lam) + 1)
    mass = poisson_pmf(k, lam)

    # Stop before the first point that is both negligible and past λ + 3√λ.
    tail = (mass < POISSON_TAIL_MASS) & (k > lam + POISSON_TAIL_SIGMAS * math.sqrt(lam))
    if tail.any():
        stop = int(np.argmax(tail))
        k, mass = k[:stop], mass[:stop]
    return _to_points(k, mass)


def _sample_exponential(parameters: Mapping[str, float]) -> List[SamplePoint]:
    lam = _require(parameters, "lambda")
    if lam <= 0:
        raise InvalidParameterError(f"lambda must be a positive number, got {lam}.")
    x = np.linspace(0.0, EXPONENTIAL_RANGE_MEANS / lam, EXPONENTIAL_POINTS)
    return _to_points(x, exponential_pdf(x, lam))


_SAMPLERS: Dict[DistributionFamily, Callable[[Mapping[str, float]], List[SamplePoint]]] = {
    DistributionFamily.NORMAL: _sample_normal,
    DistributionFamily.BINOMIAL: _sample_binomial,
    DistributionFamily.POISSON: _sample_poisson,
    DistributionFamily.EXPONENTIAL: _sample_exponential,
}


def sample(family: FamilyLike, parameters: Mapping[str, float]) -> List[SamplePoint]:
    """Evaluate a distribution's PDF/PMF over its derived domain.

    Args:
        family (DistributionFamily | str): ``normal``, ``binomial``,
            ``poisson`` or ``exponential``.
        parameters (Mapping[str, float]): Named parameters for the family:
            ``mean``/``stdDev``, ``n``/``p``, or ``lambda``.

    Returns:
        list[SamplePoint]: Points in ascending ``x`` order.

    Raises:
        InvalidParameterError: If a parameter is missing, non-finite or out
            of range.
        UnsupportedOperationError: If ``family`` is not a known family.
    """
    resolved = coerce_enum(DistributionFamily, family)
    return _SAMPLERS[resolved](parameters)


def distribution_metadata(points: List[SamplePoint]) -> Dict[str, object]:
    """Summarize a sampled domain for storage alongside the points."""
    if not points:
        return {"numPoints": 0, "range": {"min": math.nan, "max": math.nan}}
    return {
        "numPoints": len(points),
        "range": {"min": points[0].x, "max": points[-1].x},
    }
