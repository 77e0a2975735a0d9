"""Round and tabulate engine results at the presentation boundary.

The engine returns full-precision values. Callers that display or export
them use this module so rounding is applied once, consistently per family.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from .schema import (
    DistributionFamily,
    HypothesisTestResult,
    RegressionResult,
    SamplePoint,
    coerce_enum,
)

# (x decimals, y decimals) used when returning samples to a client.
DISPLAY_DECIMALS: Dict[DistributionFamily, Tuple[int, int]] = {
    DistributionFamily.NORMAL: (4, 4),
    DistributionFamily.BINOMIAL: (0, 6),
    DistributionFamily.POISSON: (0, 6),
    DistributionFamily.EXPONENTIAL: (4, 6),
}


def round_points(
    points: Iterable[SamplePoint], x_decimals: int, y_decimals: int
) -> List[SamplePoint]:
    """Return copies of ``points`` rounded to the given decimal places.

    Args:
        points (Iterable[SamplePoint]): Samples from the engine.
        x_decimals (int): Decimal places for the domain value.
        y_decimals (int): Decimal places for the density or mass value.

    Returns:
        list[SamplePoint]: Rounded points in the original order.

    Note:
        Rounding is a presentation step only. Sums of rounded masses can
        drift from 1 by up to ``len(points) * 0.5 * 10**-y_decimals``.
    """
    return [
        SamplePoint(round(p.x, x_decimals), round(p.y, y_decimals)) for p in points
    ]


def round_for_display(
    family: Union[DistributionFamily, str], points: Iterable[SamplePoint]
) -> List[SamplePoint]:
    """Round ``points`` using the family's entry in :data:`DISPLAY_DECIMALS`."""
    x_decimals, y_decimals = DISPLAY_DECIMALS[coerce_enum(DistributionFamily, family)]
    return round_points(points, x_decimals, y_decimals)


def points_to_records(points: Iterable[SamplePoint]) -> List[Dict[str, float]]:
    return [p.to_dict() for p in points]


def points_to_frame(points: Sequence[SamplePoint]) -> pd.DataFrame:
    """Tabulate samples as a two-column ``x``/``y`` DataFrame."""
    if not points:
        return pd.DataFrame(columns=["x", "y"])
    return pd.DataFrame.from_records(points_to_records(points), columns=["x", "y"])


def predictions_to_frame(result: RegressionResult) -> pd.DataFrame:
    """Tabulate regression predictions with ``x``, ``yPredicted`` and ``residual``."""
    columns = ["x", "yPredicted", "residual"]
    if not result.predictions:
        return pd.DataFrame(columns=columns)
    return pd.DataFrame.from_records(
        [p.to_dict() for p in result.predictions], columns=columns
    )


def result_to_frame(
    result: Union[HypothesisTestResult, RegressionResult],
) -> pd.DataFrame:
    """Return a one-row summary table for a test or regression result.

    Regression predictions are left out; use :func:`predictions_to_frame`
    for those.
    """
    row = result.to_dict()
    row.pop("predictions", None)
    return pd.DataFrame([row])


def total_mass(points: Iterable[SamplePoint]) -> float:
    """Sum of ``y`` over discrete samples, e.g. to check a PMF sums to ~1."""
    return float(np.sum([p.y for p in points]))
