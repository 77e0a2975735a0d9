"""Define the value objects exchanged between the engine and its callers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Tuple, Type, TypeVar

from .errors import UnsupportedOperationError

_E = TypeVar("_E", bound=Enum)


class DistributionFamily(str, Enum):
    """Distribution families understood by the sampler."""

    NORMAL = "normal"
    BINOMIAL = "binomial"
    POISSON = "poisson"
    EXPONENTIAL = "exponential"


class TestKind(str, Enum):
    """Hypothesis test kinds.

    Only ``T_TEST`` is implemented; the others are accepted by the data model
    so stored requests round-trip, but evaluating them is unsupported.
    """

    __test__ = False

    T_TEST = "t-test"
    Z_TEST = "z-test"
    CHI_SQUARE = "chi-square"


def coerce_enum(enum_cls: Type[_E], value: Any) -> _E:
    """Return ``value`` as a member of ``enum_cls``.

    Raises:
        UnsupportedOperationError: If ``value`` names no member.
    """
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        choices = ", ".join(m.value for m in enum_cls)
        raise UnsupportedOperationError(
            f"Unsupported {enum_cls.__name__} {value!r}; expected one of: {choices}."
        ) from None


@dataclass(frozen=True)
class SamplePoint:
    """A single (domain value, density or mass) pair."""

    x: float
    y: float

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y}


@dataclass(frozen=True)
class SampleSummary:
    """Basic descriptive statistics of a sample (variance uses ddof=1)."""

    mean: float
    variance: float
    std_dev: float
    n: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mean": self.mean,
            "variance": self.variance,
            "stdDev": self.std_dev,
            "n": self.n,
        }


@dataclass(frozen=True)
class HypothesisTestResult:
    """Outcome of a one-sample hypothesis test.

    Attributes:
        statistic: Test statistic (t for the t-test).
        p_value: Two-sided p-value. In table mode this is the closed-form
            approximation ``2 * (1 - |t| / (|t| + sqrt(df)))``.
        critical_value: Threshold magnitude for ``statistic``.
        reject_null: ``abs(statistic) > critical_value``.
        interpretation: Human-readable decision sentence.
    """

    statistic: float
    p_value: float
    critical_value: float
    reject_null: bool
    interpretation: str
    sample_mean: float
    sample_size: int
    sample_std_dev: float
    degrees_of_freedom: int
    significance_level: float
    hypothesized_mean: float
    test_kind: TestKind = TestKind.T_TEST

    def to_dict(self) -> Dict[str, Any]:
        return {
            "testKind": self.test_kind.value,
            "statistic": self.statistic,
            "pValue": self.p_value,
            "criticalValue": self.critical_value,
            "rejectNull": self.reject_null,
            "interpretation": self.interpretation,
            "sampleMean": self.sample_mean,
            "sampleSize": self.sample_size,
            "sampleStdDev": self.sample_std_dev,
            "degreesOfFreedom": self.degrees_of_freedom,
            "significanceLevel": self.significance_level,
            "hypothesizedMean": self.hypothesized_mean,
        }


@dataclass(frozen=True)
class Prediction:
    """Fitted value and residual for one observed pair."""

    x: float
    y_predicted: float
    residual: float

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "yPredicted": self.y_predicted, "residual": self.residual}


@dataclass(frozen=True)
class RegressionResult:
    """Ordinary least-squares fit of ``y = slope * x + intercept``."""

    slope: float
    intercept: float
    r_squared: float
    correlation: float
    n: int
    equation: str
    predictions: Tuple[Prediction, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        predictions: List[Dict[str, float]] = [p.to_dict() for p in self.predictions]
        return {
            "slope": self.slope,
            "intercept": self.intercept,
            "rSquared": self.r_squared,
            "correlation": self.correlation,
            "n": self.n,
            "equation": self.equation,
            "predictions": predictions,
        }
