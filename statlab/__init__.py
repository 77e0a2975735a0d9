"""
A small engine for interactive statistics.

Computes probability distribution samples, one-sample hypothesis tests and
ordinary-least-squares regressions, returning plain numeric results ready
for charting.

Modules:
    - stats: Pure computation engine (distributions, hypothesis, regression).
    - schema: Result value objects and family/test-kind enums.
    - errors: Exception taxonomy raised by the engine.
    - reporting: Presentation rounding and tabular conversion.
    - output: Saves and loads results with provenance metadata.
"""

__version__ = "1.0.0"

from .errors import (
    DegenerateInputError,
    InvalidParameterError,
    StatlabError,
    UnsupportedOperationError,
)
from .schema import (
    DistributionFamily,
    HypothesisTestResult,
    Prediction,
    RegressionResult,
    SamplePoint,
    SampleSummary,
    TestKind,
)
from .stats import describe_sample, evaluate, fit, sample

__all__ = [
    # Engine
    "sample",
    "evaluate",
    "describe_sample",
    "fit",
    # Data model
    "DistributionFamily",
    "TestKind",
    "SamplePoint",
    "SampleSummary",
    "HypothesisTestResult",
    "Prediction",
    "RegressionResult",
    # Errors
    "StatlabError",
    "InvalidParameterError",
    "DegenerateInputError",
    "UnsupportedOperationError",
]
