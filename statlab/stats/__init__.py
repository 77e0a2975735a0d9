"""
Statistical computation engine.

This subpackage holds the three pure numeric modules. Each is a stateless
leaf with no dependency on the others, on persistence or on the CLI.

Modules:
    distributions:
        PDF/PMF sampling for the normal, binomial, Poisson and exponential
        families over a derived, deterministic domain.

    hypothesis:
        One-sample t-test with the bracketed critical-value table and
        closed-form p-value approximation, plus an exact Student-t mode.

    regression:
        Closed-form ordinary least-squares line fit with R², correlation
        and per-point residuals.
"""

from .distributions import (
    binomial_pmf,
    distribution_metadata,
    exponential_pdf,
    normal_pdf,
    poisson_pmf,
    sample,
)
from .hypothesis import approximate_p_value, critical_value, describe_sample, evaluate
from .regression import fit

__all__ = [
    "sample",
    "distribution_metadata",
    "normal_pdf",
    "binomial_pmf",
    "poisson_pmf",
    "exponential_pdf",
    "evaluate",
    "describe_sample",
    "critical_value",
    "approximate_p_value",
    "fit",
]
