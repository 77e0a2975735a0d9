"""Exception taxonomy shared by the computation engine and its callers.

Callers map these to user-facing messages:

- ``InvalidParameterError``: an out-of-domain or missing numeric input.
- ``DegenerateInputError``: inputs are valid but the statistic is
  mathematically undefined for them (e.g. zero-variance x in a regression).
- ``UnsupportedOperationError``: the requested family or test kind is
  declared but not implemented.
"""

from __future__ import annotations


class StatlabError(Exception):
    """Base class for all engine errors."""


class InvalidParameterError(StatlabError, ValueError):
    """Raised when a parameter is missing, non-finite or out of range."""


class DegenerateInputError(StatlabError, ValueError):
    """Raised when the inputs make the requested statistic undefined."""


class UnsupportedOperationError(StatlabError, NotImplementedError):
    """Raised for distribution families or test kinds that are not implemented."""
