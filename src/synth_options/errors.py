"""
Exception types raised by the analytics library.

Bad inputs are reported with ``InvalidInputError``, which is also a
``ValueError`` so callers catching ``ValueError`` keep working.
"""


class AnalyticsError(Exception):
    """Base class for every error raised by synth_options."""


class InvalidInputError(AnalyticsError, ValueError):
    """Raised when an argument is non-finite, out of its domain or empty."""


class DegenerateDistributionError(AnalyticsError, ValueError):
    """
    Raised when a distribution has too few points to describe its spread.

    Only raised in strict mode; by default shape statistics fall back to a
    neutral result instead.
    """


class NumericalNonConvergenceError(AnalyticsError, ArithmeticError):
    """
    Raised by the implied volatility solver in strict mode when it gives up.

    Attributes
    ----------
    result : ImpliedVolResult
        Best estimate reached before the solver stopped.
    """

    def __init__(self, message: str, result=None):
        super().__init__(message)
        self.result = result
