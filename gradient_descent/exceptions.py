"""
Errors and warnings raised by the gradient descent engine.

Fatal problems (bad input, bad configuration, divergence) are exceptions.
Recoverable ones (probability clamping, divergence in "warn" mode) are
warnings so callers can filter or escalate them with the warnings module.
"""

from typing import Optional


class GradientDescentError(Exception):
    """Base class for every error raised by this project."""


class InputFormatError(GradientDescentError, ValueError):
    """The input file does not match the expected schema."""


class MalformedRowError(InputFormatError):
    """A single row has the wrong field count or a non-numeric field."""

    def __init__(self, message: str, row: Optional[int] = None,
                 line: Optional[int] = None):
        detail = message
        location = []
        if line is not None:
            location.append(f"line {line}")
        if row is not None:
            location.append(f"row {row}")
        if location:
            message = f"{', '.join(location)}: {message}"
        super().__init__(message)
        self.detail = detail
        self.row = row
        self.line = line


class UnrecognizedLabelError(GradientDescentError, KeyError):
    """A class label is not one of the known categories (strict maps only)."""

    def __str__(self):
        return str(self.args[0]) if self.args else ''


class ConfigurationError(GradientDescentError, ValueError):
    """A configuration value is missing, out of range or inconsistent."""


class DivergenceError(GradientDescentError, ArithmeticError):
    """The cost increased between two iterations."""

    def __init__(self, iteration: int, previous_cost: float, new_cost: float):
        super().__init__(
            f"cost increased at iteration {iteration}: "
            f"{previous_cost:.6g} -> {new_cost:.6g} (learning rate too large?)"
        )
        self.iteration = iteration
        self.previous_cost = previous_cost
        self.new_cost = new_cost


class NumericInstabilityWarning(RuntimeWarning):
    """A hypothesis value reached 0 or 1 and was clamped for log-loss."""


class DivergenceWarning(RuntimeWarning):
    """The optimizer stopped on a cost increase instead of raising."""
