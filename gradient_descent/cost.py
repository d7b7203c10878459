"""
Regularized cost functions for batch gradient descent.

Implements:
- SquaredErrorCost: regularized mean squared error (regression)
- CrossEntropyCost: regularized log-loss (logistic classification)

Both penalize every coefficient except the bias θ0:

    penalty(θ) = λ / (2m) * Σ_{j≥1} θj²
"""

import warnings

import numpy as np

from .exceptions import NumericInstabilityWarning
from .hypothesis import HypothesisFn, linear, logistic

# Probabilities are kept this far away from 0 and 1 before taking logs
PROBABILITY_EPSILON = 1e-15


class CostFunction:
    """
    Base class for a regularized cost J(θ) over a feature matrix.

    Subclasses provide the hypothesis and the data term; the regularization
    term and the gradient of the data term are shared.
    """

    hypothesis: HypothesisFn = staticmethod(linear)

    def __init__(self, regularization: float = 0.0):
        """
        Args:
            regularization: Penalty strength λ (0 disables regularization)
        """
        if regularization < 0:
            raise ValueError(f"regularization must be >= 0, got {regularization}")
        self.regularization = regularization

    def data_term(self, predictions: np.ndarray, y: np.ndarray) -> float:
        raise NotImplementedError

    def penalty(self, theta: np.ndarray, m: int) -> float:
        """Regularization term; the bias coefficient θ0 is never penalized."""
        if self.regularization == 0:
            return 0.0
        return self.regularization / (2.0 * m) * float(np.sum(theta[1:] ** 2))

    def __call__(self, theta: np.ndarray, X: np.ndarray, y: np.ndarray) -> float:
        """Total cost J(θ) for the rows of X with targets y."""
        m = X.shape[0]
        if m == 0:
            raise ValueError("Cannot compute cost on an empty feature matrix.")
        predictions = self.hypothesis(theta, X)
        return self.data_term(predictions, y) + self.penalty(theta, m)

    def gradient(self, theta: np.ndarray, X: np.ndarray, y: np.ndarray) -> np.ndarray:
        """
        Unregularized gradient of the data term: (1/m) Xᵀ(h(θ, X) - y).

        Holds for both squared error with a linear hypothesis and log-loss
        with a logistic one. Regularization is applied by the optimizer as
        a shrinkage factor.
        """
        m = X.shape[0]
        residuals = self.hypothesis(theta, X) - y
        return (X.T @ residuals) / m


class SquaredErrorCost(CostFunction):
    """
    J(θ) = (1/2m) * [Σ(h(θ,xi) - yi)² + λ Σ_{j≥1} θj²]
    """

    hypothesis = staticmethod(linear)

    def data_term(self, predictions: np.ndarray, y: np.ndarray) -> float:
        m = len(y)
        return float(np.sum((predictions - y) ** 2)) / (2.0 * m)


class CrossEntropyCost(CostFunction):
    """
    J(θ) = -(1/m) Σ[yi log h + (1 - yi) log(1 - h)] + λ/(2m) Σ_{j≥1} θj²

    h is clamped to [ε, 1 - ε] so a saturated sigmoid never produces
    log(0). Clamping issues a NumericInstabilityWarning.
    """

    hypothesis = staticmethod(logistic)

    def data_term(self, predictions: np.ndarray, y: np.ndarray) -> float:
        clamped = np.clip(predictions, PROBABILITY_EPSILON, 1.0 - PROBABILITY_EPSILON)
        if np.any(clamped != predictions):
            warnings.warn(
                "hypothesis reached 0 or 1; clamped for log-loss",
                NumericInstabilityWarning,
                stacklevel=3,
            )
        m = len(y)
        log_likelihood = y * np.log(clamped) + (1.0 - y) * np.log(1.0 - clamped)
        return float(-np.sum(log_likelihood) / m)


def cost_for(problem_type, regularization: float = 0.0) -> CostFunction:
    """Squared error for regression, cross-entropy for classification."""
    if problem_type.is_classification:
        return CrossEntropyCost(regularization)
    return SquaredErrorCost(regularization)
