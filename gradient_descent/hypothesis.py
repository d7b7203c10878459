"""
Hypothesis functions.

Maps a parameter vector theta and a feature row (or matrix) to a prediction:
- Linear:   h(θ, x) = θ·x
- Logistic: h(θ, x) = 1 / (1 + e^(-θ·x)), a class-membership probability

Both are stateless and work on a single row of shape (n_features,) or a
matrix of shape (n_samples, n_features).
"""

from enum import Enum
from typing import Callable, Union

import numpy as np


class ProblemType(Enum):
    """Supported learning problems."""
    REGRESSION = 'regression'
    BINARY = 'binary-classification'
    MULTICLASS = 'multiclass-classification'

    @property
    def is_classification(self) -> bool:
        return self is not ProblemType.REGRESSION


HypothesisFn = Callable[[np.ndarray, np.ndarray], Union[float, np.ndarray]]


def linear(theta: np.ndarray, X: np.ndarray) -> Union[float, np.ndarray]:
    """Identity hypothesis: the dot product of theta with each row."""
    return np.asarray(X, dtype=np.float64) @ theta


def logistic(theta: np.ndarray, X: np.ndarray) -> Union[float, np.ndarray]:
    """Sigmoid of the dot product, in (0, 1)."""
    z = np.asarray(X, dtype=np.float64) @ theta
    # Clip to prevent overflow in exp
    z = np.clip(z, -500, 500)
    return 1.0 / (1.0 + np.exp(-z))


def get_hypothesis(problem_type: ProblemType) -> HypothesisFn:
    """Linear for regression, logistic for every classification problem."""
    if problem_type is ProblemType.REGRESSION:
        return linear
    return logistic
