"""
One-vs-Rest multi-class classification on top of binary logistic models.

One binary classifier is trained per known class code (the fallback code
0 is never trained). At inference time every classifier scores the row
and the class with the highest confidence wins:

- the running best starts at `min_confidence` with the fallback code,
- a classifier replaces it only with a strictly greater score,
- ties keep the class encountered first in `class_codes` order.

With the default min_confidence=0.0 any positive sigmoid score beats the
fallback, so the fallback is only predicted when min_confidence is raised.
"""

from typing import Callable, Dict, List, Sequence

import numpy as np
from loguru import logger

from .hypothesis import logistic
from .labels import FALLBACK_CODE
from .optimizer import GradientDescentOptimizer, OptimizationResult


class OneVsRestClassifier:
    """
    Train and apply one logistic classifier per class.

    Usage:
        ovr = OneVsRestClassifier(lambda: GradientDescentOptimizer(CrossEntropyCost()),
                                  class_codes=[1, 2, 3])
        ovr.fit(X_train, y_train)
        ovr.predict(X_test)
    """

    def __init__(self,
                 optimizer_factory: Callable[[], GradientDescentOptimizer],
                 class_codes: Sequence[int],
                 min_confidence: float = 0.0,
                 fallback_code: int = FALLBACK_CODE):
        """
        Args:
            optimizer_factory: Returns a fresh optimizer per class
            class_codes: Codes to train classifiers for, in tie-break order
            min_confidence: Baseline a score must exceed to beat the fallback
            fallback_code: Prediction when no classifier beats the baseline
        """
        self.optimizer_factory = optimizer_factory
        self.class_codes: List[int] = [int(c) for c in class_codes if int(c) != fallback_code]
        if not self.class_codes:
            raise ValueError("OneVsRestClassifier needs at least one non-fallback class")
        self.min_confidence = min_confidence
        self.fallback_code = fallback_code
        self.results: Dict[int, OptimizationResult] = {}

    def fit(self, X: np.ndarray, y: np.ndarray) -> 'OneVsRestClassifier':
        """
        Fit one binary classifier per class code.

        Args:
            X: Feature matrix (bias in column 0)
            y: Class codes

        Returns:
            self
        """
        y = np.asarray(y)
        self.results = {}
        for code in self.class_codes:
            y_binary = (y == code).astype(np.float64)
            if not y_binary.any():
                logger.debug("Class {} has no positive rows in this training set", code)
            self.results[code] = self.optimizer_factory().fit(X, y_binary)
        return self

    @property
    def thetas(self) -> Dict[int, np.ndarray]:
        return {code: result.theta for code, result in self.results.items()}

    @property
    def total_iterations(self) -> int:
        return sum(result.iterations for result in self.results.values())

    def decision_function(self, X: np.ndarray) -> np.ndarray:
        """Confidence scores of shape (n_samples, n_classes), one column per class code."""
        if not self.results:
            raise ValueError("Model not fitted. Call fit() first.")
        X = np.atleast_2d(np.asarray(X, dtype=np.float64))
        scores = np.empty((X.shape[0], len(self.class_codes)))
        for i, code in enumerate(self.class_codes):
            scores[:, i] = logistic(self.results[code].theta, X)
        return scores

    def predict(self, X: np.ndarray) -> np.ndarray:
        """Predicted class codes, fallback where no score beats min_confidence."""
        scores = self.decision_function(X)
        # argmax returns the first maximum, so ties keep the earlier class
        best = np.argmax(scores, axis=1)
        best_scores = scores[np.arange(len(best)), best]
        codes = np.asarray(self.class_codes)[best]
        return np.where(best_scores > self.min_confidence, codes, self.fallback_code)

    def predict_one(self, x: np.ndarray) -> int:
        """Predict a single feature row."""
        return int(self.predict(np.atleast_2d(x))[0])
