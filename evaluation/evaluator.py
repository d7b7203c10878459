"""
Held-out evaluation of trained parameters.

Rows are sampled without replacement from a pool that never contains a
training index, then scored in one of three modes:
- Regression: RMSE (and MSE) of the linear hypothesis
- Binary: accuracy of the logistic hypothesis thresholded at 0.5
- Multi-class: accuracy of one-vs-rest predictions, per class and overall
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

import numpy as np
from loguru import logger

from gradient_descent.exceptions import ConfigurationError
from gradient_descent.hypothesis import linear, logistic
from gradient_descent.labels import LabelMap
from gradient_descent.one_vs_rest import OneVsRestClassifier

from .metrics import (
    accuracy_score, confusion_matrix, mean_squared_error, per_class_success,
    root_mean_squared_error,
)


@dataclass
class ClassScore:
    """Successes out of total held-out rows of one true class."""
    label: str
    successes: int
    total: int

    @property
    def ratio(self) -> float:
        return self.successes / self.total if self.total else 0.0


@dataclass
class EvaluationResult:
    """Metrics for one evaluation run."""
    metric: str                       # 'accuracy' or 'rmse'
    value: float
    n_samples: int
    successes: Optional[int] = None
    mse: Optional[float] = None
    per_class: Dict[str, ClassScore] = field(default_factory=dict)
    confusion: Optional[List[List[int]]] = None
    confusion_labels: Optional[List[str]] = None
    indices: np.ndarray = field(default_factory=lambda: np.empty(0, dtype=int), repr=False)

    def to_dict(self) -> dict:
        data = {
            'metric': self.metric,
            'value': self.value,
            'n_samples': self.n_samples,
            'successes': self.successes,
            'mse': self.mse,
            'per_class': {
                name: {'successes': s.successes, 'total': s.total, 'ratio': s.ratio}
                for name, s in self.per_class.items()
            },
        }
        if self.confusion is not None:
            data['confusion'] = self.confusion
            data['confusion_labels'] = self.confusion_labels
        return data


def sample_holdout(pool: Sequence[int], count: int,
                   rng: np.random.Generator) -> np.ndarray:
    """
    Sample `count` indices from `pool` without replacement.

    The whole pool is used when it holds fewer than `count` indices.

    Raises:
        ConfigurationError: the pool is empty
    """
    pool = np.asarray(pool, dtype=int)
    if len(pool) == 0:
        raise ConfigurationError("Evaluation pool is empty: no rows are held out from training")
    if len(pool) <= count:
        if len(pool) < count:
            logger.warning("Evaluation pool has {} rows, fewer than the {} requested",
                           len(pool), count)
        return rng.permutation(pool)
    return rng.choice(pool, size=count, replace=False)


class Evaluator:
    """
    Score trained parameters on sampled held-out rows.

    Usage:
        evaluator = Evaluator(test_sample_count=100, rng=np.random.default_rng(0))
        indices = evaluator.holdout_indices(pool_start=500, n_rows=len(X))
        result = evaluator.evaluate_regression(theta, X, y, indices)
    """

    def __init__(self, test_sample_count: int = 100, threshold: float = 0.5,
                 rng: Optional[np.random.Generator] = None):
        """
        Args:
            test_sample_count: Held-out rows to score per evaluation
            threshold: Probability at or above which a binary prediction is 1
            rng: Random source for sampling
        """
        if test_sample_count < 1:
            raise ConfigurationError(f"test_sample_count must be >= 1, got {test_sample_count}")
        self.test_sample_count = test_sample_count
        self.threshold = threshold
        self.rng = rng if rng is not None else np.random.default_rng()

    def holdout_indices(self, pool_start: int, n_rows: int) -> np.ndarray:
        """Sample from rows [pool_start, n_rows), disjoint from a prefix training set."""
        return sample_holdout(np.arange(pool_start, n_rows), self.test_sample_count, self.rng)

    def evaluate_regression(self, theta: np.ndarray, X: np.ndarray, y: np.ndarray,
                            indices: np.ndarray) -> EvaluationResult:
        """RMSE of the linear hypothesis on the sampled rows."""
        y_pred = linear(theta, X[indices])
        mse = mean_squared_error(y[indices], y_pred)
        return EvaluationResult(
            metric='rmse',
            value=root_mean_squared_error(y[indices], y_pred),
            n_samples=len(indices),
            mse=mse,
            indices=indices,
        )

    def evaluate_binary(self, theta: np.ndarray, X: np.ndarray, y: np.ndarray,
                        indices: np.ndarray,
                        label_map: Optional[LabelMap] = None) -> EvaluationResult:
        """Accuracy of thresholding the logistic hypothesis."""
        y_pred = (logistic(theta, X[indices]) >= self.threshold).astype(int)
        names = label_map.names() if label_map is not None else {0: '0', 1: '1'}
        return self._classification_result(y[indices], y_pred, indices, names)

    def evaluate_one_vs_rest(self, model: OneVsRestClassifier, X: np.ndarray, y: np.ndarray,
                             indices: np.ndarray, label_map: LabelMap) -> EvaluationResult:
        """Accuracy of one-vs-rest predictions, with per-class ratios and a confusion matrix."""
        y_pred = model.predict(X[indices])
        return self._classification_result(y[indices], y_pred, indices, label_map.names(),
                                           with_confusion=True)

    def _classification_result(self, y_true: np.ndarray, y_pred: np.ndarray,
                               indices: np.ndarray, names: Dict[int, str],
                               with_confusion: bool = False) -> EvaluationResult:
        y_true = np.asarray(y_true).astype(int)
        y_pred = np.asarray(y_pred).astype(int)

        per_class = {
            names.get(code, str(code)): ClassScore(names.get(code, str(code)), successes, total)
            for code, (successes, total) in per_class_success(y_true, y_pred).items()
        }
        result = EvaluationResult(
            metric='accuracy',
            value=accuracy_score(y_true, y_pred),
            n_samples=len(indices),
            successes=int(np.sum(y_true == y_pred)),
            per_class=per_class,
            indices=indices,
        )
        if with_confusion:
            codes = sorted(names)
            result.confusion = confusion_matrix(y_true, y_pred, labels=codes).tolist()
            result.confusion_labels = [names[c] for c in codes]
        return result
