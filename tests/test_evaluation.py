"""
Evaluation Tests.

Tests for:
- Metrics (confusion matrix, accuracy, per-class success, RMSE)
- Held-out sampling without replacement from a disjoint pool
- Regression, binary and one-vs-rest evaluation results
- Confusion matrix and learning curve rendering
"""

import os

import numpy as np
import pytest

from evaluation.evaluator import Evaluator, sample_holdout
from evaluation.metrics import (
    accuracy_score, confusion_matrix, mean_squared_error, per_class_success,
    plot_learning_curve, print_confusion_matrix, root_mean_squared_error,
)
from gradient_descent.exceptions import ConfigurationError
from gradient_descent.labels import LabelMap


# =============================================================================
# Metrics
# =============================================================================

def test_confusion_matrix():
    cm = confusion_matrix([0, 0, 1, 1, 2, 2], [0, 1, 1, 1, 2, 0])
    np.testing.assert_array_equal(cm, [[1, 1, 0], [0, 2, 0], [1, 0, 1]])


def test_confusion_matrix_with_fixed_labels():
    cm = confusion_matrix([1, 1], [1, 2], labels=[0, 1, 2])
    assert cm.shape == (3, 3)
    assert cm[1, 1] == 1 and cm[1, 2] == 1
    assert cm.sum() == 2


def test_accuracy_and_per_class():
    y_true = [1, 1, 2, 2, 2, 0]
    y_pred = [1, 2, 2, 2, 1, 1]
    assert accuracy_score(y_true, y_pred) == pytest.approx(3 / 6)
    assert per_class_success(y_true, y_pred) == {0: (0, 1), 1: (1, 2), 2: (2, 3)}
    assert accuracy_score([], []) == 0.0


def test_regression_metrics():
    assert mean_squared_error([1.0, 2.0], [1.0, 4.0]) == pytest.approx(2.0)
    assert root_mean_squared_error([0.0, 0.0], [3.0, 4.0]) == pytest.approx(np.sqrt(12.5))


def test_print_confusion_matrix():
    text = print_confusion_matrix(np.array([[3, 1], [0, 4]]), ['other', 'CYT'])
    assert 'Predicted' in text
    assert 'CYT' in text
    assert 'Accuracy: 0.8750 (7/8)' in text


def test_plot_learning_curve(tmp_path):
    path = str(tmp_path / "curve.png")
    plot_learning_curve([10, 100, 1000], [0.5, 0.8, 0.9], elapsed=[0.1, 0.5, 2.0],
                        save_path=path)
    assert os.path.getsize(path) > 0


# =============================================================================
# Held-out sampling
# =============================================================================

def test_sample_holdout_without_replacement(rng):
    sample = sample_holdout(np.arange(50, 200), 100, rng)
    assert len(sample) == 100
    assert len(np.unique(sample)) == 100
    assert sample.min() >= 50 and sample.max() < 200


def test_small_pool_is_used_whole(rng):
    sample = sample_holdout(np.arange(10, 15), 100, rng)
    assert sorted(sample.tolist()) == [10, 11, 12, 13, 14]


def test_empty_pool_raises(rng):
    with pytest.raises(ConfigurationError):
        sample_holdout([], 10, rng)


def test_holdout_indices_exclude_training_prefix(rng):
    evaluator = Evaluator(test_sample_count=30, rng=rng)
    indices = evaluator.holdout_indices(pool_start=40, n_rows=100)
    assert len(indices) == 30
    assert np.all(indices >= 40)


def test_invalid_sample_count():
    with pytest.raises(ConfigurationError):
        Evaluator(test_sample_count=0)


# =============================================================================
# Evaluation modes
# =============================================================================

def test_evaluate_regression_exact_model(rng):
    X = np.column_stack([np.ones(20), np.arange(20.0)])
    y = 1.0 + 2.0 * np.arange(20.0)
    evaluator = Evaluator(test_sample_count=5, rng=rng)
    result = evaluator.evaluate_regression(np.array([1.0, 2.0]), X, y,
                                           evaluator.holdout_indices(10, 20))
    assert result.metric == 'rmse'
    assert result.value == pytest.approx(0.0)
    assert result.mse == pytest.approx(0.0)
    assert result.n_samples == 5


def test_evaluate_regression_offset(rng):
    X = np.column_stack([np.ones(10), np.arange(10.0)])
    y = np.arange(10.0)
    result = Evaluator(rng=rng).evaluate_regression(np.array([0.5, 1.0]), X, y, np.arange(10))
    assert result.value == pytest.approx(0.5)


def test_evaluate_binary_threshold(rng):
    X = np.column_stack([np.ones(4), [-2.0, -1.0, 1.0, 2.0]])
    y = np.array([0, 1, 1, 1])
    result = Evaluator(rng=rng).evaluate_binary(np.array([0.0, 1.0]), X, y, np.arange(4),
                                                LabelMap.binary())
    assert result.metric == 'accuracy'
    assert result.successes == 3
    assert result.value == pytest.approx(0.75)
    assert result.per_class['0'].successes == 1
    assert result.per_class['1'].successes == 2
    assert result.per_class['1'].total == 3


def test_evaluate_one_vs_rest_reports_fallback_class(rng):
    class Fixed:
        def predict(self, X):
            return np.array([1, 2, 2, 1])

    label_map = LabelMap(['A', 'B'])
    X = np.ones((4, 2))
    y = np.array([1, 2, 0, 1])
    result = Evaluator(rng=rng).evaluate_one_vs_rest(Fixed(), X, y, np.arange(4), label_map)

    assert result.successes == 3
    assert result.per_class['other'].successes == 0
    assert result.per_class['other'].total == 1
    assert result.per_class['A'].ratio == 1.0
    assert result.confusion_labels == ['other', 'A', 'B']
    assert result.confusion[0] == [0, 0, 1]

    data = result.to_dict()
    assert data['per_class']['B'] == {'successes': 1, 'total': 1, 'ratio': 1.0}
    assert data['confusion_labels'] == ['other', 'A', 'B']
