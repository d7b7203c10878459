"""
Gradient Descent Optimizer Tests.

Tests for:
- Convergence on a noiseless linear problem
- Synchronous updates and bias-free shrinkage
- Stopping rules: tolerance, divergence, iteration cap
- Reproducibility and read-only results
"""

import numpy as np
import pytest

from gradient_descent.cost import CrossEntropyCost, SquaredErrorCost
from gradient_descent.exceptions import DivergenceError, DivergenceWarning
from gradient_descent.features import FeatureExpander
from gradient_descent.optimizer import (
    GradientDescentOptimizer, OptimizerState, StopReason,
)


@pytest.fixture
def linear_problem(linear_rows):
    return FeatureExpander().fit_transform(linear_rows[:300])


def test_converges_to_true_coefficients(linear_problem):
    X, y = linear_problem
    result = GradientDescentOptimizer(SquaredErrorCost(), learning_rate=0.1,
                                      tolerance=1e-4).fit(X, y)

    assert result.converged
    assert result.state is OptimizerState.CONVERGED
    assert result.stop_reason is StopReason.TOLERANCE
    np.testing.assert_allclose(result.theta, [0.0, 2.0, 3.0], atol=0.1)
    assert result.final_cost == result.cost_history[-1]


def test_cost_never_increases(linear_problem):
    X, y = linear_problem
    result = GradientDescentOptimizer(SquaredErrorCost(0.5), learning_rate=0.1,
                                      tolerance=1e-8).fit(X, y)
    assert np.all(np.diff(result.cost_history) <= 1e-12)
    assert len(result.cost_history) == result.iterations + 1


def test_step_is_synchronous():
    """Every θj is computed from the same previous theta."""
    rng = np.random.default_rng(3)
    X = np.column_stack([np.ones(5), rng.standard_normal((5, 2))])
    y = rng.standard_normal(5)
    theta = np.array([0.5, -1.0, 2.0])
    alpha, lam, m = 0.05, 0.8, 5

    optimizer = GradientDescentOptimizer(SquaredErrorCost(lam), learning_rate=alpha)
    new_theta = optimizer.step(theta, X, y)

    expected = np.empty(3)
    residuals = X @ theta - y
    for j in range(3):
        shrink = 1.0 if j == 0 else 1.0 - alpha * lam / m
        expected[j] = theta[j] * shrink - alpha / m * np.sum(residuals * X[:, j])
    np.testing.assert_allclose(new_theta, expected)


def test_bias_is_not_shrunk():
    # Perfect fit: the gradient is zero, only shrinkage moves theta
    X = np.array([[1.0, 0.0], [1.0, 0.0]])
    y = np.array([1.0, 1.0])
    optimizer = GradientDescentOptimizer(SquaredErrorCost(5.0), learning_rate=0.1)
    new_theta = optimizer.step(np.array([1.0, 1.0]), X, y)
    np.testing.assert_allclose(new_theta, [1.0, 0.75])


def test_divergence_raises(linear_problem):
    X, y = linear_problem
    optimizer = GradientDescentOptimizer(SquaredErrorCost(), learning_rate=5.0)
    with pytest.raises(DivergenceError) as exc_info:
        optimizer.fit(X, y)
    error = exc_info.value
    assert error.iteration == 1
    assert error.new_cost > error.previous_cost


def test_divergence_warn_keeps_last_good_theta(linear_problem):
    X, y = linear_problem
    optimizer = GradientDescentOptimizer(SquaredErrorCost(), learning_rate=5.0,
                                         on_divergence='warn')
    with pytest.warns(DivergenceWarning):
        result = optimizer.fit(X, y)

    assert result.stop_reason is StopReason.DIVERGED
    assert not result.converged
    np.testing.assert_array_equal(result.theta, np.zeros(3))
    assert result.final_cost == pytest.approx(result.cost_history[0])


def test_max_iterations(linear_problem):
    X, y = linear_problem
    result = GradientDescentOptimizer(SquaredErrorCost(), learning_rate=0.001,
                                      tolerance=0.0, max_iterations=3).fit(X, y)
    assert result.iterations == 3
    assert result.stop_reason is StopReason.MAX_ITERATIONS
    assert result.state is OptimizerState.ITERATING


def test_random_init_is_reproducible(linear_problem):
    X, y = linear_problem

    def run(seed):
        optimizer = GradientDescentOptimizer(SquaredErrorCost(), init='random',
                                             rng=np.random.default_rng(seed))
        return optimizer.fit(X, y)

    first, second = run(9), run(9)
    np.testing.assert_array_equal(first.theta, second.theta)
    assert first.iterations == second.iterations
    assert first.cost_history[0] != run(10).cost_history[0]


def test_theta_is_read_only(linear_problem):
    X, y = linear_problem
    result = GradientDescentOptimizer(SquaredErrorCost()).fit(X, y)
    with pytest.raises(ValueError):
        result.theta[0] = 1.0


def test_logistic_training_separates_classes():
    rng = np.random.default_rng(0)
    features = np.concatenate([rng.normal(-2, 0.5, 50), rng.normal(2, 0.5, 50)])
    X = np.column_stack([np.ones(100), features])
    y = np.concatenate([np.zeros(50), np.ones(50)])

    result = GradientDescentOptimizer(CrossEntropyCost(), learning_rate=0.5).fit(X, y)
    assert result.converged
    assert result.theta[1] > 0
    assert result.cost_history[-1] < result.cost_history[0]


@pytest.mark.parametrize("kwargs", [
    {'learning_rate': 0.0},
    {'tolerance': -1.0},
    {'max_iterations': 0},
    {'init': 'ones'},
    {'on_divergence': 'ignore'},
])
def test_invalid_parameters(kwargs):
    with pytest.raises(ValueError):
        GradientDescentOptimizer(SquaredErrorCost(), **kwargs)


def test_shape_mismatch():
    optimizer = GradientDescentOptimizer(SquaredErrorCost())
    with pytest.raises(ValueError):
        optimizer.fit(np.ones((3, 2)), np.ones(4))
