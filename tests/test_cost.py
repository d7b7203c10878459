"""
Hypothesis and Cost Function Tests.

Tests for:
- Linear and logistic hypotheses
- Squared error and cross-entropy values
- Regularization (bias never penalized)
- Probability clamping
"""

import numpy as np
import pytest

from gradient_descent.cost import CrossEntropyCost, SquaredErrorCost, cost_for
from gradient_descent.exceptions import NumericInstabilityWarning
from gradient_descent.hypothesis import ProblemType, get_hypothesis, linear, logistic


X = np.array([[1.0, 1.0], [1.0, 2.0]])
Y = np.array([1.0, 2.0])


# =============================================================================
# Hypotheses
# =============================================================================

def test_linear_hypothesis():
    theta = np.array([0.5, 2.0])
    np.testing.assert_allclose(linear(theta, X), [2.5, 4.5])
    assert linear(theta, X[0]) == pytest.approx(2.5)


def test_logistic_hypothesis():
    assert logistic(np.zeros(2), X[0]) == pytest.approx(0.5)
    p = logistic(np.array([0.0, 1.0]), X)
    assert np.all((p > 0) & (p < 1))
    # Extreme inputs stay finite
    extreme = logistic(np.array([0.0, 1e6]), X)
    assert np.all(np.isfinite(extreme))


def test_hypothesis_selection():
    assert get_hypothesis(ProblemType.REGRESSION) is linear
    assert get_hypothesis(ProblemType.BINARY) is logistic
    assert get_hypothesis(ProblemType.MULTICLASS) is logistic
    assert isinstance(cost_for(ProblemType.REGRESSION), SquaredErrorCost)
    assert isinstance(cost_for(ProblemType.MULTICLASS, 2.0), CrossEntropyCost)


# =============================================================================
# Cost values
# =============================================================================

def test_squared_error_value():
    assert SquaredErrorCost()(np.zeros(2), X, Y) == pytest.approx(1.25)


def test_squared_error_with_regularization():
    # residuals [5, 5], penalty λ·θ1² = 2·1
    cost = SquaredErrorCost(regularization=2.0)
    assert cost(np.array([5.0, 1.0]), X, Y) == pytest.approx((50.0 + 2.0) / 4.0)


def test_cross_entropy_at_zero_theta():
    y = np.array([0.0, 1.0])
    assert CrossEntropyCost()(np.zeros(2), X, y) == pytest.approx(np.log(2.0))


def test_regularization_increases_cost():
    theta = np.array([0.3, -1.2])
    costs = [SquaredErrorCost(lam)(theta, X, Y) for lam in (0.0, 1.0, 10.0)]
    assert costs[0] < costs[1] < costs[2]


def test_bias_is_never_penalized():
    theta = np.array([3.0, 0.0])
    costs = {SquaredErrorCost(lam)(theta, X, Y) for lam in (0.0, 1.0, 100.0)}
    assert len(costs) == 1


def test_negative_regularization_rejected():
    with pytest.raises(ValueError):
        SquaredErrorCost(regularization=-1.0)


def test_gradient_matches_finite_differences():
    cost = SquaredErrorCost()
    theta = np.array([0.2, -0.7])
    eps = 1e-6
    numeric = np.array([
        (cost(theta + eps * e, X, Y) - cost(theta - eps * e, X, Y)) / (2 * eps)
        for e in np.eye(2)
    ])
    np.testing.assert_allclose(cost.gradient(theta, X, Y), numeric, rtol=1e-5)


def test_clamping_warns_and_stays_finite():
    X_single = np.array([[1.0]])
    y_single = np.array([0.0])
    with pytest.warns(NumericInstabilityWarning):
        value = CrossEntropyCost()(np.array([1000.0]), X_single, y_single)
    assert np.isfinite(value)
    assert value > 30.0


def test_empty_matrix_rejected():
    with pytest.raises(ValueError):
        SquaredErrorCost()(np.zeros(2), np.empty((0, 2)), np.empty(0))
