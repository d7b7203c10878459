"""
Batch gradient descent with a decrease-based stopping rule.

Each iteration updates every coefficient from the same starting theta:

    θj ← θj * (1 - αλ/m) - (α/m) * Σi (h(θ, xi) - yi) * xij

where the shrinkage factor (1 - αλ/m) is applied for j ≥ 1 only, so the
bias is never regularized. Training stops once the cost decrease of one
iteration is at most `tolerance`.

A cost *increase* would also satisfy that test, so it is checked first and
treated as divergence: raised as DivergenceError, or, with
on_divergence='warn', reported as a DivergenceWarning while the last
non-increasing theta is kept. `max_iterations` bounds the run.
"""

import warnings
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

import numpy as np
from loguru import logger

from .cost import CostFunction
from .exceptions import DivergenceError, DivergenceWarning

# Relative cost increase still attributed to floating point noise
DIVERGENCE_RTOL = 1e-9

# Emit a debug progress line every this many iterations
LOG_EVERY = 1000


class OptimizerState(Enum):
    ITERATING = 'iterating'
    CONVERGED = 'converged'


class StopReason(Enum):
    TOLERANCE = 'tolerance'
    DIVERGED = 'diverged'
    MAX_ITERATIONS = 'max_iterations'


@dataclass
class OptimizationResult:
    """Outcome of one optimizer run. `theta` is read-only."""
    theta: np.ndarray
    iterations: int
    final_cost: float
    state: OptimizerState
    stop_reason: StopReason
    cost_history: List[float] = field(default_factory=list, repr=False)

    @property
    def converged(self) -> bool:
        return self.state is OptimizerState.CONVERGED


class GradientDescentOptimizer:
    """
    Minimizes a CostFunction with synchronous batch updates.

    Usage:
        optimizer = GradientDescentOptimizer(SquaredErrorCost(), learning_rate=0.1)
        result = optimizer.fit(X, y)
        result.theta
    """

    def __init__(self,
                 cost: CostFunction,
                 learning_rate: float = 0.1,
                 tolerance: float = 1e-4,
                 max_iterations: int = 100_000,
                 init: str = 'zero',
                 on_divergence: str = 'raise',
                 rng: Optional[np.random.Generator] = None):
        """
        Initialize the optimizer.

        Args:
            cost: Cost function; its regularization λ drives the shrinkage
            learning_rate: Step size α, fixed for the whole run
            tolerance: Stop once one iteration lowers the cost by at most this
            max_iterations: Safety bound on the number of updates
            init: 'zero' or 'random' (standard normal, drawn from rng)
            on_divergence: 'raise' or 'warn'
            rng: Random source for 'random' init
        """
        if learning_rate <= 0:
            raise ValueError(f"learning_rate must be > 0, got {learning_rate}")
        if tolerance < 0:
            raise ValueError(f"tolerance must be >= 0, got {tolerance}")
        if max_iterations < 1:
            raise ValueError(f"max_iterations must be >= 1, got {max_iterations}")
        if init not in ('zero', 'random'):
            raise ValueError(f"init must be 'zero' or 'random', got {init!r}")
        if on_divergence not in ('raise', 'warn'):
            raise ValueError(f"on_divergence must be 'raise' or 'warn', got {on_divergence!r}")

        self.cost = cost
        self.learning_rate = learning_rate
        self.tolerance = tolerance
        self.max_iterations = max_iterations
        self.init = init
        self.on_divergence = on_divergence
        self.rng = rng if rng is not None else np.random.default_rng()

    def initial_theta(self, n_features: int) -> np.ndarray:
        if self.init == 'random':
            return self.rng.standard_normal(n_features)
        return np.zeros(n_features)

    def step(self, theta: np.ndarray, X: np.ndarray, y: np.ndarray) -> np.ndarray:
        """One synchronous update; returns a new theta."""
        m = X.shape[0]
        shrink = np.full(theta.shape, 1.0 - self.learning_rate * self.cost.regularization / m)
        shrink[0] = 1.0
        return theta * shrink - self.learning_rate * self.cost.gradient(theta, X, y)

    @staticmethod
    def _is_divergent(previous_cost: float, new_cost: float) -> bool:
        if not np.isfinite(new_cost):
            return True
        return new_cost - previous_cost > DIVERGENCE_RTOL * max(abs(previous_cost), 1.0)

    def fit(self, X: np.ndarray, y: np.ndarray) -> OptimizationResult:
        """
        Run gradient descent until convergence, divergence or the iteration cap.

        Args:
            X: Feature matrix of shape (n_samples, n_features), bias in column 0
            y: Targets of shape (n_samples,)

        Returns:
            OptimizationResult with a read-only theta
        """
        X = np.asarray(X, dtype=np.float64)
        y = np.asarray(y, dtype=np.float64)
        if X.ndim != 2 or X.shape[0] == 0:
            raise ValueError(f"X must be a non-empty 2D matrix, got shape {X.shape}")
        if y.shape != (X.shape[0],):
            raise ValueError(f"y shape {y.shape} does not match {X.shape[0]} rows")

        theta = self.initial_theta(X.shape[1])
        cost = self.cost(theta, X, y)
        history = [cost]
        state = OptimizerState.ITERATING
        reason = StopReason.MAX_ITERATIONS
        iteration = 0

        while iteration < self.max_iterations:
            iteration += 1
            new_theta = self.step(theta, X, y)
            new_cost = self.cost(new_theta, X, y)

            if self._is_divergent(cost, new_cost):
                if self.on_divergence == 'raise':
                    raise DivergenceError(iteration, cost, new_cost)
                warnings.warn(str(DivergenceError(iteration, cost, new_cost)),
                              DivergenceWarning, stacklevel=2)
                reason = StopReason.DIVERGED
                break

            difference = cost - new_cost
            theta, cost = new_theta, new_cost
            history.append(cost)

            if iteration % LOG_EVERY == 0:
                logger.debug("iteration {}: cost={:.6g}", iteration, cost)

            if difference <= self.tolerance:
                state = OptimizerState.CONVERGED
                reason = StopReason.TOLERANCE
                break

        if reason is StopReason.MAX_ITERATIONS:
            logger.warning("Stopped after max_iterations={} without converging (cost={:.6g})",
                           self.max_iterations, cost)
        else:
            logger.debug("Stopped after {} iterations ({}), cost={:.6g}",
                         iteration, reason.value, cost)

        theta.setflags(write=False)
        return OptimizationResult(
            theta=theta,
            iterations=iteration,
            final_cost=cost,
            state=state,
            stop_reason=reason,
            cost_history=history,
        )
