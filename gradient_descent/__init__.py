"""
Gradient Descent - regression and classification trained by batch gradient descent.

All models are built directly on NumPy arrays, without sklearn or similar
libraries.

Features:
- ExpansionPolicy / FeatureExpander: bias, polynomial and interaction terms,
  optional normalization
- LabelMap: symbolic labels to class codes with a fallback category

Models:
- linear / logistic hypotheses
- SquaredErrorCost / CrossEntropyCost: regularized costs (bias never penalized)
- GradientDescentOptimizer: synchronous batch updates with a divergence guard
- OneVsRestClassifier: multi-class via one binary classifier per class
"""

# Features
from .features import ExpansionPolicy, FeatureExpander, NormalizationStats
from .labels import LabelMap, FALLBACK_CODE

# Models
from .hypothesis import ProblemType, linear, logistic, get_hypothesis
from .cost import CostFunction, SquaredErrorCost, CrossEntropyCost, cost_for
from .optimizer import (
    GradientDescentOptimizer, OptimizationResult, OptimizerState, StopReason
)
from .one_vs_rest import OneVsRestClassifier

# Errors
from .exceptions import (
    GradientDescentError,
    InputFormatError,
    MalformedRowError,
    UnrecognizedLabelError,
    ConfigurationError,
    DivergenceError,
    NumericInstabilityWarning,
    DivergenceWarning,
)

__all__ = [
    # Features
    'ExpansionPolicy',
    'FeatureExpander',
    'NormalizationStats',
    'LabelMap',
    'FALLBACK_CODE',

    # Models
    'ProblemType',
    'linear',
    'logistic',
    'get_hypothesis',
    'CostFunction',
    'SquaredErrorCost',
    'CrossEntropyCost',
    'cost_for',
    'GradientDescentOptimizer',
    'OptimizationResult',
    'OptimizerState',
    'StopReason',
    'OneVsRestClassifier',

    # Errors
    'GradientDescentError',
    'InputFormatError',
    'MalformedRowError',
    'UnrecognizedLabelError',
    'ConfigurationError',
    'DivergenceError',
    'NumericInstabilityWarning',
    'DivergenceWarning',
]
