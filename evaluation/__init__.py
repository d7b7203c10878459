"""
Evaluation module.

Provides held-out evaluation of trained parameters and the metrics it uses:
- Evaluator: samples held-out rows and scores regression, binary and
  one-vs-rest models
- Classification metrics: confusion matrix, accuracy, per-class success
- Regression metrics: MSE, RMSE
- Visualization: ASCII confusion matrix, learning curves

All metrics are implemented from scratch using only NumPy.
"""

from .metrics import (
    # Classification metrics
    confusion_matrix,
    accuracy_score,
    per_class_success,

    # Regression metrics
    mean_squared_error,
    root_mean_squared_error,

    # Visualization
    print_confusion_matrix,
    plot_learning_curve,
)

from .evaluator import (
    ClassScore,
    EvaluationResult,
    Evaluator,
    sample_holdout,
)

__all__ = [
    # Classification metrics
    'confusion_matrix',
    'accuracy_score',
    'per_class_success',

    # Regression metrics
    'mean_squared_error',
    'root_mean_squared_error',

    # Visualization
    'print_confusion_matrix',
    'plot_learning_curve',

    # Evaluator
    'ClassScore',
    'EvaluationResult',
    'Evaluator',
    'sample_holdout',
]
