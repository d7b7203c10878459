"""
Evaluation Metrics - Implemented FROM SCRATCH.

Classification Metrics:
- Confusion Matrix
- Accuracy
- Per-class success counts (grouped by true label)

Regression Metrics:
- MSE, RMSE

Visualization:
- ASCII confusion matrix
- Learning curve (metric and time against training-set size)
"""

from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np


# =============================================================================
# CLASSIFICATION METRICS
# =============================================================================

def confusion_matrix(y_true: np.ndarray, y_pred: np.ndarray,
                     labels: Optional[Sequence[int]] = None) -> np.ndarray:
    """
    Compute confusion matrix from scratch.

    Parameters
    ----------
    y_true : np.ndarray
        Ground truth class codes.
    y_pred : np.ndarray
        Predicted class codes.
    labels : sequence of int, optional
        Codes for the rows/columns, in order. If None, the sorted union of
        codes present in y_true and y_pred.

    Returns
    -------
    np.ndarray
        Matrix of shape (n_labels, n_labels). Row i, column j counts samples
        with true label labels[i] predicted as labels[j].

    Example
    -------
    >>> confusion_matrix([0, 0, 1, 1, 2, 2], [0, 1, 1, 1, 2, 0])
    array([[1, 1, 0],
           [0, 2, 0],
           [1, 0, 1]])
    """
    y_true = np.asarray(y_true).ravel().astype(int)
    y_pred = np.asarray(y_pred).ravel().astype(int)

    if labels is None:
        labels = np.unique(np.concatenate([y_true, y_pred]))
    index = {int(label): i for i, label in enumerate(labels)}

    cm = np.zeros((len(index), len(index)), dtype=np.int64)
    for true_label, pred_label in zip(y_true, y_pred):
        if true_label in index and pred_label in index:
            cm[index[true_label], index[pred_label]] += 1
    return cm


def accuracy_score(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    """
    Calculate classification accuracy.

    Accuracy = correct_predictions / total_predictions
    """
    y_true = np.asarray(y_true).ravel()
    y_pred = np.asarray(y_pred).ravel()

    if len(y_true) == 0:
        return 0.0

    return float(np.mean(y_true == y_pred))


def per_class_success(y_true: np.ndarray, y_pred: np.ndarray) -> Dict[int, Tuple[int, int]]:
    """
    Successes and totals grouped by true label.

    Returns
    -------
    dict
        {class_code: (successes, total)} ordered by class code.
    """
    y_true = np.asarray(y_true).ravel().astype(int)
    y_pred = np.asarray(y_pred).ravel().astype(int)

    counts = {}
    for cls in np.unique(y_true):
        mask = y_true == cls
        counts[int(cls)] = (int(np.sum(y_pred[mask] == cls)), int(np.sum(mask)))
    return counts


# =============================================================================
# REGRESSION METRICS
# =============================================================================

def mean_squared_error(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    """
    Calculate Mean Squared Error (MSE).

    MSE = (1/n) * sum((y_true - y_pred)^2)
    """
    y_true = np.asarray(y_true, dtype=np.float64)
    y_pred = np.asarray(y_pred, dtype=np.float64)
    return float(np.mean((y_true - y_pred) ** 2))


def root_mean_squared_error(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    """
    Calculate Root Mean Squared Error (RMSE).

    RMSE = sqrt(MSE)
    """
    return float(np.sqrt(mean_squared_error(y_true, y_pred)))


# =============================================================================
# VISUALIZATION UTILITIES
# =============================================================================

def print_confusion_matrix(cm: np.ndarray,
                           class_names: Optional[List[str]] = None,
                           title: str = "Confusion Matrix") -> str:
    """
    Create ASCII representation of confusion matrix.

    Returns
    -------
    str
        Formatted string representation.
    """
    n_classes = cm.shape[0]

    if class_names is None:
        class_names = [f"C{i}" for i in range(n_classes)]

    max_val = np.max(cm) if cm.size else 0
    val_width = max(len(str(int(max_val))), 4, max(len(name) for name in class_names))
    label_width = max(len(name) for name in class_names)

    lines = [title]
    header = " " * (label_width + 8) + " ".join(f"{name:>{val_width}}" for name in class_names)
    lines.append(" " * (label_width + 8) + "Predicted")
    lines.append(header)
    lines.append("-" * len(header))

    for i, row_name in enumerate(class_names):
        prefix = "Actual " if i == n_classes // 2 else "       "
        row_vals = " ".join(f"{int(cm[i, j]):>{val_width}}" for j in range(n_classes))
        lines.append(f"{prefix}{row_name:>{label_width}} {row_vals}")

    correct = np.trace(cm)
    total = np.sum(cm)
    accuracy = correct / total if total > 0 else 0
    lines.append(f"Accuracy: {accuracy:.4f} ({int(correct)}/{int(total)})")

    return "\n".join(lines)


def plot_learning_curve(sizes: Sequence[int],
                        scores: Sequence[float],
                        elapsed: Optional[Sequence[float]] = None,
                        metric_name: str = "Accuracy",
                        title: str = "Learning Curve",
                        figsize: Tuple[int, int] = (8, 5),
                        save_path: Optional[str] = None):
    """
    Plot a metric (and optionally elapsed time) against training-set size.

    Parameters
    ----------
    sizes : sequence of int
        Training-set sizes.
    scores : sequence of float
        Metric value per size.
    elapsed : sequence of float, optional
        Seconds per size, drawn on a secondary axis.
    save_path : str, optional
        Path to save the figure.

    Returns
    -------
    matplotlib.figure.Figure
    """
    import matplotlib
    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    fig, ax = plt.subplots(figsize=figsize)
    ax.plot(sizes, scores, marker='o', color='tab:blue', label=metric_name)
    ax.set_xscale('log')
    ax.set_xlabel('Training-set size')
    ax.set_ylabel(metric_name)
    ax.set_title(title)
    ax.grid(True, alpha=0.3)

    if elapsed is not None:
        ax_time = ax.twinx()
        ax_time.plot(sizes, elapsed, marker='s', linestyle='--', color='tab:orange',
                     label='Elapsed (s)')
        ax_time.set_ylabel('Elapsed (s)')

    fig.tight_layout()

    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches='tight')
        plt.close(fig)

    return fig
