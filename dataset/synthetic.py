"""
Synthetic datasets for demos and tests.

Every generator takes an explicit seed and returns rows in the same shape
read_rows produces (features first, label last), so they can be fed
straight into FeatureExpander or written to CSV.
"""

from typing import List, Optional, Sequence, Tuple

import numpy as np

DEFAULT_CLASS_NAMES = ('A', 'B', 'C')

# Triangle layout: each cluster is linearly separable from the other two
DEFAULT_CENTERS = ((0.0, 3.0), (-3.0, -2.0), (3.0, -2.0))


def make_linear_rows(n_samples: int = 300,
                     coefficients: Sequence[float] = (2.0, 3.0),
                     intercept: float = 0.0,
                     noise: float = 0.0,
                     seed: int = 42) -> List[List[float]]:
    """
    Rows [x1, ..., xk, y] with y = intercept + Σ coefficients[j] * xj + noise.

    Features are standard normal.
    """
    rng = np.random.default_rng(seed)
    coefficients = np.asarray(coefficients, dtype=np.float64)
    X = rng.standard_normal((n_samples, len(coefficients)))
    y = intercept + X @ coefficients
    if noise > 0:
        y = y + rng.normal(0.0, noise, n_samples)
    return np.column_stack([X, y]).tolist()


def make_blob_rows(n_samples: int = 300,
                   class_names: Sequence[str] = DEFAULT_CLASS_NAMES,
                   centers: Sequence[Tuple[float, float]] = DEFAULT_CENTERS,
                   spread: float = 0.5,
                   seed: int = 42,
                   unknown_label: Optional[str] = None,
                   unknown_fraction: float = 0.0) -> List[List]:
    """
    Rows [x1, x2, label] drawn from Gaussian clusters, shuffled.

    Args:
        n_samples: Total rows
        class_names: One label per cluster
        centers: Cluster centers, one per class name
        spread: Standard deviation of every cluster
        seed: Random seed
        unknown_label: If set, relabel a fraction of rows with this label
        unknown_fraction: Fraction of rows to relabel
    """
    if len(class_names) != len(centers):
        raise ValueError("class_names and centers must have the same length")

    rng = np.random.default_rng(seed)
    n_classes = len(class_names)
    assignments = rng.integers(0, n_classes, n_samples)
    centers_arr = np.asarray(centers, dtype=np.float64)
    points = centers_arr[assignments] + rng.normal(0.0, spread, (n_samples, centers_arr.shape[1]))

    labels = [class_names[a] for a in assignments]
    if unknown_label is not None and unknown_fraction > 0:
        n_unknown = max(1, int(n_samples * unknown_fraction))
        for idx in rng.choice(n_samples, size=n_unknown, replace=False):
            labels[idx] = unknown_label

    return [list(point) + [label] for point, label in zip(points.tolist(), labels)]


def make_binary_rows(n_samples: int = 300, spread: float = 0.7,
                     seed: int = 42) -> List[List[float]]:
    """Rows [x1, x2, 0|1] from two separable clusters."""
    return make_blob_rows(n_samples, class_names=('0', '1'),
                          centers=((-2.0, -2.0), (2.0, 2.0)),
                          spread=spread, seed=seed)
