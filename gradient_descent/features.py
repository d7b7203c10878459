"""
Feature expansion for gradient descent models.

Turns raw rows (sequences of string or numeric fields, one of them the
label) into an augmented feature matrix and a target vector, so linear
and logistic hypotheses can learn non-linear relationships.

For input features [a, b] and a policy with every option enabled:
    Output: [1, a, b, a², b², a³, b³, ab, a²b, ab²]

Normalization, when enabled, rescales every non-bias output column as
(value - center) / (max - min) with the column mean or midpoint as center.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np

from .exceptions import ConfigurationError, MalformedRowError
from .labels import LabelMap

EXPANSION_NAMES = ('none', 'square', 'cube', 'pairwise-interaction', 'normalize')


def _parse_number(value, field_index: int, row: int) -> float:
    """Parse one field; NaN and infinities are rejected like non-numeric text."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise MalformedRowError(
            f"field {field_index} is not numeric: {value!r}", row=row) from None
    if not np.isfinite(number):
        raise MalformedRowError(f"field {field_index} is not finite: {value!r}", row=row)
    return number


@dataclass(frozen=True)
class ExpansionPolicy:
    """
    Which derived features to generate.

    Cubes are always generated together with squares, so `cube=True`
    implies `square=True`.
    """
    square: bool = False
    cube: bool = False
    pairwise: bool = False
    normalize: bool = False
    centering: str = 'mean'

    def __post_init__(self):
        if self.cube and not self.square:
            object.__setattr__(self, 'square', True)
        if self.centering not in ('mean', 'midpoint'):
            raise ConfigurationError(
                f"centering must be 'mean' or 'midpoint', got {self.centering!r}")

    @classmethod
    def from_names(cls, names: Iterable[str], centering: str = 'mean') -> 'ExpansionPolicy':
        """
        Build a policy from option names.

        Accepts 'none', 'square', 'cube', 'pairwise-interaction' (or
        'pairwise') and 'normalize'.
        """
        flags = dict(square=False, cube=False, pairwise=False, normalize=False)
        for name in names:
            key = name.strip().lower().replace('_', '-')
            if key == 'none':
                continue
            if key == 'pairwise-interaction':
                key = 'pairwise'
            if key not in flags:
                raise ConfigurationError(
                    f"Unknown expansion {name!r}; expected one of {EXPANSION_NAMES}")
            flags[key] = True
        return cls(centering=centering, **flags)

    @property
    def names(self) -> List[str]:
        names = []
        if self.square:
            names.append('square')
        if self.cube:
            names.append('cube')
        if self.pairwise:
            names.append('pairwise-interaction')
        if self.normalize:
            names.append('normalize')
        return names or ['none']


@dataclass
class NormalizationStats:
    """Per-column statistics learned by FeatureExpander.fit (bias excluded)."""
    minimum: np.ndarray
    maximum: np.ndarray
    center: np.ndarray

    @property
    def span(self) -> np.ndarray:
        return self.maximum - self.minimum


class FeatureExpander:
    """
    Parse raw rows and generate the bias, polynomial and interaction columns.

    Usage:
        expander = FeatureExpander(ExpansionPolicy(square=True, normalize=True))
        X, y = expander.fit_transform(rows)
    """

    def __init__(self, policy: Optional[ExpansionPolicy] = None,
                 label_column: int = -1,
                 ignore_columns: Sequence[int] = (),
                 label_map: Optional[LabelMap] = None):
        """
        Initialize FeatureExpander.

        Args:
            policy: Expansion options (default: bias + raw features only)
            label_column: Index of the label field (negative counts from the end)
            ignore_columns: Indices of fields that are neither feature nor label
            label_map: Maps labels to class codes; None parses labels as floats
        """
        self.policy = policy or ExpansionPolicy()
        self.label_column = label_column
        self.ignore_columns = tuple(ignore_columns)
        self.label_map = label_map

        self.n_fields: int = 0
        self.n_input_features: int = 0
        self.n_output_features: int = 0
        self.stats: Optional[NormalizationStats] = None
        self._label_index: int = 0
        self._feature_indices: List[int] = []
        self._feature_names: List[str] = []

    # =========================================================================
    # Parsing
    # =========================================================================

    def resolve_columns(self, n_fields: int):
        """Label index and feature indices for rows of `n_fields` fields."""
        def resolve(index: int) -> int:
            resolved = index + n_fields if index < 0 else index
            if not 0 <= resolved < n_fields:
                raise ConfigurationError(
                    f"Column index {index} out of range for {n_fields} fields")
            return resolved

        label_index = resolve(self.label_column)
        ignored = {resolve(i) for i in self.ignore_columns}
        if label_index in ignored:
            raise ConfigurationError("The label column cannot also be ignored")
        features = [i for i in range(n_fields) if i != label_index and i not in ignored]
        if not features:
            raise ConfigurationError("No feature columns left after removing label/ignored columns")
        return label_index, features

    def parse(self, rows: Sequence[Sequence]) -> Tuple[np.ndarray, np.ndarray]:
        """
        Split rows into a raw feature matrix and a target vector.

        Raises:
            MalformedRowError: wrong field count, or a non-numeric or non-finite field
        """
        if self.n_fields == 0:
            raise ValueError("Expander not fitted. Call fit() first.")

        n_rows = len(rows)
        raw = np.empty((n_rows, self.n_input_features), dtype=np.float64)
        targets = np.empty(n_rows, dtype=np.float64)

        for i, row in enumerate(rows):
            if len(row) != self.n_fields:
                raise MalformedRowError(
                    f"expected {self.n_fields} fields, got {len(row)}", row=i)
            for out_col, field_index in enumerate(self._feature_indices):
                raw[i, out_col] = _parse_number(row[field_index], field_index, i)

            label = row[self._label_index]
            if self.label_map is not None:
                targets[i] = self.label_map.encode(label)
            else:
                targets[i] = _parse_number(label, self._label_index, i)

        return raw, targets

    # =========================================================================
    # Expansion
    # =========================================================================

    def _expand(self, raw: np.ndarray) -> np.ndarray:
        """Bias, raw features, squares, cubes, then pairwise terms."""
        n_samples, p = raw.shape
        columns = [np.ones((n_samples, 1)), raw]

        if self.policy.square:
            columns.append(raw ** 2)
        if self.policy.cube:
            columns.append(raw ** 3)
        if self.policy.pairwise:
            for j in range(p):
                for k in range(j + 1, p):
                    xj, xk = raw[:, j], raw[:, k]
                    columns.append(np.column_stack([xj * xk, xj ** 2 * xk, xj * xk ** 2]))

        return np.hstack(columns)

    def _build_names(self, input_names: List[str]) -> List[str]:
        names = ['1'] + list(input_names)
        if self.policy.square:
            names += [f'{n}^2' for n in input_names]
        if self.policy.cube:
            names += [f'{n}^3' for n in input_names]
        if self.policy.pairwise:
            for j, a in enumerate(input_names):
                for b in input_names[j + 1:]:
                    names += [f'{a}*{b}', f'{a}^2*{b}', f'{a}*{b}^2']
        return names

    def _normalize(self, X: np.ndarray) -> np.ndarray:
        stats = self.stats
        span = stats.span
        constant = span == 0
        safe_span = np.where(constant, 1.0, span)

        X = X.copy()
        X[:, 1:] = (X[:, 1:] - stats.center) / safe_span
        # Constant columns carry no information
        X[:, 1:][:, constant] = 0.0
        return X

    # =========================================================================
    # Transformer interface
    # =========================================================================

    def _fit_schema(self, rows: Sequence[Sequence], input_names: Optional[List[str]]):
        if len(rows) == 0:
            raise ValueError("Cannot fit on an empty dataset.")
        self.n_fields = len(rows[0])
        self._label_index, self._feature_indices = self.resolve_columns(self.n_fields)
        self.n_input_features = len(self._feature_indices)
        if input_names is None:
            input_names = [f'x{i}' for i in range(self.n_input_features)]
        elif len(input_names) != self.n_input_features:
            raise ValueError(f"Expected {self.n_input_features} input names, got {len(input_names)}")
        self._feature_names = self._build_names(list(input_names))
        self.n_output_features = len(self._feature_names)

    def _fit_stats(self, X: np.ndarray):
        features = X[:, 1:]
        minimum = features.min(axis=0)
        maximum = features.max(axis=0)
        if self.policy.centering == 'midpoint':
            center = (maximum + minimum) / 2.0
        else:
            center = features.mean(axis=0)
        self.stats = NormalizationStats(minimum=minimum, maximum=maximum, center=center)

    def fit(self, rows: Sequence[Sequence],
            input_names: Optional[List[str]] = None) -> 'FeatureExpander':
        """
        Learn the row schema and, if normalizing, the column statistics.

        Args:
            rows: Raw rows, label included
            input_names: Names of the feature fields (default: x0, x1, ...)

        Returns:
            self
        """
        self.fit_transform(rows, input_names)
        return self

    def transform(self, rows: Sequence[Sequence]) -> Tuple[np.ndarray, np.ndarray]:
        """
        Transform rows into (feature matrix, target vector).

        Returns:
            X of shape (n_rows, n_output_features) with X[:, 0] == 1.0,
            y of shape (n_rows,)
        """
        raw, y = self.parse(rows)
        X = self._expand(raw)
        if self.policy.normalize:
            if self.stats is None:
                raise ValueError("Expander not fitted. Call fit() first.")
            X = self._normalize(X)
        return X, y

    def fit_transform(self, rows: Sequence[Sequence],
                      input_names: Optional[List[str]] = None) -> Tuple[np.ndarray, np.ndarray]:
        """Fit and transform in one step."""
        self._fit_schema(rows, input_names)
        raw, y = self.parse(rows)
        X = self._expand(raw)
        if self.policy.normalize:
            self._fit_stats(X)
            X = self._normalize(X)
        return X, y

    @property
    def feature_names(self) -> List[str]:
        """Output column names like ['1', 'x0', 'x1', 'x0^2', 'x0*x1', ...]."""
        return list(self._feature_names)
