"""
Feature Expansion Tests.

Tests for:
- Column layout and names for every expansion option
- Normalization (mean and midpoint centering, constant columns)
- Row parsing errors
- Label and ignored columns
"""

import numpy as np
import pytest

from gradient_descent.exceptions import ConfigurationError, MalformedRowError
from gradient_descent.features import ExpansionPolicy, FeatureExpander
from gradient_descent.labels import LabelMap


ROWS = [
    ['1', '2', '5.0'],
    ['3', '-1', '2.0'],
    ['0', '4', '7.5'],
]


# =============================================================================
# Policy
# =============================================================================

def test_policy_from_names():
    policy = ExpansionPolicy.from_names(['square', 'pairwise_interaction', 'normalize'])
    assert policy.square and policy.pairwise and policy.normalize
    assert not policy.cube
    assert policy.names == ['square', 'pairwise-interaction', 'normalize']


def test_policy_none_is_identity():
    policy = ExpansionPolicy.from_names(['none'])
    assert policy == ExpansionPolicy()
    assert policy.names == ['none']


def test_cube_implies_square():
    policy = ExpansionPolicy.from_names(['cube'])
    assert policy.square and policy.cube
    assert policy.names == ['square', 'cube']
    assert ExpansionPolicy(cube=True) == ExpansionPolicy(square=True, cube=True)


def test_policy_rejects_unknown_names():
    with pytest.raises(ConfigurationError):
        ExpansionPolicy.from_names(['quartic'])
    with pytest.raises(ConfigurationError):
        ExpansionPolicy(centering='median')


# =============================================================================
# Expansion
# =============================================================================

def test_bias_and_raw_features_only():
    X, y = FeatureExpander().fit_transform(ROWS)
    assert X.shape == (3, 3)
    np.testing.assert_array_equal(X[:, 0], 1.0)
    np.testing.assert_array_equal(X[0], [1.0, 1.0, 2.0])
    np.testing.assert_array_equal(y, [5.0, 2.0, 7.5])


@pytest.mark.parametrize("names, n_columns", [
    (['none'], 3),
    (['square'], 5),
    (['square', 'cube'], 7),
    (['cube'], 7),
    (['pairwise-interaction'], 6),
    (['square', 'cube', 'pairwise-interaction'], 10),
])
def test_output_width(names, n_columns):
    expander = FeatureExpander(ExpansionPolicy.from_names(names))
    X, _ = expander.fit_transform(ROWS)
    assert X.shape == (3, n_columns)
    assert expander.n_output_features == n_columns
    assert len(expander.feature_names) == n_columns


def test_column_order():
    """Bias, raw, squares, cubes, then ab, a²b, ab² per pair."""
    policy = ExpansionPolicy(square=True, cube=True, pairwise=True)
    X, _ = FeatureExpander(policy).fit_transform([['2', '3', '0']])
    np.testing.assert_array_equal(X[0], [1, 2, 3, 4, 9, 8, 27, 6, 12, 18])


def test_feature_names_for_three_inputs():
    policy = ExpansionPolicy(square=True, pairwise=True)
    expander = FeatureExpander(policy)
    expander.fit([['1', '2', '3', '0']])
    assert expander.feature_names == [
        '1', 'x0', 'x1', 'x2', 'x0^2', 'x1^2', 'x2^2',
        'x0*x1', 'x0^2*x1', 'x0*x1^2',
        'x0*x2', 'x0^2*x2', 'x0*x2^2',
        'x1*x2', 'x1^2*x2', 'x1*x2^2',
    ]


def test_input_names_are_used():
    expander = FeatureExpander(ExpansionPolicy(square=True))
    expander.fit(ROWS, input_names=['width', 'height'])
    assert expander.feature_names == ['1', 'width', 'height', 'width^2', 'height^2']


def test_expansion_is_deterministic_and_pure():
    policy = ExpansionPolicy(square=True, cube=True, pairwise=True, normalize=True)
    rows = [list(row) for row in ROWS]
    X1, y1 = FeatureExpander(policy).fit_transform(rows)
    X2, y2 = FeatureExpander(policy).fit_transform(rows)
    np.testing.assert_array_equal(X1, X2)
    np.testing.assert_array_equal(y1, y2)
    assert rows == ROWS


# =============================================================================
# Normalization
# =============================================================================

def test_mean_normalization_bounds(linear_rows):
    policy = ExpansionPolicy(square=True, cube=True, pairwise=True, normalize=True)
    X, _ = FeatureExpander(policy).fit_transform(linear_rows)
    np.testing.assert_array_equal(X[:, 0], 1.0)
    assert np.all(np.abs(X[:, 1:]) <= 1.0)
    np.testing.assert_allclose(X[:, 1:].mean(axis=0), 0.0, atol=1e-12)


def test_midpoint_normalization_bounds(linear_rows):
    policy = ExpansionPolicy(square=True, normalize=True, centering='midpoint')
    X, _ = FeatureExpander(policy).fit_transform(linear_rows)
    features = X[:, 1:]
    assert np.all(features >= -0.5 - 1e-12)
    assert np.all(features <= 0.5 + 1e-12)
    np.testing.assert_allclose(features.max(axis=0), 0.5)
    np.testing.assert_allclose(features.min(axis=0), -0.5)


def test_constant_column_becomes_zero():
    rows = [['4', '1', '0'], ['4', '2', '1'], ['4', '3', '0']]
    X, _ = FeatureExpander(ExpansionPolicy(normalize=True)).fit_transform(rows)
    np.testing.assert_array_equal(X[:, 1], 0.0)
    assert np.all(np.isfinite(X))


def test_transform_reuses_fitted_statistics():
    expander = FeatureExpander(ExpansionPolicy(normalize=True, centering='midpoint'))
    expander.fit([['0', '0'], ['10', '1']])
    X, _ = expander.transform([['5', '0'], ['20', '1']])
    np.testing.assert_allclose(X[:, 1], [0.0, 1.5])


# =============================================================================
# Parsing
# =============================================================================

def test_non_numeric_field_raises_with_row():
    rows = [['1', '2', '3'], ['4', 'abc', '6']]
    with pytest.raises(MalformedRowError) as exc_info:
        FeatureExpander().fit_transform(rows)
    assert exc_info.value.row == 1
    assert 'abc' in str(exc_info.value)


@pytest.mark.parametrize("value", ['nan', 'inf', '-inf', 'NaN'])
def test_non_finite_feature_raises(value):
    rows = [['1', '2', '3'], [value, '2', '3']]
    with pytest.raises(MalformedRowError) as exc_info:
        FeatureExpander().fit_transform(rows)
    assert exc_info.value.row == 1
    assert 'not finite' in str(exc_info.value)


def test_non_finite_regression_target_raises():
    with pytest.raises(MalformedRowError) as exc_info:
        FeatureExpander().fit_transform([['1', '2'], ['3', 'inf']])
    assert exc_info.value.row == 1


def test_wrong_field_count_raises():
    with pytest.raises(MalformedRowError):
        FeatureExpander().fit_transform([['1', '2', '3'], ['4', '5']])


def test_non_numeric_target_without_label_map():
    with pytest.raises(MalformedRowError):
        FeatureExpander().fit_transform([['1', 'CYT']])


def test_label_column_and_ignored_columns():
    rows = [['id-1', 'CYT', '0.5', '0.2'], ['id-2', 'NUC', '0.1', '0.9']]
    expander = FeatureExpander(label_column=1, ignore_columns=[0],
                               label_map=LabelMap(['CYT', 'NUC']))
    X, y = expander.fit_transform(rows)
    np.testing.assert_array_equal(X, [[1.0, 0.5, 0.2], [1.0, 0.1, 0.9]])
    np.testing.assert_array_equal(y, [1, 2])


def test_label_column_cannot_be_ignored():
    with pytest.raises(ConfigurationError):
        FeatureExpander(label_column=-1, ignore_columns=[2]).fit(ROWS)


def test_empty_dataset():
    with pytest.raises(ValueError):
        FeatureExpander().fit_transform([])
