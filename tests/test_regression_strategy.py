import numpy as np
import pytest

from honestforest.debiaser import ObjectiveBayesDebiaser
from honestforest.observations import Observations
from honestforest.prediction_values import PredictionValues
from honestforest.regression_strategy import RegressionPredictionStrategy


def _values(*leaves):
    nodes = [[] if leaf is None else [np.array([[leaf]])] for leaf in leaves]
    return PredictionValues(nodes, len(nodes), 1)


def test_lengths():
    strategy = RegressionPredictionStrategy()
    assert strategy.prediction_length() == 1
    assert strategy.prediction_value_length() == 1


def test_predict_returns_average_outcome():
    strategy = RegressionPredictionStrategy()
    result = strategy.predict([np.array([[7.5]])])
    assert result.shape == (1,)
    assert result[0] == 7.5


def test_precompute_averages_leaf_outcomes():
    observations = Observations([[[2.0], [5.0], [5.0]]], 3)
    strategy = RegressionPredictionStrategy()
    values = strategy.precompute_prediction_values([[0], [1, 2], []], observations)
    assert values.num_nodes == 3
    assert values.num_types == 1
    assert values.get(0, 0)[0, 0] == 2.0
    assert values.get(1, 0)[0, 0] == 5.0
    assert values.empty(2)
    assert not values.empty(0)


def test_variance_of_symmetric_group():
    strategy = RegressionPredictionStrategy()
    average = [np.array([[4.0]])]
    leaf_values = _values(5.0, 3.0)
    result = strategy.compute_variance(average, leaf_values, 2)
    expected = ObjectiveBayesDebiaser().debias(0.0, 1.0, 1.0)
    assert result.shape == (1,)
    assert result[0] == pytest.approx(expected)
    assert result[0] > 0


def test_groups_with_empty_leaves_are_skipped():
    strategy = RegressionPredictionStrategy()
    average = [np.array([[4.0]])]
    base = strategy.compute_variance(average, _values(5.0, 3.0, 4.5, 3.5), 2)
    extended = strategy.compute_variance(average, _values(5.0, 3.0, 4.5, 3.5, None, 9.0), 2)
    assert extended[0] == pytest.approx(base[0])
    assert base[0] >= 0


def test_invalid_group_size_raises():
    strategy = RegressionPredictionStrategy()
    with pytest.raises(ValueError):
        strategy.compute_variance([np.array([[1.0]])], _values(1.0), 0)