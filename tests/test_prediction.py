import math

import numpy as np

from honestforest.prediction import Prediction, make_prediction


def test_length_is_number_of_predictions():
    assert len(Prediction([1.0, 2.0, 3.0])) == 3
    assert len(Prediction(np.zeros((2, 2)))) == 4


def test_default_variance_is_single_zero():
    prediction = Prediction([1.5])
    assert prediction.variance_estimates.shape == (1, 1)
    assert prediction.variance_estimates[0, 0] == 0.0
    assert prediction.contains_variance_estimates


def test_empty_variance_means_no_estimates():
    prediction = Prediction([1.5], np.zeros(0))
    assert not prediction.contains_variance_estimates


def test_explicit_variance_kept():
    prediction = Prediction([1.0, 2.0], [0.25, 0.5])
    assert prediction.variance_estimates.tolist() == [0.25, 0.5]
    assert prediction.predictions.tolist() == [1.0, 2.0]


def test_inputs_are_copied():
    values = np.array([1.0, 2.0])
    prediction = Prediction(values)
    values[0] = 7.0
    assert prediction.predictions.tolist() == [1.0, 2.0]


def test_nan_predictions_preserved():
    prediction = Prediction(np.full(2, np.nan))
    assert all(math.isnan(v) for v in prediction.predictions)
    assert len(prediction) == 2


def test_make_prediction_matches_constructor():
    without = make_prediction([3.0])
    assert without.variance_estimates.shape == (1, 1)
    with_variance = make_prediction([3.0], [])
    assert not with_variance.contains_variance_estimates
    assert with_variance.predictions.tolist() == [3.0]