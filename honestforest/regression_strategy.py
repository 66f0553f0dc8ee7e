"""Prediction strategy for regression forests: the average outcome in each leaf."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from honestforest.debiaser import ObjectiveBayesDebiaser
from honestforest.observations import Observations
from honestforest.prediction_values import PredictionValues
from honestforest.strategy import OptimizedPredictionStrategy

OUTCOME = 0


class RegressionPredictionStrategy(OptimizedPredictionStrategy):
    """Predicts the mean outcome of the leaves a sample falls into."""

    OUTCOME = OUTCOME

    def __init__(self) -> None:
        self._debiaser = ObjectiveBayesDebiaser()

    def prediction_length(self) -> int:
        return 1

    def predict(self, average: Sequence[np.ndarray]) -> np.ndarray:
        return np.asarray(average[OUTCOME], dtype=float).reshape(-1)

    def compute_variance(
        self,
        average: Sequence[np.ndarray],
        leaf_values: PredictionValues,
        ci_group_size: int,
    ) -> np.ndarray:
        if ci_group_size < 1:
            raise ValueError("ci_group_size must be at least 1")
        average_outcome = float(np.asarray(average[OUTCOME], dtype=float).flat[0])

        num_good_groups = 0
        psi_squared = 0.0
        psi_grouped_squared = 0.0

        for group in range(leaf_values.num_nodes // ci_group_size):
            nodes = range(group * ci_group_size, (group + 1) * ci_group_size)
            if any(leaf_values.empty(node) for node in nodes):
                continue
            num_good_groups += 1

            psis = [float(leaf_values.get(node, OUTCOME).flat[0]) - average_outcome for node in nodes]
            psi_squared += sum(psi * psi for psi in psis)
            group_psi = sum(psis) / ci_group_size
            psi_grouped_squared += group_psi * group_psi

        with np.errstate(all="ignore"):
            groups = np.float64(num_good_groups)
            var_between = np.float64(psi_grouped_squared) / groups
            var_total = np.float64(psi_squared) / (groups * ci_group_size)
            # The amount by which var_between is inflated due to using small groups.
            group_noise = (var_total - var_between) / np.float64(ci_group_size - 1)

        var_debiased = self._debiaser.debias(float(var_between), float(group_noise), float(groups))
        return np.array([var_debiased])

    def prediction_value_length(self) -> int:
        return 1

    def precompute_prediction_values(
        self,
        leaf_samples: Sequence[Sequence[int]],
        observations: Observations,
    ) -> PredictionValues:
        values: list[list[np.ndarray]] = []
        for leaf in leaf_samples:
            if not leaf:
                values.append([])
                continue
            total = sum(float(observations.get(Observations.OUTCOME, sample)[0]) for sample in leaf)
            values.append([np.array([[total / len(leaf)]])])
        return PredictionValues(values, len(leaf_samples), 1)