"""Prediction strategy for instrumental-variable forests."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from honestforest.debiaser import ObjectiveBayesDebiaser
from honestforest.observations import Observations
from honestforest.prediction_values import PredictionValues
from honestforest.strategy import OptimizedPredictionStrategy

OUTCOME = 0
TREATMENT = 1
INSTRUMENT = 2
OUTCOME_INSTRUMENT = 3
TREATMENT_INSTRUMENT = 4

NUM_TYPES = 5


def _column(matrix: np.ndarray) -> np.ndarray:
    return np.asarray(matrix, dtype=float).reshape(-1, 1)


class InstrumentalPredictionStrategy(OptimizedPredictionStrategy):
    """Estimates local treatment effects from leaf-level instrument moments."""

    OUTCOME = OUTCOME
    TREATMENT = TREATMENT
    INSTRUMENT = INSTRUMENT
    OUTCOME_INSTRUMENT = OUTCOME_INSTRUMENT
    TREATMENT_INSTRUMENT = TREATMENT_INSTRUMENT

    def __init__(self) -> None:
        self._debiaser = ObjectiveBayesDebiaser()
        self._prediction_size = 0

    def prediction_length(self) -> int:
        """Number of instruments seen in the last prediction."""
        return self._prediction_size

    @staticmethod
    def _moments(average: Sequence[np.ndarray]) -> tuple[np.ndarray, np.ndarray]:
        outcome = np.asarray(average[OUTCOME], dtype=float).reshape(1, 1)
        treatment = _column(average[TREATMENT])
        instrument = _column(average[INSTRUMENT])
        instrument_effect = _column(average[OUTCOME_INSTRUMENT]) - instrument @ outcome
        first_stage = np.asarray(average[TREATMENT_INSTRUMENT], dtype=float) - instrument @ treatment.T
        return instrument_effect, first_stage

    def predict(self, average: Sequence[np.ndarray]) -> np.ndarray:
        self._prediction_size = int(np.asarray(average[INSTRUMENT]).size)
        instrument_effect, first_stage = self._moments(average)
        return (np.linalg.inv(first_stage) @ instrument_effect).reshape(-1)

    def compute_variance(
        self,
        average: Sequence[np.ndarray],
        leaf_values: PredictionValues,
        ci_group_size: int,
    ) -> np.ndarray:
        if ci_group_size < 1:
            raise ValueError("ci_group_size must be at least 1")
        instrument_effect, first_stage = self._moments(average)
        treatment_estimate = np.linalg.inv(first_stage) @ instrument_effect
        avg_outcome = np.asarray(average[OUTCOME], dtype=float).reshape(1, 1)
        avg_treatment = _column(average[TREATMENT])
        main_effect = float((avg_outcome - treatment_estimate.T @ avg_treatment)[0, 0])

        num_w = first_stage.shape[1]
        num_good_groups = 0
        psi_squared = np.zeros((num_w + 1, num_w + 1))
        psi_grouped_squared = np.zeros((num_w + 1, num_w + 1))

        for group in range(leaf_values.num_nodes // ci_group_size):
            nodes = range(group * ci_group_size, (group + 1) * ci_group_size)
            if any(leaf_values.empty(node) for node in nodes):
                continue
            num_good_groups += 1

            group_psi = np.zeros(num_w + 1)
            for node in nodes:
                leaf = leaf_values.get_values(node)
                psi_1 = (
                    _column(leaf[OUTCOME_INSTRUMENT])
                    - np.asarray(leaf[TREATMENT_INSTRUMENT], dtype=float) @ treatment_estimate
                    - _column(leaf[INSTRUMENT]) * main_effect
                )
                psi_2 = (
                    float(
                        (
                            np.asarray(leaf[OUTCOME], dtype=float).reshape(1, 1)
                            - _column(leaf[TREATMENT]).T @ treatment_estimate
                        )[0, 0]
                    )
                    - main_effect
                )
                psi = np.append(psi_1.ravel(), psi_2)
                psi_squared += np.outer(psi, psi)
                group_psi += psi

            group_psi /= ci_group_size
            psi_grouped_squared += np.outer(group_psi, group_psi)

        with np.errstate(all="ignore"):
            groups = np.float64(num_good_groups)
            psi_squared = psi_squared / (groups * ci_group_size)
            psi_grouped_squared = psi_grouped_squared / groups

            bread = np.block(
                [
                    [np.asarray(average[TREATMENT_INSTRUMENT], dtype=float), _column(average[INSTRUMENT])],
                    [avg_treatment.T, np.ones((1, 1))],
                ]
            )
            bread = np.linalg.inv(bread)

            var_between = bread @ psi_grouped_squared @ bread.T
            var_total = bread @ psi_squared @ bread.T
            # The amount by which var_between is inflated due to using small groups.
            group_noise = (var_total - var_between) / np.float64(ci_group_size - 1)

        return np.array(
            [
                self._debiaser.debias(float(var_between[i, i]), float(group_noise[i, i]), float(groups))
                for i in range(num_w)
            ]
        )

    def prediction_value_length(self) -> int:
        return NUM_TYPES

    def precompute_prediction_values(
        self,
        leaf_samples: Sequence[Sequence[int]],
        observations: Observations,
    ) -> PredictionValues:
        num_treatment = observations.num_treatment
        num_instrument = observations.num_instrument
        values: list[list[np.ndarray]] = []

        for leaf in leaf_samples:
            if not leaf:
                values.append([])
                continue
            sum_y = np.zeros(1)
            sum_w = np.zeros(num_treatment)
            sum_z = np.zeros(num_instrument)
            sum_yz = np.zeros(num_instrument)
            sum_wz = np.zeros((num_instrument, num_treatment))

            for sample in leaf:
                y = observations.get(Observations.OUTCOME, sample)
                w = observations.get(Observations.TREATMENT, sample)
                z = observations.get(Observations.INSTRUMENT, sample)
                sum_y += y
                sum_w += w
                sum_z += z
                sum_yz += z * y[0]
                sum_wz += np.outer(z, w)

            size = len(leaf)
            values.append(
                [
                    sum_y.reshape(1, 1) / size,
                    sum_w.reshape(-1, 1) / size,
                    sum_z.reshape(-1, 1) / size,
                    sum_yz.reshape(-1, 1) / size,
                    sum_wz / size,
                ]
            )

        return PredictionValues(values, len(leaf_samples), NUM_TYPES)