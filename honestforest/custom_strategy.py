"""A placeholder strategy to be filled in with custom prediction logic."""

from __future__ import annotations

from typing import Mapping

from honestforest.observations import Observations
from honestforest.strategy import DefaultPredictionStrategy


class CustomPredictionStrategy(DefaultPredictionStrategy):
    """Predicts a single constant zero for every sample."""

    # Add more observables here as needed.
    OUTCOME = 0

    def prediction_length(self) -> int:
        return 1

    def predict(
        self,
        sample: int,
        weights_by_sample: Mapping[int, float],
        observations: Observations,
    ) -> list[float]:
        return [0.0]