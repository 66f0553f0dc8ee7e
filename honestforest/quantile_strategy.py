"""Prediction strategy for quantile forests."""

from __future__ import annotations

from typing import Iterable, Mapping

from honestforest.observations import Observations
from honestforest.strategy import DefaultPredictionStrategy


class QuantilePredictionStrategy(DefaultPredictionStrategy):
    """Predicts weighted quantiles of the neighbours' outcomes."""

    def __init__(self, quantiles: Iterable[float]) -> None:
        self.quantiles = list(quantiles)

    def prediction_length(self) -> int:
        return len(self.quantiles)

    def predict(
        self,
        prediction_sample: int,
        weights_by_sample: Mapping[int, float],
        observations: Observations,
    ) -> list[float]:
        samples_and_values = [
            (sample, float(observations.get(Observations.OUTCOME, sample)[0]))
            for sample in weights_by_sample
        ]
        return self._compute_quantile_cutoffs(weights_by_sample, samples_and_values)

    def _compute_quantile_cutoffs(
        self,
        weights_by_sample: Mapping[int, float],
        samples_and_values: list[tuple[int, float]],
    ) -> list[float]:
        if not samples_and_values:
            raise ValueError("cannot compute quantiles without neighbouring samples")
        samples_and_values = sorted(samples_and_values, key=lambda pair: pair[1])

        cutoffs: list[float] = []
        pending = iter(self.quantiles)
        current = next(pending, None)
        cumulative_weight = 0.0

        for sample, value in samples_and_values:
            cumulative_weight += weights_by_sample[sample]
            while current is not None and cumulative_weight >= current:
                cutoffs.append(value)
                current = next(pending, None)

        last_value = samples_and_values[-1][1]
        while current is not None:
            cutoffs.append(last_value)
            current = next(pending, None)
        return cutoffs