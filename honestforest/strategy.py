"""Interfaces for computing predictions from a trained forest."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Mapping

import numpy as np

from honestforest.observations import Observations
from honestforest.prediction_values import PredictionValues


class DefaultPredictionStrategy(ABC):
    """Predicts a test sample from weighted training neighbours sharing its leaves."""

    @abstractmethod
    def prediction_length(self) -> int:
        """Number of values in a prediction, e.g. 1 for regression."""

    @abstractmethod
    def predict(
        self,
        sample: int,
        weights_by_sample: Mapping[int, float],
        observations: Observations,
    ) -> list[float]:
        """Predict one test sample; weights_by_sample maps neighbours to weights summing to 1."""


class OptimizedPredictionStrategy(ABC):
    """Predicts from summary values precomputed per leaf during training."""

    @abstractmethod
    def prediction_length(self) -> int:
        """Number of values in a prediction."""

    @abstractmethod
    def predict(self, average_prediction_values: list[np.ndarray]) -> np.ndarray:
        """Predict from leaf values averaged over all leaves the sample landed in."""

    @abstractmethod
    def compute_variance(
        self,
        average_prediction_values: list[np.ndarray],
        leaf_prediction_values: PredictionValues,
        ci_group_size: int,
    ) -> np.ndarray:
        """Estimate prediction variance from per-tree leaf values grouped by ci_group_size."""

    @abstractmethod
    def prediction_value_length(self) -> int:
        """Number of types of precomputed prediction values."""

    @abstractmethod
    def precompute_prediction_values(
        self,
        leaf_samples: list[list[int]],
        observations: Observations,
    ) -> PredictionValues:
        """Compute the summary values for each leaf of a tree."""