"""The result of predicting a single sample."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

import numpy as np


def _default_variance() -> np.ndarray:
    return np.zeros((1, 1))


@dataclass(frozen=True, eq=False)
class Prediction:
    """Point predictions with optional variance estimates."""

    predictions: np.ndarray
    variance_estimates: np.ndarray = field(default_factory=_default_variance)

    def __post_init__(self) -> None:
        object.__setattr__(self, "predictions", np.array(self.predictions, dtype=float))
        object.__setattr__(
            self, "variance_estimates", np.array(self.variance_estimates, dtype=float)
        )

    @property
    def contains_variance_estimates(self) -> bool:
        return self.variance_estimates.size > 0

    def __len__(self) -> int:
        return int(self.predictions.size)


def make_prediction(
    predictions: Sequence[float] | np.ndarray,
    variance_estimates: Sequence[float] | np.ndarray | None = None,
) -> Prediction:
    """Build a Prediction, using the default variance when none is given."""
    if variance_estimates is None:
        return Prediction(predictions)
    return Prediction(predictions, variance_estimates)