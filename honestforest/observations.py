"""Training observations grouped by type (outcome, treatment, instrument)."""

from __future__ import annotations

from typing import Iterable, Sequence

import numpy as np

OUTCOME = 0
TREATMENT = 1
INSTRUMENT = 2


class Observations:
    """One matrix per observation type, with one row for each training sample."""

    OUTCOME = OUTCOME
    TREATMENT = TREATMENT
    INSTRUMENT = INSTRUMENT

    def __init__(
        self,
        observations_by_type: Iterable[Sequence[Sequence[float]] | np.ndarray] | None = None,
        num_samples: int = 0,
    ) -> None:
        matrices = []
        for matrix in observations_by_type or ():
            array = np.array(matrix, dtype=float)
            if array.ndim != 2:
                raise ValueError("each observation type must be a two-dimensional matrix")
            matrices.append(array)
        self.observations_by_type: list[np.ndarray] = matrices
        self.num_samples = num_samples

    def get(self, type: int, sample: int) -> np.ndarray:
        """The observations of the given type for one sample, as a vector."""
        if not 0 <= type < len(self.observations_by_type):
            raise IndexError(f"no observations of type {type}")
        return self.observations_by_type[type][sample].copy()

    @property
    def num_treatment(self) -> int:
        return self.observations_by_type[TREATMENT].shape[1]

    @property
    def num_instrument(self) -> int:
        return self.observations_by_type[INSTRUMENT].shape[1]