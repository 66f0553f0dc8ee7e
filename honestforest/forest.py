"""A trained forest together with the training observations it predicts from."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

import numpy as np

from honestforest.data import DefaultData
from honestforest.observations import Observations


@dataclass(frozen=True)
class ForestOptions:
    """Basic settings shared by forest training and prediction."""

    num_trees: int
    num_threads: int
    random_seed: int


def _observation_matrices(
    data: DefaultData,
    observables: Mapping[int, Sequence[int]],
) -> list[np.ndarray]:
    num_types = len(observables)
    num_samples = data.num_rows
    matrices: list[np.ndarray | None] = [None] * num_types

    for type_, columns in observables.items():
        if not 0 <= type_ < num_types:
            raise ValueError(
                f"observation type {type_} is outside 0..{num_types - 1}; "
                "types must be numbered consecutively from 0"
            )
        columns = list(columns)
        matrix = np.array(
            [[data.get(row, col) for col in columns] for row in range(num_samples)],
            dtype=float,
        ).reshape(num_samples, len(columns))
        matrices[type_] = matrix

    return [matrix for matrix in matrices if matrix is not None]


@dataclass
class Forest:
    """The trees of a forest, the observations they were trained on, and the
    number of variables in the training data."""

    trees: list[Any] = field(default_factory=list)
    observations: Observations = field(default_factory=Observations)
    num_variables: int = 0

    @classmethod
    def create(
        cls,
        trees: Sequence[Any],
        data: DefaultData,
        observables: Mapping[int, Sequence[int]],
    ) -> Forest:
        """Build a forest, extracting each observation type's columns from data.

        observables maps an observation type (such as Observations.OUTCOME) to the
        data columns that hold it.
        """
        matrices = _observation_matrices(data, observables)
        observations = Observations(matrices, data.num_rows)
        return cls(list(trees), observations, data.num_cols)