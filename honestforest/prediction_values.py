"""Summary values precomputed for each leaf of a tree."""

from __future__ import annotations

from typing import Sequence

import numpy as np


class PredictionValues:
    """Per-node lists of matrices, one matrix per value type; empty nodes hold no values."""

    def __init__(
        self,
        values: Sequence[Sequence[np.ndarray]] | None = None,
        num_nodes: int = 0,
        num_types: int = 0,
    ) -> None:
        self._values: list[list[np.ndarray]] = [
            [np.array(matrix, dtype=float) for matrix in node] for node in values or ()
        ]
        self.num_nodes = num_nodes
        self.num_types = num_types

    def _node(self, node: int) -> list[np.ndarray]:
        if not 0 <= node < len(self._values):
            raise IndexError(f"node {node} out of range")
        return self._values[node]

    def empty(self, node: int) -> bool:
        """Whether the node has no precomputed values."""
        return not self._node(node)

    def get(self, node: int, type: int) -> np.ndarray:
        """The value of the given type at the node."""
        values = self._node(node)
        if not 0 <= type < len(values):
            raise IndexError(f"type {type} out of range for node {node}")
        return values[type].copy()

    def get_values(self, node: int) -> list[np.ndarray]:
        """All values stored at the node."""
        return list(self._node(node))