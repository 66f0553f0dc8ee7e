"""Combine the leaves a sample lands in across trees into predictions."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections import defaultdict
from typing import Protocol, Sequence

import numpy as np

from honestforest.data import DefaultData
from honestforest.forest import Forest
from honestforest.prediction import Prediction
from honestforest.prediction_values import PredictionValues
from honestforest.strategy import DefaultPredictionStrategy, OptimizedPredictionStrategy


class _LeafSampleTree(Protocol):
    leaf_samples: Sequence[Sequence[int]]


class _PredictionValueTree(Protocol):
    prediction_values: PredictionValues


def _tree_applies(trees_by_sample: Sequence[Sequence[bool]] | None, sample: int, tree_index: int) -> bool:
    return not trees_by_sample or bool(trees_by_sample[sample][tree_index])


def _validate(sample: int, prediction: Prediction, expected_length: int) -> None:
    if len(prediction) != expected_length:
        raise ValueError(f"Prediction for sample {sample} did not have the expected length.")


class PredictionCollector(ABC):
    """Turns per-tree leaf assignments into one prediction per sample."""

    @abstractmethod
    def collect_predictions(
        self,
        forest: Forest,
        prediction_data: DefaultData,
        leaf_nodes_by_tree: Sequence[Sequence[int]],
        trees_by_sample: Sequence[Sequence[bool]] | None,
    ) -> list[Prediction]:
        """Predict every row of prediction_data.

        leaf_nodes_by_tree[t][s] is the leaf of tree t that sample s falls into.
        When trees_by_sample is non-empty, only trees with trees_by_sample[s][t]
        set are used for sample s.
        """


class DefaultPredictionCollector(PredictionCollector):
    """Weights training neighbours by how often they share a leaf with the sample."""

    def __init__(self, strategy: DefaultPredictionStrategy) -> None:
        self.strategy = strategy

    def collect_predictions(
        self,
        forest: Forest,
        prediction_data: DefaultData,
        leaf_nodes_by_tree: Sequence[Sequence[int]],
        trees_by_sample: Sequence[Sequence[bool]] | None,
    ) -> list[Prediction]:
        predictions: list[Prediction] = []
        for sample in range(prediction_data.num_rows):
            weights_by_sample: defaultdict[int, float] = defaultdict(float)
            num_leaves = 0

            for tree_index, tree in enumerate(forest.trees):
                if not _tree_applies(trees_by_sample, sample, tree_index):
                    continue
                node = leaf_nodes_by_tree[tree_index][sample]
                samples = tree.leaf_samples[node]
                if samples:
                    num_leaves += 1
                    self._add_sample_weights(samples, weights_by_sample)

            # Without neighbours (possible only with honesty) the prediction is a placeholder.
            if num_leaves == 0:
                predictions.append(Prediction(np.full(self.strategy.prediction_length(), np.nan)))
                continue

            weights = self._normalize(weights_by_sample)
            values = self.strategy.predict(sample, weights, forest.observations)
            prediction = Prediction(np.asarray(values, dtype=float).reshape(-1))
            _validate(sample, prediction, self.strategy.prediction_length())
            predictions.append(prediction)
        return predictions

    @staticmethod
    def _add_sample_weights(samples: Sequence[int], weights_by_sample: defaultdict[int, float]) -> None:
        sample_weight = 1.0 / len(samples)
        for neighbour in samples:
            weights_by_sample[neighbour] += sample_weight

    @staticmethod
    def _normalize(weights_by_sample: dict[int, float]) -> dict[int, float]:
        total = sum(weights_by_sample.values())
        return {neighbour: weight / total for neighbour, weight in weights_by_sample.items()}


class OptimizedPredictionCollector(PredictionCollector):
    """Averages precomputed leaf values and, with tree groups, estimates variance."""

    def __init__(self, strategy: OptimizedPredictionStrategy, ci_group_size: int) -> None:
        self.strategy = strategy
        self.ci_group_size = ci_group_size

    def collect_predictions(
        self,
        forest: Forest,
        prediction_data: DefaultData,
        leaf_nodes_by_tree: Sequence[Sequence[int]],
        trees_by_sample: Sequence[Sequence[bool]] | None,
    ) -> list[Prediction]:
        num_trees = len(forest.trees)
        with_variance = self.ci_group_size > 1
        predictions: list[Prediction] = []

        for sample in range(prediction_data.num_rows):
            average_value: list[np.ndarray] = []
            leaf_values: list[list[np.ndarray]] = [[] for _ in range(num_trees)] if with_variance else []
            num_leaves = 0

            for tree_index, tree in enumerate(forest.trees):
                if not _tree_applies(trees_by_sample, sample, tree_index):
                    continue
                node = leaf_nodes_by_tree[tree_index][sample]
                prediction_values: PredictionValues = tree.prediction_values
                if prediction_values.empty(node):
                    continue
                num_leaves += 1
                self._add_prediction_values(node, prediction_values, average_value)
                if with_variance:
                    leaf_values[tree_index] = prediction_values.get_values(node)

            # Without neighbours (possible only with honesty) the prediction is a placeholder.
            if num_leaves == 0:
                predictions.append(Prediction(np.full(self.strategy.prediction_length(), np.nan)))
                continue

            average_value = [value / num_leaves for value in average_value]
            point_prediction = self.strategy.predict(average_value)
            if with_variance:
                grouped = PredictionValues(leaf_values, num_trees, self.strategy.prediction_value_length())
                variance = self.strategy.compute_variance(average_value, grouped, self.ci_group_size)
            else:
                variance = np.empty(0)

            prediction = Prediction(point_prediction, variance)
            _validate(sample, prediction, self.strategy.prediction_length())
            predictions.append(prediction)
        return predictions

    @staticmethod
    def _add_prediction_values(
        node: int,
        prediction_values: PredictionValues,
        combined_average: list[np.ndarray],
    ) -> None:
        if not combined_average:
            combined_average.extend(
                np.zeros_like(prediction_values.get(node, type_))
                for type_ in range(prediction_values.num_types)
            )
        for type_ in range(prediction_values.num_types):
            combined_average[type_] = combined_average[type_] + prediction_values.get(node, type_)