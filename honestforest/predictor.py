"""Predict with a trained forest, optionally using only out-of-bag trees."""

from __future__ import annotations

import os
from concurrent.futures import ThreadPoolExecutor
from itertools import pairwise
from typing import Any, Iterable, Protocol, Sequence

from honestforest.collectors import (
    DefaultPredictionCollector,
    OptimizedPredictionCollector,
    PredictionCollector,
)
from honestforest.custom_strategy import CustomPredictionStrategy
from honestforest.data import DefaultData
from honestforest.forest import Forest
from honestforest.instrumental_strategy import InstrumentalPredictionStrategy
from honestforest.prediction import Prediction
from honestforest.quantile_strategy import QuantilePredictionStrategy
from honestforest.regression_strategy import RegressionPredictionStrategy
from honestforest.strategy import DefaultPredictionStrategy, OptimizedPredictionStrategy
from honestforest.utility import DEFAULT_NUM_THREADS, split_sequence


class _PredictableTree(Protocol):
    oob_samples: Sequence[int]

    def find_leaf_nodes(self, data: DefaultData, samples: Sequence[int]) -> Sequence[int]:
        ...


class ForestPredictor:
    """Finds the leaves each sample reaches in every tree and collects predictions.

    An optimized strategy predicts from precomputed leaf values and, when
    ci_group_size is above 1, also estimates variance; a default strategy
    predicts from weighted training neighbours.
    """

    def __init__(
        self,
        num_threads: int,
        strategy: DefaultPredictionStrategy | OptimizedPredictionStrategy,
        ci_group_size: int = 1,
    ) -> None:
        if isinstance(strategy, OptimizedPredictionStrategy):
            self.collector: PredictionCollector = OptimizedPredictionCollector(strategy, ci_group_size)
        elif isinstance(strategy, DefaultPredictionStrategy):
            self.collector = DefaultPredictionCollector(strategy)
        else:
            raise TypeError("strategy must be a default or optimized prediction strategy")
        self.num_threads = (
            (os.cpu_count() or 1) if num_threads == DEFAULT_NUM_THREADS else num_threads
        )

    def predict(self, forest: Forest, data: DefaultData) -> list[Prediction]:
        """Predict every row of data using all trees."""
        return self._predict(forest, data, oob_prediction=False)

    def predict_oob(self, forest: Forest, data: DefaultData) -> list[Prediction]:
        """Predict every training row using only trees for which it was out of bag."""
        return self._predict(forest, data, oob_prediction=True)

    def _predict(self, forest: Forest, data: DefaultData, oob_prediction: bool) -> list[Prediction]:
        leaf_nodes_by_tree = self._find_leaf_nodes(forest, data, oob_prediction)
        trees_by_sample = self._trees_by_sample(forest, data) if oob_prediction else []
        return self.collector.collect_predictions(forest, data, leaf_nodes_by_tree, trees_by_sample)

    @staticmethod
    def _trees_by_sample(forest: Forest, data: DefaultData) -> list[list[bool]]:
        num_trees = len(forest.trees)
        result = [[False] * num_trees for _ in range(data.num_rows)]
        for tree_index, tree in enumerate(forest.trees):
            for sample in tree.oob_samples:
                result[sample][tree_index] = True
        return result

    def _find_leaf_nodes(
        self, forest: Forest, data: DefaultData, oob_prediction: bool
    ) -> list[list[int]]:
        num_trees = len(forest.trees)
        if num_trees == 0:
            return []
        ranges = split_sequence(0, num_trees - 1, self.num_threads)
        batches = list(pairwise(ranges))

        with ThreadPoolExecutor(max_workers=len(batches)) as executor:
            futures = [
                executor.submit(self._find_batch, forest.trees[start:stop], data, oob_prediction)
                for start, stop in batches
            ]
            leaf_nodes_by_tree: list[list[int]] = []
            for future in futures:
                leaf_nodes_by_tree.extend(future.result())
        return leaf_nodes_by_tree

    @staticmethod
    def _find_batch(
        trees: Iterable[Any], data: DefaultData, oob_prediction: bool
    ) -> list[list[int]]:
        return [
            list(tree.find_leaf_nodes(data, tree.oob_samples if oob_prediction else []))
            for tree in trees
        ]


def custom_predictor(num_threads: int) -> ForestPredictor:
    return ForestPredictor(num_threads, CustomPredictionStrategy())


def instrumental_predictor(num_threads: int, ci_group_size: int) -> ForestPredictor:
    return ForestPredictor(num_threads, InstrumentalPredictionStrategy(), ci_group_size)


def quantile_predictor(num_threads: int, quantiles: Iterable[float]) -> ForestPredictor:
    return ForestPredictor(num_threads, QuantilePredictionStrategy(list(quantiles)))


def regression_predictor(num_threads: int, ci_group_size: int) -> ForestPredictor:
    return ForestPredictor(num_threads, RegressionPredictionStrategy(), ci_group_size)