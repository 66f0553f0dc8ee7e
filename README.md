# honestforest

The prediction side of generalized random forests. Given trees that have
already been grown, it finds the leaves each sample lands in and turns them
into predictions. Forests whose trees were grown in groups also get variance
estimates.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## What it provides

### Data

- `honestforest.data.DefaultData` is a two-dimensional table of floats with
  column names in `variable_names`.
  - Build it from a nested sequence or a NumPy array, or load it with
    `DefaultData.from_file`.
  - The file's first line is a header. The separator is taken from that
    header: a comma, then a semicolon, or whitespace if neither is present.
  - Whitespace files must have exactly as many values on each row as the
    header has names; otherwise a `ValueError` is raised.
  - `sort()` builds each column's sorted unique values and the index of every
    cell into them. After that, `get_index`, `get_unique_data_value` and
    `num_unique_data_values` work. Calling them before `sort()` raises
    `RuntimeError`.
- `honestforest.data.load_data(file_name)` loads a file and sorts it.
- `honestforest.observations.Observations` holds one matrix per observation
  type for the training samples. The types are `Observations.OUTCOME`,
  `Observations.TREATMENT` and `Observations.INSTRUMENT`.

### Strategies

All strategies build on the interfaces in `honestforest.strategy`:

- `DefaultPredictionStrategy` predicts from weighted training neighbours.
- `OptimizedPredictionStrategy` predicts from values computed in advance for
  each leaf. It can also estimate variance.

The strategies provided are:

- `honestforest.regression_strategy.RegressionPredictionStrategy` (optimized)
  gives the mean outcome.
- `honestforest.instrumental_strategy.InstrumentalPredictionStrategy`
  (optimized) gives local instrumental-variable treatment effects.
- `honestforest.quantile_strategy.QuantilePredictionStrategy` (default) gives
  weighted quantiles of the neighbours' outcomes.
- `honestforest.custom_strategy.CustomPredictionStrategy` (default) always
  predicts `[0.0]`. It is a starting point for a strategy of your own.

`honestforest.debiaser.ObjectiveBayesDebiaser` is the objective-Bayes
correction used by the grouped variance estimates. It keeps those estimates
from going negative.

### Forests and prediction

- `honestforest.forest.Forest` holds three things:
  - the trees;
  - the training `Observations`;
  - the number of variables.

  `Forest.create(trees, data, observables)` builds one. It pulls each
  observation type's columns out of `data`, using `observables`, which maps a
  type to a list of column indices. The types must be numbered from 0.
- `honestforest.forest.ForestOptions` is a frozen record of `num_trees`,
  `num_threads` and `random_seed`.
- `honestforest.predictor.ForestPredictor(num_threads, strategy, ci_group_size=1)`
  makes predictions.
  - `predict(forest, data)` uses all trees.
  - `predict_oob(forest, data)` uses, for each row, only the trees whose
    `oob_samples` contain it.
  - Leaf lookup runs across `num_threads` threads. A value of 0 means one
    thread per CPU.
  - The factories `regression_predictor`, `instrumental_predictor`,
    `quantile_predictor` and `custom_predictor` build a predictor with the
    matching strategy.
- `honestforest.collectors` holds `DefaultPredictionCollector` and
  `OptimizedPredictionCollector`. These combine the leaves a sample reaches
  into one `honestforest.prediction.Prediction`.
  - A `Prediction` has `predictions` and `variance_estimates`, and its
    `len()` is the number of predicted values.
  - Variance is estimated only by an optimized strategy with `ci_group_size`
    above 1. The other two cases are:
    - an optimized strategy with a group size of 1 gives an empty
      `variance_estimates`;
    - a default strategy gives a 1×1 zero matrix.
  - A sample that lands only in empty leaves gets NaN predictions.

### Analysis and helpers

- `honestforest.analysis.compute_split_frequencies(forest, max_depth)` counts
  how often each variable is split on at each depth below `max_depth`.
- `honestforest.utility` holds small helpers:
  - `split_sequence`, `beautify_time`, `round_to_next_multiple`,
    `split_string`, `equal_doubles`, `read_vector_from_file`;
  - the `TreeType` enum;
  - length-prefixed little-endian binary readers and writers for vectors,
    nested vectors, matrices and strings: `write_vector`/`read_vector`,
    `write_nested`/`read_nested`, `write_matrix`/`read_matrix`,
    `write_string`/`read_string`.

## Trees

Trees are supplied by the caller. Any object with the following members will
do.

For prediction:

- `oob_samples` is the list of training rows left out of the tree.
- `find_leaf_nodes(data, samples)` returns, for every row of `data`, the leaf
  it falls in. `samples` is the tree's `oob_samples` when predicting out of
  bag, and an empty list otherwise.
- `leaf_samples` is needed with a default strategy. It gives the training rows
  in each leaf.
- `prediction_values` is needed with an optimized strategy. It is a
  `honestforest.prediction_values.PredictionValues` per leaf, typically from
  the strategy's `precompute_prediction_values`.

For `compute_split_frequencies`:

- `root_node`
- `child_nodes` (left and right child lists)
- `split_vars`
- `is_leaf(node)`

## Example

```python
from honestforest.data import DefaultData
from honestforest.forest import Forest
from honestforest.observations import Observations
from honestforest.predictor import regression_predictor
from honestforest.regression_strategy import RegressionPredictionStrategy


class StumpTree:
    """Splits rows on column 0 at 0.5."""

    def __init__(self, leaf_samples, observations):
        self.leaf_samples = leaf_samples
        self.prediction_values = RegressionPredictionStrategy().precompute_prediction_values(
            leaf_samples, observations
        )
        self.oob_samples = []

    def find_leaf_nodes(self, data, samples):
        return [0 if data.get(row, 0) < 0.5 else 1 for row in range(data.num_rows)]


data = DefaultData([[0.0, 1.0], [0.2, 3.0], [0.8, 10.0], [1.0, 12.0]], ["x", "y"])
forest = Forest.create([], data, {Observations.OUTCOME: [1]})
forest.trees.append(StumpTree([[0, 1], [2, 3]], forest.observations))

predictor = regression_predictor(num_threads=1, ci_group_size=1)
for prediction in predictor.predict(forest, data):
    print(prediction.predictions)  # [2.] [2.] [11.] [11.]
```

## What it does not do

- It does not grow trees. There are no splitting rules, no sampling and no
  trainer, so trees must come from elsewhere.
- It has no tree class of its own.
- It does not save or load whole forests. Only the low-level binary helpers in
  `honestforest.utility` are provided.
- It has no command-line interface.