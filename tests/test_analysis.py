from dataclasses import dataclass

import pytest

from honestforest.analysis import compute_split_frequencies
from honestforest.forest import Forest


@dataclass
class SplitTree:
    child_nodes: list
    split_vars: list
    root_node: int = 0

    def is_leaf(self, node):
        return self.child_nodes[0][node] == 0 and self.child_nodes[1][node] == 0


def _tree():
    # Node 0 splits on variable 1 into 1 and 2; node 1 splits on variable 0 into 3 and 4.
    return SplitTree(child_nodes=[[1, 3, 0, 0, 0], [2, 4, 0, 0, 0]], split_vars=[1, 0, 0, 0, 0])


def test_counts_splits_by_depth():
    forest = Forest([_tree()], num_variables=2)
    assert compute_split_frequencies(forest, 3) == [[0, 1], [1, 0], [0, 0]]


def test_max_depth_truncates():
    forest = Forest([_tree()], num_variables=2)
    full = compute_split_frequencies(forest, 3)
    assert compute_split_frequencies(forest, 1) == full[:1]
    assert compute_split_frequencies(forest, 0) == []


def test_counts_add_across_trees():
    single = compute_split_frequencies(Forest([_tree()], num_variables=2), 2)
    double = compute_split_frequencies(Forest([_tree(), _tree()], num_variables=2), 2)
    assert double == [[2 * v for v in row] for row in single]


def test_total_equals_internal_nodes():
    forest = Forest([_tree()], num_variables=3)
    result = compute_split_frequencies(forest, 5)
    assert sum(map(sum, result)) == 2
    assert all(len(row) == 3 for row in result)


def test_leaf_root_has_no_splits():
    forest = Forest([SplitTree(child_nodes=[[0], [0]], split_vars=[0])], num_variables=2)
    assert compute_split_frequencies(forest, 2) == [[0, 0], [0, 0]]


def test_split_variable_outside_forest_raises():
    forest = Forest([_tree()], num_variables=1)
    with pytest.raises(IndexError):
        compute_split_frequencies(forest, 2)