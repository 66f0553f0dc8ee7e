"""Summaries of how a trained forest uses its variables."""

from __future__ import annotations

from typing import Protocol, Sequence

from honestforest.forest import Forest


class _SplitTree(Protocol):
    root_node: int
    child_nodes: Sequence[Sequence[int]]
    split_vars: Sequence[int]

    def is_leaf(self, node: int) -> bool:
        ...


def compute_split_frequencies(forest: Forest, max_depth: int) -> list[list[int]]:
    """Count, for each depth below max_depth and each variable, how often the
    forest's trees split on that variable at that depth."""
    result = [[0] * forest.num_variables for _ in range(max_depth)]

    for tree in forest.trees:
        level = [tree.root_node]
        for depth in range(max_depth):
            if not level:
                break
            next_level: list[int] = []
            for node in level:
                if tree.is_leaf(node):
                    continue
                result[depth][tree.split_vars[node]] += 1
                next_level.append(tree.child_nodes[0][node])
                next_level.append(tree.child_nodes[1][node])
            level = next_level
    return result