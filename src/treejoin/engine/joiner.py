"""Materializing join phase.

Combines the relations of a (normally fully reduced) join tree into one relation.
A leaf contributes its own relation; an internal node joins its own relation with the
combined result of its left subtree, then with that of its right subtree.
"""

from __future__ import annotations

from concurrent.futures import Executor
from typing import Dict, Optional

from treejoin.algebra.join_tree import JoinTreeNode
from treejoin.algebra.operators import common_attributes, equi_join
from treejoin.algebra.relation import Relation
from treejoin.exceptions import MissingJoinKeyError


class Joiner:
    """Post-order hash-join combination of a join tree.

    Every edge is checked on the two node relations themselves before the child's
    combined subtree is attached. A disjoint edge raises MissingJoinKeyError carrying
    the child's label, even when a deeper relation reintroduces a shared attribute,
    and is never turned into an empty or partial result.

    Args:
        pool: Optional executor. When given, all nodes of one tree level are combined
            concurrently, deepest level first.
    """

    def __init__(self, pool: Optional[Executor] = None):
        self.pool = pool

    def materialize(self, root: JoinTreeNode) -> Relation:
        results: Dict[int, Relation] = {}

        def combine(node: JoinTreeNode) -> Relation:
            result = node.relation
            for child in node.children:
                child_result = results.pop(id(child))
                if not common_attributes(node.relation, child.relation):
                    raise MissingJoinKeyError(node.relation.name, child.relation.name, node=child.label)
                result = equi_join(result, child_result)
            return result

        if self.pool is None:
            for node in reversed(list(root.walk())):
                results[id(node)] = combine(node)
        else:
            for level in reversed(root.levels()):
                combined = list(self.pool.map(combine, level))
                for node, relation in zip(level, combined):
                    results[id(node)] = relation

        return results[id(root)]
