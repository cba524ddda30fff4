"""Semi-join reduction passes.

Together the two passes form the full reducer of an acyclic join tree. The bottom-up
pass removes from every node the tuples that cannot match any descendant; the
top-down pass then pushes the now consistent parent relations back down. Afterwards
every relation holds exactly the tuples that take part in the global join result,
which bounds the work of the join phase by input plus output size.
"""

from __future__ import annotations

from concurrent.futures import Executor
from typing import Optional

from treejoin.algebra.join_tree import JoinTreeNode
from treejoin.algebra.operators import common_attributes, semi_join
from treejoin.algebra.relation import Relation
from treejoin.engine.observer import NullObserver, Observer
from treejoin.exceptions import MissingJoinKeyError


class Reducer:
    """Runs the bottom-up and top-down semi-join passes over a join tree.

    Args:
        observer: Receives a ``relation_reduced`` event for every slot reassignment
        strict: Raise MissingJoinKeyError for an edge whose relations share no
            attribute. Otherwise such an edge is left unreduced.
        pool: Optional executor. When given, the bottom-up pass reduces all nodes of
            one tree level concurrently, deepest level first.
    """

    def __init__(
        self,
        observer: Optional[Observer] = None,
        strict: bool = False,
        pool: Optional[Executor] = None,
    ):
        self.observer = observer or NullObserver()
        self.strict = strict
        self.pool = pool

    def full_reduce(self, root: JoinTreeNode) -> JoinTreeNode:
        """Bottom-up pass followed by the top-down pass."""
        self.bottom_up(root)
        self.top_down(root)
        return root

    def bottom_up(self, root: JoinTreeNode) -> JoinTreeNode:
        """Reduce every node against its children, descendants before ancestors."""
        if self.pool is None:
            # reversed pre-order visits every node after all of its descendants
            for node in reversed(list(root.walk())):
                self._reduce_against_children(node)
        else:
            for level in reversed(root.levels()):
                list(self.pool.map(self._reduce_against_children, level))
        return root

    def top_down(self, root: JoinTreeNode) -> JoinTreeNode:
        """Reduce every child against its already reduced parent, parents first.

        Always sequential: a child can only be reduced once its parent is final.
        """
        for node in root.walk():
            for child in node.children:
                child.relation = self._reduce(child, node.relation, blame=child)
        return root

    def _reduce_against_children(self, node: JoinTreeNode) -> None:
        for child in node.children:
            node.relation = self._reduce(node, child.relation, blame=child)

    def _reduce(self, target: JoinTreeNode, other: Relation, blame: JoinTreeNode) -> Relation:
        relation = target.relation
        join_attrs = common_attributes(relation, other)
        if not join_attrs and self.strict:
            raise MissingJoinKeyError(relation.name, other.name, node=blame.label)

        reduced = semi_join(relation, other, join_attrs)
        self.observer.relation_reduced(target.label, len(relation), len(reduced))
        return reduced

