"""
Yannakakis processing pipeline.

Runs the phases over a join tree in a fixed order:

    selection -> bottom-up reduction -> top-down reduction -> join -> projection

Each phase replaces node relations rather than mutating them. The pipeline either
returns the complete final relation or raises; there is no partial-result contract.
"""

from __future__ import annotations

from concurrent.futures import Executor, ThreadPoolExecutor
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator, Optional, Tuple

from treejoin.algebra.join_tree import JoinTree, JoinTreeNode
from treejoin.algebra.operators import project, select
from treejoin.algebra.relation import Relation, Row
from treejoin.engine.config import ProcessorConfig
from treejoin.engine.joiner import Joiner
from treejoin.engine.observer import (
    BOTTOM_UP,
    JOIN,
    PROJECTION,
    SELECTION,
    TOP_DOWN,
    NullObserver,
    Observer,
)
from treejoin.engine.reducer import Reducer
from treejoin.engine.sinks import ResultSink


@dataclass(frozen=True)
class ProcessResult:
    """Final relation of a run together with its shape."""

    relation: Relation
    attribute_count: int
    tuple_count: int

    @classmethod
    def of(cls, relation: Relation) -> "ProcessResult":
        attribute_count, tuple_count = relation.shape
        return cls(relation, attribute_count, tuple_count)

    @property
    def attributes(self) -> Tuple[str, ...]:
        return self.relation.attributes

    @property
    def tuples(self) -> Tuple[Row, ...]:
        return self.relation.tuples

    @property
    def is_empty(self) -> bool:
        """True for a well-formed result without tuples, which is not an error."""
        return self.tuple_count == 0


def _tree_stats(root: JoinTreeNode) -> Tuple[int, int]:
    nodes = list(root.walk())
    return len(nodes), sum(len(node.relation) for node in nodes)


class Processor:
    """Evaluates acyclic join trees with the Yannakakis algorithm.

    Args:
        config: Processing options; defaults to ``ProcessorConfig()``
        observer: Receives phase and row-count diagnostics
        sink: Receives the final relation after a successful run

    Example:
        >>> tree = JoinTree(JoinTreeNode(r1, left=JoinTreeNode(r2)))
        >>> result = Processor().process(tree)
        >>> result.attributes
        ('A', 'B', 'C')
    """

    def __init__(
        self,
        config: Optional[ProcessorConfig] = None,
        observer: Optional[Observer] = None,
        sink: Optional[ResultSink] = None,
    ):
        self.config = config or ProcessorConfig()
        self.observer = observer or NullObserver()
        self.sink = sink

    def process(self, tree: JoinTree) -> ProcessResult:
        """Run all phases and return the final relation.

        With ``in_place`` set the phases reassign the caller's node relations, so a
        run that fails after validation leaves that tree partly reduced. The default
        works on a copy and leaves the input tree untouched either way.

        Raises:
            InvalidJoinTreeError: If the tree has no root, no root relation, an aliased
                node or a selection that names no node
            MissingJoinKeyError: If a tree edge joins relations without a shared
                attribute. Checked before any phase runs.
            UnknownAttributeError: For a selection expression naming an unknown column,
                or in strict mode for an unresolved projection name
        """
        tree = self._prepare(tree)

        with self._pool() as pool:
            self._reduce(tree, pool)
            relation = self._join(tree.root, pool)

        if tree.projections is not None:
            self.observer.phase_started(PROJECTION)
            relation = project(relation, tree.projections, strict=self.config.strict)
            self.observer.phase_finished(PROJECTION, 1, len(relation))

        result = ProcessResult.of(relation)
        if self.sink is not None:
            self.sink.write(relation)
        return result

    def reduce(self, tree: JoinTree) -> JoinTree:
        """Apply selections and both semi-join passes, without joining.

        Returns:
            The reduced tree, which is ``tree`` itself unless ``in_place`` is off
        """
        tree = self._prepare(tree)
        with self._pool() as pool:
            self._reduce(tree, pool)
        return tree

    def _prepare(self, tree: JoinTree) -> JoinTree:
        if not isinstance(tree, JoinTree):
            raise TypeError(f"Expected JoinTree, got {type(tree).__name__}")
        tree.validate()
        if not self.config.in_place:
            tree = tree.copy()
        self._apply_selections(tree)
        return tree

    @contextmanager
    def _pool(self) -> Iterator[Optional[Executor]]:
        if not self.config.parallel:
            yield None
            return
        with ThreadPoolExecutor(max_workers=self.config.max_workers) as pool:
            yield pool

    def _apply_selections(self, tree: JoinTree) -> None:
        selections = tree.resolve_selections()
        if not selections:
            return

        self.observer.phase_started(SELECTION)
        for node, predicate in selections:
            before = len(node.relation)
            node.relation = select(node.relation, predicate)
            self.observer.relation_reduced(node.label, before, len(node.relation))
        self.observer.phase_finished(SELECTION, *_tree_stats(tree.root))

    def _reduce(self, tree: JoinTree, pool: Optional[Executor]) -> None:
        if not self.config.reduce:
            return
        reducer = Reducer(self.observer, strict=self.config.strict, pool=pool)

        self.observer.phase_started(BOTTOM_UP)
        reducer.bottom_up(tree.root)
        self.observer.phase_finished(BOTTOM_UP, *_tree_stats(tree.root))

        self.observer.phase_started(TOP_DOWN)
        reducer.top_down(tree.root)
        self.observer.phase_finished(TOP_DOWN, *_tree_stats(tree.root))

    def _join(self, root: JoinTreeNode, pool: Optional[Executor]) -> Relation:
        self.observer.phase_started(JOIN)
        relation = Joiner(pool).materialize(root)
        self.observer.phase_finished(JOIN, 1, len(relation))
        return relation


def process(
    tree: JoinTree,
    observer: Optional[Observer] = None,
    sink: Optional[ResultSink] = None,
    **config: Any,
) -> ProcessResult:
    """Process ``tree`` with a one-off Processor.

    Keyword arguments beyond ``observer`` and ``sink`` are ProcessorConfig fields.
    """
    return Processor(ProcessorConfig.from_dict(config), observer, sink).process(tree)
