"""
Reference implementations for end-to-end correctness tests.

Provides a brute-force natural join built on pandas (cartesian product of every
relation, then equality filters on every shared attribute name) and a generator of
random join trees that satisfy the connectedness condition of acyclic queries.
"""

import itertools
from collections import Counter
from typing import Any, Dict, FrozenSet, List, Sequence, Tuple

import numpy as np
import pandas as pd

from treejoin import JoinTree, JoinTreeNode, Relation

RowKey = FrozenSet[Tuple[str, Any]]


def brute_force_join(relations: Sequence[Relation]) -> pd.DataFrame:
    """Natural join of ``relations`` by cartesian product and filtering.

    Columns of the product are prefixed with the relation's position, equality is
    enforced for every attribute name appearing in more than one relation, and one
    column per attribute name is kept.
    """
    frames = []
    occurrences: Dict[str, List[str]] = {}
    for i, rel in enumerate(relations):
        df = rel.to_dataframe()
        renamed = {attr: f"{i}.{attr}" for attr in rel.attributes}
        frames.append(df.rename(columns=renamed))
        for attr in rel.attributes:
            occurrences.setdefault(attr, []).append(renamed[attr])

    product = frames[0]
    for frame in frames[1:]:
        product = product.merge(frame, how="cross")

    mask = pd.Series(True, index=product.index)
    for columns in occurrences.values():
        for other in columns[1:]:
            mask &= product[columns[0]] == product[other]

    result = product.loc[mask, [columns[0] for columns in occurrences.values()]]
    result.columns = list(occurrences)
    return result.reset_index(drop=True)


def rows_as_multiset(attributes: Sequence[str], rows) -> Counter:
    """Column-order independent multiset of rows."""
    return Counter(
        frozenset(zip(attributes, (_plain(v) for v in row)))
        for row in rows
    )


def frame_as_multiset(df: pd.DataFrame) -> Counter:
    return rows_as_multiset(list(df.columns), df.astype(object).itertuples(index=False, name=None))


def _plain(value: Any) -> Any:
    return value.item() if isinstance(value, np.generic) else value


def random_join_tree(
    rng: np.random.Generator,
    n_nodes: int,
    max_rows: int = 5,
    domain: int = 3,
) -> JoinTree:
    """Random binary join tree over small integer relations.

    Every child takes a non-empty subset of its parent's attributes plus one fresh
    attribute, so attributes shared by two nodes occur on the whole path between them.
    """
    names = (f"a{i}" for i in itertools.count())

    def rows(arity: int) -> List[Tuple[int, ...]]:
        count = int(rng.integers(1, max_rows + 1))
        return [tuple(int(v) for v in rng.integers(0, domain, size=arity)) for _ in range(count)]

    root_attrs = [next(names), next(names)]
    root = JoinTreeNode(Relation("R0", root_attrs, rows(2)))
    open_nodes = [root]

    for i in range(1, n_nodes):
        parent = open_nodes[int(rng.integers(len(open_nodes)))]
        parent_attrs = list(parent.relation.attributes)
        k = int(rng.integers(1, len(parent_attrs) + 1))
        shared = [str(a) for a in rng.choice(parent_attrs, size=k, replace=False)]
        attrs = shared + [next(names)]
        child = JoinTreeNode(Relation(f"R{i}", attrs, rows(len(attrs))))

        if parent.left is None:
            parent.left = child
        else:
            parent.right = child
            open_nodes.remove(parent)
        open_nodes.append(child)

    return JoinTree(root)
