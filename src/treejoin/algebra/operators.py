"""Relational primitives over in-memory relations.

Every function here is pure: it takes Relations and returns a new Relation, leaving its
inputs untouched. Join keys are plain Python tuples of the projected values, so hashing
and equality are value-based and order-sensitive, and values of different types never
collide the way they would under a textual key encoding.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

from treejoin.algebra.expressions import Expression, compile_predicate
from treejoin.algebra.relation import Relation, Row
from treejoin.exceptions import MissingJoinKeyError, UnknownAttributeError

Predicate = Union[Callable[[Row], bool], Expression]


def _key_getter(indices: Tuple[int, ...]) -> Callable[[Row], Tuple[Any, ...]]:
    return lambda row: tuple(row[i] for i in indices)


def common_attributes(r1: Relation, r2: Relation) -> List[str]:
    """Attributes of ``r1`` that also appear in ``r2``, in ``r1``'s order."""
    return [attr for attr in r1.attributes if attr in r2]


def semi_join(
    relation: Relation, other: Relation, join_attrs: Optional[Sequence[str]] = None
) -> Relation:
    """Keep the tuples of ``relation`` that agree with some tuple of ``other`` on ``join_attrs``.

    The attribute list is unchanged. With ``join_attrs`` omitted the common attributes
    of both relations are used. An empty attribute list makes the semi-join a no-op:
    ``relation`` is returned as is.

    Args:
        relation: Relation to reduce
        other: Relation whose projected keys act as the filter
        join_attrs: Attributes present in both relations

    Returns:
        Relation with the same name and attributes and a subset of the tuples

    Raises:
        UnknownAttributeError: If a join attribute is missing from either relation
    """
    if join_attrs is None:
        join_attrs = common_attributes(relation, other)
    if not join_attrs:
        return relation

    own_key = _key_getter(relation.indices_of(join_attrs))
    other_key = _key_getter(other.indices_of(join_attrs))

    keys = {other_key(row) for row in other.tuples}
    return relation.with_tuples(row for row in relation.tuples if own_key(row) in keys)


def equi_join(r1: Relation, r2: Relation) -> Relation:
    """Natural inner join of two relations on all shared attribute names.

    Output attributes are ``r1``'s attributes followed by those of ``r2`` that are not
    join attributes, in ``r2``'s order. Multiplicities multiply; nothing is
    deduplicated. The smaller relation is used as the hash table's build side.

    Raises:
        MissingJoinKeyError: If the relations share no attribute
    """
    join_attrs = common_attributes(r1, r2)
    if not join_attrs:
        raise MissingJoinKeyError(r1.name, r2.name)

    r1_key = _key_getter(r1.indices_of(join_attrs))
    r2_key = _key_getter(r2.indices_of(join_attrs))

    shared = set(join_attrs)
    r2_rest = [attr for attr in r2.attributes if attr not in shared]
    r2_rest_indices = r2.indices_of(r2_rest)

    result: List[Row] = []
    if len(r2.tuples) <= len(r1.tuples):
        buckets: Dict[Tuple[Any, ...], List[Row]] = defaultdict(list)
        for row in r2.tuples:
            buckets[r2_key(row)].append(row)
        for row in r1.tuples:
            for match in buckets.get(r1_key(row), ()):
                result.append(row + tuple(match[i] for i in r2_rest_indices))
    else:
        buckets = defaultdict(list)
        for row in r1.tuples:
            buckets[r1_key(row)].append(row)
        for row in r2.tuples:
            rest = tuple(row[i] for i in r2_rest_indices)
            for match in buckets.get(r2_key(row), ()):
                result.append(match + rest)

    return Relation(
        f"{r1.name}_{r2.name}",
        r1.attributes + tuple(r2_rest),
        result,
    )


def select(relation: Relation, predicate: Predicate) -> Relation:
    """Keep the tuples for which ``predicate`` holds.

    ``predicate`` is either a callable over the positional tuple or an Expression,
    which is bound to the relation's attributes first. Filtering everything away is
    a valid result; the attribute list is preserved.
    """
    if isinstance(predicate, Expression):
        predicate = compile_predicate(predicate, relation.attributes, relation.name)
    elif not callable(predicate):
        raise TypeError(f"Selection predicate must be callable or an Expression, got {type(predicate).__name__}")
    return relation.with_tuples(row for row in relation.tuples if predicate(row))


def project(relation: Relation, attributes: Sequence[str], strict: bool = False) -> Relation:
    """Narrow ``relation`` to ``attributes``, in request order.

    Names the relation does not have are dropped from the output, unless ``strict``
    is set. Requesting the same name twice keeps only its first occurrence.

    Raises:
        UnknownAttributeError: In strict mode, for the first name that does not resolve
    """
    resolved: List[str] = []
    for attr in attributes:
        if attr in relation:
            if attr not in resolved:
                resolved.append(attr)
        elif strict:
            raise UnknownAttributeError(attr, relation.name)

    indices = relation.indices_of(resolved)
    return Relation(
        relation.name,
        resolved,
        (tuple(row[i] for i in indices) for row in relation.tuples),
    )
