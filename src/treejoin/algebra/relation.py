"""
Relation values for the join algebra.

A Relation is a named, ordered list of unique attribute names together with a sequence
of fixed-arity tuples. Position ``i`` of every tuple holds the value of ``attributes[i]``.
Relations are immutable: every algebra operation returns a new Relation and the old one
is simply dropped once nothing refers to it any more.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property
from typing import Any, Dict, Iterable, Sequence, Tuple

import pandas as pd

from treejoin.exceptions import UnknownAttributeError

Row = Tuple[Any, ...]


@dataclass(frozen=True)
class Relation:
    """Named set of tuples over an ordered attribute list.

    Attributes and tuples are normalised to tuples on construction so a Relation can
    be shared freely between tree nodes and threads.

    Example:
        >>> r = Relation("R1", ["A", "B"], [(1, 2), (1, 3)])
        >>> r.shape
        (2, 2)
    """

    name: str
    attributes: Tuple[str, ...] = ()
    tuples: Tuple[Row, ...] = ()

    def __post_init__(self):
        attributes = tuple(self.attributes)
        for attr in attributes:
            if not isinstance(attr, str):
                raise TypeError(f"Attribute names must be strings, got {type(attr).__name__}")
        if len(set(attributes)) != len(attributes):
            raise ValueError(f"Relation '{self.name}' has duplicate attribute names: {list(attributes)}")

        rows = tuple(tuple(row) for row in self.tuples)
        arity = len(attributes)
        for row in rows:
            if len(row) != arity:
                raise ValueError(
                    f"Tuple {row!r} has {len(row)} values, relation '{self.name}' "
                    f"expects {arity}"
                )

        object.__setattr__(self, "attributes", attributes)
        object.__setattr__(self, "tuples", rows)

    @cached_property
    def _positions(self) -> Dict[str, int]:
        return {attr: i for i, attr in enumerate(self.attributes)}

    @property
    def arity(self) -> int:
        """Number of attributes."""
        return len(self.attributes)

    @property
    def shape(self) -> Tuple[int, int]:
        """``(attribute count, tuple count)``."""
        return len(self.attributes), len(self.tuples)

    def __len__(self) -> int:
        return len(self.tuples)

    def __contains__(self, attribute: object) -> bool:
        return attribute in self._positions

    def index_of(self, attribute: str) -> int:
        """Position of ``attribute`` within every tuple.

        Raises:
            UnknownAttributeError: If the relation has no such attribute
        """
        try:
            return self._positions[attribute]
        except KeyError:
            raise UnknownAttributeError(attribute, self.name) from None

    def indices_of(self, attributes: Iterable[str]) -> Tuple[int, ...]:
        return tuple(self.index_of(attr) for attr in attributes)

    def with_tuples(self, rows: Iterable[Sequence[Any]]) -> "Relation":
        """Same name and attributes, different tuples."""
        return Relation(self.name, self.attributes, tuple(rows))

    def rename(self, name: str) -> "Relation":
        return Relation(name, self.attributes, self.tuples)

    # Serialization

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "attributes": list(self.attributes),
            "tuples": [list(row) for row in self.tuples],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Relation":
        if "name" not in data:
            raise ValueError("Relation dict must have 'name' field")
        if "attributes" not in data:
            raise ValueError(f"Relation dict '{data['name']}' must have 'attributes' field")
        return cls(
            name=data["name"],
            attributes=data["attributes"],
            tuples=data.get("tuples", []),
        )

    # pandas interop

    @classmethod
    def from_dataframe(cls, df: pd.DataFrame, name: str) -> "Relation":
        """Build a Relation from a DataFrame, columns becoming attributes.

        Values are converted to Python objects so that numpy scalars and plain
        Python values produce identical join keys.
        """
        columns = [str(c) for c in df.columns]
        rows = df.astype(object).itertuples(index=False, name=None)
        return cls(name, columns, rows)

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame(list(self.tuples), columns=list(self.attributes))

    def __repr__(self) -> str:
        return f"Relation(name={self.name!r}, attributes={list(self.attributes)}, rows={len(self.tuples)})"
