"""
Predicate expressions for tuple selection.

Selections can be given as plain callables over a positional tuple, but those cannot be
inspected or serialized. This module provides a small expression AST instead: Column
references, Literal values, BinaryOp / UnaryOp for arithmetic, comparison and logic, and
IsIn for membership tests. ``compile_predicate`` binds an expression to a relation's
attribute list once and returns a positional predicate.
"""

from __future__ import annotations

import operator
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Sequence

from treejoin.exceptions import UnknownAttributeError

_COMPARE_OPS: dict[str, Any] = {
    ">": operator.gt,
    "<": operator.lt,
    ">=": operator.ge,
    "<=": operator.le,
    "==": operator.eq,
    "!=": operator.ne,
}

_ARITH_OPS: dict[str, Any] = {
    "+": operator.add,
    "-": operator.sub,
    "*": operator.mul,
    "/": operator.truediv,
    "%": operator.mod,
}


def _wrap(other: Any) -> "Expression":
    """Promote a plain Python value to a Literal when needed."""
    if isinstance(other, Expression):
        return other
    return Literal(value=other)


@dataclass(eq=False)
class Expression:
    """Base class for all expression types.

    Supports Python operators so you can write ``col("age") > 30`` and get
    back a ``BinaryOp`` AST node.
    """

    # Arithmetic
    def __add__(self, other: Any) -> "BinaryOp":
        return BinaryOp(op="+", left=self, right=_wrap(other))

    def __radd__(self, other: Any) -> "BinaryOp":
        return BinaryOp(op="+", left=_wrap(other), right=self)

    def __sub__(self, other: Any) -> "BinaryOp":
        return BinaryOp(op="-", left=self, right=_wrap(other))

    def __rsub__(self, other: Any) -> "BinaryOp":
        return BinaryOp(op="-", left=_wrap(other), right=self)

    def __mul__(self, other: Any) -> "BinaryOp":
        return BinaryOp(op="*", left=self, right=_wrap(other))

    def __rmul__(self, other: Any) -> "BinaryOp":
        return BinaryOp(op="*", left=_wrap(other), right=self)

    def __truediv__(self, other: Any) -> "BinaryOp":
        return BinaryOp(op="/", left=self, right=_wrap(other))

    def __mod__(self, other: Any) -> "BinaryOp":
        return BinaryOp(op="%", left=self, right=_wrap(other))

    def __neg__(self) -> "UnaryOp":
        return UnaryOp(op="neg", operand=self)

    # Comparison: returns BinaryOp nodes, NOT Python bools
    def __gt__(self, other: Any) -> "BinaryOp":
        return BinaryOp(op=">", left=self, right=_wrap(other))

    def __ge__(self, other: Any) -> "BinaryOp":
        return BinaryOp(op=">=", left=self, right=_wrap(other))

    def __lt__(self, other: Any) -> "BinaryOp":
        return BinaryOp(op="<", left=self, right=_wrap(other))

    def __le__(self, other: Any) -> "BinaryOp":
        return BinaryOp(op="<=", left=self, right=_wrap(other))

    def __eq__(self, other: Any) -> "BinaryOp":  # type: ignore[override]
        return BinaryOp(op="==", left=self, right=_wrap(other))

    def __ne__(self, other: Any) -> "BinaryOp":  # type: ignore[override]
        return BinaryOp(op="!=", left=self, right=_wrap(other))

    __hash__ = object.__hash__

    # Logical (bitwise operators used as logical, like pandas)
    def __and__(self, other: Any) -> "BinaryOp":
        return BinaryOp(op="and", left=self, right=_wrap(other))

    def __or__(self, other: Any) -> "BinaryOp":
        return BinaryOp(op="or", left=self, right=_wrap(other))

    def __invert__(self) -> "UnaryOp":
        return UnaryOp(op="not", operand=self)

    def isin(self, values: Sequence[Any]) -> "IsIn":
        return IsIn(operand=self, values=list(values))

    # Serialization
    def to_dict(self) -> Dict[str, Any]:
        raise NotImplementedError(
            f"to_dict not implemented for {self.__class__.__name__}"
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Expression":
        type_name = data.get("type")
        type_map: dict[str, type] = {
            "column": Column,
            "literal": Literal,
            "binary_op": BinaryOp,
            "unary_op": UnaryOp,
            "isin": IsIn,
        }
        target = type_map.get(type_name)
        if target is None:
            raise ValueError(f"Unknown expression type: {type_name!r}")
        return target._from_dict(data)  # type: ignore[attr-defined]


@dataclass(eq=False)
class Column(Expression):
    """Reference to a named attribute."""

    name: str = ""

    def __str__(self) -> str:
        return self.name

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "column", "name": self.name}

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> "Column":
        return cls(name=data["name"])


@dataclass(eq=False)
class Literal(Expression):
    """A constant / literal value."""

    value: Any = None

    def __str__(self) -> str:
        return repr(self.value)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "literal", "value": self.value}

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> "Literal":
        return cls(value=data["value"])


@dataclass(eq=False)
class BinaryOp(Expression):
    """Binary operation (arithmetic, comparison, or logical)."""

    op: str = ""
    left: Expression = field(default_factory=Literal)
    right: Expression = field(default_factory=Literal)

    def __post_init__(self):
        if self.op not in _COMPARE_OPS and self.op not in _ARITH_OPS and self.op not in ("and", "or"):
            raise ValueError(f"Unknown binary operator: {self.op!r}")

    def __str__(self) -> str:
        return f"({self.left} {self.op} {self.right})"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "binary_op",
            "op": self.op,
            "left": self.left.to_dict(),
            "right": self.right.to_dict(),
        }

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> "BinaryOp":
        return cls(
            op=data["op"],
            left=Expression.from_dict(data["left"]),
            right=Expression.from_dict(data["right"]),
        )


@dataclass(eq=False)
class UnaryOp(Expression):
    """Unary operation (negation, logical NOT)."""

    op: str = ""
    operand: Expression = field(default_factory=Literal)

    def __post_init__(self):
        if self.op not in ("neg", "not"):
            raise ValueError(f"Unknown unary operator: {self.op!r}")

    def __str__(self) -> str:
        return f"({self.op} {self.operand})"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "unary_op",
            "op": self.op,
            "operand": self.operand.to_dict(),
        }

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> "UnaryOp":
        return cls(
            op=data["op"],
            operand=Expression.from_dict(data["operand"]),
        )


@dataclass(eq=False)
class IsIn(Expression):
    """Membership of an expression's value in a fixed list of values."""

    operand: Expression = field(default_factory=Literal)
    values: List[Any] = field(default_factory=list)

    def __str__(self) -> str:
        return f"({self.operand} in {self.values!r})"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "isin",
            "operand": self.operand.to_dict(),
            "values": list(self.values),
        }

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> "IsIn":
        return cls(
            operand=Expression.from_dict(data["operand"]),
            values=list(data.get("values", [])),
        )


def col(name: str) -> Column:
    """Create a Column reference expression.

    Example:
        >>> c = col("age")
        >>> pred = c > 30           # BinaryOp(op='>', left=Column('age'), right=Literal(30))
    """
    return Column(name=name)


def lit(value: Any) -> Literal:
    return Literal(value=value)


def compile_predicate(
    expression: Expression, attributes: Sequence[str], relation: str = "<relation>"
) -> Callable[[tuple], bool]:
    """Bind an expression to an attribute list, returning a positional predicate.

    Column names are resolved to tuple positions once, up front.

    Args:
        expression: Predicate expression, typically a comparison or a logical combination
        attributes: Attribute names of the relation the predicate will be applied to
        relation: Relation name, only used in error messages

    Returns:
        Callable taking a tuple and returning a bool

    Raises:
        UnknownAttributeError: If the expression references an attribute not in ``attributes``
    """
    positions = {attr: i for i, attr in enumerate(attributes)}
    evaluate = _compile(expression, positions, relation)
    return lambda row: bool(evaluate(row))


def _compile(expr: Expression, positions: Dict[str, int], relation: str) -> Callable[[tuple], Any]:
    match expr:
        case Column(name=name):
            if name not in positions:
                raise UnknownAttributeError(name, relation)
            index = positions[name]
            return lambda row: row[index]

        case Literal(value=value):
            return lambda row: value

        case BinaryOp(op="and", left=left, right=right):
            lhs = _compile(left, positions, relation)
            rhs = _compile(right, positions, relation)
            return lambda row: lhs(row) and rhs(row)

        case BinaryOp(op="or", left=left, right=right):
            lhs = _compile(left, positions, relation)
            rhs = _compile(right, positions, relation)
            return lambda row: lhs(row) or rhs(row)

        case BinaryOp(op=op, left=left, right=right):
            func = _COMPARE_OPS.get(op) or _ARITH_OPS[op]
            lhs = _compile(left, positions, relation)
            rhs = _compile(right, positions, relation)
            return lambda row: func(lhs(row), rhs(row))

        case UnaryOp(op="neg", operand=operand):
            inner = _compile(operand, positions, relation)
            return lambda row: -inner(row)

        case UnaryOp(op="not", operand=operand):
            inner = _compile(operand, positions, relation)
            return lambda row: not inner(row)

        case IsIn(operand=operand, values=values):
            inner = _compile(operand, positions, relation)
            members = list(values)
            return lambda row: inner(row) in members

        case _:
            raise TypeError(f"Unknown expression type: {type(expr).__name__}")
