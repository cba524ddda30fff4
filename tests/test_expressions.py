"""Tests for predicate expressions and their compilation to positional predicates."""

import pytest

from treejoin import UnknownAttributeError
from treejoin.algebra.expressions import (
    BinaryOp,
    Column,
    Expression,
    IsIn,
    Literal,
    UnaryOp,
    col,
    compile_predicate,
    lit,
)

ATTRS = ["name", "age", "dept"]
ROW = ("Alice", 30, "eng")


def _eval(expression: Expression, row=ROW) -> bool:
    return compile_predicate(expression, ATTRS)(row)


class TestConstruction:
    def test_comparison_builds_ast(self):
        pred = col("age") > 30
        assert isinstance(pred, BinaryOp)
        assert pred.op == ">"
        assert isinstance(pred.left, Column)
        assert isinstance(pred.right, Literal)
        assert pred.right.value == 30

    def test_str(self):
        assert str((col("age") + 1) >= lit(5)) == "((age + 1) >= 5)"

    def test_unknown_binary_operator(self):
        with pytest.raises(ValueError, match="Unknown binary operator"):
            BinaryOp(op="**", left=col("a"), right=lit(2))

    def test_unknown_unary_operator(self):
        with pytest.raises(ValueError, match="Unknown unary operator"):
            UnaryOp(op="abs", operand=col("a"))

    def test_expressions_are_hashable(self):
        assert len({col("a"), col("a")}) == 2


class TestEvaluation:
    @pytest.mark.parametrize(
        "expression, expected",
        [
            (col("age") > 29, True),
            (col("age") < 30, False),
            (col("age") >= 30, True),
            (col("age") <= 29, False),
            (col("dept") == "eng", True),
            (col("dept") != "eng", False),
            ((col("age") * 2) == 60, True),
            ((col("age") - 10) / 4 == 5, True),
            ((col("age") % 7) == 2, True),
            ((100 - col("age")) == 70, True),
            (-col("age") < 0, True),
        ],
    )
    def test_operators(self, expression, expected):
        assert _eval(expression) is expected

    def test_and_or_not(self):
        assert _eval((col("age") > 20) & (col("dept") == "eng"))
        assert not _eval((col("age") > 40) & (col("dept") == "eng"))
        assert _eval((col("age") > 40) | (col("dept") == "eng"))
        assert _eval(~(col("age") > 40))

    def test_isin(self):
        assert _eval(col("dept").isin(["eng", "hr"]))
        assert not _eval(col("name").isin(["Bob"]))

    def test_unknown_column(self):
        with pytest.raises(UnknownAttributeError) as info:
            compile_predicate(col("salary") > 1, ATTRS, "employees")
        assert info.value.relation == "employees"

    def test_positions_resolved_per_attribute_list(self):
        pred = col("x") == 1
        assert compile_predicate(pred, ["x", "y"])((1, 2))
        assert not compile_predicate(pred, ["y", "x"])((1, 2))


class TestSerialization:
    def test_to_dict(self):
        pred = (col("age") > 30) & ~col("dept").isin(["hr"])
        assert pred.to_dict() == {
            "type": "binary_op",
            "op": "and",
            "left": {
                "type": "binary_op",
                "op": ">",
                "left": {"type": "column", "name": "age"},
                "right": {"type": "literal", "value": 30},
            },
            "right": {
                "type": "unary_op",
                "op": "not",
                "operand": {
                    "type": "isin",
                    "operand": {"type": "column", "name": "dept"},
                    "values": ["hr"],
                },
            },
        }

    def test_round_trip_evaluates_identically(self):
        pred = (col("age") > 30) | col("dept").isin(["eng"])
        restored = Expression.from_dict(pred.to_dict())
        assert isinstance(restored, BinaryOp)
        assert isinstance(restored.right, IsIn)
        for row in [ROW, ("Bob", 45, "hr"), ("Eve", 20, "ops")]:
            assert _eval(restored, row) == _eval(pred, row)

    def test_unknown_type(self):
        with pytest.raises(ValueError, match="Unknown expression type"):
            Expression.from_dict({"type": "function_call"})
