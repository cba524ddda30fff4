"""
Join algebra module.

This module defines the data model and relational primitives the engine works on.

Key components:
- Relation: Named, immutable set of fixed-arity tuples over ordered attributes
- JoinTreeNode / JoinTree: Binary join tree with per-node selections and a final projection
- Primitives: common_attributes, semi_join, equi_join, select, project
- Expression AST: Column, Literal, BinaryOp, UnaryOp, IsIn for serializable selections
"""

from .relation import Relation
from .join_tree import JoinTree, JoinTreeNode
from .operators import (
    common_attributes,
    semi_join,
    equi_join,
    select,
    project,
)
from .expressions import (
    Expression,
    Column,
    Literal,
    BinaryOp,
    UnaryOp,
    IsIn,
    col,
    lit,
    compile_predicate,
)

__all__ = [
    "Relation",
    "JoinTree",
    "JoinTreeNode",
    "common_attributes",
    "semi_join",
    "equi_join",
    "select",
    "project",
    "Expression",
    "Column",
    "Literal",
    "BinaryOp",
    "UnaryOp",
    "IsIn",
    "col",
    "lit",
    "compile_predicate",
]
