"""
Exception classes for treejoin.

These exceptions are used throughout the treejoin package to signal structural problems
with a join tree and failures while reducing, joining or projecting relations.
"""

from typing import Optional


class TreeJoinError(Exception):
    """Base class for all treejoin errors."""
    pass


class InvalidJoinTreeError(TreeJoinError):
    """Raised when a join tree is structurally unusable.

    This error aborts processing before any phase runs. Common causes:
        - Missing root node or a root without a relation
        - A node reachable from two parents (aliasing) or a cycle
        - A selection that refers to a node label not present in the tree
        - A serialized tree without a root
    """
    pass


class MissingJoinKeyError(TreeJoinError):
    """Raised when two relations that must be joined share no attribute.

    A join tree is only valid if every parent and child share at least one attribute
    name. Joining a disjoint pair would silently degrade to a cartesian product, so
    the pipeline fails instead and reports which node broke the contract.
    """

    def __init__(self, left: str, right: str, node: Optional[str] = None):
        self.left = left
        self.right = right
        self.node = node
        message = f"Relations '{left}' and '{right}' share no attribute"
        if node is not None:
            message += f" (at join tree node '{node}')"
        super().__init__(message)


class UnknownAttributeError(TreeJoinError):
    """Raised when an attribute name does not resolve against a relation.

    Projection only raises this in strict mode; otherwise unresolved names are
    dropped from the output.
    """

    def __init__(self, attribute: str, relation: str):
        self.attribute = attribute
        self.relation = relation
        super().__init__(f"Unknown attribute '{attribute}' in relation '{relation}'")


__all__ = [
    "TreeJoinError",
    "InvalidJoinTreeError",
    "MissingJoinKeyError",
    "UnknownAttributeError",
]
