"""
Join tree representation.

A JoinTreeNode owns one replaceable Relation slot and up to two child nodes. The
reduction and join passes reassign ``node.relation`` in place; nodes themselves are
never shared between parents. A JoinTree wraps the root node together with optional
per-node selection predicates and an optional final projection list.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from treejoin.algebra.expressions import Expression
from treejoin.algebra.operators import Predicate, common_attributes
from treejoin.algebra.relation import Relation
from treejoin.exceptions import InvalidJoinTreeError, MissingJoinKeyError

SelectionKey = Union[str, "JoinTreeNode"]


@dataclass(eq=False)
class JoinTreeNode:
    """One relation in a join tree.

    Nodes compare and hash by identity, so they can be used as selection keys.
    ``label`` defaults to the relation's name and stays fixed while the relation
    slot is replaced by reduced versions.

    Example:
        >>> b = JoinTreeNode(Relation("B", ["y", "z"], [(2, 9)]))
        >>> a = JoinTreeNode(Relation("A", ["x", "y"], [(1, 2)]), left=b)
        >>> [n.label for n in a.walk()]
        ['A', 'B']
    """

    relation: Optional[Relation]
    left: Optional["JoinTreeNode"] = None
    right: Optional["JoinTreeNode"] = None
    label: Optional[str] = None

    def __post_init__(self):
        if self.relation is not None and not isinstance(self.relation, Relation):
            raise TypeError(f"Node relation must be a Relation, got {type(self.relation).__name__}")
        for side in ("left", "right"):
            child = getattr(self, side)
            if child is not None and not isinstance(child, JoinTreeNode):
                raise TypeError(f"Node {side} child must be a JoinTreeNode, got {type(child).__name__}")
        if self.label is None and self.relation is not None:
            self.label = self.relation.name

    @property
    def children(self) -> List["JoinTreeNode"]:
        """Existing children, left before right."""
        return [child for child in (self.left, self.right) if child is not None]

    @property
    def is_leaf(self) -> bool:
        return self.left is None and self.right is None

    def walk(self) -> Iterator["JoinTreeNode"]:
        """Pre-order traversal of this subtree, left before right."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def levels(self) -> List[List["JoinTreeNode"]]:
        """Nodes of this subtree grouped by distance from this node, shallowest first."""
        levels = []
        current = [self]
        while current:
            levels.append(current)
            current = [child for node in current for child in node.children]
        return levels

    def depth(self) -> int:
        """Height of this subtree; a leaf has depth 1."""
        return len(self.levels())

    def copy(self) -> "JoinTreeNode":
        """Copy the node structure. Relations are immutable and therefore shared."""
        clones: Dict[int, JoinTreeNode] = {}
        for node in reversed(list(self.walk())):
            clones[id(node)] = JoinTreeNode(
                relation=node.relation,
                left=clones[id(node.left)] if node.left is not None else None,
                right=clones[id(node.right)] if node.right is not None else None,
                label=node.label,
            )
        return clones[id(self)]

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "label": self.label,
            "relation": self.relation.to_dict() if self.relation is not None else None,
        }
        if self.left is not None:
            result["left"] = self.left.to_dict()
        if self.right is not None:
            result["right"] = self.right.to_dict()
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "JoinTreeNode":
        relation_data = data.get("relation")
        left = data.get("left")
        right = data.get("right")
        return cls(
            relation=Relation.from_dict(relation_data) if relation_data is not None else None,
            left=cls.from_dict(left) if left is not None else None,
            right=cls.from_dict(right) if right is not None else None,
            label=data.get("label"),
        )

    def __repr__(self) -> str:
        return f"JoinTreeNode(label={self.label!r}, children={len(self.children)})"


@dataclass
class JoinTree:
    """Root node plus optional selections and a final projection.

    Attributes:
        root: Root node of the tree
        selections: Predicate per node, keyed by node object or node label. Applied to
            the node's relation before any reduction.
        projections: Attribute names the final relation is narrowed to
    """

    root: Optional[JoinTreeNode]
    selections: Optional[Dict[SelectionKey, Predicate]] = None
    projections: Optional[List[str]] = field(default=None)

    def __post_init__(self):
        if self.projections is not None:
            if isinstance(self.projections, str) or not all(isinstance(p, str) for p in self.projections):
                raise InvalidJoinTreeError("Projections must be a sequence of attribute names")
            self.projections = list(self.projections)

    def nodes(self) -> List[JoinTreeNode]:
        """All nodes in pre-order; empty for a tree without root."""
        if self.root is None:
            return []
        return list(self.root.walk())

    def edges(self) -> List[Tuple[JoinTreeNode, JoinTreeNode]]:
        """``(parent, child)`` pairs in pre-order of the parent."""
        return [(node, child) for node in self.nodes() for child in node.children]

    def find(self, label: str) -> JoinTreeNode:
        """Look up the single node carrying ``label``.

        Raises:
            InvalidJoinTreeError: If no node or more than one node has this label
        """
        matches = [node for node in self.nodes() if node.label == label]
        if not matches:
            raise InvalidJoinTreeError(f"No join tree node labelled '{label}'")
        if len(matches) > 1:
            raise InvalidJoinTreeError(f"Join tree node label '{label}' is ambiguous ({len(matches)} nodes)")
        return matches[0]

    def resolve_selections(self) -> List[Tuple[JoinTreeNode, Predicate]]:
        """Pair every selection predicate with the node it applies to."""
        if not self.selections:
            return []
        members = {id(node) for node in self.nodes()}
        resolved = []
        for key, predicate in self.selections.items():
            if isinstance(key, JoinTreeNode):
                if id(key) not in members:
                    raise InvalidJoinTreeError(f"Selection refers to node '{key.label}' outside the tree")
                node = key
            else:
                node = self.find(key)
            resolved.append((node, predicate))
        return resolved

    def validate(self) -> None:
        """Check the tree's structural contract.

        A root with a relation, every node carrying a relation, no node reachable
        twice, and every parent/child pair sharing at least one attribute. The edge
        check looks at the two relations themselves, so an attribute reintroduced
        further down a subtree does not make up for a disjoint edge.

        Raises:
            InvalidJoinTreeError: On a missing root, missing relation or aliased node
            MissingJoinKeyError: On an edge without a shared attribute, naming the child
        """
        if self.root is None or self.root.relation is None:
            raise InvalidJoinTreeError("Join tree must have a root node with a relation")

        seen: set[int] = set()
        stack = [self.root]
        while stack:
            node = stack.pop()
            if id(node) in seen:
                raise InvalidJoinTreeError(f"Join tree node '{node.label}' is reachable more than once")
            seen.add(id(node))
            if node.relation is None:
                raise InvalidJoinTreeError(f"Join tree node '{node.label}' has no relation")
            stack.extend(node.children)

        for parent, child in self.edges():
            if not common_attributes(parent.relation, child.relation):
                raise MissingJoinKeyError(parent.relation.name, child.relation.name, node=child.label)

    def copy(self) -> "JoinTree":
        """Copy of the tree whose node slots can be reassigned independently.

        Selections keyed by node object are re-keyed to the matching copied node.
        """
        if self.root is None:
            return JoinTree(None, dict(self.selections) if self.selections else None, self.projections)
        root = self.root.copy()
        selections = None
        if self.selections is not None:
            mapping = {id(old): new for old, new in zip(self.root.walk(), root.walk())}
            selections = {
                (mapping.get(id(key), key) if isinstance(key, JoinTreeNode) else key): predicate
                for key, predicate in self.selections.items()
            }
        projections = list(self.projections) if self.projections is not None else None
        return JoinTree(root, selections, projections)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the tree. Only Expression selections can be serialized.

        Raises:
            TypeError: If a selection is a plain callable
        """
        result: Dict[str, Any] = {
            "root": self.root.to_dict() if self.root is not None else None,
        }
        if self.selections:
            selections = {}
            for node, predicate in self.resolve_selections():
                if not isinstance(predicate, Expression):
                    raise TypeError(
                        f"Selection on '{node.label}' is a {type(predicate).__name__}; "
                        "only Expression predicates can be serialized"
                    )
                selections[node.label] = predicate.to_dict()
            result["selections"] = selections
        if self.projections is not None:
            result["projections"] = list(self.projections)
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "JoinTree":
        root_data = data.get("root")
        if root_data is None:
            raise InvalidJoinTreeError("Serialized join tree must have a 'root'")
        selections = None
        if data.get("selections"):
            selections = {
                label: Expression.from_dict(pred)
                for label, pred in data["selections"].items()
            }
        return cls(
            root=JoinTreeNode.from_dict(root_data),
            selections=selections,
            projections=data.get("projections"),
        )
