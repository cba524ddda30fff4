"""
Join tree and relation serialization utilities.

Provides JSON serialization and deserialization for join trees and relations. The
serialized tree format includes versioning for forward compatibility.
"""

import json
from typing import Any, Dict

from ..algebra.join_tree import JoinTree
from ..algebra.relation import Relation
from ..exceptions import InvalidJoinTreeError


# Current serialization format version
SERIALIZATION_VERSION = "1.0"


def serialize(tree: JoinTree) -> Dict[str, Any]:
    """Serialize a join tree to a JSON-serializable dictionary.

    The serialized format includes:
    - version: Format version string for forward compatibility
    - tree: The root node, selections and projections as nested dictionaries

    Args:
        tree: The join tree to serialize

    Returns:
        Dictionary that can be serialized to JSON

    Raises:
        TypeError: If tree is not a JoinTree, or carries a non-Expression selection

    Example:
        >>> tree = JoinTree(JoinTreeNode(Relation("R", ["a"], [(1,)])))
        >>> data = serialize(tree)
        >>> assert data["version"] == "1.0"
    """
    if not isinstance(tree, JoinTree):
        raise TypeError(f"Expected JoinTree, got {type(tree)}")

    return {
        "version": SERIALIZATION_VERSION,
        "tree": tree.to_dict(),
    }


def deserialize(data: Dict[str, Any]) -> JoinTree:
    """Deserialize a join tree from a dictionary.

    Raises:
        TypeError: If data is not a dictionary
        ValueError: If data is missing required fields or has an unsupported version
        InvalidJoinTreeError: If the tree has no root
    """
    if not isinstance(data, dict):
        raise TypeError(f"Expected dict, got {type(data)}")

    if "version" not in data:
        raise ValueError("Serialized join tree must have 'version' field")
    if "tree" not in data:
        raise ValueError("Serialized join tree must have 'tree' field")

    version = data["version"]
    if version != SERIALIZATION_VERSION:
        raise ValueError(
            f"Unsupported serialization version: {version}. "
            f"Expected {SERIALIZATION_VERSION}"
        )

    try:
        return JoinTree.from_dict(data["tree"])
    except InvalidJoinTreeError:
        raise
    except KeyError as e:
        raise ValueError(f"Missing required field in join tree: {e}") from e


def to_json(tree: JoinTree, **kwargs) -> str:
    """Serialize a join tree to a JSON string.

    Args:
        tree: The join tree to serialize
        **kwargs: Additional arguments to pass to json.dumps (e.g., indent=2)
    """
    return json.dumps(serialize(tree), **kwargs)


def from_json(json_str: str) -> JoinTree:
    """Deserialize a join tree from a JSON string.

    Raises:
        ValueError: If JSON is invalid or the tree structure is invalid
    """
    if not isinstance(json_str, str):
        raise TypeError(f"Expected str, got {type(json_str)}")

    try:
        data = json.loads(json_str)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON: {e}") from e

    return deserialize(data)


def relation_to_json(relation: Relation, **kwargs) -> str:
    """Serialize a relation as ``{name, attributes, tuples}``."""
    return json.dumps(relation.to_dict(), **kwargs)


def relation_from_json(json_str: str) -> Relation:
    try:
        data = json.loads(json_str)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object, got {type(data).__name__}")
    return Relation.from_dict(data)
