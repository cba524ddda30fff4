"""
Join tree visualization utilities.

Provides text-based rendering of join trees. Each node is shown with its label,
attributes and current row count, so printing a tree before and after reduction shows
how far the semi-join passes shrank every relation.
"""

from typing import List, Union

from ..algebra.join_tree import JoinTree, JoinTreeNode


def visualize(tree: Union[JoinTree, JoinTreeNode]) -> str:
    """Generate a text-based tree visualization.

    Args:
        tree: A join tree or a single subtree root

    Returns:
        A string containing the tree-shaped visualization

    Example:
        >>> print(visualize(tree))
        A(x, y) [1 tuple(s)]
        └── B(y, z) [2 tuple(s)]
            └── C(z, w) [1 tuple(s)]
    """
    if isinstance(tree, JoinTree):
        root = tree.root
    elif isinstance(tree, JoinTreeNode):
        root = tree
    else:
        raise TypeError(f"Expected JoinTree or JoinTreeNode, got {type(tree)}")

    if root is None:
        return "<empty join tree>"

    lines: List[str] = [_format_node(root)]
    stack = [(child, "", i == len(root.children) - 1) for i, child in reversed(list(enumerate(root.children)))]
    while stack:
        node, prefix, is_last = stack.pop()
        connector = "└── " if is_last else "├── "
        lines.append(prefix + connector + _format_node(node))

        # Extension for children depends on whether this is the last child
        child_prefix = prefix + ("    " if is_last else "│   ")
        children = node.children
        for i in reversed(range(len(children))):
            stack.append((children[i], child_prefix, i == len(children) - 1))

    return "\n".join(lines)


def _format_node(node: JoinTreeNode) -> str:
    if node.relation is None:
        return f"{node.label}(?)"
    attrs = ", ".join(node.relation.attributes)
    label = node.label if node.label == node.relation.name else f"{node.label}={node.relation.name}"
    return f"{label}({attrs}) [{len(node.relation)} tuple(s)]"
