"""
Unit tests for the join tree model.

These tests verify:
1. Node construction, labels and traversal order
2. Structural validation (missing root, aliasing, disjoint edges)
3. Selection resolution by label and by node
4. copy() isolation and to_dict()/from_dict()
"""

import pytest

from treejoin import (
    InvalidJoinTreeError,
    JoinTree,
    JoinTreeNode,
    MissingJoinKeyError,
    Relation,
    col,
)


def _node(name: str, attrs, rows=(), **kwargs) -> JoinTreeNode:
    return JoinTreeNode(Relation(name, attrs, rows), **kwargs)


class TestJoinTreeNode:
    def test_label_defaults_to_relation_name(self):
        assert _node("R", ["a"]).label == "R"

    def test_explicit_label(self):
        assert _node("R", ["a"], label="r_alias").label == "r_alias"

    def test_children_and_leaf(self):
        leaf = _node("L", ["a"])
        parent = _node("P", ["a"], right=leaf)
        assert parent.children == [leaf]
        assert leaf.is_leaf
        assert not parent.is_leaf

    def test_non_node_child_fails(self):
        with pytest.raises(TypeError, match="must be a JoinTreeNode"):
            JoinTreeNode(Relation("R", ["a"]), left=Relation("S", ["a"]))  # type: ignore[arg-type]

    def test_non_relation_fails(self):
        with pytest.raises(TypeError, match="must be a Relation"):
            JoinTreeNode({"name": "R"})  # type: ignore[arg-type]

    def test_walk_is_preorder(self, star_tree: JoinTree):
        assert [n.label for n in star_tree.root.walk()] == ["orders", "customers", "items"]

    def test_levels_and_depth(self, chain_tree: JoinTree):
        assert [[n.label for n in level] for level in chain_tree.root.levels()] == [["A"], ["B"], ["C"]]
        assert chain_tree.root.depth() == 3

    def test_deep_chain_traversal(self):
        root = _node("N0", ["k"])
        node = root
        for i in range(1, 3000):
            node.left = _node(f"N{i}", ["k"])
            node = node.left
        assert len(list(root.walk())) == 3000
        assert root.depth() == 3000

    def test_nodes_compare_by_identity(self):
        assert _node("R", ["a"]) != _node("R", ["a"])


class TestValidation:
    def test_missing_root(self):
        with pytest.raises(InvalidJoinTreeError):
            JoinTree(None).validate()

    def test_root_without_relation(self):
        with pytest.raises(InvalidJoinTreeError):
            JoinTree(JoinTreeNode(None)).validate()

    def test_child_without_relation(self):
        tree = JoinTree(_node("R", ["a"], left=JoinTreeNode(None, label="ghost")))
        with pytest.raises(InvalidJoinTreeError, match="ghost"):
            tree.validate()

    def test_aliased_node(self):
        shared = _node("S", ["a"])
        tree = JoinTree(_node("R", ["a"], left=shared, right=shared))
        with pytest.raises(InvalidJoinTreeError, match="reachable more than once"):
            tree.validate()

    def test_disjoint_edge(self):
        tree = JoinTree(_node("R", ["a"], left=_node("S", ["b"])))
        with pytest.raises(MissingJoinKeyError) as info:
            tree.validate()
        assert info.value.node == "S"

    def test_disjoint_edge_not_hidden_by_grandchild(self):
        # G shares "a" with P, but the P-C edge itself has no common attribute
        grandchild = _node("G", ["a", "b"], [(1, 2)])
        tree = JoinTree(_node("P", ["a"], [(1,)], left=_node("C", ["b"], [(2,)], left=grandchild)))
        with pytest.raises(MissingJoinKeyError) as info:
            tree.validate()
        assert info.value.node == "C"

    def test_connected_tree_passes(self, chain_tree: JoinTree):
        chain_tree.validate()

    def test_projections_must_be_names(self, chain_tree: JoinTree):
        with pytest.raises(InvalidJoinTreeError):
            JoinTree(chain_tree.root, projections="x")  # type: ignore[arg-type]
        with pytest.raises(InvalidJoinTreeError):
            JoinTree(chain_tree.root, projections=["x", 1])  # type: ignore[list-item]


class TestLookup:
    def test_find(self, chain_tree: JoinTree):
        assert chain_tree.find("B").relation.attributes == ("y", "z")

    def test_find_missing(self, chain_tree: JoinTree):
        with pytest.raises(InvalidJoinTreeError, match="No join tree node"):
            chain_tree.find("Z")

    def test_find_ambiguous(self):
        tree = JoinTree(_node("R", ["a"], left=_node("R", ["a"])))
        with pytest.raises(InvalidJoinTreeError, match="ambiguous"):
            tree.find("R")

    def test_edges(self, star_tree: JoinTree):
        assert [(p.label, c.label) for p, c in star_tree.edges()] == [
            ("orders", "customers"),
            ("orders", "items"),
        ]

    def test_resolve_selections_by_label_and_node(self, chain_tree: JoinTree):
        b = chain_tree.find("B")
        pred_a = col("x") == 1
        pred_b = col("z") == 9
        tree = JoinTree(chain_tree.root, selections={"A": pred_a, b: pred_b})
        resolved = tree.resolve_selections()
        assert resolved == [(chain_tree.root, pred_a), (b, pred_b)]

    def test_resolve_selection_outside_tree(self, chain_tree: JoinTree):
        stranger = _node("X", ["x"])
        tree = JoinTree(chain_tree.root, selections={stranger: col("x") == 1})
        with pytest.raises(InvalidJoinTreeError, match="outside the tree"):
            tree.resolve_selections()


class TestCopy:
    def test_slots_are_independent(self, chain_tree: JoinTree):
        copied = chain_tree.copy()
        copied.find("B").relation = Relation("B", ["y", "z"])
        assert len(chain_tree.find("B").relation) == 2

    def test_relations_are_shared(self, chain_tree: JoinTree):
        copied = chain_tree.copy()
        assert copied.find("C").relation is chain_tree.find("C").relation
        assert copied.find("C") is not chain_tree.find("C")

    def test_node_keyed_selections_follow_copy(self, chain_tree: JoinTree):
        b = chain_tree.find("B")
        tree = JoinTree(chain_tree.root, selections={b: col("y") == 2}, projections=["x"])
        copied = tree.copy()
        [(node, _)] = copied.resolve_selections()
        assert node is copied.find("B")
        assert copied.projections == ["x"]
        assert copied.projections is not tree.projections


class TestSerialization:
    def test_round_trip(self, star_tree: JoinTree):
        tree = JoinTree(star_tree.root, selections={"items": col("sku") != "cup"}, projections=["order", "sku"])
        restored = JoinTree.from_dict(tree.to_dict())
        assert [n.label for n in restored.nodes()] == ["orders", "customers", "items"]
        assert [n.relation for n in restored.nodes()] == [n.relation for n in tree.nodes()]
        assert restored.projections == ["order", "sku"]
        assert set(restored.selections) == {"items"}

    def test_callable_selection_not_serializable(self, chain_tree: JoinTree):
        tree = JoinTree(chain_tree.root, selections={"A": lambda row: True})
        with pytest.raises(TypeError, match="only Expression predicates"):
            tree.to_dict()

    def test_from_dict_without_root(self):
        with pytest.raises(InvalidJoinTreeError):
            JoinTree.from_dict({"projections": ["a"]})
