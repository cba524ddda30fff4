"""Shared pytest configuration and fixtures for treejoin tests."""

import pytest

from treejoin import JoinTree, JoinTreeNode, Relation


def pytest_addoption(parser):
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="Include tests marked @pytest.mark.slow (e.g. large random trees)",
    )


def pytest_configure(config):
    config.addinivalue_line("markers", "slow: marks tests as slow (skipped unless --run-slow)")


def pytest_collection_modifyitems(config, items):
    if config.getoption("--run-slow"):
        return
    skip = pytest.mark.skip(reason="slow test, pass --run-slow to include")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip)


@pytest.fixture
def r1() -> Relation:
    return Relation("R1", ["A", "B"], [(1, 2), (1, 3)])


@pytest.fixture
def r2() -> Relation:
    return Relation("R2", ["B", "C"], [(2, 10), (4, 20)])


@pytest.fixture
def employees() -> Relation:
    return Relation("employees", ["name", "dept", "salary"], [
        ("Alice", "eng", 90000),
        ("Bob", "eng", 120000),
        ("Charlie", "sales", 65000),
        ("Diana", "hr", 80000),
        ("Eve", "ops", 70000),
    ])


@pytest.fixture
def departments() -> Relation:
    return Relation("departments", ["dept", "floor"], [
        ("eng", 3),
        ("sales", 1),
        ("hr", 2),
        ("marketing", 4),
    ])


@pytest.fixture
def chain_tree() -> JoinTree:
    """A(x,y) - B(y,z) - C(z,w), rooted at A."""
    c = JoinTreeNode(Relation("C", ["z", "w"], [(9, 100)]))
    b = JoinTreeNode(Relation("B", ["y", "z"], [(2, 9), (5, 9)]), left=c)
    a = JoinTreeNode(Relation("A", ["x", "y"], [(1, 2)]), left=b)
    return JoinTree(a)


@pytest.fixture
def star_tree() -> JoinTree:
    """orders at the root with customers on the left and items on the right."""
    customers = JoinTreeNode(Relation("customers", ["cust", "city"], [
        ("c1", "Oslo"), ("c2", "Rome"), ("c3", "Lima"),
    ]))
    items = JoinTreeNode(Relation("items", ["order", "sku"], [
        (1, "pen"), (1, "ink"), (2, "pad"), (9, "cup"),
    ]))
    orders = JoinTreeNode(
        Relation("orders", ["order", "cust"], [(1, "c1"), (2, "c2"), (3, "c1")]),
        left=customers,
        right=items,
    )
    return JoinTree(orders)
