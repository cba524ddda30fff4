"""
Demo: evaluating a three-way join with treejoin.

This script walks through the pipeline on a small orders database:
1. Build relations from pandas DataFrames and arrange them in a join tree
2. Show the tree before and after the two semi-join passes
3. Process the tree with a selection and a projection, logging every phase
4. Write the result to a CSV file

Usage:
    python examples/yannakakis_demo.py [output.csv]
"""

import sys

import pandas as pd

import treejoin as tj
from treejoin.utils import visualize


def build_tree() -> tj.JoinTree:
    """orders at the root, customers and items as children."""
    customers = tj.Relation.from_dataframe(
        pd.DataFrame({
            "cust": ["c1", "c2", "c3", "c4"],
            "city": ["Oslo", "Rome", "Lima", "Oslo"],
        }),
        name="customers",
    )
    orders = tj.Relation.from_dataframe(
        pd.DataFrame({
            "order": [1, 2, 3, 4],
            "cust": ["c1", "c2", "c1", "c9"],
        }),
        name="orders",
    )
    items = tj.Relation.from_dataframe(
        pd.DataFrame({
            "order": [1, 1, 2, 3, 7],
            "sku": ["pen", "ink", "pad", "cup", "mug"],
        }),
        name="items",
    )
    root = tj.JoinTreeNode(
        orders,
        left=tj.JoinTreeNode(customers),
        right=tj.JoinTreeNode(items),
    )
    return tj.JoinTree(
        root,
        selections={"customers": tj.col("city") == "Oslo"},
        projections=["order", "cust", "sku"],
    )


def main() -> None:
    tj.configure_logging("DEBUG")
    tree = build_tree()

    print("Join tree:")
    print(visualize(tree))

    reduced = tj.Processor().reduce(tree)
    print("\nAfter selection and semi-join reduction:")
    print(visualize(reduced))

    sink = tj.CsvFileSink(sys.argv[1]) if len(sys.argv) > 1 else None
    processor = tj.Processor(observer=tj.LoggingObserver(), sink=sink)
    result = processor.process(tree)

    print(f"\nResult: {result.attribute_count} attribute(s), {result.tuple_count} tuple(s)")
    print(result.relation.to_dataframe().to_string(index=False))


if __name__ == "__main__":
    main()
