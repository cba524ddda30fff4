"""
treejoin - Acyclic multi-way equi-joins with the Yannakakis algorithm.

This package evaluates natural joins over a join tree in three phases: a bottom-up and a
top-down semi-join pass that fully reduce every relation, followed by a single
bottom-up materializing hash join. Total work is bounded by input plus output size;
no intermediate result ever grows beyond what the final result needs.

Usage:
    >>> import treejoin as tj
    >>> a = tj.Relation("A", ["x", "y"], [(1, 2)])
    >>> b = tj.Relation("B", ["y", "z"], [(2, 9), (5, 9)])
    >>> tree = tj.JoinTree(tj.JoinTreeNode(a, left=tj.JoinTreeNode(b)))
    >>> tj.process(tree).tuples
    ((1, 2, 9),)

Key components:
- Relation: Immutable named set of tuples over ordered attributes
- JoinTree / JoinTreeNode: The join tree with optional selections and projection
- Processor: Selection -> reduction -> join -> projection pipeline
- Observers and sinks: Diagnostics and result persistence at the boundary
"""

from .algebra import (
    Relation,
    JoinTree,
    JoinTreeNode,
    common_attributes,
    semi_join,
    equi_join,
    select,
    project,
    col,
    lit,
)
from .engine import (
    Processor,
    ProcessorConfig,
    ProcessResult,
    process,
    LoggingObserver,
    RecordingObserver,
    MemorySink,
    JsonFileSink,
    CsvFileSink,
)
from .log import configure_logging
from .exceptions import *

# Version
__version__ = "0.1.0"

__all__ = [
    'Relation',
    'JoinTree',
    'JoinTreeNode',
    'common_attributes',
    'semi_join',
    'equi_join',
    'select',
    'project',
    'col',
    'lit',
    'Processor',
    'ProcessorConfig',
    'ProcessResult',
    'process',
    'LoggingObserver',
    'RecordingObserver',
    'MemorySink',
    'JsonFileSink',
    'CsvFileSink',
    'configure_logging',
    'TreeJoinError',
    'InvalidJoinTreeError',
    'MissingJoinKeyError',
    'UnknownAttributeError',
]
