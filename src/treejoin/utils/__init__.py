"""
Utility functions for treejoin.

This module provides utilities for working with join trees:
- visualization: Text-based tree rendering of join trees
- serialization: JSON serialization/deserialization of join trees and relations
"""

from .visualization import visualize
from .serialization import (
    serialize,
    deserialize,
    to_json,
    from_json,
    relation_to_json,
    relation_from_json,
    SERIALIZATION_VERSION
)

__all__ = [
    'visualize',
    'serialize',
    'deserialize',
    'to_json',
    'from_json',
    'relation_to_json',
    'relation_from_json',
    'SERIALIZATION_VERSION'
]
