"""
Result sinks.

The ResultSink protocol defines the contract for persisting or displaying the final
relation of a processing run. The engine itself never writes files; a sink is handed
the finished relation once the whole pipeline has succeeded.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, Optional, Protocol, Union

from treejoin.algebra.relation import Relation

logger = logging.getLogger(__name__)


class ResultSink(Protocol):
    """Protocol for receivers of a final join result."""

    def write(self, relation: Relation) -> None:
        """Persist or display ``relation``."""
        ...


class MemorySink:
    """Keeps every written relation in ``relations``."""

    def __init__(self) -> None:
        self.relations: List[Relation] = []

    def write(self, relation: Relation) -> None:
        self.relations.append(relation)

    @property
    def last(self) -> Optional[Relation]:
        return self.relations[-1] if self.relations else None


class JsonFileSink:
    """Writes the relation as ``{name, attributes, tuples}`` JSON, replacing the file."""

    def __init__(self, path: Union[str, Path], indent: Optional[int] = None):
        self.path = Path(path)
        self.indent = indent

    def write(self, relation: Relation) -> None:
        with open(self.path, "w") as f:
            json.dump(relation.to_dict(), f, indent=self.indent)
        logger.info(f"Wrote {len(relation)} tuple(s) of '{relation.name}' to {self.path}")


class CsvFileSink:
    """Writes the relation as CSV with the attribute names as header row."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def write(self, relation: Relation) -> None:
        relation.to_dataframe().to_csv(self.path, index=False)
        logger.info(f"Wrote {len(relation)} tuple(s) of '{relation.name}' to {self.path}")
