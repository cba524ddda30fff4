"""
Diagnostics observers.

The engine reports phase boundaries and per-node row counts to an observer instead of
logging itself. Observers are purely informational: they never influence control flow
or results. LoggingObserver forwards events to the standard logging module,
RecordingObserver keeps them for later inspection.
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, List, Optional, Protocol, Tuple

SELECTION = "selection"
BOTTOM_UP = "bottom_up"
TOP_DOWN = "top_down"
JOIN = "join"
PROJECTION = "projection"

PHASES = (SELECTION, BOTTOM_UP, TOP_DOWN, JOIN, PROJECTION)


class Observer(Protocol):
    """Protocol for receivers of processing diagnostics."""

    def phase_started(self, phase: str) -> None:
        ...

    def phase_finished(self, phase: str, relation_count: int, tuple_count: int) -> None:
        """Called when a phase completes.

        Args:
            phase: One of the PHASES names
            relation_count: Number of relations in the tree (1 after joining)
            tuple_count: Total tuples across those relations
        """
        ...

    def relation_reduced(self, label: str, before: int, after: int) -> None:
        """Called whenever a node's relation is replaced during selection or reduction."""
        ...


class NullObserver:
    """Observer that ignores every event."""

    def phase_started(self, phase: str) -> None:
        pass

    def phase_finished(self, phase: str, relation_count: int, tuple_count: int) -> None:
        pass

    def relation_reduced(self, label: str, before: int, after: int) -> None:
        pass


class LoggingObserver:
    """Observer writing every event to a logger."""

    def __init__(self, logger: Optional[logging.Logger] = None, level: int = logging.DEBUG):
        self.logger = logger or logging.getLogger(__name__)
        self.level = level

    def phase_started(self, phase: str) -> None:
        self.logger.log(self.level, "Starting %s phase", phase)

    def phase_finished(self, phase: str, relation_count: int, tuple_count: int) -> None:
        self.logger.log(
            self.level,
            "Finished %s phase: %d relation(s), %d tuple(s)",
            phase, relation_count, tuple_count,
        )

    def relation_reduced(self, label: str, before: int, after: int) -> None:
        if before != after:
            self.logger.log(self.level, "Reduced '%s' from %d to %d tuple(s)", label, before, after)


@dataclass
class RecordingObserver:
    """Observer keeping every event as a tuple, in arrival order.

    Events look like ``("phase_started", phase)``,
    ``("phase_finished", phase, relation_count, tuple_count)`` and
    ``("relation_reduced", label, before, after)``.
    """

    events: List[Tuple[Any, ...]] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def _record(self, *event: Any) -> None:
        with self._lock:
            self.events.append(event)

    def phase_started(self, phase: str) -> None:
        self._record("phase_started", phase)

    def phase_finished(self, phase: str, relation_count: int, tuple_count: int) -> None:
        self._record("phase_finished", phase, relation_count, tuple_count)

    def relation_reduced(self, label: str, before: int, after: int) -> None:
        self._record("relation_reduced", label, before, after)

    def phases(self) -> List[str]:
        """Names of the phases that finished, in order."""
        return [event[1] for event in self.events if event[0] == "phase_finished"]

    def reductions(self, label: str) -> List[Tuple[int, int]]:
        return [(e[2], e[3]) for e in self.events if e[0] == "relation_reduced" and e[1] == label]
