"""
Processing engine.

Runs the Yannakakis pipeline over a join tree:
- Reducer: bottom-up and top-down semi-join passes (the full reducer)
- Joiner: post-order hash-join materialization of the reduced tree
- Processor: orchestration of selection, reduction, join and projection
- ProcessorConfig: strict mode, optional reduction, parallelism, copy-on-process
- Observers and sinks: diagnostics and result persistence at the boundary
"""

from .config import ProcessorConfig
from .reducer import Reducer
from .joiner import Joiner
from .processor import Processor, ProcessResult, process
from .observer import Observer, NullObserver, LoggingObserver, RecordingObserver, PHASES
from .sinks import ResultSink, MemorySink, JsonFileSink, CsvFileSink

__all__ = [
    "ProcessorConfig",
    "Reducer",
    "Joiner",
    "Processor",
    "ProcessResult",
    "process",
    "Observer",
    "NullObserver",
    "LoggingObserver",
    "RecordingObserver",
    "PHASES",
    "ResultSink",
    "MemorySink",
    "JsonFileSink",
    "CsvFileSink",
]
