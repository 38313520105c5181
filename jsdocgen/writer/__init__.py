"""Writers and insertion sinks for generated headers."""

from .file_writer import FileWriter
from .sinks import BatchSink, FileEditBatch, FileInsertionSink, InteractiveSink, StdoutSink

__all__ = [
    'BatchSink',
    'FileEditBatch',
    'FileInsertionSink',
    'FileWriter',
    'InteractiveSink',
    'StdoutSink',
]
