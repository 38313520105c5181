"""Scope traversal for JSDoc generation."""

from .cancellation import CancellationSignal, ConsoleProgress, NullProgress, Progress
from .orchestrator import HeaderOrchestrator
from .sources import (
    DEFAULT_FILE_GLOB,
    DocumentSource,
    FileEnumerator,
    FileSystemDocuments,
    FileSystemEnumerator,
    expand_braces,
)

__all__ = [
    'CancellationSignal',
    'ConsoleProgress',
    'DEFAULT_FILE_GLOB',
    'DocumentSource',
    'FileEnumerator',
    'FileSystemDocuments',
    'FileSystemEnumerator',
    'HeaderOrchestrator',
    'NullProgress',
    'Progress',
    'expand_braces',
]
