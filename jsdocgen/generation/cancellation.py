"""Cooperative cancellation and progress reporting."""

import logging
import sys
from abc import ABC, abstractmethod
from typing import Optional, TextIO

logger = logging.getLogger(__name__)


class CancellationSignal:
    """Flag observed by the orchestrator after each suspension point.

    Setting the flag never interrupts work in progress; the orchestrator
    stops scheduling new work the next time it checks.
    """

    def __init__(self) -> None:
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        if not self._cancelled:
            logger.info("Cancellation requested")
        self._cancelled = True


class Progress(ABC):
    """Receives incremental progress of a generation request."""

    @abstractmethod
    def begin(self, total: int, title: str) -> None:
        """Announce the number of units (declarations or files) to process."""

    @abstractmethod
    def advance(self, message: str = "") -> None:
        """Report one processed unit."""


class NullProgress(Progress):
    """Discards progress reports."""

    def begin(self, total: int, title: str) -> None:
        pass

    def advance(self, message: str = "") -> None:
        pass


class ConsoleProgress(Progress):
    """Prints progress lines to stderr.

    Args:
        stream: Output stream; sys.stderr by default.
    """

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream
        self.total = 0
        self.done = 0

    def begin(self, total: int, title: str) -> None:
        self.total = total
        self.done = 0
        print(title, file=self.stream or sys.stderr)

    def advance(self, message: str = "") -> None:
        self.done += 1
        line = f"  [{self.done}/{self.total}]"
        if message:
            line = f"{line} {message}"
        print(line, file=self.stream or sys.stderr)
