"""Insertion sinks: where generated headers go.

Two shapes exist. An interactive sink inserts one header immediately and
reports success. A batch sink accumulates insertions for many files and
applies them all at once, or not at all.
"""

import logging
import sys
from abc import ABC, abstractmethod
from typing import Dict, Optional, TextIO

from ..errors import InsertionError
from ..models.edit_batch import EditBatch, apply_insertions
from .file_writer import FileWriter

logger = logging.getLogger(__name__)


class InteractiveSink(ABC):
    """Inserts a single header into one document."""

    supports_snippets = False

    @abstractmethod
    async def insert(self, text: str, offset: int) -> bool:
        """
        Insert ``text`` at ``offset`` of the document.

        Parameters
        ----------
        text : str
            Rendered header, including the trailing newline and indentation
        offset : int
            Offset in the document text the header was built from

        Returns
        -------
        bool
            True if the text was inserted
        """
        pass


class BatchSink(ABC):
    """Accumulates insertions across files and applies them together."""

    @abstractmethod
    def accumulate(self, file: str, offset: int, text: str) -> None:
        pass

    @abstractmethod
    async def apply_all(self) -> bool:
        """Apply every accumulated insertion; False leaves all files untouched."""
        pass


class FileInsertionSink(InteractiveSink):
    """Inserts a header straight into a file on disk.

    Args:
        filepath: File to modify.
        writer: Atomic writer; one rooted at the current directory by default.
    """

    def __init__(self, filepath: str, writer: Optional[FileWriter] = None):
        self.filepath = filepath
        self.writer = writer or FileWriter()

    async def insert(self, text: str, offset: int) -> bool:
        try:
            content = self.writer.read(self.filepath)
            if not 0 <= offset <= len(content):
                raise InsertionError(f"Offset {offset} is outside '{self.filepath}'")
            self.writer.write(self.filepath, content[:offset] + text + content[offset:])
        except (InsertionError, OSError, ValueError) as e:
            logger.warning("Could not insert header into %s: %s", self.filepath, e)
            return False
        return True


class StdoutSink(InteractiveSink):
    """Prints the header instead of inserting it.

    Used by editor integrations that insert the text themselves, optionally
    as a snippet with tab stops.

    Args:
        stream: Output stream; sys.stdout by default.
        snippets: Render editable regions as snippet tab stops.
    """

    def __init__(self, stream: Optional[TextIO] = None, snippets: bool = False):
        self.stream = stream
        self.supports_snippets = snippets

    async def insert(self, text: str, offset: int) -> bool:
        stream = self.stream or sys.stdout
        stream.write(text)
        stream.flush()
        return True


class FileEditBatch(BatchSink):
    """Batch sink writing the accumulated insertions to files on disk.

    Offsets refer to the file texts the headers were built from, which are
    re-read when the batch is applied.

    Args:
        writer: Atomic writer; one rooted at the current directory by default.
    """

    def __init__(self, writer: Optional[FileWriter] = None):
        self.writer = writer or FileWriter()
        self.batch = EditBatch()

    def accumulate(self, file: str, offset: int, text: str) -> None:
        self.batch.accumulate(file, offset, text)

    def __len__(self) -> int:
        return len(self.batch)

    async def apply_all(self) -> bool:
        if not len(self.batch):
            return True
        try:
            contents: Dict[str, str] = {}
            for file, insertions in self.batch.by_file().items():
                contents[file] = apply_insertions(self.writer.read(file), insertions)
            self.writer.write_all(contents)
        except (OSError, ValueError) as e:
            logger.warning("Could not apply %d insertion(s): %s", len(self.batch), e)
            return False
        logger.info("Applied %d insertion(s) to %d file(s)", len(self.batch), len(contents))
        return True
