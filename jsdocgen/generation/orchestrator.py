"""Traversal of generation scopes and insertion of generated headers."""

import logging
from pathlib import Path
from typing import Callable, Optional

from ..builder.classifier import classify_position, file_declarations
from ..builder.header_builder import HeaderBuilder
from ..errors import UnsupportedPositionError, UnsupportedScopeError
from ..models.declaration_kind import GenerationScope
from ..models.generation_result import FileFailure, GenerationResult
from ..parsers.base_parser import BaseParser
from ..parsers.typescript_parser import language_of
from ..writer.sinks import BatchSink, FileEditBatch, InteractiveSink
from .cancellation import CancellationSignal, NullProgress, Progress
from .sources import DEFAULT_FILE_GLOB, DocumentSource, FileEnumerator, FileSystemDocuments, FileSystemEnumerator

logger = logging.getLogger(__name__)


class HeaderOrchestrator:
    """Walks a scope, builds missing headers and drives their insertion.

    Work is strictly sequential. Every await (file enumeration, reading a
    file, building a header, inserting or applying edits) is followed by a
    cancellation check; once cancelled, no further declaration or file is
    scheduled and a header still being built is discarded.

    Within a file, declarations are handled in descending insertion offset.
    Multi-declaration scopes collect their insertions in one batch that is
    applied once, at the end, and never when the run was cancelled.

    Attributes:
        parser: Parses file text into syntax trees.
        builder: Builds and renders headers.
        documents: Supplies file text.
        enumerator: Finds the files of folder and workspace scopes.
        batch_factory: Creates the batch sink owned by one scope invocation.
        progress: Receives one unit per declaration (file scope) or per file
            (folder and workspace scopes).
        cancellation: Cooperative cancellation flag.
        file_glob: Pattern of the files enumerated in folder and workspace scopes.
    """

    def __init__(
        self,
        parser: BaseParser,
        builder: HeaderBuilder,
        documents: Optional[DocumentSource] = None,
        enumerator: Optional[FileEnumerator] = None,
        batch_factory: Callable[[], BatchSink] = FileEditBatch,
        progress: Optional[Progress] = None,
        cancellation: Optional[CancellationSignal] = None,
        file_glob: str = DEFAULT_FILE_GLOB,
    ) -> None:
        self.parser = parser
        self.builder = builder
        self.documents = documents or FileSystemDocuments()
        self.enumerator = enumerator or FileSystemEnumerator()
        self.batch_factory = batch_factory
        self.progress = progress or NullProgress()
        self.cancellation = cancellation or CancellationSignal()
        self.file_glob = file_glob

    async def generate_at_position(
        self, filepath: str, position: int, sink: InteractiveSink, text: Optional[str] = None
    ) -> GenerationResult:
        """Generate the header of the declaration at a position.

        When no declaration encloses the position and only whitespace
        precedes it, a file header is inserted at the top of the file.

        Args:
            filepath: File the position belongs to.
            position: Offset in the file text.
            sink: Receives the header.
            text: Current file text; read from ``documents`` when None.

        Returns:
            Result with a count of 0 or 1.

        Raises:
            UnsupportedScopeError: If the file is not TypeScript or JavaScript.
            UnsupportedPositionError: If nothing at the position can be documented.
        """
        self._check_language(filepath)
        result = GenerationResult(GenerationScope.POSITION)

        if text is None:
            text = await self.documents.read(filepath)
            if self._stop(result):
                return result

        if not 0 <= position <= len(text):
            raise UnsupportedPositionError(filepath, position)

        root = self.parser.parse(text, filepath)
        result.files_processed = 1
        node = classify_position(root, position)
        if node is None:
            if text[:position].strip():
                line = text.count("\n", 0, position) + 1
                column = position - (text.rfind("\n", 0, position) + 1) + 1
                raise UnsupportedPositionError(filepath, position, line, column)
            logger.debug("No declaration at %s:%d, falling back to a file header", filepath, position)
            node = root

        if node.has_header:
            logger.info("%r already has a JSDoc header", node)
            return result

        header = await self.builder.build_text(node, text, snippet=sink.supports_snippets)
        if self._stop(result):
            return result

        inserted = await sink.insert(header, node.insertion_offset)
        if not inserted:
            result.warnings.append(f"Could not insert the JSDoc header into {filepath}")
            return result
        result.generated = 1
        result.applied = True
        self.progress.advance(filepath)
        self._stop(result)
        return result

    async def generate_for_file(self, filepath: str) -> GenerationResult:
        """Generate headers for every undocumented declaration of a file.

        Raises:
            UnsupportedScopeError: If the file is not TypeScript or JavaScript.
        """
        self._check_language(filepath)
        result = GenerationResult(GenerationScope.FILE)
        batch = self.batch_factory()

        await self._collect_file(filepath, batch, result, per_declaration=True)
        if result.cancelled:
            return result
        await self._apply(batch, result)
        return result

    async def generate_for_folder(self, folder: str) -> GenerationResult:
        """Generate headers for every supported file under a folder.

        Raises:
            UnsupportedScopeError: If ``folder`` is not a directory.
        """
        return await self._generate_many(GenerationScope.FOLDER, folder)

    async def generate_for_workspace(self, root: str) -> GenerationResult:
        """Generate headers for every supported file of the workspace at ``root``.

        Raises:
            UnsupportedScopeError: If ``root`` is not a directory.
        """
        return await self._generate_many(GenerationScope.WORKSPACE, root)

    async def _generate_many(self, scope: GenerationScope, root: str) -> GenerationResult:
        if not Path(root).is_dir():
            raise UnsupportedScopeError(root, "not a directory")
        result = GenerationResult(scope)

        files = await self.enumerator.find_files(self.file_glob, root)
        if self._stop(result):
            return result
        logger.debug("Found %d file(s) under %s", len(files), root)

        batch = self.batch_factory()
        self.progress.begin(len(files), f"Generating JSDoc for {len(files)} file(s) in {root}")
        for filepath in files:
            if self._stop(result):
                return result
            await self._collect_file(filepath, batch, result, per_declaration=False)
            if result.cancelled:
                return result
            self.progress.advance(filepath)

        await self._apply(batch, result)
        return result

    async def _collect_file(
        self, filepath: str, batch: BatchSink, result: GenerationResult, per_declaration: bool
    ) -> None:
        """Accumulate the headers of one file into ``batch``.

        Files that cannot be read or parsed are recorded as failures and
        skipped.
        """
        try:
            text = await self.documents.read(filepath)
        except (OSError, UnicodeDecodeError) as e:
            self._record_failure(result, filepath, e)
            return
        if self._stop(result):
            return

        try:
            root = self.parser.parse(text, filepath)
        except (SyntaxError, ValueError, RuntimeError) as e:
            self._record_failure(result, filepath, e)
            return
        result.files_processed += 1

        declarations = file_declarations(root)
        if per_declaration:
            self.progress.begin(len(declarations), f"Generating JSDoc for {len(declarations)} declaration(s)")
        for node in declarations:
            header = await self.builder.build_text(node, text)
            if self._stop(result):
                return
            batch.accumulate(filepath, node.insertion_offset, header)
            result.generated += 1
            if per_declaration:
                self.progress.advance(node.name or node.kind)

    async def _apply(self, batch: BatchSink, result: GenerationResult) -> None:
        if result.generated == 0:
            return
        result.applied = await batch.apply_all()
        if not result.applied:
            result.warnings.append("The edits could not be applied; no file was modified.")

    async def close(self) -> None:
        """Release the description source once the request is done."""
        await self.builder.descriptions.close()

    def _stop(self, result: GenerationResult) -> bool:
        """Check for cancellation, marking ``result`` when it occurred."""
        if self.cancellation.cancelled and not result.cancelled:
            logger.info("Generation cancelled after %d header(s)", result.generated)
            result.cancelled = True
        return result.cancelled

    @staticmethod
    def _check_language(filepath: str) -> None:
        if language_of(filepath) is None:
            raise UnsupportedScopeError(filepath)

    @staticmethod
    def _record_failure(result: GenerationResult, filepath: str, error: Exception) -> None:
        error_msg = str(error).split("\n")[0] or "Unknown parse error"
        logger.warning("Failed to process %s: %s", filepath, error_msg)
        result.failures.append(FileFailure(filepath=filepath, error=error_msg))
