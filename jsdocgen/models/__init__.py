"""Data models for JSDoc generation.

This module defines the core data structures used throughout jsdocgen:
- SyntaxNode: A node of a parsed TypeScript/JavaScript syntax tree
- DeclarationKind, GenerationScope: Closed sets of kinds and scopes
- TagLine, HeaderDraft: The lines of a header and the header being built
- EditBatch: Insertions accumulated by one scope invocation
- GenerationResult: Outcome of one generation request
"""

from .declaration_kind import DeclarationKind, GenerationScope
from .edit_batch import EditBatch, Insertion, apply_insertions
from .generation_result import FileFailure, GenerationResult
from .header import ColumnLayout, HeaderDraft, Placeholder, TagLine, display_text
from .syntax_node import SyntaxNode

__all__ = [
    "ColumnLayout",
    "DeclarationKind",
    "EditBatch",
    "FileFailure",
    "GenerationResult",
    "GenerationScope",
    "HeaderDraft",
    "Insertion",
    "Placeholder",
    "SyntaxNode",
    "TagLine",
    "apply_insertions",
    "display_text",
]
