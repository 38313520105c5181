"""Exceptions raised while generating JSDoc headers."""

from typing import Optional


class JsdocGeneratorError(Exception):
    """Base class for errors reported to the user."""


class UnsupportedScopeError(JsdocGeneratorError, ValueError):
    """The file type or language of the requested scope is not supported."""

    def __init__(self, target: str, reason: Optional[str] = None):
        self.target = target
        message = f"Unsupported file type: {target}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class UnsupportedPositionError(JsdocGeneratorError):
    """No documentable declaration exists at the requested position."""

    def __init__(self, filepath: str, position: int, line: Optional[int] = None, column: Optional[int] = None):
        self.filepath = filepath
        self.position = position
        self.line = line
        self.column = column
        where = f"{line}:{column}" if line is not None and column is not None else f"offset {position}"
        super().__init__(f"Unable to generate JSDoc at {filepath} {where}: no supported declaration found")


class InsertionError(JsdocGeneratorError):
    """A header could not be inserted, or a batch of edits could not be applied."""
