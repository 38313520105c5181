"""GenerationResult data model for the outcome of one generation request."""

from dataclasses import asdict, dataclass, field
from typing import List

from .declaration_kind import GenerationScope


@dataclass
class FileFailure:
    """Represents a file that could not be processed.

    Attributes:
        filepath: Path of the file that failed.
        error: First line of the error message from the exception.
    """

    filepath: str
    error: str

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


@dataclass
class GenerationResult:
    """Outcome of generating headers for one scope.

    Attributes:
        scope: Scope the request covered.
        generated: Number of headers generated. For batched scopes this counts
            headers accumulated, which are only written when ``applied``.
        cancelled: Whether the request was cancelled before completing.
        applied: Whether the generated headers were inserted.
        files_processed: Number of files whose declarations were visited.
        failures: Files that could not be read or parsed.
        warnings: Non-fatal conditions worth showing to the user.
    """

    scope: GenerationScope
    generated: int = 0
    cancelled: bool = False
    applied: bool = False
    files_processed: int = 0
    failures: List[FileFailure] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def message(self) -> str:
        """User-facing summary of the result."""
        noun = "header" if self.generated == 1 else "headers"
        if self.cancelled:
            if self.scope in (GenerationScope.FOLDER, GenerationScope.WORKSPACE, GenerationScope.FILE):
                return (
                    f"Generation cancelled after {self.generated} JSDoc {noun}; "
                    f"no edits were applied."
                )
            return f"Generation cancelled after {self.generated} JSDoc {noun}."
        if self.generated == 0:
            return "No JSDoc generated."
        if not self.applied:
            return f"Generated {self.generated} JSDoc {noun}, but the edits could not be applied."
        return f"Generated {self.generated} JSDoc {noun}."

    def to_dict(self) -> dict:
        data = asdict(self)
        data["scope"] = self.scope.value
        data["message"] = self.message
        return data
