"""EditBatch data model for accumulating text insertions across files."""

from dataclasses import dataclass
from typing import Dict, Iterator, List


@dataclass(frozen=True)
class Insertion:
    """A single pending text insertion.

    Attributes:
        file: Identifier of the target file (a path string for filesystem hosts).
        offset: Offset in the file's original text where ``text`` goes.
        text: Text to insert.
    """

    file: str
    offset: int
    text: str


def apply_insertions(content: str, insertions: List[Insertion]) -> str:
    """Apply insertions to the original text of one file.

    All offsets refer to the original text. Insertions are spliced from the
    highest offset down, so no splice moves an offset that is still pending.
    Insertions sharing an offset keep their accumulation order in the output.

    Args:
        content: Original text of the file.
        insertions: Insertions targeting this file.

    Returns:
        The text with every insertion applied.

    Raises:
        ValueError: If an offset lies outside the text.
    """
    ordered = sorted(enumerate(insertions), key=lambda pair: (pair[1].offset, pair[0]), reverse=True)
    for _, insertion in ordered:
        if not 0 <= insertion.offset <= len(content):
            raise ValueError(
                f"Insertion offset {insertion.offset} is outside '{insertion.file}' "
                f"(length {len(content)})"
            )
        content = content[: insertion.offset] + insertion.text + content[insertion.offset :]
    return content


class EditBatch:
    """Accumulator of insertions owned by one scope invocation.

    The batch only grows: insertions are never removed or reordered once
    accumulated. It is either applied as a whole or discarded.
    """

    def __init__(self) -> None:
        self._insertions: List[Insertion] = []

    def accumulate(self, file: str, offset: int, text: str) -> None:
        self._insertions.append(Insertion(file=file, offset=offset, text=text))

    def __len__(self) -> int:
        return len(self._insertions)

    def __iter__(self) -> Iterator[Insertion]:
        return iter(self._insertions)

    @property
    def files(self) -> List[str]:
        """Files touched by the batch, in first-accumulation order."""
        return list(dict.fromkeys(insertion.file for insertion in self._insertions))

    def by_file(self) -> Dict[str, List[Insertion]]:
        grouped: Dict[str, List[Insertion]] = {}
        for insertion in self._insertions:
            grouped.setdefault(insertion.file, []).append(insertion)
        return grouped
