"""Abstract base class for language parsers."""

from abc import ABC, abstractmethod

from ..models.syntax_node import SyntaxNode


class BaseParser(ABC):
    """
    Abstract base class defining the interface for language-specific parsers.

    A parser turns the text of one file into a syntax tree whose nodes carry
    offsets into that text, parent/child links, and the type checker's
    answers for declarations.
    """

    @abstractmethod
    def parse(self, text: str, filename: str) -> SyntaxNode:
        """
        Parse source text and return the root of its syntax tree.

        Parameters
        ----------
        text : str
            Full text of the file, as currently held by the host
        filename : str
            Name of the file, used to pick TypeScript or JavaScript rules

        Returns
        -------
        SyntaxNode
            Root node (kind 'SourceFile') of the syntax tree

        Raises
        ------
        SyntaxError
            If the text cannot be parsed
        RuntimeError
            If the parser infrastructure fails
        """
        pass
