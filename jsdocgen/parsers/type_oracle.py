"""Type oracle: answers type questions about syntax nodes."""

from abc import ABC, abstractmethod
from typing import Optional

from ..models.syntax_node import SyntaxNode


class TypeOracle(ABC):
    """Source of type strings for nodes that carry no explicit annotation."""

    @abstractmethod
    def type_of(self, node: SyntaxNode) -> Optional[str]:
        """Return the display string of the node's type, or None if unknown."""

    @abstractmethod
    def return_type_of(self, node: SyntaxNode) -> Optional[str]:
        """Return the display string of a function-like node's return type."""


class SyntaxTreeTypeOracle(TypeOracle):
    """Reads the type checker output the TypeScript helper embeds in the tree."""

    def type_of(self, node: SyntaxNode) -> Optional[str]:
        return node.inferred_type

    def return_type_of(self, node: SyntaxNode) -> Optional[str]:
        return node.inferred_return_type
