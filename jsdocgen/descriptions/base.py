"""Abstract base class for description sources."""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..models.declaration_kind import DeclarationKind
from ..models.header import Placeholder, Text
from ..models.syntax_node import SyntaxNode

CLASS_NAME_TOKEN = "{Object}"


class DescriptionSource(ABC):
    """
    Supplies description text for a declaration, its parameters and its
    return value.

    Descriptions are returned as editable placeholders (or plain text the
    user is not expected to edit). Implementations never raise: anything
    that goes wrong degrades to an empty placeholder.

    Parameters
    ----------
    constructor_description : str, optional
        Description used for constructors, with '{Object}' replaced by the
        class name. Empty to describe constructors like any other
        declaration.
    """

    def __init__(self, constructor_description: str = ""):
        self.constructor_description = constructor_description

    def constructor_text(self, node: SyntaxNode, kind: DeclarationKind) -> Optional[str]:
        """Return the constructor description for ``node``, if it applies.

        Anonymous classes have no name to substitute, so they get the
        source's regular description instead.
        """
        if kind is not DeclarationKind.CONSTRUCTOR or not self.constructor_description:
            return None
        owner = node.parent
        if owner is None or not owner.name:
            return None
        return self.constructor_description.replace(CLASS_NAME_TOKEN, owner.name)

    @abstractmethod
    async def describe_snippet(self, node: SyntaxNode, kind: DeclarationKind) -> Text:
        """
        Describe a declaration.

        Parameters
        ----------
        node : SyntaxNode
            Declaration being documented
        kind : DeclarationKind
            Kind the declaration is documented as

        Returns
        -------
        Text
            Description; may span several lines separated by newlines
        """
        pass

    async def describe_parameters(
        self, node: SyntaxNode, kind: DeclarationKind, generics: bool, names: List[str]
    ) -> List[Text]:
        """Describe parameters (``generics=False``) or type parameters by name.

        Returns one description per name, in the order of ``names``.
        """
        return [Placeholder() for _ in names]

    async def describe_return(self, node: SyntaxNode) -> Text:
        """Describe the return value of a function-like declaration."""
        return Placeholder()

    async def close(self) -> None:
        """Release resources held by the source, such as service connections."""
