"""Closed sets of declaration kinds and generation scopes."""

from enum import Enum


class DeclarationKind(str, Enum):
    """Kind of a documentable declaration.

    Each kind selects a fixed tag-emission pipeline in the HeaderBuilder.
    The string value doubles as the kind name shown to the generative
    description service.
    """

    CLASS_LIKE = "class"
    PROPERTY = "property"
    ACCESSOR = "accessor"
    ENUM = "enum"
    METHOD = "function"
    CONSTRUCTOR = "constructor"
    TYPE_ALIAS = "type"
    VARIABLE = "variable"
    FILE = "file"

    @classmethod
    def from_name(cls, name: str) -> "DeclarationKind":
        """Look up a kind by enum name or value, case-insensitively.

        Args:
            name: Either the enum member name ('CLASS_LIKE') or its value
                ('class').

        Returns:
            The matching DeclarationKind.

        Raises:
            ValueError: If the name matches no kind.
        """
        normalized = name.strip().lower()
        for kind in cls:
            if normalized in (kind.name.lower(), kind.value):
                return kind
        raise ValueError(f"Unknown declaration kind: {name}")


class GenerationScope(str, Enum):
    """Unit of work for one generation request."""

    POSITION = "position"
    FILE = "file"
    FOLDER = "folder"
    WORKSPACE = "workspace"
