"""Rendering of type strings for tag values."""

from typing import Optional

from ..models.syntax_node import SyntaxNode
from ..parsers.type_oracle import TypeOracle

WILDCARD = "*"
WILDCARD_TYPES = ("any", "unknown")
NO_VALUE_TYPE = "void"

OPTIONAL_PREFIX = "?"
DEFINITE_PREFIX = "!"
REST_PREFIX = "..."
GENERATOR_PREFIX = "*"

# Prefixes that would bind ambiguously to the first member of a union
WRAP_FORCING_PREFIXES = (OPTIONAL_PREFIX, DEFINITE_PREFIX)

_OPENERS = "([{<"
_CLOSERS = ")]}>"
_QUOTES = "'\"`"


def canonical_type(text: Optional[str]) -> str:
    """Normalize a type string, mapping any/unknown and missing types to '*'."""
    if text is None:
        return WILDCARD
    stripped = text.strip()
    if not stripped or stripped in WILDCARD_TYPES:
        return WILDCARD
    return stripped


def is_compound(type_text: str) -> bool:
    """Whether a type is a union or intersection at its outermost level.

    Separators nested in brackets, generics or string literals do not count,
    and the '>' of an arrow ('=>') does not close a bracket.
    """
    depth = 0
    quote = None
    previous = ""
    for char in type_text:
        if quote:
            if char == quote and previous != "\\":
                quote = None
        elif char in _QUOTES:
            quote = char
        elif char in _OPENERS:
            depth += 1
        elif char in _CLOSERS and not (char == ">" and previous == "="):
            depth = max(0, depth - 1)
        elif char in "|&" and depth == 0:
            return True
        previous = char
    return False


class TypeRenderer:
    """Produces the display text of a node's type.

    Args:
        oracle: Answers type questions for nodes without an annotation.
        parenthesize_compound: Wrap union and intersection types in
            parentheses even when no prefix requires it.
    """

    def __init__(self, oracle: TypeOracle, parenthesize_compound: bool = True):
        self.oracle = oracle
        self.parenthesize_compound = parenthesize_compound

    def type_of(self, node: SyntaxNode) -> str:
        """Resolve the type of a typed node, annotation first.

        Accessors take the getter's annotated return type, then the setter's
        parameter type, before asking the oracle.
        """
        annotation = node.type_annotation
        if annotation is None and node.kind == "SetAccessor" and node.parameters:
            annotation = node.parameters[0].type_annotation
        if annotation is None:
            annotation = self.oracle.type_of(node)
        return canonical_type(annotation)

    def return_type_of(self, node: SyntaxNode) -> str:
        """Resolve the return type of a function-like node."""
        annotation = node.type_annotation
        if annotation is None:
            annotation = self.oracle.return_type_of(node)
        return canonical_type(annotation)

    def prefix_of(self, node: SyntaxNode) -> str:
        """Return the single modifier prefix of a node, or ''.

        Precedence is optional, definite assignment, rest, generator. The
        rest prefix only applies to parameters; the generator prefix only to
        function values.
        """
        if node.question_token:
            return OPTIONAL_PREFIX
        if node.exclamation_token:
            return DEFINITE_PREFIX
        if node.dot_dot_dot_token and node.kind == "Parameter":
            return REST_PREFIX
        function = node if node.kind in ("ArrowFunction", "FunctionExpression") else node.function_value
        if function is not None and function.asterisk_token:
            return GENERATOR_PREFIX
        return ""

    def wrap(self, type_text: str, prefix: str = "") -> str:
        """Join a prefix and a type, parenthesizing compound types as needed."""
        if is_compound(type_text) and (self.parenthesize_compound or prefix in WRAP_FORCING_PREFIXES):
            type_text = f"({type_text})"
        return prefix + type_text

    def render(self, node: SyntaxNode) -> str:
        """Render the value of a typed node, prefix included."""
        return self.wrap(self.type_of(node), self.prefix_of(node))

    def render_return(self, node: SyntaxNode) -> Optional[str]:
        """Render the return type of a function-like node.

        Returns:
            The rendered type, or None when the function returns 'void'.
        """
        type_text = self.return_type_of(node)
        if type_text == NO_VALUE_TYPE:
            return None
        return self.wrap(type_text)
