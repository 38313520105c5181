"""Classification of syntax nodes into documentable declarations."""

from typing import Dict, List, Optional

from ..models.declaration_kind import DeclarationKind
from ..models.syntax_node import FUNCTION_VALUE_KINDS, SyntaxNode

SUPPORTED_KINDS: Dict[str, DeclarationKind] = {
    "ClassDeclaration": DeclarationKind.CLASS_LIKE,
    "ClassExpression": DeclarationKind.CLASS_LIKE,
    "InterfaceDeclaration": DeclarationKind.CLASS_LIKE,
    "PropertyDeclaration": DeclarationKind.PROPERTY,
    "PropertySignature": DeclarationKind.PROPERTY,
    "EnumMember": DeclarationKind.PROPERTY,
    "GetAccessor": DeclarationKind.ACCESSOR,
    "SetAccessor": DeclarationKind.ACCESSOR,
    "EnumDeclaration": DeclarationKind.ENUM,
    "FunctionDeclaration": DeclarationKind.METHOD,
    "MethodDeclaration": DeclarationKind.METHOD,
    "MethodSignature": DeclarationKind.METHOD,
    "CallSignature": DeclarationKind.METHOD,
    "ConstructSignature": DeclarationKind.METHOD,
    "Constructor": DeclarationKind.CONSTRUCTOR,
    "TypeAliasDeclaration": DeclarationKind.TYPE_ALIAS,
    "VariableDeclaration": DeclarationKind.VARIABLE,
    "SourceFile": DeclarationKind.FILE,
}

# Containers unwrapped to their first variable declaration
BINDING_CONTAINERS = ("VariableDeclarationList", "VariableStatement")

# Declarations that document the function value they are initialized with
FUNCTION_OWNER_KINDS = ("VariableDeclaration", "PropertyDeclaration")

CLASS_LIKE_KINDS = ("ClassDeclaration", "ClassExpression", "InterfaceDeclaration")

TOP_LEVEL_KINDS = (
    "ClassDeclaration",
    "InterfaceDeclaration",
    "EnumDeclaration",
    "FunctionDeclaration",
    "TypeAliasDeclaration",
)

MEMBER_KINDS = (
    "PropertyDeclaration",
    "PropertySignature",
    "GetAccessor",
    "SetAccessor",
    "MethodDeclaration",
    "MethodSignature",
    "CallSignature",
    "ConstructSignature",
    "Constructor",
)


def find_deepest_node(root: SyntaxNode, position: int) -> SyntaxNode:
    """Return the deepest node whose full range contains ``position``.

    Falls back to ``root`` when no child contains the position. When two
    siblings touch at ``position`` the earlier one wins.
    """
    node = root
    while True:
        child = next((c for c in node.children if c.contains(position)), None)
        if child is None:
            return node
        node = child


def classify(node: SyntaxNode) -> Optional[SyntaxNode]:
    """Find the declaration that documents ``node``.

    Walks from ``node`` up the ancestor chain to the nearest supported
    declaration. Variable statements and declaration lists resolve to their
    first declaration; function and arrow function values resolve to the
    variable or property they initialize, and are otherwise passed over.
    The source file itself is never returned.

    Args:
        node: Any node of a syntax tree.

    Returns:
        The declaration node, or None when no ancestor is supported.
    """
    for candidate in node.ancestors():
        if candidate.kind in BINDING_CONTAINERS:
            declarations = candidate.declarations
            if declarations:
                return declarations[0]
            continue
        if candidate.kind in FUNCTION_VALUE_KINDS:
            owner = candidate.parent
            if owner is not None and owner.kind in FUNCTION_OWNER_KINDS:
                return owner
            continue
        if candidate.kind in SUPPORTED_KINDS and candidate.kind != "SourceFile":
            return candidate
    return None


def classify_position(root: SyntaxNode, position: int) -> Optional[SyntaxNode]:
    """Classify the node found at ``position`` of the tree rooted at ``root``."""
    return classify(find_deepest_node(root, position))


def is_function_variable(node: SyntaxNode) -> bool:
    """Whether a variable or property is initialized with a function value."""
    return node.kind in FUNCTION_OWNER_KINDS and node.function_value is not None


def declaration_kind(node: SyntaxNode, function_variables_as_functions: bool = False) -> DeclarationKind:
    """Map a supported node to its DeclarationKind.

    Args:
        node: A node accepted by :func:`classify`, or a SourceFile.
        function_variables_as_functions: Treat variables and properties
            holding a function value as functions.

    Returns:
        The kind selecting the node's tag pipeline.

    Raises:
        ValueError: If the node's kind is not supported.
    """
    try:
        kind = SUPPORTED_KINDS[node.kind]
    except KeyError:
        raise ValueError(f"Unsupported declaration kind: {node.kind}")
    if function_variables_as_functions and is_function_variable(node):
        return DeclarationKind.METHOD
    return kind


def file_declarations(root: SyntaxNode) -> List[SyntaxNode]:
    """Collect the declarations of a file that still need a header.

    Covers top-level declarations and the members of top-level classes and
    interfaces. Declarations that already carry a header are left out.

    Returns:
        Declarations in descending insertion offset, so inserting a header
        for one never moves the offsets of those still pending.
    """
    found: List[SyntaxNode] = []
    for statement in root.children:
        if statement.kind == "VariableStatement":
            declarations = statement.declarations
            if declarations:
                found.append(declarations[0])
        elif statement.kind in TOP_LEVEL_KINDS:
            found.append(statement)
            if statement.kind in CLASS_LIKE_KINDS:
                found.extend(statement.children_of_kind(*MEMBER_KINDS))

    pending = [node for node in found if not node.has_header]
    return sorted(pending, key=lambda node: node.insertion_offset, reverse=True)
