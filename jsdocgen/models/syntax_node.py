"""SyntaxNode data model for representing parsed TypeScript/JavaScript nodes."""

from dataclasses import dataclass, field
from typing import Iterator, List, Optional

# Kinds that hold a function body assigned as a value
FUNCTION_VALUE_KINDS = ("ArrowFunction", "FunctionExpression")

BINDING_PATTERN_KINDS = ("ObjectBindingPattern", "ArrayBindingPattern")


@dataclass(eq=False)
class SyntaxNode:
    """A node of the syntax tree produced by the TypeScript helper.

    Nodes are read-only views over the compiler's tree: the parser fills in
    the fields it needs for header generation and links parents and children.
    Offsets are Python string indices into the parsed file text.

    Attributes:
        kind: TypeScript SyntaxKind name ('ClassDeclaration', 'Parameter', ...).
        full_start: Offset including leading trivia (whitespace, comments).
        start: Offset of the first token, after any existing JSDoc.
        end: Offset just past the last token.
        text: Source text between start and end.
        name: Declared name, if the node has a simple one.
        property_name: Property name of a binding element ('a' in '{a: b}').
        modifiers: Modifier keywords in source order ('export', 'static', ...).
        type_annotation: Text of the explicit type annotation. For function-like
            nodes this is the annotated return type; for type parameters it is
            unused (see constraint/default); for type aliases it is the aliased
            type.
        inferred_type: Type string from the type checker.
        inferred_return_type: Return type string from the type checker, for
            function-like nodes.
        initializer: Initializer text (parameter defaults, enum member values).
        question_token: Whether the node is marked optional ('?').
        exclamation_token: Whether the node is marked definitely assigned ('!').
        dot_dot_dot_token: Whether the node is a rest element ('...').
        asterisk_token: Whether the node is a generator ('*').
        jsdoc: Text of the JSDoc comment attached to the node, if any.
        token: Heritage clause keyword ('extends' or 'implements').
        expression: Referenced expression of a heritage type ('Base').
        type_arguments: Type argument texts of a heritage type.
        constraint: Constraint text of a type parameter.
        default: Default text of a type parameter.
        children: Child nodes in source order.
        parent: Parent node, None for the root.
    """

    kind: str
    full_start: int
    start: int
    end: int
    text: str = ""
    name: Optional[str] = None
    property_name: Optional[str] = None
    modifiers: List[str] = field(default_factory=list)
    type_annotation: Optional[str] = None
    inferred_type: Optional[str] = None
    inferred_return_type: Optional[str] = None
    initializer: Optional[str] = None
    question_token: bool = False
    exclamation_token: bool = False
    dot_dot_dot_token: bool = False
    asterisk_token: bool = False
    jsdoc: Optional[str] = None
    token: Optional[str] = None
    expression: Optional[str] = None
    type_arguments: List[str] = field(default_factory=list)
    constraint: Optional[str] = None
    default: Optional[str] = None
    children: List["SyntaxNode"] = field(default_factory=list)
    parent: Optional["SyntaxNode"] = field(default=None, repr=False)

    def children_of_kind(self, *kinds: str) -> List["SyntaxNode"]:
        """Return the direct children whose kind is one of ``kinds``."""
        return [child for child in self.children if child.kind in kinds]

    def first_child_of_kind(self, *kinds: str) -> Optional["SyntaxNode"]:
        """Return the first direct child whose kind is one of ``kinds``."""
        return next((c for c in self.children if c.kind in kinds), None)

    @property
    def parameters(self) -> List["SyntaxNode"]:
        return self.children_of_kind("Parameter")

    @property
    def type_parameters(self) -> List["SyntaxNode"]:
        return self.children_of_kind("TypeParameter")

    @property
    def heritage_clauses(self) -> List["SyntaxNode"]:
        return self.children_of_kind("HeritageClause")

    @property
    def declarations(self) -> List["SyntaxNode"]:
        """Variable declarations of a statement or declaration list."""
        if self.kind == "VariableStatement":
            declaration_list = self.first_child_of_kind("VariableDeclarationList")
            return declaration_list.declarations if declaration_list else []
        return self.children_of_kind("VariableDeclaration")

    @property
    def binding_pattern(self) -> Optional["SyntaxNode"]:
        """Object or array binding pattern of a destructured parameter."""
        return self.first_child_of_kind(*BINDING_PATTERN_KINDS)

    @property
    def binding_elements(self) -> List["SyntaxNode"]:
        return self.children_of_kind("BindingElement")

    @property
    def function_value(self) -> Optional["SyntaxNode"]:
        """Function or arrow function assigned as this node's initializer."""
        return self.first_child_of_kind(*FUNCTION_VALUE_KINDS)

    @property
    def anchor(self) -> "SyntaxNode":
        """Node that owns the JSDoc of this declaration.

        A variable declaration is documented on its enclosing
        VariableStatement, which is also where modifiers like 'export' live.
        """
        if self.kind == "VariableDeclaration":
            declaration_list = self.parent
            if declaration_list is not None and declaration_list.kind == "VariableDeclarationList":
                statement = declaration_list.parent
                if statement is not None and statement.kind == "VariableStatement":
                    return statement
        return self

    @property
    def has_header(self) -> bool:
        """Whether a JSDoc is already attached to this declaration."""
        return bool(self.jsdoc) or bool(self.anchor.jsdoc)

    @property
    def header_text(self) -> Optional[str]:
        return self.jsdoc or self.anchor.jsdoc

    @property
    def insertion_offset(self) -> int:
        """Offset where a new header for this declaration is inserted."""
        if self.kind == "SourceFile":
            return 0
        return self.anchor.start

    def has_modifier(self, modifier: str) -> bool:
        return modifier in self.modifiers

    def ancestors(self) -> Iterator["SyntaxNode"]:
        """Yield this node, then each parent up to the root."""
        node: Optional[SyntaxNode] = self
        while node is not None:
            yield node
            node = node.parent

    def walk(self) -> Iterator["SyntaxNode"]:
        """Yield this node and all descendants in pre-order."""
        yield self
        for child in self.children:
            yield from child.walk()

    def contains(self, position: int) -> bool:
        """Whether ``position`` lies within the node's full range."""
        return self.full_start <= position <= self.end

    def __repr__(self) -> str:
        """Compact representation for debugging."""
        header_indicator = "📝" if self.jsdoc else "❌"
        label = f" '{self.name}'" if self.name else ""
        return f"SyntaxNode({header_indicator} {self.kind}{label} @ {self.start}:{self.end})"
