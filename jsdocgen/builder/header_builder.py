"""
Assembly of JSDoc headers.

The HeaderBuilder runs a fixed pipeline of stages per DeclarationKind. Each
stage appends zero or more TagLines to a HeaderDraft:

    header -> modifiers -> kind tag -> heritage -> generics -> parameters
           -> return -> custom tags -> terminator

Two declarations skip most of the pipeline: an accessor whose opposite
accessor is already documented reuses that description, and an overriding
member only points to the documentation it inherits.
"""

import logging
import re
from datetime import datetime
from typing import Callable, List, Optional

from ..config import GeneratorConfig
from ..descriptions.base import DescriptionSource
from ..models.declaration_kind import DeclarationKind
from ..models.header import HeaderDraft, Placeholder, TagLine, Text, display_text
from ..models.syntax_node import SyntaxNode
from ..parsers.type_oracle import SyntaxTreeTypeOracle, TypeOracle
from .classifier import declaration_kind, is_function_variable
from .type_renderer import TypeRenderer

logger = logging.getLogger(__name__)

# Modifier keywords documented as tags, in the form they appear in source
MODIFIER_TAGS = ("export", "public", "private", "protected", "static", "abstract", "async", "readonly")

UNWRAPPED = ("", "")
AUTHOR_PLACEHOLDER = "author"
OPPOSITE_ACCESSOR = {"GetAccessor": "SetAccessor", "SetAccessor": "GetAccessor"}
ENUM_STRING_QUOTES = ("'", '"', "`")

_LEADING_WHITESPACE = re.compile(r"[ \t]*")


def header_description(header: str) -> List[str]:
    """Extract the free-text description of an existing JSDoc comment.

    The description is everything before the first tag line, with comment
    markers removed. Leading and trailing empty lines are dropped.

    Args:
        header: Full text of a '/** ... */' comment.

    Returns:
        Description lines, possibly empty.
    """
    body = header.strip()
    if body.startswith("/**"):
        body = body[3:]
    if body.endswith("*/"):
        body = body[:-2]

    lines: List[str] = []
    for raw in body.splitlines():
        line = raw.strip()
        if line.startswith("*"):
            line = line[1:]
            if line.startswith(" "):
                line = line[1:]
        if line.lstrip().startswith("@"):
            break
        lines.append(line.rstrip())

    while lines and not lines[0].strip():
        lines.pop(0)
    while lines and not lines[-1].strip():
        lines.pop()
    return lines


def indentation_at(text: str, offset: int) -> str:
    """Return the leading whitespace of the line containing ``offset``."""
    line_start = text.rfind("\n", 0, offset) + 1
    match = _LEADING_WHITESPACE.match(text, line_start)
    return match.group(0) if match else ""


def _split_lines(description: Text) -> List[Text]:
    """Split a multi-line description into one Text per line."""
    text = display_text(description)
    if "\n" not in text:
        return [description]
    parts = [part.strip() for part in text.splitlines() if part.strip()]
    if isinstance(description, Placeholder):
        return [Placeholder(part) for part in parts]
    return list(parts)


class HeaderBuilder:
    """
    Builds the header of one declaration at a time.

    Parameters
    ----------
    config : GeneratorConfig
        Settings toggling stages and shaping lines.
    descriptions : DescriptionSource
        Supplies description text.
    oracle : TypeOracle, optional
        Type oracle for nodes without annotations. Defaults to the checker
        output embedded in the syntax tree.
    clock : callable, optional
        Returns the current datetime for the '@date' tag.
    """

    def __init__(
        self,
        config: GeneratorConfig,
        descriptions: DescriptionSource,
        oracle: Optional[TypeOracle] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.config = config
        self.descriptions = descriptions
        self.types = TypeRenderer(oracle or SyntaxTreeTypeOracle(), config.include_parenthesis_for_multiple_types)
        self.clock = clock or datetime.now

    def kind_of(self, node: SyntaxNode) -> DeclarationKind:
        return declaration_kind(node, self.config.function_variables_as_functions)

    async def build(self, node: SyntaxNode) -> HeaderDraft:
        """
        Build the header draft for a declaration.

        Parameters
        ----------
        node : SyntaxNode
            A declaration returned by the classifier, or a SourceFile for a
            file header.

        Returns
        -------
        HeaderDraft
            The closed draft, ready to render.

        Raises
        ------
        ValueError
            If the node is not a supported declaration.
        """
        kind = self.kind_of(node)
        draft = HeaderDraft(kind)
        logger.debug("Building %s header for %r", kind.value, node)

        if kind is DeclarationKind.ACCESSOR:
            paired = self._paired_accessor(node)
            if paired is not None:
                self._reuse_description(draft, paired)
                draft.close()
                return draft

        await self._header_stage(draft, node, kind)

        if node.has_modifier("override"):
            draft.append(TagLine("override"))
            draft.append(TagLine("inheritdoc"))
            draft.close()
            return draft

        self._modifier_stage(draft, node)

        if kind is DeclarationKind.CLASS_LIKE:
            self._class_tags(draft, node)
            self._heritage_stage(draft, node)
            await self._generics_stage(draft, node, node, kind)
        elif kind is DeclarationKind.TYPE_ALIAS:
            self._typedef_tag(draft, node)
            await self._generics_stage(draft, node, node, kind)
        elif kind is DeclarationKind.ENUM:
            self._enum_tag(draft, node)
        elif kind in (DeclarationKind.PROPERTY, DeclarationKind.ACCESSOR, DeclarationKind.VARIABLE):
            self._type_tag(draft, node)
        elif kind is DeclarationKind.METHOD:
            signature = node.function_value if is_function_variable(node) else node
            if signature.asterisk_token:
                draft.append(TagLine("generator"))
            await self._generics_stage(draft, node, signature, kind)
            await self._parameter_stage(draft, node, signature, kind)
            await self._return_stage(draft, node, signature)
        elif kind is DeclarationKind.CONSTRUCTOR:
            draft.append(TagLine("constructor"))
            await self._parameter_stage(draft, node, node, kind)
        elif kind is DeclarationKind.FILE:
            draft.append(TagLine("file"))

        self._custom_tag_stage(draft, kind)
        draft.close()
        return draft

    def render(self, draft: HeaderDraft, indent: str = "", snippet: bool = False) -> str:
        """Render a draft with the configured layout and comment style."""
        return draft.render(
            layout=self.config.column_layout,
            indent=indent,
            snippet=snippet,
            single_line=self.config.single_line_comments,
        )

    async def build_text(self, node: SyntaxNode, source: str, snippet: bool = False) -> str:
        """Build and render the text inserted at ``node.insertion_offset``."""
        draft = await self.build(node)
        return self.render(draft, indentation_at(source, node.insertion_offset), snippet)

    # Stages

    async def _header_stage(self, draft: HeaderDraft, node: SyntaxNode, kind: DeclarationKind) -> None:
        description = await self._describe(self.descriptions.describe_snippet(node, kind), Placeholder())
        for line in _split_lines(description):
            draft.append(TagLine.text(line))

        if self.config.author:
            author: Text = self.config.author
            if author == AUTHOR_PLACEHOLDER:
                author = Placeholder(AUTHOR_PLACEHOLDER)
            draft.append(TagLine("author", value=author, wrapper=UNWRAPPED, align=False))
        if self.config.date_format:
            draft.append(
                TagLine("date", value=self.clock().strftime(self.config.date_format), wrapper=UNWRAPPED, align=False)
            )
        if self.config.empty_line_after_header:
            draft.append(TagLine.blank())

    def _modifier_stage(self, draft: HeaderDraft, node: SyntaxNode) -> None:
        modifiers = list(node.anchor.modifiers)
        if node.anchor is not node:
            modifiers += [m for m in node.modifiers if m not in modifiers]
        function = node.function_value
        if function is not None and function.has_modifier("async") and "async" not in modifiers:
            modifiers.append("async")

        for modifier in modifiers:
            if modifier not in MODIFIER_TAGS:
                continue
            if modifier == "export" and not self.config.include_export:
                continue
            if modifier == "async" and not self.config.include_async:
                continue
            draft.append(TagLine(modifier))

    def _class_tags(self, draft: HeaderDraft, node: SyntaxNode) -> None:
        draft.append(TagLine("interface" if node.kind == "InterfaceDeclaration" else "class"))
        if node.name:
            draft.append(TagLine("typedef", value=node.name))

    def _typedef_tag(self, draft: HeaderDraft, node: SyntaxNode) -> None:
        draft.append(TagLine("typedef", value=node.name or ""))

    def _enum_tag(self, draft: HeaderDraft, node: SyntaxNode) -> None:
        members = node.children_of_kind("EnumMember")
        is_string = any((m.initializer or "").startswith(ENUM_STRING_QUOTES) for m in members)
        value = ("string" if is_string else "number") if self.config.include_types else None
        draft.append(TagLine("enum", value=value))

    def _type_tag(self, draft: HeaderDraft, node: SyntaxNode) -> None:
        if not self.config.include_types or node.kind == "EnumMember":
            return
        draft.append(TagLine("type", value=self.types.render(node)))

    def _heritage_stage(self, draft: HeaderDraft, node: SyntaxNode) -> None:
        for clause in node.heritage_clauses:
            for reference in clause.children_of_kind("ExpressionWithTypeArguments"):
                value = reference.expression or reference.text
                if reference.type_arguments:
                    value += f"<{', '.join(reference.type_arguments)}>"
                draft.append(TagLine(clause.token or "extends", value=value))

    async def _generics_stage(
        self, draft: HeaderDraft, node: SyntaxNode, signature: SyntaxNode, kind: DeclarationKind
    ) -> None:
        type_parameters = signature.type_parameters
        if not type_parameters:
            return
        names = [tp.name or "" for tp in type_parameters]
        descriptions = await self._describe_names(node, kind, True, names)
        for type_parameter, name, description in zip(type_parameters, names, descriptions):
            if type_parameter.default:
                name = f"[{name}={type_parameter.default}]"
            constraint = type_parameter.constraint if self.config.include_types else None
            draft.append(TagLine("template", value=constraint, name=name, description=description))

    async def _parameter_stage(
        self, draft: HeaderDraft, node: SyntaxNode, signature: SyntaxNode, kind: DeclarationKind
    ) -> None:
        parameters = [p for p in signature.parameters if p.name != "this"]
        if not parameters:
            return

        names: List[str] = []
        destructured = 0
        for parameter in parameters:
            if parameter.binding_pattern is not None:
                names.append(f"param{destructured}")
                destructured += 1
            else:
                names.append(parameter.name or "")

        descriptions = await self._describe_names(node, kind, False, names)
        for parameter, name, description in zip(parameters, names, descriptions):
            draft.append(
                TagLine("param", value=self._value(parameter), name=self._parameter_name(parameter, name),
                        description=description)
            )
            pattern = parameter.binding_pattern
            if pattern is None:
                continue
            for element in pattern.binding_elements:
                element_name = element.property_name or element.name
                if not element_name:
                    continue
                qualified = f"{name}.{element_name}"
                if element.initializer:
                    qualified = f"[{qualified}={element.initializer}]"
                draft.append(
                    TagLine("param", value=self._value(element), name=qualified, description=Placeholder())
                )

    async def _return_stage(self, draft: HeaderDraft, node: SyntaxNode, signature: SyntaxNode) -> None:
        if not self.config.include_return:
            return
        rendered = self.types.render_return(signature)
        if rendered is None:
            return
        description = await self._describe(self.descriptions.describe_return(node), Placeholder())
        value = rendered if self.config.include_types else None
        draft.append(TagLine("returns", value=value, description=description))

    def _custom_tag_stage(self, draft: HeaderDraft, kind: DeclarationKind) -> None:
        emitted = set()
        for custom_tag in self.config.custom_tags:
            if custom_tag.tag in emitted or not custom_tag.applies_to(kind):
                continue
            emitted.add(custom_tag.tag)
            draft.append(
                TagLine(custom_tag.tag, value=Placeholder(custom_tag.placeholder), wrapper=UNWRAPPED,
                        force_placeholder=True)
            )

    # Helpers

    def _value(self, node: SyntaxNode) -> Optional[str]:
        return self.types.render(node) if self.config.include_types else None

    @staticmethod
    def _parameter_name(parameter: SyntaxNode, name: str) -> str:
        if parameter.initializer:
            return f"[{name}={parameter.initializer}]"
        if parameter.question_token:
            return f"[{name}]"
        return name

    @staticmethod
    def _paired_accessor(node: SyntaxNode) -> Optional[SyntaxNode]:
        """Return the documented opposite accessor of a get/set pair."""
        if node.parent is None:
            return None
        opposite = OPPOSITE_ACCESSOR[node.kind]
        for sibling in node.parent.children_of_kind(opposite):
            if sibling.name == node.name and sibling.has_header:
                return sibling
        return None

    def _reuse_description(self, draft: HeaderDraft, paired: SyntaxNode) -> None:
        lines = header_description(paired.header_text or "")
        for line in lines:
            draft.append(TagLine.text(line) if line.strip() else TagLine.blank())
        if lines and self.config.empty_line_after_header:
            draft.append(TagLine.blank())
        draft.append(TagLine("inheritdoc"))

    async def _describe_names(
        self, node: SyntaxNode, kind: DeclarationKind, generics: bool, names: List[str]
    ) -> List[Text]:
        """Describe parameter or type parameter names, one placeholder per name."""
        descriptions = await self._describe(
            self.descriptions.describe_parameters(node, kind, generics, names),
            [],
        )
        descriptions = list(descriptions or [])[: len(names)]
        return descriptions + [Placeholder() for _ in range(len(names) - len(descriptions))]

    @staticmethod
    async def _describe(request, fallback):
        """Await a description request, degrading to ``fallback`` on error."""
        try:
            return await request
        except Exception as e:
            logger.warning("Description source failed: %s", e)
            return fallback
