"""Header data model: tag lines, placeholders and the header draft.

A header is built as an ordered list of TagLine values and rendered to its
final text in a single pass. Rendering comes in two flavours:

- plain text, used when headers are written straight into files;
- snippet text, where editable regions become numbered tab stops
  (``${1:text}``) and literal ``$``, ``}`` and ``\\`` are escaped, for hosts
  that insert snippets interactively.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

from .declaration_kind import DeclarationKind


@dataclass(frozen=True)
class Placeholder:
    """An editable region whose initial text may be replaced by the user."""

    text: str = ""


Text = Union[str, Placeholder]


def display_text(value: Optional[Text]) -> str:
    """Return the text a value shows once inserted, without snippet markup."""
    if value is None:
        return ""
    if isinstance(value, Placeholder):
        return value.text
    return value


@dataclass(frozen=True)
class ColumnLayout:
    """Start columns for tag values, names and descriptions.

    Columns are zero-based offsets from the first character of the comment
    line (the space before '*'), ignoring indentation. Zero disables
    alignment for that column.
    """

    value: int = 0
    name: int = 0
    description: int = 0


@dataclass
class TagLine:
    """One line of a header.

    Attributes:
        tag: Tag name without '@', or None for description and blank lines.
        value: Tag value (usually a type), wrapped by ``wrapper`` when shown.
        wrapper: Opening and closing delimiters around the value.
        name: Secondary name ('param' name, 'template' name).
        description: Free text shown after the name.
        align: Whether the configured start columns apply to this line.
        force_placeholder: Render the value as an editable region even when
            it is plain text.
    """

    tag: Optional[str] = None
    value: Optional[Text] = None
    wrapper: Tuple[str, str] = ("{", "}")
    name: Optional[Text] = None
    description: Optional[Text] = None
    align: bool = True
    force_placeholder: bool = False

    @property
    def is_blank(self) -> bool:
        return not (
            self.tag
            or display_text(self.value)
            or display_text(self.name)
            or display_text(self.description)
        )

    @classmethod
    def blank(cls) -> "TagLine":
        return cls(align=False)

    @classmethod
    def text(cls, description: Text) -> "TagLine":
        """Line holding only free text (description, reused description)."""
        return cls(description=description, align=False)


class _SnippetCounter:
    """Hands out tab stop numbers while one header is rendered."""

    def __init__(self) -> None:
        self.next_stop = 1

    def take(self) -> int:
        stop = self.next_stop
        self.next_stop += 1
        return stop


def _escape_snippet(text: str) -> str:
    return text.replace("\\", "\\\\").replace("$", "\\$").replace("}", "\\}")


def _markup(value: Text, snippet: bool, counter: _SnippetCounter, as_placeholder: bool = False) -> str:
    text = display_text(value)
    if not snippet:
        return text
    if isinstance(value, Placeholder) or as_placeholder:
        escaped = _escape_snippet(text)
        stop = counter.take()
        return f"${{{stop}:{escaped}}}" if escaped else f"${{{stop}}}"
    return _escape_snippet(text)


class HeaderDraft:
    """Ordered, append-only sequence of TagLines for one declaration.

    The draft is populated by the builder stages, closed once by the
    terminator stage and then rendered.
    """

    def __init__(self, kind: DeclarationKind) -> None:
        self.kind = kind
        self._lines: List[TagLine] = []
        self.closed = False

    @property
    def lines(self) -> Tuple[TagLine, ...]:
        return tuple(self._lines)

    def append(self, line: TagLine) -> None:
        if self.closed:
            raise RuntimeError("Cannot append to a closed header draft")
        self._lines.append(line)

    def extend(self, lines: List[TagLine]) -> None:
        for line in lines:
            self.append(line)

    def tags(self) -> List[str]:
        """Tag names in emission order."""
        return [line.tag for line in self._lines if line.tag]

    def has_tag(self, tag: str) -> bool:
        return tag in self.tags()

    def close(self) -> None:
        """Terminate the draft.

        Blank lines next to the opening or closing delimiter are dropped, so a
        header with no description never starts with an empty line and a
        header with no tags never ends with the description separator.
        """
        while self._lines and self._lines[0].is_blank:
            self._lines.pop(0)
        while self._lines and self._lines[-1].is_blank:
            self._lines.pop()
        self.closed = True

    def render(
        self,
        layout: Optional[ColumnLayout] = None,
        indent: str = "",
        snippet: bool = False,
        single_line: bool = False,
    ) -> str:
        """Render the draft to the text inserted before the declaration.

        Args:
            layout: Column alignment settings; no alignment when None.
            indent: Indentation of the declaration's line. Every line after
                the first is prefixed with it, and the text ends with a
                newline plus the indentation so the declaration keeps its
                column.
            snippet: Render editable regions as numbered tab stops.
            single_line: Render a header with exactly one content line as
                ``/** ... */``.

        Returns:
            The header text.
        """
        if not self.closed:
            self.close()
        layout = layout or ColumnLayout()
        counter = _SnippetCounter()
        body = [self._render_line(line, layout, snippet, counter) for line in self._lines]

        if single_line and len(body) <= 1:
            content = body[0][2:] if body else ""
            comment = f"/**{content} */"
        else:
            comment = f"\n{indent}".join(["/**", *body, " */"])
        return f"{comment}\n{indent}"

    @staticmethod
    def _render_line(line: TagLine, layout: ColumnLayout, snippet: bool, counter: _SnippetCounter) -> str:
        parts = [" *"]
        width = 2
        if line.tag:
            parts.append(f" @{line.tag}")
            width += len(line.tag) + 2

        open_, close = line.wrapper
        value_display = display_text(line.value)
        segments = []
        if value_display or (snippet and line.force_placeholder):
            value_markup = _markup(line.value or "", snippet, counter, line.force_placeholder)
            if snippet:
                open_markup, close_markup = _escape_snippet(open_), _escape_snippet(close)
            else:
                open_markup, close_markup = open_, close
            segments.append(
                (open_ + value_display + close, open_markup + value_markup + close_markup, layout.value)
            )
        if display_text(line.name):
            segments.append((display_text(line.name), _markup(line.name, snippet, counter), layout.name))
        description_is_region = snippet and isinstance(line.description, Placeholder)
        if display_text(line.description) or description_is_region:
            segments.append(
                (display_text(line.description), _markup(line.description, snippet, counter), layout.description)
            )

        for display, markup, column in segments:
            padding = 1
            if line.align and column > 0:
                # Placeholder markup is not counted; only what the user sees is.
                padding = max(1, column - width)
            parts.append(" " * padding + markup)
            width += padding + len(display)
        return "".join(parts)
