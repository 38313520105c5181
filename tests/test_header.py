"""Tests for header drafts and their rendering."""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from jsdocgen.models.declaration_kind import DeclarationKind
from jsdocgen.models.header import ColumnLayout, HeaderDraft, Placeholder, TagLine, display_text


def method_draft(description):
    draft = HeaderDraft(DeclarationKind.METHOD)
    draft.append(TagLine.text(description))
    draft.append(TagLine.blank())
    draft.append(TagLine(tag="param", value="number", name="a", description=Placeholder("")))
    draft.append(TagLine(tag="returns", value="number", description=Placeholder("")))
    return draft


class TestPlainRendering:
    """Test rendering for direct file insertion."""

    def test_indented_header(self):
        text = method_draft("Adds numbers.").render(indent="  ")

        assert text == (
            "/**\n"
            "   * Adds numbers.\n"
            "   *\n"
            "   * @param {number} a\n"
            "   * @returns {number}\n"
            "   */\n"
            "  "
        )

    def test_placeholders_render_their_text(self):
        draft = HeaderDraft(DeclarationKind.PROPERTY)
        draft.append(TagLine.text(Placeholder("Description placeholder")))

        assert draft.render() == "/**\n * Description placeholder\n */\n"

    def test_unwrapped_value(self):
        draft = HeaderDraft(DeclarationKind.CLASS_LIKE)
        draft.append(TagLine(tag="author", value="Ada", wrapper=("", ""), align=False))

        assert draft.render() == "/**\n * @author Ada\n */\n"


class TestSnippetRendering:
    """Test rendering with numbered tab stops."""

    def test_tab_stops_are_numbered_in_order(self):
        text = method_draft(Placeholder("Description placeholder")).render(snippet=True)

        assert text == (
            "/**\n"
            " * ${1:Description placeholder}\n"
            " *\n"
            " * @param {number\\} a ${2}\n"
            " * @returns {number\\} ${3}\n"
            " */\n"
        )

    def test_literal_text_is_escaped(self):
        draft = HeaderDraft(DeclarationKind.VARIABLE)
        draft.append(TagLine.text("Costs $5 {x} \\ more"))

        assert draft.render(snippet=True) == "/**\n * Costs \\$5 {x\\} \\\\ more\n */\n"

    def test_placeholder_text_is_escaped(self):
        draft = HeaderDraft(DeclarationKind.VARIABLE)
        draft.append(TagLine.text(Placeholder("a}b")))

        assert draft.render(snippet=True) == "/**\n * ${1:a\\}b}\n */\n"

    def test_forced_placeholder_with_empty_value(self):
        draft = HeaderDraft(DeclarationKind.METHOD)
        draft.append(
            TagLine(tag="since", value=Placeholder(""), wrapper=("", ""), align=False, force_placeholder=True)
        )

        assert draft.render(snippet=True) == "/**\n * @since ${1}\n */\n"
        assert draft.render() == "/**\n * @since\n */\n"


class TestAlignment:
    """Test tag column alignment."""

    LAYOUT = ColumnLayout(value=10, name=20, description=30)

    def test_columns(self):
        draft = HeaderDraft(DeclarationKind.METHOD)
        draft.append(TagLine(tag="param", value="string", name="s", description="text"))

        line = draft.render(self.LAYOUT).split("\n")[1]

        assert line == " * @param {string}  s         text"
        assert line.index("{") == 10
        assert line.index("s ") == 20
        assert line.index("text") == 30

    def test_placeholder_markup_does_not_shift_columns(self):
        draft = HeaderDraft(DeclarationKind.METHOD)
        draft.append(TagLine(tag="param", value="string", name="s", description=Placeholder("text")))

        line = draft.render(self.LAYOUT, snippet=True).split("\n")[1]

        assert line == " * @param {string\\}  s         ${1:text}"

    def test_overflow_keeps_single_space(self):
        draft = HeaderDraft(DeclarationKind.METHOD)
        draft.append(TagLine(tag="param", value="Record<string, number>", name="m", description="map"))

        line = draft.render(ColumnLayout(value=3, name=5, description=6)).split("\n")[1]

        assert line == " * @param {Record<string, number>} m map"

    def test_unaligned_lines_ignore_layout(self):
        draft = HeaderDraft(DeclarationKind.METHOD)
        draft.append(TagLine.text("Just text"))

        assert draft.render(self.LAYOUT).split("\n")[1] == " * Just text"


class TestSingleLine:
    """Test single-line comment rendering."""

    def test_one_line_collapses(self):
        draft = HeaderDraft(DeclarationKind.PROPERTY)
        draft.append(TagLine(tag="type", value="number"))

        assert draft.render(indent="    ", single_line=True) == "/** @type {number} */\n    "

    def test_several_lines_stay_multiline(self):
        draft = HeaderDraft(DeclarationKind.PROPERTY)
        draft.append(TagLine.text("Count."))
        draft.append(TagLine(tag="type", value="number"))

        assert draft.render(single_line=True) == "/**\n * Count.\n * @type {number}\n */\n"


class TestDraftLifecycle:
    """Test appending and closing drafts."""

    def test_close_drops_outer_blank_lines(self):
        draft = HeaderDraft(DeclarationKind.CLASS_LIKE)
        draft.append(TagLine.blank())
        draft.append(TagLine(tag="class"))
        draft.append(TagLine.blank())
        draft.append(TagLine.text(Placeholder("")))

        draft.close()

        assert draft.tags() == ["class"]
        assert len(draft.lines) == 1

    def test_append_after_close_fails(self):
        draft = HeaderDraft(DeclarationKind.CLASS_LIKE)
        draft.close()

        with pytest.raises(RuntimeError, match="closed"):
            draft.append(TagLine(tag="class"))

    def test_render_closes_draft(self):
        draft = HeaderDraft(DeclarationKind.FILE)
        draft.append(TagLine(tag="file"))
        draft.append(TagLine.blank())

        assert draft.render() == "/**\n * @file\n */\n"
        assert draft.closed

    def test_has_tag(self):
        draft = HeaderDraft(DeclarationKind.METHOD)
        draft.extend([TagLine(tag="async"), TagLine(tag="returns", value="Promise<void>")])

        assert draft.has_tag("async")
        assert not draft.has_tag("param")


def test_display_text():
    assert display_text(None) == ""
    assert display_text("a") == "a"
    assert display_text(Placeholder("b")) == "b"
