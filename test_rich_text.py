"""
Unit tests for rich_text module.
"""

import pytest

from dinaforms.rich_text import (
    LINK_PLACEHOLDER_URL,
    RichText,
    StyleKind,
    StyleSpan,
)


class TestFromHtml:
    """Test HTML to styled text conversion."""

    def test_plain_text(self):
        content = RichText.from_html("Just text")

        assert content.text == "Just text"
        assert content.spans == ()

    def test_empty_input(self):
        assert RichText.from_html("") == RichText()
        assert RichText.from_html(None) == RichText()

    def test_inline_styles_become_spans(self):
        content = RichText.from_html("<b>Bold</b> and <i>italic</i> and <u>under</u>")

        assert content.text == "Bold and italic and under"
        assert StyleSpan(0, 4, StyleKind.BOLD) in content.spans
        assert StyleSpan(9, 15, StyleKind.ITALIC) in content.spans
        assert StyleSpan(20, 25, StyleKind.UNDERLINE) in content.spans

    def test_strong_and_em_aliases(self):
        content = RichText.from_html("<strong>A</strong><em>B</em>")

        assert content.text == "AB"
        assert {span.kind for span in content.spans} == {StyleKind.BOLD, StyleKind.ITALIC}

    def test_links_keep_href(self):
        content = RichText.from_html('See <a href="https://example.org">docs</a>')

        assert content.text == "See docs"
        assert content.spans == (StyleSpan(4, 8, StyleKind.LINK, "https://example.org"),)

    def test_paragraphs_are_compact(self):
        """Test that block elements are separated by a single newline."""
        content = RichText.from_html("<p>First</p><p>Second</p>")

        assert content.text == "First\nSecond"

    def test_line_breaks(self):
        assert RichText.from_html("one<br>two").text == "one\ntwo"

    def test_whitespace_collapsed(self):
        content = RichText.from_html("<p>  lots   of\n   space </p>")

        assert content.text == "lots of space"

    def test_nested_styles(self):
        content = RichText.from_html("<p>Tell us about <b>your<i>self</i></b>.</p>")

        assert content.text == "Tell us about yourself."
        assert StyleSpan(14, 22, StyleKind.BOLD) in content.spans
        assert StyleSpan(18, 22, StyleKind.ITALIC) in content.spans

    def test_malformed_html_does_not_raise(self):
        content = RichText.from_html("<p>Open <b>bold never closed")

        assert content.text == "Open bold never closed"
        assert content.styles_at(5) == {StyleKind.BOLD}


class TestEditing:
    """Test toolbar operations over a selection."""

    def setup_method(self):
        self.content = RichText(text="Hello world")

    def test_apply_style(self):
        styled = self.content.apply_style(0, 5, StyleKind.BOLD)

        assert styled.spans == (StyleSpan(0, 5, StyleKind.BOLD),)
        assert styled.text == "Hello world"
        # original value is untouched
        assert self.content.spans == ()

    def test_apply_style_accepts_string_kind(self):
        styled = self.content.apply_style(0, 5, "italic")

        assert styled.spans[0].kind is StyleKind.ITALIC

    def test_overlapping_styles_coexist(self):
        styled = (self.content
                  .apply_style(0, 5, StyleKind.BOLD)
                  .apply_style(3, 8, StyleKind.ITALIC)
                  .apply_style(0, 11, StyleKind.UNDERLINE))

        assert len(styled.spans) == 3
        assert styled.styles_at(4) == {StyleKind.BOLD, StyleKind.ITALIC, StyleKind.UNDERLINE}
        assert styled.styles_at(9) == {StyleKind.UNDERLINE}

    def test_end_is_exclusive(self):
        styled = self.content.apply_style(0, 5, StyleKind.BOLD)

        assert StyleKind.BOLD in styled.styles_at(4)
        assert StyleKind.BOLD not in styled.styles_at(5)

    def test_reversed_selection_is_normalized(self):
        styled = self.content.apply_style(5, 0, StyleKind.BOLD)

        assert styled.spans == (StyleSpan(0, 5, StyleKind.BOLD),)

    def test_empty_selection_is_noop(self):
        assert self.content.apply_style(3, 3, StyleKind.BOLD) is self.content

    def test_out_of_range_selection_raises(self):
        with pytest.raises(ValueError):
            self.content.apply_style(0, 50, StyleKind.BOLD)
        with pytest.raises(ValueError):
            self.content.apply_style(-1, 2, StyleKind.BOLD)

    def test_apply_style_rejects_link(self):
        with pytest.raises(ValueError):
            self.content.apply_style(0, 5, StyleKind.LINK)

    def test_insert_link_uses_placeholder(self):
        linked = self.content.insert_link(6, 11)

        assert linked.spans == (StyleSpan(6, 11, StyleKind.LINK, LINK_PLACEHOLDER_URL),)
        assert LINK_PLACEHOLDER_URL == "https://www.exemplo.com"

    def test_insert_link_empty_selection_leaves_text_unannotated(self):
        linked = self.content.insert_link(4, 4)

        assert linked.spans == ()
        assert linked == self.content


class TestToHtml:
    """Test serialization back to inline HTML."""

    def test_plain(self):
        assert RichText(text="a < b").to_html() == "a &lt; b"

    def test_styled_segments(self):
        content = RichText(text="Hello world").apply_style(0, 5, StyleKind.BOLD)

        assert content.to_html() == "<b>Hello</b> world"

    def test_overlapping_segments(self):
        content = (RichText(text="abcd")
                   .apply_style(0, 3, StyleKind.BOLD)
                   .apply_style(2, 4, StyleKind.ITALIC))

        assert content.to_html() == "<b>ab</b><b><i>c</i></b><i>d</i>"

    def test_link_and_newline(self):
        content = RichText(text="go\nhere").insert_link(3, 7)

        assert content.to_html() == 'go<br><a href="https://www.exemplo.com">here</a>'

    def test_empty(self):
        assert RichText().to_html() == ""


class TestWithText:
    """Test replacing the text of styled content."""

    def test_spans_kept_when_text_grows(self):
        content = RichText(text="Hello", spans=(StyleSpan(0, 5, StyleKind.BOLD),))

        edited = content.with_text("Hello world")

        assert edited.text == "Hello world"
        assert edited.spans == (StyleSpan(0, 5, StyleKind.BOLD),)

    def test_spans_clipped_and_dropped_when_text_shrinks(self):
        content = RichText(text="Hello world", spans=(
            StyleSpan(0, 5, StyleKind.BOLD),
            StyleSpan(6, 11, StyleKind.LINK, LINK_PLACEHOLDER_URL),
        ))

        edited = content.with_text("Hello w")

        assert edited.spans == (
            StyleSpan(0, 5, StyleKind.BOLD),
            StyleSpan(6, 7, StyleKind.LINK, LINK_PLACEHOLDER_URL),
        )
        assert content.with_text("Hi").spans == (StyleSpan(0, 2, StyleKind.BOLD),)
        assert content.with_text("").spans == ()
