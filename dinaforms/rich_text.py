"""
Rich text model for description fields.

A RichText value is plain text plus style spans over half-open character
ranges. Editing operations return new values; spans may overlap and are
applied additively.
"""

import html
import re
from dataclasses import dataclass, replace
from enum import Enum
from typing import FrozenSet, List, Optional, Tuple
import logging

from lxml import etree
from lxml import html as lxml_html

logger = logging.getLogger(__name__)

LINK_PLACEHOLDER_URL = "https://www.exemplo.com"

_WHITESPACE_RE = re.compile(r"\s+")


class StyleKind(str, Enum):
    """Annotations the description toolbar can apply."""
    BOLD = "bold"
    ITALIC = "italic"
    UNDERLINE = "underline"
    LINK = "link"


TAG_STYLES = {
    'b': StyleKind.BOLD,
    'strong': StyleKind.BOLD,
    'i': StyleKind.ITALIC,
    'em': StyleKind.ITALIC,
    'cite': StyleKind.ITALIC,
    'dfn': StyleKind.ITALIC,
    'u': StyleKind.UNDERLINE,
    'ins': StyleKind.UNDERLINE,
}

BLOCK_TAGS = frozenset({
    'p', 'div', 'h1', 'h2', 'h3', 'h4', 'h5', 'h6', 'li', 'ul', 'ol',
    'blockquote', 'section', 'article', 'header', 'footer', 'pre', 'table', 'tr'
})

# Serialization order, outermost first
_STYLE_TAGS = ((StyleKind.BOLD, 'b'), (StyleKind.ITALIC, 'i'), (StyleKind.UNDERLINE, 'u'))


@dataclass(frozen=True)
class StyleSpan:
    """Style annotation over [start, end)."""
    start: int
    end: int
    kind: StyleKind
    url: Optional[str] = None

    def covers(self, position: int) -> bool:
        return self.start <= position < self.end


class _TextCollector:
    """Accumulates compact text and style spans while walking an lxml tree."""

    def __init__(self):
        self.text = ""
        self.spans: List[StyleSpan] = []

    def append(self, fragment: Optional[str]) -> None:
        if not fragment:
            return
        fragment = _WHITESPACE_RE.sub(" ", fragment)
        if fragment.startswith(" ") and (not self.text or self.text[-1] in " \n"):
            fragment = fragment[1:]
        self.text += fragment

    def newline(self) -> None:
        if self.text and not self.text.endswith("\n"):
            self.text += "\n"

    def walk(self, element) -> None:
        tag = element.tag if isinstance(element.tag, str) else None
        if tag is None:
            # comments and processing instructions only contribute their tail
            self.append(element.tail)
            return

        tag = tag.lower()
        if tag == 'br':
            self.text += "\n"
            self.append(element.tail)
            return

        is_block = tag in BLOCK_TAGS
        if is_block:
            self.newline()

        start = len(self.text)
        self.append(element.text)
        for child in element:
            self.walk(child)
        end = len(self.text)

        if end > start:
            if tag in TAG_STYLES:
                self.spans.append(StyleSpan(start, end, TAG_STYLES[tag]))
            elif tag == 'a' and element.get('href'):
                self.spans.append(StyleSpan(start, end, StyleKind.LINK, element.get('href')))

        if is_block:
            self.newline()
        self.append(element.tail)


@dataclass(frozen=True)
class RichText:
    """Immutable styled text."""
    text: str = ""
    spans: Tuple[StyleSpan, ...] = ()

    @classmethod
    def from_html(cls, html_content: Optional[str]) -> "RichText":
        """
        Convert an HTML fragment into compact styled text.

        Block elements are separated by single newlines, whitespace runs are
        collapsed and inline bold, italic, underline and link markup becomes
        style spans. Malformed markup is parsed best-effort.

        Args:
            html_content: HTML fragment (plain text is accepted too)

        Returns:
            RichText value
        """
        if not html_content or not html_content.strip():
            return cls()

        try:
            root = lxml_html.fragment_fromstring(html_content, create_parent='div')
        except (etree.ParserError, ValueError) as e:
            logger.warning(f"Could not parse description HTML, using it as plain text: {e}")
            return cls(text=html_content)

        collector = _TextCollector()
        collector.append(root.text)
        for child in root:
            collector.walk(child)

        text = collector.text.rstrip()
        spans = tuple(
            replace(span, end=min(span.end, len(text)))
            for span in collector.spans
            if span.start < len(text)
        )
        return cls(text=text, spans=spans)

    def _selection(self, start: int, end: int) -> Tuple[int, int]:
        if start > end:
            start, end = end, start
        if start < 0 or end > len(self.text):
            raise ValueError(f"Selection [{start}, {end}) is outside text of length {len(self.text)}")
        return start, end

    def apply_style(self, start: int, end: int, kind: StyleKind) -> "RichText":
        """
        Annotate the selection [start, end) with a style.

        Args:
            start: Selection start
            end: Selection end (exclusive)
            kind: BOLD, ITALIC or UNDERLINE

        Returns:
            New RichText with the extra span; unchanged for an empty selection

        Raises:
            ValueError: If the selection is out of range or kind is LINK
        """
        kind = StyleKind(kind)
        if kind is StyleKind.LINK:
            raise ValueError("Links are added with insert_link")

        start, end = self._selection(start, end)
        if start == end:
            return self
        return replace(self, spans=self.spans + (StyleSpan(start, end, kind),))

    def insert_link(self, start: int, end: int) -> "RichText":
        """Link a non-empty selection to the placeholder URL."""
        start, end = self._selection(start, end)
        if start == end:
            logger.debug("insert_link called with an empty selection, ignoring")
            return self
        return replace(self, spans=self.spans + (StyleSpan(start, end, StyleKind.LINK, LINK_PLACEHOLDER_URL),))

    def with_text(self, text: str) -> "RichText":
        """Replace the text, clipping spans to the new length and dropping empty ones."""
        spans = tuple(
            replace(span, end=min(span.end, len(text)))
            for span in self.spans
            if span.start < len(text)
        )
        return RichText(text=text, spans=spans)

    def styles_at(self, position: int) -> FrozenSet[StyleKind]:
        return frozenset(span.kind for span in self.spans if span.covers(position))

    def to_html(self) -> str:
        """Serialize text and spans to inline HTML."""
        boundaries = sorted({0, len(self.text)}
                            | {span.start for span in self.spans}
                            | {span.end for span in self.spans})
        parts = []
        for seg_start, seg_end in zip(boundaries, boundaries[1:]):
            covering = [span for span in self.spans if span.start <= seg_start and span.end >= seg_end]
            segment = html.escape(self.text[seg_start:seg_end]).replace("\n", "<br>")

            kinds = {span.kind for span in covering}
            for kind, tag in reversed(_STYLE_TAGS):
                if kind in kinds:
                    segment = f"<{tag}>{segment}</{tag}>"

            links = [span for span in covering if span.kind is StyleKind.LINK]
            if links:
                segment = f'<a href="{html.escape(links[-1].url or "")}">{segment}</a>'
            parts.append(segment)
        return "".join(parts)
