"""
Section header interpreter.
Turns a section's HTML title into heading, paragraph and image blocks.
"""

import re
from typing import Optional, Tuple
import logging

from lxml import etree
from lxml import html as lxml_html

from .descriptors import Block, Heading, Image, Paragraph

logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")


def _element_text(element) -> str:
    """Text content with whitespace runs collapsed to single spaces."""
    return _WHITESPACE_RE.sub(" ", element.text_content())


def _first_image_src(element) -> Optional[str]:
    for img in element.iter('img'):
        src = img.get('src')
        if src:
            return src
    return None


def parse_section_header(html_content: Optional[str]) -> Tuple[Block, ...]:
    """
    Parse a section title HTML fragment into display blocks.

    Only top-level elements are inspected: ``h1`` becomes a Heading, ``p``
    becomes a Paragraph followed by an Image when the paragraph holds an
    ``img``. Anything else is skipped. Parsing is lenient and never raises.

    Args:
        html_content: HTML fragment from the schema

    Returns:
        Tuple of blocks in document order
    """
    if not html_content or not html_content.strip():
        return ()

    try:
        document = lxml_html.document_fromstring(f"<html><body>{html_content}</body></html>")
    except (etree.ParserError, ValueError) as e:
        logger.warning(f"Could not parse section header HTML: {e}")
        return ()

    body = document.find('body')
    if body is None:
        return ()

    blocks = []
    for element in body:
        # comments and processing instructions have no string tag
        if not isinstance(element.tag, str):
            continue

        tag = element.tag.lower()
        if tag == 'h1':
            blocks.append(Heading(_element_text(element)))
        elif tag == 'p':
            blocks.append(Paragraph(_element_text(element)))
            src = _first_image_src(element)
            if src:
                blocks.append(Image(src))
        else:
            logger.debug(f"Ignoring <{tag}> in section header")

    return tuple(blocks)
