"""Pre-processing, conversion and post-processing of one post body."""

from __future__ import annotations

import logging
import re
from typing import Any, Mapping, Optional

from ..errors import ConversionError
from ..models.config import PostProcessingOptions
from .protocols import MarkdownConverter

logger = logging.getLogger(__name__)

# Two or more line breaks in a row
PARAGRAPH_BREAK_RE = re.compile(r"(?:\r?\n){2,}")
PARAGRAPH_MARKER = "\n<div></div>\n"

# <img ... src=".../name.ext" ...> for the image types the scraper saves
IMAGE_SRC_RE = re.compile(r'(<img[^>]*src=")[^"]*?([^/"]+\.(?:gif|jpe?g|png))("[^>]*>)', re.IGNORECASE)

# WordPress scaled copies: /photo-300x200.jpg -> /photo.jpg
SCALED_IMAGE_RE = re.compile(r"(/[a-z0-9_]+)-[a-z0-9]+(\.(?:gif|jpe?g|png))", re.IGNORECASE)

IFRAME_CLOSE_RE = re.compile(r"(</iframe>)", re.IGNORECASE)
IFRAME_PLACEHOLDER = "."
IFRAME_PLACEHOLDER_RE = re.compile(re.escape(IFRAME_PLACEHOLDER) + r"(</iframe>)", re.IGNORECASE)

# "*   Item", "-  Item", "1.   Item" at the start of a line
LIST_MARKER_SPACES_RE = re.compile(r"^([ \t]*(?:[-*+]|\d+\.)) {2,}", re.MULTILINE)


def insert_paragraph_markers(content: str) -> str:
    """
    Put an empty <div> between blank-line separated runs of text.

    markdownify collapses newlines in text nodes, so paragraphs that WordPress
    only separates by blank lines would merge. The converter turns the
    marker into exactly one blank line; inside <pre> it adds nothing, so code
    keeps its own newlines.
    """
    return PARAGRAPH_BREAK_RE.sub(PARAGRAPH_MARKER, content)


def rewrite_image_paths(content: str) -> str:
    """Point <img> sources at the local images/ folder the scraper writes to."""
    content = IMAGE_SRC_RE.sub(r"\g<1>images/\g<2>\g<3>", content)
    # Only the original of a scaled image is saved locally
    return SCALED_IMAGE_RE.sub(r"\g<1>\g<2>", content)


def add_iframe_placeholders(content: str) -> str:
    """Give every <iframe> a text child so it is never treated as empty."""
    return IFRAME_CLOSE_RE.sub(IFRAME_PLACEHOLDER + r"\g<1>", content)


def normalize_list_markers(markdown: str) -> str:
    return LIST_MARKER_SPACES_RE.sub(r"\g<1> ", markdown)


def remove_iframe_placeholders(markdown: str) -> str:
    return IFRAME_PLACEHOLDER_RE.sub(r"\g<1>", markdown)


def render_markdown(
    raw_html: str,
    converter: MarkdownConverter,
    options: Optional[PostProcessingOptions] = None,
) -> str:
    """
    Convert one post body to Markdown.

    Args:
        raw_html: Post body as exported (content:encoded)
        converter: Shared converter, usually from build_converter()
        options: Per-call flags (defaults to no local images)

    Returns:
        Markdown string

    Raises:
        ConversionError: If the conversion library fails on this post
    """
    options = options or PostProcessingOptions()

    content = insert_paragraph_markers(raw_html)
    if options.images_saved_locally:
        content = rewrite_image_paths(content)
    content = add_iframe_placeholders(content)

    try:
        markdown = converter.convert(content)
    except Exception as e:
        logger.error(f"Failed to convert HTML to Markdown: {e}")
        raise ConversionError(f"HTML to Markdown conversion failed: {e}") from e

    markdown = normalize_list_markers(markdown)
    markdown = remove_iframe_placeholders(markdown)

    logger.debug(f"Converted {len(raw_html)} bytes of HTML to {len(markdown)} bytes of Markdown")
    return markdown


def get_post_content(
    post: Mapping[str, Any],
    converter: MarkdownConverter,
    options: Optional[PostProcessingOptions] = None,
) -> str:
    """
    Render the body of a parsed WordPress export item.

    The export parser yields each field as a list of values; the body is the
    first value of ``encoded``. A plain string is accepted too.

    Args:
        post: Export item mapping with an ``encoded`` field
        converter: Shared converter
        options: Per-call flags

    Returns:
        Markdown string, empty if the post has no body
    """
    encoded = post.get("encoded")
    if isinstance(encoded, (list, tuple)):
        encoded = encoded[0] if encoded else None
    if not encoded:
        logger.debug("Post has no encoded content")
        return ""
    return render_markdown(encoded, converter, options)
