"""Conversion rules for WordPress and plugin markup.

A rule pairs a predicate over a parsed node with a function producing the
replacement text. Rules are tried in order ahead of markdownify's per-tag
conversion and the first match wins. Predicates only read the tree.
"""

from __future__ import annotations

import html
from dataclasses import dataclass
from typing import Callable, Optional, Union

from bs4 import Comment, Doctype, NavigableString, Tag
from bs4.dammit import EntitySubstitution
from bs4.formatter import HTMLFormatter

NodePredicate = Callable[[Tag], bool]
NodeRenderer = Callable[[str, Tag], str]

# Tags handled by markdownify's built-in pipe-table conversion
TABLE_TAGS = frozenset({"table", "thead", "tbody", "tfoot", "tr", "th", "td", "caption"})

# Tags emitted as raw markup that surrounding whitespace should not leak into
RAW_BLOCK_TAGS = frozenset({"script", "iframe"})

# Blocks whose Markdown is padded by blank lines once they have content
FILLED_BLOCK_TAGS = frozenset({"p", "div", "article", "section", "pre", "h1", "h2", "h3", "h4", "h5", "h6"})

# Containers where a paragraph break between children would split the structure
SILENT_MARKER_PARENTS = frozenset({"table", "thead", "tbody", "tfoot", "tr", "ul", "ol", "dl"})


@dataclass(frozen=True)
class ConversionRule:
    """
    A named override of the default HTML to Markdown conversion.

    Attributes:
        name: Identifier used in logs and for lookups
        matches: Side-effect free predicate deciding whether the rule applies
        render: Builds the replacement from the converted children text and
            the node. None hands the node to the converter's built-in
            conversion, which still stops later rules from claiming it.
    """

    name: str
    matches: NodePredicate
    render: Optional[NodeRenderer] = None


class SourceOrderFormatter(HTMLFormatter):
    """
    bs4 formatter that writes attributes in the order the author wrote them.

    bs4's own formatters sort attributes alphabetically, which breaks
    embed markup that is meant to pass through untouched.
    """

    def attributes(self, tag):
        if tag.attrs is None:
            return []
        return [
            (key, None if self.empty_attributes_are_booleans and value == "" else value)
            for key, value in tag.attrs.items()
        ]


# Exact markup for tweet and codepen embeds
RAW_MARKUP = SourceOrderFormatter(
    entity_substitution=EntitySubstitution.substitute_xml,
    void_element_close_prefix="",
)

# Scripts and iframes write empty attributes bare: async, allowfullscreen
RAW_EMBED_TAG = SourceOrderFormatter(
    entity_substitution=EntitySubstitution.substitute_xml,
    void_element_close_prefix="",
    empty_attributes_are_booleans=True,
)


def _classes(node: Tag) -> list[str]:
    value = node.get("class") or []
    if isinstance(value, str):
        return value.split()
    return list(value)


def _is_content(el: Union[Tag, NavigableString, None]) -> bool:
    """Tags and non-whitespace text are content; comments and doctypes are not."""
    if isinstance(el, Tag):
        return True
    if isinstance(el, (Comment, Doctype)):
        return False
    if isinstance(el, NavigableString):
        return el.strip() != ""
    return False


def _is_blank_text(el: Union[Tag, NavigableString, None]) -> bool:
    return isinstance(el, NavigableString) and not isinstance(el, (Comment, Doctype)) and not el.strip()


def _is_marker(el: Union[Tag, NavigableString, None]) -> bool:
    return isinstance(el, Tag) and is_paragraph_marker(el)


def _previous_content_sibling(node: Tag, skip_markers: bool = False) -> Union[Tag, NavigableString, None]:
    sibling = node.previous_sibling
    while sibling is not None and (not _is_content(sibling) or (skip_markers and _is_marker(sibling))):
        sibling = sibling.previous_sibling
    return sibling


def _next_content_sibling(node: Tag, skip_markers: bool = False) -> Union[Tag, NavigableString, None]:
    sibling = node.next_sibling
    while sibling is not None and (not _is_content(sibling) or (skip_markers and _is_marker(sibling))):
        sibling = sibling.next_sibling
    return sibling


def _content_children(node: Tag) -> list[Union[Tag, NavigableString]]:
    return [child for child in node.children if _is_content(child) and not _is_marker(child)]


def _first_element_child(node: Tag) -> Optional[Tag]:
    """First content child, or None if there is none or it is text."""
    children = _content_children(node)
    if children and isinstance(children[0], Tag):
        return children[0]
    return None


def is_raw_block(el: Union[Tag, NavigableString, None]) -> bool:
    return isinstance(el, Tag) and el.name in RAW_BLOCK_TAGS


# --- paragraph break -------------------------------------------------------


def is_paragraph_marker(node: Tag) -> bool:
    """Empty, attribute-less <div> inserted between blank-line separated text."""
    return node.name == "div" and not node.attrs and not node.contents


def _leading_newlines(node: Tag) -> int:
    """How many newlines the Markdown for node starts with."""
    if node.name in ("hr", "iframe", "script", "table", "figcaption") or is_tweet(node) or is_codepen(node):
        return 2
    if node.name in ("ul", "ol"):
        # nested lists open with a single newline
        return 1 if node.find_parent("li") is not None else 2
    if node.name == "blockquote":
        return 1
    if node.name in FILLED_BLOCK_TAGS and (node.get_text().strip() or node.find(True) is not None):
        return 2
    return 0


def _preformatted_gap(node: Tag) -> str:
    # Whitespace-only text touching a <div> is dropped before it is rendered,
    # so the markers around it put it back, each blank run exactly once
    gap = ""
    previous = node.previous_sibling
    if _is_blank_text(previous) and not _is_marker(previous.previous_sibling):
        gap += str(previous)
    following = node.next_sibling
    if _is_blank_text(following):
        gap += str(following)
    return gap


def render_paragraph_break(content: str, node: Tag) -> str:
    """
    Separate the text on either side of a marker by a blank line.

    Inside <pre> the surrounding text keeps its own newlines, so the marker
    adds nothing of its own. Elsewhere it tops up the newlines the next
    block opens with, so a blank line separates the two sides exactly once.
    """
    if node.find_parent("pre") is not None:
        return _preformatted_gap(node)
    if node.parent is not None and node.parent.name in SILENT_MARKER_PARENTS:
        return ""
    previous = _previous_content_sibling(node, skip_markers=True)
    following = _next_content_sibling(node, skip_markers=True)
    if previous is None or following is None or _is_marker(_next_content_sibling(node)):
        return ""
    if isinstance(following, Tag):
        return "\n" * (2 - _leading_newlines(following))
    return "\n\n"


# --- tables ----------------------------------------------------------------


def is_table_element(node: Tag) -> bool:
    return node.name in TABLE_TAGS


# --- embeds ----------------------------------------------------------------


def is_tweet(node: Tag) -> bool:
    return node.name == "blockquote" and "twitter-tweet" in _classes(node)


def is_codepen(node: Tag) -> bool:
    # Codepen embed snippets changed over the years; these checks hold for all of them
    return node.name in ("p", "div") and node.has_attr("data-slug-hash") and "codepen" in _classes(node)


def render_embed(content: str, node: Tag) -> str:
    """Raw markup padded by blank lines, kept snug with a following <script>."""
    following = _next_content_sibling(node)
    after = "\n" if isinstance(following, Tag) and following.name == "script" else "\n\n"
    return "\n\n" + node.decode(formatter=RAW_MARKUP) + after


def render_script(content: str, node: Tag) -> str:
    before = "\n\n"
    previous = _previous_content_sibling(node)
    if isinstance(previous, Tag) and not _is_marker(previous):
        # keep tweet and codepen <script> tags attached to the element above them
        before = "\n"
    return before + node.decode(formatter=RAW_EMBED_TAG) + "\n\n"


def render_iframe(content: str, node: Tag) -> str:
    return "\n\n" + node.decode(formatter=RAW_EMBED_TAG) + "\n\n"


# --- gallery ---------------------------------------------------------------

GALLERY_SHAPE = ("figure", "a", "img")


def _gallery_image(item: Union[Tag, NavigableString]) -> Optional[Tag]:
    """Return the <img> of an ``li > figure > a > img`` item, else None."""
    if not isinstance(item, Tag) or item.name != "li":
        return None
    node: Optional[Tag] = item
    for name in GALLERY_SHAPE:
        node = _first_element_child(node)
        if node is None or node.name != name:
            return None
    return node


def is_gallery(node: Tag) -> bool:
    if node.name != "ul":
        return False
    items = _content_children(node)
    return bool(items) and all(_gallery_image(item) is not None for item in items)


def render_gallery(content: str, node: Tag) -> str:
    lines = ["<Gallery>"]
    for item in _content_children(node):
        img = _gallery_image(item)
        src = html.escape(img.get("src") or "")
        alt = html.escape(img.get("alt") or "")
        lines.append(f'\t<img src="{src}" alt="{alt}">')
    lines.append("</Gallery>")
    return "\n\n" + "\n".join(lines) + "\n\n"


BUILTIN_RULES: tuple[ConversionRule, ...] = (
    ConversionRule("paragraph_break", is_paragraph_marker, render_paragraph_break),
    ConversionRule("tables", is_table_element),
    ConversionRule("tweet", is_tweet, render_embed),
    ConversionRule("codepen", is_codepen, render_embed),
    ConversionRule("script", lambda node: node.name == "script", render_script),
    ConversionRule("iframe", lambda node: node.name == "iframe", render_iframe),
    ConversionRule("gallery", is_gallery, render_gallery),
)
