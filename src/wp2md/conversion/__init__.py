"""Content conversion for wp2md (WordPress HTML to Markdown)."""

from .markdown import HtmlToMarkdown, build_converter
from .protocols import MarkdownConverter
from .rules import BUILTIN_RULES, ConversionRule
from .transformer import get_post_content, render_markdown

__all__ = [
    # Protocols
    "MarkdownConverter",
    # Rule engine
    "ConversionRule",
    "BUILTIN_RULES",
    "HtmlToMarkdown",
    "build_converter",
    # Transformer
    "render_markdown",
    "get_post_content",
]
