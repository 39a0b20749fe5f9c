"""Rule-based HTML to Markdown conversion."""

from __future__ import annotations

import logging
from textwrap import indent
from typing import Iterable, Optional

from bs4 import Comment, Doctype, Tag
from markdownify import ATX
from markdownify import MarkdownConverter as BaseMarkdownConverter
from markdownify import strip_pre

from ..models.config import ConverterConfig
from .rules import BUILTIN_RULES, ConversionRule, is_raw_block

logger = logging.getLogger(__name__)


class HtmlToMarkdown(BaseMarkdownConverter):
    """
    Converts WordPress post HTML to Markdown.

    Each tag is first offered to the registered conversion rules in order;
    the first rule whose predicate matches produces the output. Tags no rule
    claims get markdownify's default conversion.

    Example:
        converter = HtmlToMarkdown()
        markdown = converter.convert('<p>Hello <em>world</em></p>')
    """

    def __init__(self, rules: Iterable[ConversionRule] = BUILTIN_RULES, **options):
        options.setdefault("heading_style", ATX)
        options.setdefault("bullets", "*")
        options.setdefault("code_block_style", "fenced")
        options.setdefault("bs4_options", "html.parser")
        # GFM pipe tables take their header from the first row
        options.setdefault("table_infer_header", True)
        super().__init__(**options)
        self._rules = list(rules)

    @property
    def rules(self) -> tuple[ConversionRule, ...]:
        """Registered rules in precedence order."""
        return tuple(self._rules)

    def add_rule(self, rule: ConversionRule) -> "HtmlToMarkdown":
        """
        Register a rule after the existing ones.

        Call only while building the converter, before it is shared.

        Returns:
            Self for chaining
        """
        self._rules.append(rule)
        return self

    def match_rule(self, node: Tag) -> Optional[ConversionRule]:
        """Return the first rule matching node, or None."""
        for rule in self._rules:
            if rule.matches(node):
                return rule
        return None

    def process_tag(self, node, parent_tags=None):
        rule = self.match_rule(node)
        if rule is None or rule.render is None:
            return super().process_tag(node, parent_tags=parent_tags)

        child_tags = set(parent_tags or ())
        child_tags.add(node.name)
        content = "".join(
            self.process_element(child, parent_tags=child_tags)
            for child in node.children
            if not isinstance(child, (Comment, Doctype))
        )
        return rule.render(content, node)

    def process_text(self, el, parent_tags=None):
        parent_tags = parent_tags or set()
        if "pre" in parent_tags:
            # Preformatted text keeps every newline and indent, even beside a block
            text = str(el)
            if "_noformat" not in parent_tags:
                text = self.escape(text, parent_tags)
            return text

        text = super().process_text(el, parent_tags=parent_tags)
        # Raw-markup blocks bring their own line breaks
        if is_raw_block(el.previous_sibling):
            text = text.lstrip()
        if is_raw_block(el.next_sibling):
            text = text.rstrip()
        return text

    def convert_pre(self, el, text, parent_tags):
        if self.options["code_block_style"] != "indented":
            return super().convert_pre(el, text, parent_tags)
        if not text:
            return ""
        return "\n\n%s\n\n" % indent(strip_pre(text), "    ")


def build_converter(config: Optional[ConverterConfig] = None) -> HtmlToMarkdown:
    """
    Build a converter with every WordPress rule registered.

    The instance holds no external resources and is read-only once built,
    so one converter can be shared by every post conversion.

    Args:
        config: Style options (defaults: ATX headings, '*' bullets, fenced code)

    Returns:
        Configured HtmlToMarkdown instance
    """
    config = config or ConverterConfig()
    converter = HtmlToMarkdown(
        heading_style=config.heading_style,
        bullets=config.bullet_marker,
        code_block_style=config.code_block_style,
        escape_asterisks=config.escape_asterisks,
        escape_underscores=config.escape_underscores,
    )
    logger.debug(f"Built converter with rules: {', '.join(rule.name for rule in converter.rules)}")
    return converter
