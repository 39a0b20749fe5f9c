"""Protocol definitions for content conversion."""

from typing import Protocol


class MarkdownConverter(Protocol):
    """
    Protocol for converting HTML to Markdown.

    Implementations convert one post body at a time and must not keep
    per-call state, so a single instance can serve every post.
    """

    def convert(self, html: str) -> str:
        """
        Convert HTML to Markdown.

        Args:
            html: HTML content string

        Returns:
            Markdown string
        """
        ...
