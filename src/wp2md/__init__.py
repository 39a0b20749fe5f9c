"""
wp2md - Convert WordPress post HTML to Markdown for static-site generators.

Usage:
    from wp2md import PostProcessingOptions, build_converter, render_markdown

    converter = build_converter()
    markdown = render_markdown(
        post_html,
        converter,
        PostProcessingOptions(images_saved_locally=True),
    )
"""

__version__ = "1.0.0"

from .conversion import (
    BUILTIN_RULES,
    ConversionRule,
    HtmlToMarkdown,
    build_converter,
    get_post_content,
    render_markdown,
)
from .errors import ConfigError, ConversionError, Wp2mdError
from .logging_config import setup_logging, setup_logging_from_config
from .models.config import ConverterConfig, PostProcessingOptions, Wp2mdConfig

__all__ = [
    "__version__",
    # Conversion
    "build_converter",
    "render_markdown",
    "get_post_content",
    "HtmlToMarkdown",
    "ConversionRule",
    "BUILTIN_RULES",
    # Config
    "Wp2mdConfig",
    "ConverterConfig",
    "PostProcessingOptions",
    # Errors
    "Wp2mdError",
    "ConversionError",
    "ConfigError",
    # Logging
    "setup_logging",
    "setup_logging_from_config",
]
