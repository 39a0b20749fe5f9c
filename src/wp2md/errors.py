"""Exception hierarchy for wp2md.

All exceptions inherit from Wp2mdError so callers converting many posts can
catch failures for a single post and move on.
"""


class Wp2mdError(Exception):
    """Base exception for all wp2md errors."""


class ConversionError(Wp2mdError):
    """Raised when converting a post body from HTML to Markdown fails."""


class ConfigError(Wp2mdError):
    """Raised when a configuration file cannot be loaded or validated."""
