"""wp2md configuration models."""

from .config import ConverterConfig, PostProcessingOptions, Wp2mdConfig

__all__ = [
    "ConverterConfig",
    "PostProcessingOptions",
    "Wp2mdConfig",
]
