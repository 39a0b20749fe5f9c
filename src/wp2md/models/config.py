"""Pydantic configuration models for wp2md."""

from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field, ValidationError

from ..errors import ConfigError


class ConverterConfig(BaseModel):
    """Style options for the HTML to Markdown converter."""

    heading_style: Literal["atx", "atx_closed", "underlined"] = Field(
        "atx",
        description="Heading style (# Title, # Title #, or underlined)",
    )
    bullet_marker: Literal["*", "-", "+"] = Field("*", description="Bullet list marker")
    code_block_style: Literal["fenced", "indented"] = Field(
        "fenced",
        description="Render <pre> blocks as ``` fences or four-space indented blocks",
    )
    escape_asterisks: bool = Field(True, description="Escape * in text content")
    escape_underscores: bool = Field(True, description="Escape _ in text content")

    model_config = {"extra": "forbid"}


class PostProcessingOptions(BaseModel):
    """Per-call flags controlling the substitutions run before conversion."""

    images_saved_locally: bool = Field(
        False,
        description="Images were scraped to a local images/ folder; rewrite <img> sources to match",
    )

    model_config = {"extra": "forbid"}


class Wp2mdConfig(BaseModel):
    """
    Root configuration model for wp2md.

    Example:
        config = Wp2mdConfig(
            converter=ConverterConfig(bullet_marker="-"),
            post=PostProcessingOptions(images_saved_locally=True),
        )

    YAML format:
        converter:
          heading_style: atx
          bullet_marker: "-"
        post:
          images_saved_locally: true
        log_level: DEBUG
    """

    converter: ConverterConfig = Field(default_factory=ConverterConfig)
    post: PostProcessingOptions = Field(default_factory=PostProcessingOptions)

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        "INFO",
        description="Logging level",
    )
    log_file: Optional[Path] = Field(None, description="Log file path")

    model_config = {"extra": "forbid"}

    def to_yaml(self) -> str:
        """Serialize config to YAML string."""
        import yaml

        return yaml.dump(self.model_dump(mode="json", exclude_none=True), default_flow_style=False)

    @classmethod
    def from_yaml(cls, yaml_str: str) -> "Wp2mdConfig":
        """
        Load config from YAML string.

        Raises:
            ConfigError: If the YAML cannot be parsed or does not describe a valid config
        """
        import yaml

        try:
            data = yaml.safe_load(yaml_str)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(f"Expected a mapping at the top level, got {type(data).__name__}")

        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e

    @classmethod
    def from_yaml_file(cls, path: Path) -> "Wp2mdConfig":
        """Load config from YAML file."""
        return cls.from_yaml(path.read_text(encoding="utf-8"))
