"""Generator configuration file: models, loading and CLI merging.

Example ``generator-config.yaml``::

    version: "1.0"
    input:
      source: openapi.yaml
    output: generated
    generations:
      - generator: typescript_adi_http
        outputFile: api.ts
        options:
          includeServer: false
    hooks:
      afterGenerate:
        - prettier --write generated/api.ts
"""

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from api_codegen.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(".config/api-codegen/generator-config.yaml")
DEFAULT_OUTPUT_DIR = Path("generated")


class _ConfigModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class InputConfig(_ConfigModel):
    format: str | None = None  # explicit parser name; detected from the extension otherwise
    source: Path
    options: dict[str, Any] = {}


class GenerationConfig(_ConfigModel):
    """One generation target: a generator, where it writes, and its free-form options."""

    generator: str
    output_file: str = Field(alias="outputFile")
    enabled: bool = True
    template: Path | None = None
    plugin: Path | None = None
    options: dict[str, Any] = {}


class HooksConfig(_ConfigModel):
    before_generate: list[str] = Field(default=[], alias="beforeGenerate")
    after_generate: list[str] = Field(default=[], alias="afterGenerate")


class Config(_ConfigModel):
    version: str = "1.0"
    input: InputConfig | None = None
    output: Path | None = DEFAULT_OUTPUT_DIR
    generations: list[GenerationConfig] = []
    hooks: HooksConfig = Field(default_factory=HooksConfig)


def load_config(path: Path | None = None) -> Config:
    """Load the config file, or built-in defaults when no default file exists.

    An explicitly requested path that does not exist is an error.
    """
    config_path = Path(path) if path is not None else DEFAULT_CONFIG_PATH

    if not config_path.exists():
        if path is not None:
            raise ConfigError(f"Config file not found: {config_path}")
        logger.debug("No config at %s, using defaults", config_path)
        return Config()

    try:
        data = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigError(f"Failed to read config file {config_path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse config file {config_path}: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {config_path} must contain a mapping")

    try:
        config = Config.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid config file {config_path}: {exc}") from exc

    logger.debug("Loaded config from %s with %d generations", config_path, len(config.generations))
    return config


def merge_with_cli_args(
    config: Config, spec: Path | None = None, output: Path | None = None
) -> Config:
    """Return a copy of ``config`` with CLI values taking precedence."""
    updates: dict[str, Any] = {}
    if spec is not None:
        if config.input is None:
            updates["input"] = InputConfig(source=spec)
        else:
            updates["input"] = config.input.model_copy(update={"source": spec})
    if output is not None:
        updates["output"] = output
    return config.model_copy(update=updates)
