"""Generator configuration.

Settings come from three layers, later ones winning:

  defaults (the models below)
  config file: swagger-codegen.config.json / .yaml / .yml, or --config
  CLI options

Keys may be written camelCase (outputDir, hooks.hookPattern) or
snake_case (output_dir, hooks.hook_pattern).
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel, to_snake

from .catalog import normalize_strip_paths
from .errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILES = (
    "swagger-codegen.config.json",
    "swagger-codegen.config.yaml",
    "swagger-codegen.config.yml",
)


class _Settings(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class AxiosConfigOptions(_Settings):
    """The generated axios instance module."""

    generate_axios_config: bool = True
    axios_config_path: str = "config"
    base_url_placeholder: str = "process.env.REACT_APP_API_URL"
    include_interceptors: bool = True
    skip_dependency_check: bool = False


class HookOptions(_Settings):
    """Generated React hooks."""

    generate_hooks: bool = True
    hooks_dir: str = "hooks"
    hook_pattern: Literal["separate", "combined"] = "separate"
    include_headers: bool = True
    use_fetch: bool = False
    skip_dependency_check: bool = False


class GeneratorConfig(_Settings):
    swagger_url: str
    output_dir: str = "./src/generated"
    models_dir: str = "models"
    endpoints_dir: str = "endpoints"
    generate_index: bool = True
    strip_base_path: str | list[str] | None = None
    axios_config: AxiosConfigOptions = Field(default_factory=AxiosConfigOptions)
    hooks: HookOptions = Field(default_factory=HookOptions)

    @field_validator("swagger_url")
    @classmethod
    def _require_source(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("swaggerUrl is required")
        return value

    @property
    def strip_paths(self) -> list[str]:
        return normalize_strip_paths(self.strip_base_path)

    @property
    def models_path(self) -> Path:
        return Path(self.output_dir) / self.models_dir

    @property
    def endpoints_path(self) -> Path:
        return Path(self.output_dir) / self.endpoints_dir

    @property
    def hooks_path(self) -> Path:
        return Path(self.output_dir) / self.hooks.hooks_dir

    @property
    def axios_config_dir(self) -> Path:
        return Path(self.output_dir) / self.axios_config.axios_config_path


def _snake_keys(data: Any) -> Any:
    """Recursively convert mapping keys to snake_case."""
    if isinstance(data, dict):
        return {to_snake(str(k)): _snake_keys(v) for k, v in data.items()}
    return data


def _deep_merge(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in overrides.items():
        if value is None:
            continue
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _parse_config(path: Path) -> dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    try:
        if path.suffix == ".json":
            data = json.loads(text)
        elif path.suffix in (".yaml", ".yml"):
            data = yaml.safe_load(text)
        else:
            raise ConfigError(
                f"Unsupported config file format: {path.suffix}. Use .json, .yaml or .yml"
            )
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigError(f"Failed to parse config {path}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return data


def load_config_file(
    config_path: str | Path | None = None,
    cwd: str | Path | None = None,
) -> dict[str, Any] | None:
    """Raw settings from an explicit config file, or one found in cwd."""
    base = Path(cwd) if cwd is not None else Path.cwd()
    if config_path is not None:
        path = base / config_path
        if not path.is_file():
            raise ConfigError(f"Config file not found: {path}")
        return _parse_config(path)

    for file_name in CONFIG_FILES:
        path = base / file_name
        if path.is_file():
            logger.info("Found config file: %s", file_name)
            return _parse_config(path)
    return None


def merge_config(
    file_config: dict[str, Any] | None,
    overrides: dict[str, Any] | None = None,
) -> GeneratorConfig:
    """Validated config from file settings plus non-None overrides."""
    data = _deep_merge(_snake_keys(file_config or {}), _snake_keys(overrides or {}))
    if not data.get("swagger_url"):
        raise ConfigError(
            "Swagger URL is required. Provide it as an argument or in a config file."
        )
    try:
        return GeneratorConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
