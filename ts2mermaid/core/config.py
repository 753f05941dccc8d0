"""Run configuration.

A Configuration carries the per-invocation options (where to scan, where to
save, what to hide, which names to keep). Options bundle several
configurations under an optional global default:

    # single configuration
    pathToScan: src
    hideExtends: true

    # list, each entry saved under mermaid/<name>/
    - name: models
      include: ["^Model"]

    # list with a global default merged into every entry
    global:
      pathToScan: src
    list:
      - name: api
        include: ["Request$", "Response$"]

Keys are accepted in snake_case or camelCase.
"""

import logging
import re
from typing import Any, List, Literal, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from .constants import DEFAULT_RENDERER
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class Configuration(BaseModel):
    """Options for one scan/render pass."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: Optional[str] = Field(None, description="Output name (file name or subdirectory)")
    path_to_scan: Optional[str] = Field(None, description="File or directory to scan")
    path_to_save: Optional[str] = Field(None, description="Output directory")
    hide_types: bool = Field(False, description="Drop type alias declarations")
    hide_interfaces: bool = Field(False, description="Drop interface declarations")
    hide_dependencies: bool = Field(False, description="Omit dependency arrows")
    hide_extends: bool = Field(False, description="Omit inheritance arrows")
    include: Optional[List[str]] = Field(None, description="Keep names matching any pattern")
    exclude: Optional[List[str]] = Field(None, description="Drop names matching any pattern")
    renderer: Literal["mmdc", "http", "none"] = Field(DEFAULT_RENDERER, description="SVG renderer")

    @field_validator("include", "exclude")
    @classmethod
    def check_patterns(cls, patterns: Optional[List[str]]) -> Optional[List[str]]:
        for pattern in patterns or []:
            try:
                re.compile(pattern)
            except re.error as e:
                raise ValueError(f"invalid regular expression {pattern!r}: {e}") from e
        return patterns

    @property
    def include_patterns(self) -> List[re.Pattern]:
        return [re.compile(p) for p in self.include or []]

    @property
    def exclude_patterns(self) -> List[re.Pattern]:
        return [re.compile(p) for p in self.exclude or []]


class Options(BaseModel):
    """Several configurations sharing a global default."""

    model_config = ConfigDict(populate_by_name=True)

    global_configuration: Configuration = Field(default_factory=Configuration, alias="global")
    configurations: List[Configuration] = Field(default_factory=list, alias="list")


def merge_configurations(base: Optional[Configuration], override: Configuration) -> Configuration:
    """Overlay ``override`` on ``base`` field by field.

    Only fields explicitly set on ``override`` win; everything else comes
    from ``base``.
    """
    if base is None:
        return override
    merged = {
        **base.model_dump(exclude_unset=True),
        **override.model_dump(exclude_unset=True),
    }
    return Configuration.model_validate(merged)


def parse_options(data: Any) -> Union[Configuration, Options]:
    """Build options from already-loaded data (e.g. parsed YAML).

    Raises:
        ConfigurationError: If the data has an unknown shape or invalid values
    """
    try:
        if data is None:
            return Configuration()
        if isinstance(data, list):
            return Options.model_validate({"list": data})
        if isinstance(data, dict):
            if "global" in data or "list" in data:
                return Options.model_validate(data)
            return Configuration.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e

    raise ConfigurationError(
        f"Invalid configuration: expected a mapping or a list, got {type(data).__name__}"
    )


def load_options(path: str) -> Union[Configuration, Options]:
    """Load options from a YAML file.

    Raises:
        ConfigurationError: If the file is not valid YAML or not valid options
        OSError: If the file cannot be read
    """
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e

    logger.debug(f"Loaded options from {path}")
    return parse_options(data)


def apply_overrides(
    options: Union[Configuration, Options], override: Configuration
) -> Union[Configuration, Options]:
    """Overlay ``override`` on a single configuration or on the global one."""
    if isinstance(options, Options):
        return options.model_copy(
            update={
                "global_configuration": merge_configurations(options.global_configuration, override)
            }
        )
    return merge_configurations(options, override)
