"""Stamp configuration files."""

import os
from enum import Enum
from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .errors import ConfigError
from .resolver import PathTarget
from .sync import DEFAULT_REMOTE
from .version import DEFAULT_ENV_PREFIX

DEFAULT_CONFIG_NAME = "gitstamp.yaml"


class OutputFormat(str, Enum):
    """Rendering of version metadata."""

    JSON = "json"
    YAML = "yaml"
    ENV = "env"


class StampConfig(BaseModel):
    """
    What to stamp and how to render it.

    Example gitstamp.yaml:

        targets:
          - path: src
            include_subdirs: true
          - path: "docs/*.md"
        remote: origin
        format: env
        env_prefix: BUILD_
    """

    targets: list[PathTarget] = Field(
        default_factory=list, description="Targets to inspect (default: '.')"
    )
    remote: str = Field(default=DEFAULT_REMOTE, description="Remote for sync checks")
    format: OutputFormat = Field(
        default=OutputFormat.JSON, description="Output format"
    )
    env_prefix: str = Field(
        default=DEFAULT_ENV_PREFIX, description="Variable prefix for env output"
    )

    @field_validator("targets", mode="before")
    @classmethod
    def accept_bare_paths(cls, v):
        """Allow plain strings in the targets list."""
        if not isinstance(v, list):
            return v
        return [{"path": t} if isinstance(t, str) else t for t in v]

    def relative_to(self, base_dir: Union[str, Path]) -> "StampConfig":
        """Return a copy with relative target paths anchored at base_dir."""
        targets = [
            t
            if os.path.isabs(t.path)
            else t.model_copy(update={"path": os.path.join(str(base_dir), t.path)})
            for t in self.targets
        ]
        return self.model_copy(update={"targets": targets})

    @classmethod
    def from_yaml(cls, yaml_str: str) -> "StampConfig":
        """
        Parse configuration from a YAML string.

        Raises:
            ConfigError: If the YAML or its content is invalid
        """
        try:
            data = yaml.safe_load(yaml_str)
        except yaml.YAMLError as e:
            raise ConfigError(f"invalid YAML: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError("configuration must be a mapping")

        try:
            return cls(**data)
        except ValidationError as e:
            raise ConfigError(f"invalid configuration: {e}") from e

    @classmethod
    def load(cls, path: Union[str, Path]) -> "StampConfig":
        """
        Read a configuration file; target paths resolve against its directory.

        Raises:
            ConfigError: If the file cannot be read or is invalid
        """
        path = Path(path)
        try:
            text = path.read_text()
        except OSError as e:
            raise ConfigError(f"cannot read {path}: {e}") from e
        return cls.from_yaml(text).relative_to(path.parent)


def find_config(start: Optional[Union[str, Path]] = None) -> Optional[Path]:
    """Return gitstamp.yaml in start (default: cwd) if present."""
    candidate = Path(start or Path.cwd()) / DEFAULT_CONFIG_NAME
    return candidate if candidate.is_file() else None
