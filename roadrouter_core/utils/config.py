"""Configuration utilities.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Type, TypeVar

import yaml

logger = logging.getLogger(__name__)

T = TypeVar("T", bound="Config")

DEFAULT_ENV_PREFIX = "ROADROUTER_"


@dataclass
class Config:
    """Router configuration."""

    # Server settings
    host: str = "127.0.0.1"
    port: int = 8080
    max_request_size: int = 1024 * 1024
    read_timeout: float = 30.0

    # Logging
    log_level: str = "INFO"
    log_format: str = "text"
    access_log: bool = True

    # Routing
    reject_duplicate_variables: bool = False
    routes: List[Dict[str, str]] = field(default_factory=list)

    @classmethod
    def from_dict(cls: Type[T], data: Dict[str, Any]) -> T:
        """Create config from dictionary."""
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ValueError(f"Config must be a mapping, got {type(data).__name__}")

        # Filter to only valid fields
        valid_fields = {f.name for f in fields(cls)}
        filtered = {k: v for k, v in data.items() if k in valid_fields}
        return cls(**filtered)

    @classmethod
    def from_json(cls: Type[T], path: str) -> T:
        """Load config from JSON file."""
        with open(path, "r") as f:
            data = json.load(f)
        return cls.from_dict(data)

    @classmethod
    def from_yaml(cls: Type[T], path: str) -> T:
        """Load config from YAML file."""
        with open(path, "r") as f:
            data = yaml.safe_load(f)
        return cls.from_dict(data)

    @classmethod
    def from_env(cls: Type[T], prefix: str = DEFAULT_ENV_PREFIX) -> T:
        """Load config from environment variables."""
        data = {}

        for key, value in os.environ.items():
            if key.startswith(prefix):
                config_key = key[len(prefix):].lower()

                # Type conversion
                if value.lower() in ("true", "false"):
                    data[config_key] = value.lower() == "true"
                elif value.isdigit():
                    data[config_key] = int(value)
                else:
                    try:
                        data[config_key] = float(value)
                    except ValueError:
                        data[config_key] = value

        return cls.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def merge(self, other: "Config") -> "Config":
        """Merge with another config.

        Values of ``other`` that differ from the defaults take precedence.
        """
        defaults = type(other)().to_dict()
        data = self.to_dict()
        for key, value in other.to_dict().items():
            if value != defaults[key]:
                data[key] = value
        return type(self).from_dict(data)


def load_config(
    path: Optional[str] = None,
    env_prefix: str = DEFAULT_ENV_PREFIX,
) -> Config:
    """Load configuration from multiple sources.

    Priority (highest to lowest):
    1. Environment variables
    2. Config file (if provided)
    3. Defaults

    Raises:
        FileNotFoundError: If ``path`` does not exist
    """
    config = Config()

    if path:
        path_obj = Path(path)
        if not path_obj.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        if path_obj.suffix == ".json":
            config = Config.from_json(path)
        elif path_obj.suffix in (".yaml", ".yml"):
            config = Config.from_yaml(path)
        else:
            logger.warning(f"Unknown config format: {path}")

    # Override with environment variables
    env_config = Config.from_env(env_prefix)
    config = config.merge(env_config)

    logger.debug(f"Loaded config with {len(config.routes)} routes")
    return config


__all__ = [
    "Config",
    "load_config",
    "DEFAULT_ENV_PREFIX",
]
