# Copyright 2025 Alibaba Group Holding Ltd.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.


"""
Application configuration for the container file conversion service.

Configuration is read from a TOML file whose location is taken from
``SCORE_FILES_CONFIG_PATH`` (default ``~/.score-files.toml``). A missing
file yields the defaults.
"""

import logging
import os
import tomllib
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "SCORE_FILES_CONFIG_PATH"
DEFAULT_CONFIG_PATH = Path.home() / ".score-files.toml"

_LOG_LEVELS = {"critical", "error", "warning", "info", "debug"}


class ServerConfig(BaseModel):
    """HTTP server settings."""
    host: str = Field("0.0.0.0", description="Interface to bind")
    port: int = Field(8080, ge=1, le=65535, description="Port to listen on")
    log_level: str = Field("info", description="Log level for project loggers")

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate that log_level is a known logging level name."""
        if v.lower() not in _LOG_LEVELS:
            raise ValueError(f"unsupported log_level '{v}'")
        return v.lower()


class ConverterConfig(BaseModel):
    """Container file conversion settings."""
    default_name_prefix: str = Field(
        "",
        description="ConfigMap name prefix used when a request does not supply one",
    )


class AppConfig(BaseModel):
    """Top-level application configuration."""
    server: ServerConfig = Field(default_factory=ServerConfig)
    converter: ConverterConfig = Field(default_factory=ConverterConfig)

    @classmethod
    def from_file(cls, path: str) -> "AppConfig":
        """
        Load configuration from a TOML file.

        Raises:
            ValueError: If the file cannot be parsed or fails validation
        """
        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Invalid TOML in config file {path}: {e}") from e
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ValueError(f"Invalid configuration in {path}: {e}") from e


_config: Optional[AppConfig] = None


def load_config(path: Optional[str] = None) -> AppConfig:
    """
    Load configuration from ``path``, the environment, or the default location.

    The loaded configuration becomes the one returned by ``get_config()``.
    """
    global _config
    config_path = Path(path or os.environ.get(CONFIG_ENV_VAR) or DEFAULT_CONFIG_PATH)
    if config_path.is_file():
        logger.info("Loading configuration from %s", config_path)
        _config = AppConfig.from_file(str(config_path))
    else:
        logger.info("No configuration file at %s; using defaults", config_path)
        _config = AppConfig()
    return _config


def get_config() -> AppConfig:
    """Return the loaded configuration, loading it on first use."""
    if _config is None:
        return load_config()
    return _config
