"""
Configuration management for the ecoCode toolbox

Handles configuration loading from environment variables and the optional
.toolbox.env file using Pydantic settings, and reads the sandbox env file
shared with docker compose.
"""

import logging
from pathlib import Path
from typing import Dict, Optional

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import ConfigurationError

logger = logging.getLogger(__name__)


class SandboxEnvironment(BaseSettings):
    """
    Variables from the sandbox env file.

    The same file is passed to docker compose with --env-file, so keys are
    read without any prefix.
    """

    model_config = SettingsConfigDict(
        env_file="docker.env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    ECOCODE_JAVA_PLUGIN_VERSION: Optional[str] = Field(
        default=None,
        description="Version of the ecoCode Java plugin under development",
    )

    @field_validator("ECOCODE_JAVA_PLUGIN_VERSION")
    @classmethod
    def strip_version(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        return v or None


class ToolboxConfig(BaseSettings):
    """
    Main configuration class for the toolbox.

    Configuration is loaded from:
    1. Environment variables (highest priority)
    2. .toolbox.env file
    3. Default values (lowest priority)
    """

    model_config = SettingsConfigDict(
        env_prefix="TOOLBOX_",
        env_file=".toolbox.env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Project layout
    project_dir: Path = Field(
        default_factory=Path.cwd,
        validate_default=True,
        description="Root of the plugin project (holds pom.xml and target/)",
    )
    env_file: str = Field(
        default="docker.env",
        description="Sandbox env file, relative to the project dir",
    )
    compose_file: str = Field(
        default="docker-compose.yml",
        description="Compose file, relative to the project dir",
    )
    plugin_name: str = Field(
        default="ecocode-java-plugin",
        description="Artifact id of the plugin jar",
    )

    # External tools
    container_runtime: str = Field(
        default="docker",
        description="Container runtime providing the compose subcommand (docker or podman)",
    )
    build_tool: str = Field(
        default="mvn",
        description="Build tool used to package the plugin",
    )
    java_tool: str = Field(
        default="javap",
        description="Executable used to detect a Java installation",
    )
    min_compose_major: int = Field(
        default=2,
        description="Minimum supported major version of the compose module",
    )

    # Logging configuration
    log_level: Optional[str] = Field(
        default=None,
        description="Console log level override (DEBUG, INFO, WARNING, ERROR)",
    )
    log_to_file: bool = Field(
        default=False,
        description="Also write a rotating log file",
    )
    log_dir: str = Field(
        default="logs",
        description="Directory for log files, relative to the project dir",
    )
    verbose: bool = Field(
        default=False,
        description="Enable verbose console output",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: Optional[str]) -> Optional[str]:
        """Validate log level is valid."""
        if v is None:
            return v
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"log_level must be one of: {', '.join(valid_levels)}")
        return v.upper()

    @field_validator("container_runtime")
    @classmethod
    def validate_container_runtime(cls, v: str) -> str:
        """Validate container runtime is supported."""
        valid_runtimes = ["docker", "podman"]
        if v.lower() not in valid_runtimes:
            raise ValueError(
                f"container_runtime must be one of: {', '.join(valid_runtimes)}"
            )
        return v.lower()

    @field_validator("project_dir")
    @classmethod
    def resolve_project_dir(cls, v: Path) -> Path:
        return Path(v).expanduser().resolve()

    @property
    def env_file_path(self) -> Path:
        return self.project_dir / self.env_file

    @property
    def compose_file_path(self) -> Path:
        return self.project_dir / self.compose_file

    @property
    def target_dir(self) -> Path:
        return self.project_dir / "target"

    def get_log_dir_path(self) -> Path:
        """Get log directory as Path object."""
        return self.project_dir / self.log_dir

    def load_sandbox_environment(self) -> SandboxEnvironment:
        """Read the sandbox env file (missing file yields empty values)."""
        env_path = self.env_file_path
        if not env_path.exists():
            logger.debug(f"Sandbox env file not found: {env_path}")
        return SandboxEnvironment(_env_file=env_path)

    @property
    def plugin_version(self) -> Optional[str]:
        return self.load_sandbox_environment().ECOCODE_JAVA_PLUGIN_VERSION

    def sandbox_variables(self) -> Dict[str, str]:
        """Variables available for compose file interpolation."""
        sandbox = self.load_sandbox_environment()
        return {k: v for k, v in sandbox.model_dump().items() if v is not None}

    def artifact_path(self) -> Path:
        """
        Path of the plugin jar produced by the build tool.

        Raises:
            ConfigurationError: If the plugin version is not defined
        """
        version = self.plugin_version
        if not version:
            raise ConfigurationError(
                f"ECOCODE_JAVA_PLUGIN_VERSION is not defined in {self.env_file_path}"
            )
        return self.target_dir / f"{self.plugin_name}-{version}-SNAPSHOT.jar"


def load_config(cli_overrides: Optional[dict] = None) -> ToolboxConfig:
    """
    Load configuration with optional CLI overrides.

    Args:
        cli_overrides: CLI argument overrides

    Returns:
        Loaded configuration

    Raises:
        ConfigurationError: If a setting fails validation
    """
    try:
        config = ToolboxConfig()

        if cli_overrides:
            config_data = config.model_dump()
            config_data.update(cli_overrides)
            config = ToolboxConfig(**config_data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid toolbox configuration: {e}") from e

    return config
