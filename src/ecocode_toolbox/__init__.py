"""
ecoCode toolbox: local SonarQube sandbox for the ecoCode Java plugin

Builds the plugin with Maven and manages the sandbox containers through
docker compose.
"""

__version__ = "0.1.0"

from .config import ToolboxConfig, load_config
from .logging_config import setup_logging

__all__ = [
    "ToolboxConfig",
    "load_config",
    "setup_logging",
]
