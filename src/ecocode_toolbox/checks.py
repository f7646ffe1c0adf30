"""
Environment checks for the ecoCode toolbox

Verifies that the container runtime, its compose module, Java and the build
tool are installed before any lifecycle task runs.
"""

import logging
import re
from typing import Optional

from .compose import ComposeCommandBuilder
from .config import ToolboxConfig
from .models import MissingToolchainError, ToolchainCheck
from .process import CommandRunner

logger = logging.getLogger(__name__)

_MAJOR_VERSION = re.compile(r"^v?(\d+)\.")


def parse_major_version(version: str) -> Optional[int]:
    """
    Extract the major component of a version such as ``2.24.5`` or ``v2.24.5``.

    Returns None when the string does not look like a version.
    """
    match = _MAJOR_VERSION.match(version.strip())
    if not match:
        return None
    return int(match.group(1))


class EnvironmentValidator:
    """Runs the toolchain checks in order, stopping at the first failure."""

    def __init__(self, config: ToolboxConfig, runner: CommandRunner):
        self.config = config
        self.runner = runner
        self.commands = ComposeCommandBuilder(config)

    def require_container_runtime(self) -> None:
        """
        Check that the container runtime and its compose module are usable.

        Raises:
            MissingToolchainError: For the first failing check
        """
        runtime = self.config.container_runtime

        if not self.runner.which(runtime):
            raise MissingToolchainError(
                ToolchainCheck.CONTAINER_RUNTIME, f"Please install {runtime}"
            )

        result = self.runner.run(self.commands.compose_version(), capture=True)
        if not result.success:
            raise MissingToolchainError(
                ToolchainCheck.COMPOSE_MODULE, f"Please install {runtime} compose module"
            )

        result = self.runner.run(self.commands.compose_version(short=True), capture=True)
        current = result.stdout.strip()
        major = parse_major_version(current) if result.success else None
        # Unparsable output counts as unsupported
        if major is None or major < self.config.min_compose_major:
            raise MissingToolchainError(
                ToolchainCheck.COMPOSE_VERSION,
                f"{current or 'unknown'} is not a supported {runtime} compose version, "
                f"please upgrade to the minimum supported version: "
                f"{self.config.min_compose_major}.0",
            )
        logger.debug(f"Found {runtime} compose version {current}")

    def require(self) -> None:
        """
        Check the whole local environment.

        Raises:
            MissingToolchainError: For the first failing check
        """
        logger.debug(f"Check if {self.config.container_runtime} is correctly installed")
        self.require_container_runtime()

        logger.debug("Check if java is installed")
        if not self.runner.which(self.config.java_tool):
            raise MissingToolchainError(ToolchainCheck.JAVA, "Please install java")

        logger.debug("Check if maven is installed")
        if not self.runner.which(self.config.build_tool):
            raise MissingToolchainError(
                ToolchainCheck.BUILD_TOOL, "Please install maven"
            )

    def check_container_runtime(self) -> int:
        """Run the container runtime checks and return 0 or the runtime code (1-3)."""
        try:
            self.require_container_runtime()
        except MissingToolchainError as e:
            logger.error(str(e))
            return e.check.runtime_code
        return 0

    def check(self) -> int:
        """Run every check and return 0 or the environment code (1-3)."""
        try:
            self.require()
        except MissingToolchainError as e:
            logger.error(str(e))
            return e.check.environment_code
        return 0
