"""
Lifecycle tasks for the ecoCode sandbox

Builds the plugin and drives the compose tool. Tasks run in a fixed order and
the first failing task stops the chain.
"""

import logging
from pathlib import Path
from typing import Callable, Dict

from .compose import ComposeCommandBuilder, compose_mounts_artifact
from .config import ToolboxConfig
from .models import (
    Action,
    Command,
    CommandFailedError,
    CommandResult,
    MissingArtifactError,
    Options,
    ToolboxError,
)
from .process import CommandRunner
from .usage import display_help

logger = logging.getLogger(__name__)


class TaskExecutor:
    """
    Executes the actions requested on the command line.

    Each action either completes or raises a ToolboxError; ``execute`` maps
    the first failure to the failing action's code.
    """

    def __init__(
        self,
        config: ToolboxConfig,
        runner: CommandRunner,
        prog_name: str = "toolbox",
    ):
        self.config = config
        self.runner = runner
        self.prog_name = prog_name
        self.commands = ComposeCommandBuilder(config)

    def _run(self, command: Command) -> CommandResult:
        logger.debug(command.display())
        result = self.runner.run(command)
        if not result.success:
            raise CommandFailedError(result)
        return result

    def _require_artifact(self) -> Path:
        artifact = self.config.artifact_path()
        if not artifact.is_file():
            raise MissingArtifactError(artifact)
        return artifact

    def _check_artifact_mount(self, artifact: Path) -> None:
        if not compose_mounts_artifact(self.config, artifact):
            logger.warning(
                f"No service in {self.config.compose_file} mounts {artifact.name}; "
                "check the plugin version in the compose file"
            )

    def show_help(self, options: Options) -> None:
        display_help(self.prog_name)

    def init(self, options: Options) -> None:
        """Build the plugin if needed, then create and start the containers."""
        artifact = self.config.artifact_path()
        if not artifact.is_file():
            logger.info("Building project code in the target folder")
            self._run(self.commands.package_plugin())

        artifact = self._require_artifact()
        self._check_artifact_mount(artifact)

        logger.info("Creating and starting Docker containers")
        self._run(self.commands.up())

    def start(self, options: Options) -> None:
        artifact = self._require_artifact()
        self._check_artifact_mount(artifact)

        logger.info("Starting Docker containers")
        self._run(self.commands.start())

    def stop(self, options: Options) -> None:
        logger.info("Stopping Docker containers")
        self._run(self.commands.stop())

    def clean(self, options: Options) -> None:
        logger.info("Remove Docker containers, networks and volumes")
        self._run(self.commands.down())

    def show_logs(self, options: Options) -> None:
        logger.info("Display Docker container logs")
        self._run(self.commands.logs())

    @property
    def handlers(self) -> Dict[Action, Callable[[Options], None]]:
        return {
            Action.SHOW_HELP: self.show_help,
            Action.INIT: self.init,
            Action.START: self.start,
            Action.STOP: self.stop,
            Action.CLEAN: self.clean,
            Action.SHOW_LOGS: self.show_logs,
        }

    def execute(self, options: Options) -> int:
        """
        Execute the requested actions in precedence order.

        Args:
            options: Parsed command-line options

        Returns:
            0 on success, otherwise the failing action's code (1-6)
        """
        handlers = self.handlers
        for action in options.actions:
            logger.debug(f"Running task: {action.label}")
            try:
                handlers[action](options)
            except ToolboxError as e:
                logger.error(str(e))
                return action.failure_code
        return 0
