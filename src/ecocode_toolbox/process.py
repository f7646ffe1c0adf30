"""
Process execution for the ecoCode toolbox

All external tools are invoked through a CommandRunner so that the
environment checks and lifecycle tasks can be exercised without a real
container runtime or build tool.
"""

import logging
import shutil
import subprocess
import time
from abc import ABC, abstractmethod
from typing import Optional

from .models import Command, CommandResult

logger = logging.getLogger(__name__)

# Conventional shell status for "command not found"
COMMAND_NOT_FOUND = 127


class CommandRunner(ABC):
    """Interface for running external commands."""

    @abstractmethod
    def which(self, program: str) -> Optional[str]:
        """Resolve an executable on PATH, or None when it is absent."""

    @abstractmethod
    def run(self, command: Command, capture: bool = False) -> CommandResult:
        """
        Run a command and block until it exits.

        Args:
            command: Command to execute
            capture: Capture stdout/stderr instead of inheriting the terminal

        Returns:
            CommandResult with the exit status and any captured output
        """


class SubprocessRunner(CommandRunner):
    """CommandRunner backed by subprocess.run."""

    def which(self, program: str) -> Optional[str]:
        return shutil.which(program)

    def run(self, command: Command, capture: bool = False) -> CommandResult:
        start_time = time.time()

        try:
            completed = subprocess.run(
                list(command.argv),
                cwd=command.cwd,
                capture_output=capture,
                text=True,
            )
        except FileNotFoundError as e:
            logger.debug(f"Executable not found: {e}")
            return CommandResult(
                command=command,
                returncode=COMMAND_NOT_FOUND,
                stderr=str(e),
                elapsed_seconds=time.time() - start_time,
            )

        result = CommandResult(
            command=command,
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
            elapsed_seconds=time.time() - start_time,
        )
        logger.debug(result.get_summary())
        return result
