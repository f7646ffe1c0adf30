"""
Data models for the ecoCode toolbox

Defines the parsed command-line options, lifecycle actions, toolchain checks,
external command descriptions and results, exit codes and the error hierarchy.
"""

import shlex
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, IntEnum
from pathlib import Path
from typing import List, Optional, Tuple


class ExitCode(IntEnum):
    """Process exit codes returned by the toolbox entry point."""

    SUCCESS = 0
    OPTIONS_FAILED = 1
    ENVIRONMENT_FAILED = 2
    TASKS_FAILED = 3


class Action(Enum):
    """Lifecycle actions, declared in dispatch precedence order."""

    SHOW_HELP = ("help", 1)
    INIT = ("init", 2)
    START = ("start", 3)
    STOP = ("stop", 4)
    CLEAN = ("clean", 5)
    SHOW_LOGS = ("logs", 6)

    def __init__(self, label: str, failure_code: int):
        self.label = label
        self.failure_code = failure_code


class ToolchainCheck(Enum):
    """Environment checks, declared in evaluation order."""

    CONTAINER_RUNTIME = ("container runtime", 1, 1)
    COMPOSE_MODULE = ("compose module", 2, 1)
    COMPOSE_VERSION = ("compose version", 3, 1)
    JAVA = ("java", None, 2)
    BUILD_TOOL = ("build tool", None, 3)

    def __init__(self, label: str, runtime_code: Optional[int], environment_code: int):
        self.label = label
        # Code reported by the container runtime check alone
        self.runtime_code = runtime_code
        # Code reported by the full environment check
        self.environment_code = environment_code


@dataclass(frozen=True)
class Options:
    """Options parsed once from the command line."""

    help: bool = False
    init: bool = False
    start: bool = False
    stop: bool = False
    clean: bool = False
    show_logs: bool = False
    verbose: bool = False
    passthrough: Tuple[str, ...] = ()

    @property
    def actions(self) -> List[Action]:
        """Requested actions in dispatch order."""
        if self.help:
            return [Action.SHOW_HELP]
        flags = [
            (self.init, Action.INIT),
            (self.start, Action.START),
            (self.stop, Action.STOP),
            (self.clean, Action.CLEAN),
            (self.show_logs, Action.SHOW_LOGS),
        ]
        return [action for requested, action in flags if requested]


@dataclass(frozen=True)
class Command:
    """An external command as an argument vector, never a shell string."""

    argv: Tuple[str, ...]
    cwd: Optional[Path] = None

    def display(self) -> str:
        """Shell-quoted rendering for logs."""
        return shlex.join(self.argv)


@dataclass
class CommandResult:
    """Result of an external command invocation."""

    command: Command
    returncode: int
    stdout: str = ""
    stderr: str = ""
    elapsed_seconds: float = 0.0
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def success(self) -> bool:
        return self.returncode == 0

    def get_summary(self) -> str:
        """Get a summary string for the command result."""
        status = "SUCCESS" if self.success else f"FAILED ({self.returncode})"
        return f"{status}: {self.command.display()} ({self.elapsed_seconds:.1f}s)"


class ToolboxError(Exception):
    """Base class for toolbox failures."""


class ConfigurationError(ToolboxError):
    """Raised when the toolbox or sandbox configuration is unusable."""


class MissingToolchainError(ToolboxError):
    """Raised when a required external tool is absent or too old."""

    def __init__(self, check: ToolchainCheck, message: str):
        super().__init__(message)
        self.check = check


class MissingArtifactError(ToolboxError):
    """Raised when the plugin artifact is not present in the target folder."""

    def __init__(self, path: Path):
        super().__init__("Cannot find ecoCode plugin in target directory")
        self.path = path


class CommandFailedError(ToolboxError):
    """Raised when an external command exits with a nonzero status."""

    def __init__(self, result: CommandResult):
        super().__init__(
            f"Command failed with return code {result.returncode}: "
            f"{result.command.display()}"
        )
        self.result = result
