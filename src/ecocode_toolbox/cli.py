"""
Command-line interface for the ecoCode toolbox

Parses the toolbox flags, checks the local environment and runs the
requested lifecycle tasks. The first token that is not a toolbox flag, and
everything after it, is forwarded to the compose tool.
"""

import logging
from dataclasses import replace
from typing import Dict, List, Optional, Sequence

import click

from .checks import EnvironmentValidator
from .config import load_config
from .logging_config import setup_logging
from .models import ConfigurationError, ExitCode, Options
from .process import CommandRunner, SubprocessRunner
from .tasks import TaskExecutor

logger = logging.getLogger(__name__)

FLAGS: Dict[str, str] = {
    "-h": "help",
    "--help": "help",
    "-i": "init",
    "--init": "init",
    "-s": "start",
    "--start": "start",
    "-t": "stop",
    "--stop": "stop",
    "-c": "clean",
    "--clean": "clean",
    "-l": "show_logs",
    "--logs": "show_logs",
    "-v": "verbose",
    "--verbose": "verbose",
}

# Explicit end of toolbox flags
PASSTHROUGH_MARKER = "--"


def parse_options(argv: Sequence[str]) -> Options:
    """
    Parse toolbox flags from the raw argument list.

    Flag parsing stops at the first unrecognized token, which starts the
    passthrough arguments. A ``--`` marker also ends flag parsing and is not
    kept. Passthrough arguments are collected but never run. Without any
    action flag or passthrough argument, help is shown.
    """
    args = list(argv)
    flags: Dict[str, bool] = {}
    passthrough: List[str] = []

    for index, arg in enumerate(args):
        if arg == PASSTHROUGH_MARKER:
            passthrough = args[index + 1:]
            break
        name = FLAGS.get(arg)
        if name is None:
            passthrough = args[index:]
            break
        flags[name] = True

    options = Options(passthrough=tuple(passthrough), **flags)
    if not options.actions and not options.passthrough:
        options = replace(options, help=True)
    return options


def main(
    argv: Sequence[str],
    runner: Optional[CommandRunner] = None,
    prog_name: str = "toolbox",
) -> int:
    """
    Run the toolbox.

    Returns:
        0 on success, 2 if the environment check failed, 3 if a task failed.
        Code 1 (options check failed) is reserved: every token list parses.
    """
    options = parse_options(argv)
    setup_logging(verbose=options.verbose)

    try:
        config = load_config(cli_overrides={"verbose": True} if options.verbose else None)
    except ConfigurationError as e:
        logger.error(str(e))
        return ExitCode.ENVIRONMENT_FAILED

    setup_logging(
        verbose=config.verbose,
        log_level=config.log_level,
        enable_file_logging=config.log_to_file,
        log_dir=config.get_log_dir_path(),
    )
    logger.debug(f"Project directory: {config.project_dir}")
    if options.passthrough:
        logger.debug(f"Ignoring passthrough arguments: {' '.join(options.passthrough)}")

    runner = runner or SubprocessRunner()

    if EnvironmentValidator(config, runner).check() != 0:
        return ExitCode.ENVIRONMENT_FAILED

    task_code = TaskExecutor(config, runner, prog_name=prog_name).execute(options)
    if task_code != 0:
        logger.debug(f"Task execution failed with code {task_code}")
        return ExitCode.TASKS_FAILED

    return ExitCode.SUCCESS


class RawArgsCommand(click.Command):
    """Command that leaves its arguments unparsed for ``parse_options``."""

    def parse_args(self, ctx: click.Context, args: List[str]) -> List[str]:
        ctx.meta["toolbox.argv"] = list(args)
        ctx.args = []
        return []


@click.command(
    "toolbox",
    cls=RawArgsCommand,
    add_help_option=False,
)
@click.pass_context
def cli(ctx: click.Context) -> None:
    """
    ecoCode toolbox: build the plugin and manage the SonarQube sandbox
    """
    prog_name = ctx.find_root().info_name or "toolbox"
    ctx.exit(int(main(ctx.meta["toolbox.argv"], prog_name=prog_name)))
