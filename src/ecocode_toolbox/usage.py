"""Static usage block for the toolbox command."""

import click

OPTIONS_HELP = [
    ("-h, --help", "Display help"),
    ("-i, --init", "Building the ecoCode plugin and creating containers"),
    ("-s, --start", "Starting Docker containers"),
    ("-t, --stop", "Stopping Docker containers"),
    ("-c, --clean", "Stop and remove containers, networks and volumes"),
    ("-l, --logs", "Display Docker container logs"),
    ("-v, --verbose", "Make the command more talkative"),
]


def render_help(prog_name: str = "toolbox") -> str:
    """Render the usage block with terminal colors."""
    lines = [
        f"{click.style('Usage', fg='yellow')} {prog_name} [OPTION] [-- COMPOSE_ARGS...]",
        click.style("Options:", fg="yellow"),
    ]
    for flags, description in OPTIONS_HELP:
        lines.append(f"  {click.style(flags.ljust(22), fg='green')}{description}")
    return "\n".join(lines)


def display_help(prog_name: str = "toolbox") -> None:
    click.echo(render_help(prog_name))
