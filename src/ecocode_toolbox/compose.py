"""
Command builders for the compose tool and the build tool

Every lifecycle command shares the same prefix:
``<runtime> compose --env-file <env file> -f <compose file>``.
Also inspects the compose file to detect a plugin bind mount that does not
match the artifact produced by the build.
"""

import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .config import ToolboxConfig
from .models import Command

logger = logging.getLogger(__name__)

_VARIABLE = re.compile(
    r"\$(?:(?P<escaped>\$)"
    r"|\{(?P<braced>\w+)(?:(?P<op>:?[-?+])(?P<arg>[^}]*))?\}"
    r"|(?P<named>\w+))"
)


class ComposeCommandBuilder:
    """Builds argument vectors for the external compose and build tools."""

    def __init__(self, config: ToolboxConfig):
        self.config = config

    def _compose(self, *args: str) -> Command:
        return Command(
            argv=(
                self.config.container_runtime,
                "compose",
                "--env-file",
                str(self.config.env_file_path),
                "-f",
                str(self.config.compose_file_path),
            )
            + tuple(args),
            cwd=self.config.project_dir,
        )

    def up(self) -> Command:
        """Create, build and start containers in the background."""
        return self._compose("up", "--build", "-d")

    def start(self) -> Command:
        return self._compose("start")

    def stop(self) -> Command:
        return self._compose("stop")

    def down(self) -> Command:
        """Remove containers, networks and volumes."""
        return self._compose("down", "--volumes")

    def logs(self) -> Command:
        return self._compose("logs", "-f")

    def compose_version(self, short: bool = False) -> Command:
        argv = [self.config.container_runtime, "compose", "version"]
        if short:
            argv.append("--short")
        return Command(argv=tuple(argv))

    def package_plugin(self) -> Command:
        """Build the plugin jar, skipping tests."""
        return Command(
            argv=(self.config.build_tool, "clean", "package", "-DskipTests"),
            cwd=self.config.project_dir,
        )


def load_compose_file(path: Path) -> Dict[str, Any]:
    """
    Load a compose file.

    Raises:
        OSError: If the file cannot be read
        yaml.YAMLError: If the file is not valid YAML
    """
    with open(path, "r") as f:
        doc = yaml.safe_load(f)
    return doc if isinstance(doc, dict) else {}


def interpolate(value: str, variables: Dict[str, str]) -> str:
    """
    Expand compose-style variable references in a string.

    Handles ``$VAR``, ``${VAR}``, ``${VAR:-default}``, ``${VAR-default}``,
    ``${VAR:+alt}``, ``${VAR+alt}``, ``${VAR:?err}``, ``${VAR?err}`` and ``$$``.
    Variables that are unset, including required ones, expand to an empty
    string.
    """

    def replace(match: "re.Match[str]") -> str:
        if match.group("escaped"):
            return "$"
        name = match.group("braced") or match.group("named")
        current = variables.get(name)
        op = match.group("op")
        arg = match.group("arg") or ""
        if op == ":-":
            return current if current else arg
        if op == "-":
            return arg if current is None else current
        if op == ":+":
            return arg if current else ""
        if op == "+":
            return "" if current is None else arg
        return current or ""

    return _VARIABLE.sub(replace, value)


def _mount_source(volume: Any, variables: Dict[str, str]) -> Optional[str]:
    # Long syntax: {type: bind, source: ..., target: ...}
    if isinstance(volume, dict):
        if volume.get("type", "bind") != "bind" or not volume.get("source"):
            return None
        return interpolate(str(volume["source"]), variables)
    # Short syntax: "source:target[:mode]", expanded before splitting
    if isinstance(volume, str):
        volume = interpolate(volume, variables)
        if ":" not in volume:
            return None
        source = volume.split(":", 1)[0]
        if source.startswith((".", "/", "~")):
            return source
    return None


def find_bind_sources(doc: Dict[str, Any], variables: Dict[str, str]) -> List[str]:
    """Bind-mount sources of every service, with variable references expanded."""
    sources = []
    services = doc.get("services") or {}
    if not isinstance(services, dict):
        return sources
    for service in services.values():
        if not isinstance(service, dict):
            continue
        for volume in service.get("volumes") or []:
            source = _mount_source(volume, variables)
            if source:
                sources.append(source)
    return sources


def compose_mounts_artifact(config: ToolboxConfig, artifact: Path) -> bool:
    """
    Check whether the compose file bind-mounts the given artifact.

    Inspection problems are logged at debug level and treated as a match.
    """
    compose_path = config.compose_file_path
    try:
        doc = load_compose_file(compose_path)
    except (OSError, yaml.YAMLError) as e:
        logger.debug(f"Could not inspect compose file {compose_path}: {e}")
        return True

    for source in find_bind_sources(doc, config.sandbox_variables()):
        source_path = Path(source).expanduser()
        if not source_path.is_absolute():
            source_path = config.project_dir / source_path
        if source_path.resolve() == artifact.resolve():
            return True

    return False
