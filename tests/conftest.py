"""
Pytest configuration and fixtures for toolbox tests.

Provides an isolated environment, a throwaway sandbox project and a fake
command runner so no test touches docker or maven.
"""

import logging
import os
import shutil
import tempfile
from collections.abc import Generator
from pathlib import Path

import pytest

from ecocode_toolbox.config import ToolboxConfig

from .fake_runner import FakeCommandRunner

PLUGIN_VERSION = "1.6.2"

COMPOSE_FILE = """\
services:
  sonar:
    image: sonarqube:10.5.1-community
    volumes:
      - type: bind
        source: ./target/ecocode-java-plugin-${ECOCODE_JAVA_PLUGIN_VERSION}-SNAPSHOT.jar
        target: /opt/sonarqube/extensions/plugins/ecocode-java-plugin.jar
      - "extensions:/opt/sonarqube/extensions"
  db:
    image: postgres:12
    volumes:
      - pg_data:/var/lib/postgresql/data
volumes:
  extensions:
  pg_data:
"""


@pytest.fixture
def isolated_test_env() -> Generator[dict[str, str], None, None]:
    """
    Clear toolbox-related environment variables for the duration of a test.

    Yields:
        Dictionary of original environment variables
    """
    original_env = os.environ.copy()

    for key in list(os.environ.keys()):
        if key.startswith("TOOLBOX_") or key == "ECOCODE_JAVA_PLUGIN_VERSION":
            del os.environ[key]

    yield original_env

    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def temp_workspace() -> Generator[Path, None, None]:
    """
    Create temporary workspace directory for test files.

    Yields:
        Path to temporary workspace
    """
    temp_dir = tempfile.mkdtemp(prefix="toolbox_workspace_")
    workspace = Path(temp_dir)

    yield workspace

    shutil.rmtree(temp_dir)


@pytest.fixture
def sandbox_project(temp_workspace: Path, isolated_test_env: dict[str, str]) -> Path:
    """A plugin project with docker.env and docker-compose.yml, but no jar."""
    (temp_workspace / "docker.env").write_text(
        f"ECOCODE_JAVA_PLUGIN_VERSION={PLUGIN_VERSION}\n"
    )
    (temp_workspace / "docker-compose.yml").write_text(COMPOSE_FILE)
    os.environ["TOOLBOX_PROJECT_DIR"] = str(temp_workspace)
    return temp_workspace


@pytest.fixture
def test_config(sandbox_project: Path) -> ToolboxConfig:
    return ToolboxConfig(project_dir=sandbox_project)


@pytest.fixture
def artifact(test_config: ToolboxConfig) -> Path:
    """Path of the plugin jar for the sandbox project (not created)."""
    return test_config.artifact_path()


@pytest.fixture
def built_artifact(artifact: Path) -> Path:
    """The plugin jar, already present in target/."""
    artifact.parent.mkdir(parents=True, exist_ok=True)
    artifact.write_bytes(b"PK")
    return artifact


@pytest.fixture
def fake_runner() -> FakeCommandRunner:
    return FakeCommandRunner()


@pytest.fixture(autouse=True)
def restore_root_logger() -> Generator[None, None, None]:
    """Undo handler changes made by setup_logging."""
    root_logger = logging.getLogger()
    handlers = root_logger.handlers[:]
    level = root_logger.level

    yield

    for handler in root_logger.handlers[:]:
        if handler not in handlers:
            root_logger.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root_logger.handlers:
            root_logger.addHandler(handler)
    root_logger.setLevel(level)
