"""
Tests for compose command building and compose file inspection.
"""

import logging

import pytest

from ecocode_toolbox.compose import (
    ComposeCommandBuilder,
    compose_mounts_artifact,
    find_bind_sources,
    interpolate,
    load_compose_file,
)
from ecocode_toolbox.config import ToolboxConfig
from ecocode_toolbox.models import Command


class TestComposeCommandBuilder:
    def test_shared_prefix(self, test_config):
        builder = ComposeCommandBuilder(test_config)
        prefix = (
            "docker",
            "compose",
            "--env-file",
            str(test_config.env_file_path),
            "-f",
            str(test_config.compose_file_path),
        )

        for command in [builder.up(), builder.start(), builder.stop(), builder.down(), builder.logs()]:
            assert command.argv[:6] == prefix
            assert command.cwd == test_config.project_dir

    def test_version_probe(self, test_config):
        builder = ComposeCommandBuilder(test_config)

        assert builder.compose_version().argv == ("docker", "compose", "version")
        assert builder.compose_version(short=True).argv == (
            "docker",
            "compose",
            "version",
            "--short",
        )

    def test_custom_build_tool(self, sandbox_project):
        config = ToolboxConfig(project_dir=sandbox_project, build_tool="./mvnw")

        command = ComposeCommandBuilder(config).package_plugin()

        assert command.argv == ("./mvnw", "clean", "package", "-DskipTests")

    def test_display_quotes_arguments(self):
        command = Command(argv=("docker", "compose", "exec", "sonar", "sh", "-c", "ls; id"))

        assert command.display() == "docker compose exec sonar sh -c 'ls; id'"


class TestComposeFileInspection:
    def test_bind_sources(self):
        doc = {
            "services": {
                "sonar": {
                    "volumes": [
                        {"type": "bind", "source": "./target/plugin-${VERSION}.jar", "target": "/p.jar"},
                        {"type": "volume", "source": "data", "target": "/data"},
                        "logs:/opt/logs",
                        "./conf:/etc/conf:ro",
                    ]
                },
                "db": {"image": "postgres:12"},
            }
        }

        sources = find_bind_sources(doc, {"VERSION": "1.0"})

        assert sources == ["./target/plugin-1.0.jar", "./conf"]

    def test_empty_compose_file(self, temp_workspace):
        path = temp_workspace / "docker-compose.yml"
        path.write_text("")

        assert load_compose_file(path) == {}

    def test_sandbox_compose_mounts_artifact(self, test_config, artifact):
        assert compose_mounts_artifact(test_config, artifact) is True

    def test_version_drift(self, test_config, sandbox_project):
        other = sandbox_project / "target" / "ecocode-java-plugin-9.9.9-SNAPSHOT.jar"

        assert compose_mounts_artifact(test_config, other) is False

    def test_unreadable_compose_file_is_not_an_error(self, test_config, artifact, sandbox_project):
        (sandbox_project / "docker-compose.yml").write_text("services: [unclosed\n")

        assert compose_mounts_artifact(test_config, artifact) is True

    def test_drift_is_reported_without_logging_a_warning(self, test_config, sandbox_project, caplog):
        other = sandbox_project / "target" / "ecocode-java-plugin-9.9.9-SNAPSHOT.jar"
        caplog.set_level(logging.WARNING)

        assert compose_mounts_artifact(test_config, other) is False
        assert caplog.records == []

    def test_short_syntax_with_default_value(self):
        doc = {
            "services": {
                "sonar": {"volumes": ["./target/plugin-${VERSION:-1.0}.jar:/p.jar:ro"]}
            }
        }

        assert find_bind_sources(doc, {}) == ["./target/plugin-1.0.jar"]
        assert find_bind_sources(doc, {"VERSION": "2.0"}) == ["./target/plugin-2.0.jar"]


class TestInterpolate:
    """Test compose-style variable expansion."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("plugin-$VERSION.jar", "plugin-1.6.2.jar"),
            ("plugin-${VERSION}.jar", "plugin-1.6.2.jar"),
            ("plugin-${VERSION:-0.0.0}.jar", "plugin-1.6.2.jar"),
            ("plugin-${MISSING:-0.0.0}.jar", "plugin-0.0.0.jar"),
            ("plugin-${EMPTY:-0.0.0}.jar", "plugin-0.0.0.jar"),
            ("plugin-${EMPTY-0.0.0}.jar", "plugin-.jar"),
            ("plugin-${MISSING-0.0.0}.jar", "plugin-0.0.0.jar"),
            ("plugin-${VERSION?version is required}.jar", "plugin-1.6.2.jar"),
            ("plugin-${VERSION:?version is required}.jar", "plugin-1.6.2.jar"),
            ("plugin-${MISSING:?version is required}.jar", "plugin-.jar"),
            ("${VERSION:+released}", "released"),
            ("${MISSING:+released}", ""),
            ("${EMPTY+set}", "set"),
            ("price-$$5", "price-$5"),
            ("no variables", "no variables"),
        ],
    )
    def test_interpolate(self, value, expected):
        variables = {"VERSION": "1.6.2", "EMPTY": ""}

        assert interpolate(value, variables) == expected
