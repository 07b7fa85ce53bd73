"""
Tests for Fincheck configuration loading.
"""

from pathlib import Path

import pytest

from fincheck.config import ConfigLoader, DEFAULT_PORT, load_config
from fincheck.config.schema import DocsConfig, ServerConfig
from fincheck.exceptions import ConfigurationError


class TestDefaults:
    """Tests for default configuration values."""

    def test_default_values(self) -> None:
        """Test the deployment defaults."""
        config = load_config()

        assert config.server.port == DEFAULT_PORT == 3333
        assert config.server.host == "0.0.0.0"
        assert config.server.route_prefix == "/api/v1"
        assert config.server.enable_cors is True
        assert config.docs.title == "Fincheck API"
        assert config.docs.version == "1.0"
        assert config.docs.bearer_auth is True
        assert config.docs.global_responses == {500: "Internal server error"}
        assert config.docs.explorer is True
        assert config.docs.auto_tag_modules is False

    @pytest.mark.parametrize(
        "environment,level",
        [("production", "WARNING"), ("development", "DEBUG"), ("test", "DEBUG")],
    )
    def test_environment_profiles(self, environment: str, level: str) -> None:
        """Test the environment profiles."""
        config = load_config(environment=environment)

        assert config.environment == environment
        assert config.logging.level == level

    def test_test_profile_uses_ephemeral_port(self) -> None:
        """Test that the test profile binds localhost on a free port."""
        config = load_config(environment="test")

        assert config.server.host == "127.0.0.1"
        assert config.server.port == 0

    def test_invalid_server_values(self) -> None:
        """Test schema validation of server values."""
        with pytest.raises(ValueError):
            ServerConfig(port=70000)
        with pytest.raises(ValueError):
            ServerConfig(host="")
        with pytest.raises(ValueError):
            ServerConfig(route_prefix=None)  # type: ignore[arg-type]

    def test_invalid_global_response_status(self) -> None:
        """Test schema validation of default responses."""
        with pytest.raises(ValueError):
            DocsConfig(global_responses={99: "Nope"})


class TestPortVariable:
    """Tests for the PORT environment variable."""

    def test_port_unset(self) -> None:
        """Test that the default port is used without PORT."""
        assert load_config().server.port == 3333

    def test_port_empty(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that an empty PORT is ignored."""
        monkeypatch.setenv("PORT", "")

        assert load_config().server.port == 3333

    def test_port_set(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that PORT overrides the configured port."""
        monkeypatch.setenv("PORT", "8080")
        monkeypatch.setenv("FINCHECK_SERVER_PORT", "9090")

        assert load_config().server.port == 8080

    def test_port_invalid(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that a non-numeric PORT is a configuration error."""
        monkeypatch.setenv("PORT", "http")

        with pytest.raises(ConfigurationError) as exc_info:
            load_config()

        assert exc_info.value.details["env_var"] == "PORT"

    def test_port_out_of_range(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that an out-of-range PORT fails validation."""
        monkeypatch.setenv("PORT", "70000")

        with pytest.raises(ConfigurationError):
            load_config()


class TestEnvironmentOverrides:
    """Tests for FINCHECK_ environment variables."""

    def test_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test overriding server and docs options."""
        monkeypatch.setenv("FINCHECK_SERVER_HOST", "127.0.0.1")
        monkeypatch.setenv("FINCHECK_SERVER_ROUTE_PREFIX", "/api/v2")
        monkeypatch.setenv("FINCHECK_DOCS_EXPLORER", "false")
        monkeypatch.setenv("FINCHECK_DOCS_AUTO_TAG_MODULES", "yes")

        config = load_config()

        assert config.server.host == "127.0.0.1"
        assert config.server.route_prefix == "/api/v2"
        assert config.docs.explorer is False
        assert config.docs.auto_tag_modules is True

    def test_invalid_bool(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that an unparseable boolean is a configuration error."""
        monkeypatch.setenv("FINCHECK_SERVER_ENABLE_CORS", "maybe")

        with pytest.raises(ConfigurationError):
            load_config()

    def test_invalid_level(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that overrides are validated."""
        monkeypatch.setenv("FINCHECK_LOGGING_LEVEL", "CHATTY")

        with pytest.raises(ConfigurationError) as exc_info:
            load_config()

        assert exc_info.value.details["errors"][0].startswith("logging:")


class TestYamlFile:
    """Tests for YAML configuration files."""

    def test_merge_file(self, tmp_path: Path) -> None:
        """Test merging a configuration file over the defaults."""
        config_file = tmp_path / "fincheck.yaml"
        config_file.write_text(
            "environment: staging\n"
            "server:\n"
            "  port: 4000\n"
            "docs:\n"
            "  version: 2.1\n"
            "  global_responses:\n"
            "    '500': Internal server error\n"
            "    401: Unauthorized\n"
            "  yaml_document_url: openapi/yaml\n"
        )

        config = ConfigLoader().load(config_file)

        assert config.environment == "staging"
        assert config.server.port == 4000
        assert config.server.route_prefix == "/api/v1"
        assert config.docs.version == "2.1"
        assert config.docs.global_responses == {
            500: "Internal server error",
            401: "Unauthorized",
        }
        assert config.docs.yaml_document_url == "openapi/yaml"

    def test_env_wins_over_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that environment variables override the file."""
        config_file = tmp_path / "fincheck.yaml"
        config_file.write_text("server:\n  port: 4000\n")
        monkeypatch.setenv("PORT", "5000")

        assert load_config(config_file).server.port == 5000

    def test_empty_file(self, tmp_path: Path) -> None:
        """Test that an empty file leaves the defaults."""
        config_file = tmp_path / "fincheck.yaml"
        config_file.write_text("")

        assert load_config(config_file).server.port == 3333

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test that a missing file is a configuration error."""
        with pytest.raises(ConfigurationError, match="not found"):
            load_config(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        """Test that malformed YAML is a configuration error."""
        config_file = tmp_path / "fincheck.yaml"
        config_file.write_text("server: [port: 1\n")

        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            load_config(config_file)

    def test_not_a_mapping(self, tmp_path: Path) -> None:
        """Test that a top-level list is rejected."""
        config_file = tmp_path / "fincheck.yaml"
        config_file.write_text("- server\n")

        with pytest.raises(ConfigurationError):
            load_config(config_file)

    def test_invalid_value_in_file(self, tmp_path: Path) -> None:
        """Test that an invalid value in the file is a configuration error."""
        config_file = tmp_path / "fincheck.yaml"
        config_file.write_text("server:\n  port: 99999\n")

        with pytest.raises(ConfigurationError):
            load_config(config_file)

    def test_null_route_prefix(self, tmp_path: Path) -> None:
        """Test that a null route prefix is a configuration error."""
        config_file = tmp_path / "fincheck.yaml"
        config_file.write_text("server:\n  route_prefix: null\n")

        with pytest.raises(ConfigurationError, match="route_prefix"):
            load_config(config_file)

    def test_null_global_response_description(self, tmp_path: Path) -> None:
        """Test that a default response needs a text description."""
        config_file = tmp_path / "fincheck.yaml"
        config_file.write_text("docs:\n  global_responses:\n    500: null\n")

        with pytest.raises(ConfigurationError, match="global response 500"):
            load_config(config_file)

    def test_null_version(self, tmp_path: Path) -> None:
        """Test that a null version is not turned into text."""
        config_file = tmp_path / "fincheck.yaml"
        config_file.write_text("docs:\n  version: null\n")

        with pytest.raises(ConfigurationError, match="version"):
            load_config(config_file)
