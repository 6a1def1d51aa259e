"""Tests for the resourcefs command line interface."""

import json
import logging
import re

import pytest
import yaml
from click.testing import CliRunner

from resourcefs.logging_setup import JsonlHandler
from resourcefs.main import cli


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def invoke(runner, resource_root):
    """Invoke the CLI with settings disabled and the resource tree as a --dir root."""

    def _invoke(*args):
        return runner.invoke(cli, ["--no-settings", "--dir", str(resource_root), *args])

    return _invoke


@pytest.fixture
def isolated_settings(tmp_path, monkeypatch):
    """Point global and project settings at empty temporary directories."""
    home = tmp_path / "home"
    project = tmp_path / "project"
    home.mkdir()
    project.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(project)
    return project


class TestGet:
    def test_text(self, invoke):
        result = invoke("get", "text://lang/en/hello.txt")

        assert result.exit_code == 0
        assert result.output == "hi\n"

    def test_json_pretty(self, invoke):
        result = invoke("get", "json://data/config.json")

        assert result.exit_code == 0
        assert json.loads(result.output) == {"name": "demo", "size": 3}

    def test_json_raw(self, invoke):
        result = invoke("get", "--raw", "json://data/config.json")

        assert result.exit_code == 0
        assert result.output == '{"name": "demo", "size": 3}\n'

    def test_bytes_summary(self, invoke):
        result = invoke("get", "bytes://lang/en/hello.txt")

        assert result.exit_code == 0
        assert "<2 bytes>" in result.output

    def test_bytes_raw(self, invoke):
        result = invoke("get", "--raw", "bytes://lang/en/hello.txt")

        assert result.exit_code == 0
        assert result.output == "hi"

    def test_missing_resource(self, invoke):
        result = invoke("get", "text://lang/en/nothing.txt")

        assert result.exit_code == 1
        assert "NoFallbackError" in result.output

    def test_unknown_scheme(self, invoke):
        result = invoke("get", "img://common/default.png")

        assert result.exit_code == 1
        assert "LoaderNotFoundError" in result.output

    def test_malformed_identifier(self, invoke):
        result = invoke("get", "lang/en/hello.txt")

        assert result.exit_code == 1
        assert "MalformedIdentifierError" in result.output

    def test_decode_error_reported(self, invoke):
        result = invoke("get", "json://lang/en/hello.txt")

        assert result.exit_code == 1
        assert "JSONDecodeError" in result.output

    def test_zip_root(self, runner, archive_root):
        result = runner.invoke(cli, ["--no-settings", "--zip", str(archive_root), "get", "text://pack/readme.txt"])

        assert result.exit_code == 0
        assert result.output == "pack readme\n"


class TestLs:
    def test_lists_entries(self, invoke):
        result = invoke("ls", "text://lang/en/")

        assert result.exit_code == 0
        assert "Resources under text://lang/en/" in result.output
        assert "bye.txt" in result.output
        assert "hello.txt" in result.output
        assert "extra" not in result.output

    def test_listed_identifier_can_be_fetched(self, invoke, resource_root):
        (resource_root / "lang" / "en" / "a b.txt").write_text("spaced")

        listing = invoke("ls", "text://lang/en/")
        fetched = invoke("get", "text://lang/en/a%20b.txt")

        assert "text://lang/en/a%20b.txt" in listing.output
        assert fetched.exit_code == 0
        assert fetched.output == "spaced\n"

    def test_empty_directory(self, invoke):
        result = invoke("ls", "text://lang/en/extra/")

        assert result.exit_code == 0
        assert "No resources under text://lang/en/extra/" in result.output

    def test_unresolvable(self, invoke):
        result = invoke("ls", "text://lang/fr/")

        assert result.exit_code == 1
        assert "ResourceNotFoundError" in result.output

    def test_archive_listing(self, runner, archive_root):
        result = runner.invoke(cli, ["--no-settings", "--zip", str(archive_root), "ls", "bytes://pack/sprites/"])

        assert result.exit_code == 0
        assert "a.png" in result.output
        assert "b.png" not in result.output


class TestWhich:
    def test_found(self, invoke):
        result = invoke("which", "text://lang/en/hello.txt")

        assert result.exit_code == 0
        assert "yes (used)" in result.output
        assert "Loader:" in result.output

    def test_not_found(self, invoke):
        result = invoke("which", "text://lang/en/nothing.txt")

        assert result.exit_code == 1
        assert "yes (used)" not in result.output

    def test_directory_does_not_shadow_later_file(self, runner, tmp_path):
        first = tmp_path / "d1"
        second = tmp_path / "d2"
        (first / "pack" / "x").mkdir(parents=True)
        (second / "pack").mkdir(parents=True)
        (second / "pack" / "x").write_text("from-d2")
        args = ["--no-settings", "--dir", str(first), "--dir", str(second)]

        which = runner.invoke(cli, [*args, "which", "text://pack/x"])
        fetched = runner.invoke(cli, [*args, "get", "text://pack/x"])

        assert which.exit_code == 0
        used_row = next(line for line in which.output.splitlines() if "yes (used)" in line)
        assert re.split(r"[│|┃]", used_row)[1].strip() == "2"
        assert fetched.output == "from-d2\n"

    def test_unknown_scheme_reported(self, invoke):
        result = invoke("which", "img://common/missing.txt")

        assert result.exit_code == 0
        assert "No loader registered for scheme 'img'" in result.output

    def test_no_resolvers(self, runner):
        result = runner.invoke(cli, ["--no-settings", "which", "text://lang/en/hello.txt"])

        assert result.exit_code == 1
        assert "No path resolvers configured." in result.output


class TestConfig:
    def test_show(self, invoke):
        result = invoke("config", "show")

        assert result.exit_code == 0
        assert "Path Resolvers" in result.output
        assert "DirectoryPathResolver" in result.output
        assert "Loaders" in result.output
        assert "Produces" in result.output
        assert "str" in result.output
        for scheme in ("text", "bytes", "json", "yaml"):
            assert scheme in result.output

    def test_show_without_resolvers(self, runner):
        result = runner.invoke(cli, ["--no-settings", "config", "show"])

        assert result.exit_code == 0
        assert "No path resolvers configured." in result.output

    def test_help_without_subcommand(self, runner):
        result = runner.invoke(cli, ["config"])

        assert result.exit_code == 0
        assert "show" in result.output
        assert "path" in result.output

    def test_path(self, runner, isolated_settings):
        result = runner.invoke(cli, ["config", "path"])

        assert result.exit_code == 0
        assert "global:" in result.output
        assert "project:" in result.output
        assert "local:" in result.output
        assert "not created" in result.output

    def test_settings_resolvers_used(self, runner, isolated_settings, resource_root):
        settings_file = isolated_settings / ".resourcefs" / "settings.yaml"
        settings_file.parent.mkdir()
        settings_file.write_text(yaml.safe_dump({"resolvers": [{"type": "directory", "root": str(resource_root)}]}))

        result = runner.invoke(cli, ["get", "text://lang/en/bye.txt"])

        assert result.exit_code == 0
        assert result.output == "bye\n"

    def test_broken_settings_exit(self, runner, isolated_settings, resource_root):
        settings_file = isolated_settings / ".resourcefs" / "settings.yaml"
        settings_file.parent.mkdir()
        settings_file.write_text(
            yaml.safe_dump(
                {
                    "resolvers": [{"type": "directory", "root": str(resource_root)}],
                    "loaders": [{"type": "bytes", "scheme": "img", "fallback": "img://common/default.png"}],
                }
            )
        )

        result = runner.invoke(cli, ["config", "show"])

        assert result.exit_code == 1
        assert "ConfigurationError" in result.output


class TestLogging:
    @pytest.fixture(autouse=True)
    def reset_package_logger(self):
        yield
        package_logger = logging.getLogger("resourcefs")
        for handler in list(package_logger.handlers):
            if isinstance(handler, JsonlHandler):
                package_logger.removeHandler(handler)
        package_logger.setLevel(logging.NOTSET)

    def test_log_file(self, invoke, tmp_path):
        log_path = tmp_path / "cli.jsonl"

        result = invoke("--log-file", str(log_path), "--log-level", "debug", "get", "text://lang/en/hello.txt")

        assert result.exit_code == 0
        messages = [json.loads(line)["message"] for line in log_path.read_text().splitlines()]
        assert any(message.startswith("[resource:resolve] text://lang/en/hello.txt") for message in messages)


class TestConfigAdd:
    def test_add_to_project_scope(self, runner, isolated_settings, resource_root):
        result = runner.invoke(cli, ["config", "add", "directory", str(resource_root)])

        assert result.exit_code == 0
        assert "Added directory resolver" in result.output
        written = yaml.safe_load((isolated_settings / ".resourcefs" / "settings.yaml").read_text())
        assert written == {"resolvers": [{"type": "directory", "root": str(resource_root)}]}

        fetched = runner.invoke(cli, ["get", "text://lang/en/hello.txt"])
        assert fetched.output == "hi\n"

    def test_add_to_local_scope(self, runner, isolated_settings, archive_root):
        result = runner.invoke(cli, ["config", "add", "zip", str(archive_root), "--scope", "local"])

        assert result.exit_code == 0
        assert (isolated_settings / ".resourcefs" / "settings.local.yaml").exists()
        assert not (isolated_settings / ".resourcefs" / "settings.yaml").exists()

    def test_unknown_type_rejected(self, runner, isolated_settings, resource_root):
        result = runner.invoke(cli, ["config", "add", "ftp", str(resource_root)])

        assert result.exit_code == 2

    def test_broken_settings_file(self, runner, isolated_settings, resource_root):
        settings_file = isolated_settings / ".resourcefs" / "settings.yaml"
        settings_file.parent.mkdir()
        settings_file.write_text("- not\n- a mapping\n")

        result = runner.invoke(cli, ["config", "add", "directory", str(resource_root)])

        assert result.exit_code == 1
        assert "ConfigurationError" in result.output
