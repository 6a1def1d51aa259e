"""Tests for DirectoryPathResolver."""

import logging
from pathlib import Path

import pytest

from resourcefs.exceptions import ContainerNotFoundError
from resourcefs.resolvers.directory import DirectoryPathResolver


@pytest.fixture
def resolver(resource_root: Path) -> DirectoryPathResolver:
    return DirectoryPathResolver(resource_root)


class TestExists:
    def test_existing_file(self, resolver):
        assert resolver.exists_in_path("lang", "/en/hello.txt")

    def test_existing_directory(self, resolver):
        assert resolver.exists_in_path("lang", "/en/")

    def test_missing_file(self, resolver):
        assert not resolver.exists_in_path("lang", "/en/missing.txt")

    def test_missing_host_does_not_raise(self, resolver):
        assert not resolver.exists_in_path("nowhere", "/en/hello.txt")

    def test_identifier_convenience(self, resolver):
        assert resolver.exists("text://lang/en/hello.txt")


class TestGetStream:
    def test_stream_reads_content(self, resolver):
        stream = resolver.get_stream("lang", "/en/hello.txt")
        assert stream is not None
        with stream:
            assert stream.read() == b"hi"

    def test_missing_returns_none(self, resolver):
        assert resolver.get_stream("lang", "/en/missing.txt") is None

    def test_directory_returns_none(self, resolver):
        assert resolver.get_stream("lang", "/en/") is None

    def test_open_convenience(self, resolver):
        with resolver.open("text://common/missing.txt") as stream:
            assert stream.read() == b"?"

    def test_path_traversal_blocked(self, resolver, resource_root, caplog):
        """Paths escaping the host directory are treated as absent."""
        (resource_root.parent / "secret.txt").write_text("secret")

        with caplog.at_level(logging.WARNING):
            stream = resolver.get_stream("lang", "/../../secret.txt")

        assert stream is None
        assert "Path traversal attempt blocked" in caplog.text

    def test_host_traversal_blocked(self, resolver):
        assert not resolver.exists_in_path("..", "/res/lang/en/hello.txt")


class TestListEntries:
    def test_lists_files_only(self, resolver):
        """Subdirectories are not listed."""
        assert resolver.list_entries("lang", "/en/") == ["bye.txt", "hello.txt"]

    def test_missing_subdirectory_is_empty(self, resolver):
        assert resolver.list_entries("lang", "/fr/") == []

    def test_file_path_is_empty(self, resolver):
        assert resolver.list_entries("lang", "/en/hello.txt") == []

    def test_missing_host_raises(self, resolver):
        with pytest.raises(ContainerNotFoundError):
            resolver.list_entries("nowhere", "/")

    def test_entries_convenience(self, resolver):
        assert resolver.entries("text://common/") == ["missing.txt"]


def test_file_uri_root(resource_root):
    resolver = DirectoryPathResolver(f"file://{resource_root}")

    assert resolver.root == resource_root
    assert resolver.exists_in_path("lang", "/en/hello.txt")
