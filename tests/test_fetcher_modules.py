"""Tests for the fetcher and core package structure.

Verifies that each package re-exports the symbols callers build on.
"""


class TestFetcherModuleExports:
    """Test that the fetcher package exports expected symbols."""

    def test_types_exports(self):
        """Test types are available from the package."""
        from arenapack.fetcher import ContentOrigin, ResolvedContent, SourceDescriptor

        assert ContentOrigin.FILESYSTEM.value == "filesystem"
        assert ContentOrigin.CONFIG_MAP.value == "configmap"
        assert ResolvedContent.empty().origin is ContentOrigin.NONE
        assert SourceDescriptor(name="s").content_path is None

    def test_operation_exports(self):
        """Test fetch operations are callable."""
        from arenapack.fetcher import (
            build_content_path,
            extract_tar_gz,
            fetch_artifact,
            read_directory,
            rewrite_artifact_url,
        )

        for func in (
            build_content_path,
            extract_tar_gz,
            fetch_artifact,
            read_directory,
            rewrite_artifact_url,
        ):
            assert callable(func)

    def test_all_is_complete(self):
        """Test every name in __all__ resolves."""
        import arenapack.fetcher as fetcher

        for name in fetcher.__all__:
            assert hasattr(fetcher, name), name


class TestCoreModuleExports:
    """Test that the core package exports expected symbols."""

    def test_all_is_complete(self):
        """Test every name in __all__ resolves."""
        import arenapack.core as core

        for name in core.__all__:
            assert hasattr(core, name), name

    def test_no_source_constants(self):
        """Test the empty-result reasons."""
        from arenapack.constants import NO_CONTENT_AVAILABLE, NO_SOURCE, SOURCE_NOT_FOUND

        assert NO_SOURCE == "No source"
        assert SOURCE_NOT_FOUND == "Source not found"
        assert NO_CONTENT_AVAILABLE == "No content available"
