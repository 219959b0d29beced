"""Unit tests for book_mapper.metadata_resolver module."""

import logging
from unittest.mock import patch

from src.book_mapper.metadata_resolver import MetadataResolver
from src.book_mapper.models import EntityMetadata
from tests.fixtures import write_tree


class TestReadMetadata:
    """Test cases for sidecar parsing."""

    def test_reads_name_and_description(self, tmp_path):
        write_tree(tmp_path, {".chapter-metadata.json": {"name": "Introduction", "description": "Start here"}})

        meta = MetadataResolver.read_chapter_metadata(str(tmp_path))

        assert meta == EntityMetadata(name="Introduction", description="Start here")

    def test_book_sidecar_uses_its_own_file(self, tmp_path):
        write_tree(tmp_path, {
            ".chapter-metadata.json": {"name": "Chapter"},
            ".book-metadata.json": {"name": "Handbook"},
        })

        assert MetadataResolver.read_book_metadata(str(tmp_path)).name == "Handbook"

    def test_missing_file_returns_empty(self, tmp_path):
        assert MetadataResolver.read_chapter_metadata(str(tmp_path)) == EntityMetadata()

    def test_invalid_json_warns_and_returns_empty(self, tmp_path, caplog):
        write_tree(tmp_path, {".chapter-metadata.json": "{not json"})

        with caplog.at_level(logging.WARNING, logger="src.book_mapper.metadata_resolver"):
            meta = MetadataResolver.read_chapter_metadata(str(tmp_path))

        assert meta == EntityMetadata()
        assert "Ignoring metadata file" in caplog.text

    def test_non_object_json_returns_empty(self, tmp_path):
        write_tree(tmp_path, {".chapter-metadata.json": '["Introduction"]'})

        assert MetadataResolver.read_chapter_metadata(str(tmp_path)) == EntityMetadata()

    def test_blank_and_non_string_values_ignored(self, tmp_path):
        write_tree(tmp_path, {".chapter-metadata.json": {"name": "  ", "description": 5}})

        assert MetadataResolver.read_chapter_metadata(str(tmp_path)) == EntityMetadata()


class TestDeriveNameFromReadme:
    """Test cases for README-based naming."""

    def test_first_h1_wins(self, tmp_path):
        write_tree(tmp_path, {"README.md": "intro line\n## Sub\n# Getting Started\n"})

        assert MetadataResolver.derive_name_from_readme(str(tmp_path)) == "Getting Started"

    def test_h2_used_without_h1(self, tmp_path):
        write_tree(tmp_path, {"README.md": "text\n### Third\n## Second\n"})

        assert MetadataResolver.derive_name_from_readme(str(tmp_path)) == "Second"

    def test_closing_hashes_dropped(self, tmp_path):
        write_tree(tmp_path, {"README.md": "# Getting Started ##\n"})

        assert MetadataResolver.derive_name_from_readme(str(tmp_path)) == "Getting Started"

    def test_trailing_hash_in_word_is_kept(self, tmp_path):
        write_tree(tmp_path, {"README.md": "# C#\n"})

        assert MetadataResolver.derive_name_from_readme(str(tmp_path)) == "C#"

    def test_first_non_blank_line_without_heading(self, tmp_path):
        write_tree(tmp_path, {"readme.txt": "\n\n  Plain title  \nmore"})

        assert MetadataResolver.derive_name_from_readme(str(tmp_path)) == "Plain title"

    def test_empty_candidate_is_skipped(self, tmp_path):
        write_tree(tmp_path, {"README.md": "   \n", "index.md": "# From Index"})

        assert MetadataResolver.derive_name_from_readme(str(tmp_path)) == "From Index"

    def test_no_candidate_returns_none(self, tmp_path):
        write_tree(tmp_path, {"page.md": "# Not a readme"})

        assert MetadataResolver.derive_name_from_readme(str(tmp_path)) is None


class TestResolveChapterName:
    """Test cases for the naming fallback chain."""

    def test_sidecar_name_wins_without_reading_readme(self, tmp_path):
        """Lower-precedence sources are not consulted once a name is found."""
        chapter = tmp_path / "Intro"
        write_tree(chapter, {".chapter-metadata.json": {"name": "Introduction"}, "README.md": "# Readme"})

        with patch.object(MetadataResolver, 'derive_name_from_readme') as mock_derive:
            name = MetadataResolver.resolve_chapter_name(str(chapter), 'readme')

        assert name == "Introduction"
        mock_derive.assert_not_called()

    def test_readme_policy_uses_heading(self, tmp_path):
        chapter = tmp_path / "intro"
        write_tree(chapter, {"README.md": "# Getting Started"})

        assert MetadataResolver.resolve_chapter_name(str(chapter), 'readme') == "Getting Started"

    def test_dir_policy_ignores_readme(self, tmp_path):
        chapter = tmp_path / "intro"
        write_tree(chapter, {"README.md": "# Getting Started"})

        assert MetadataResolver.resolve_chapter_name(str(chapter), 'dir') == "intro"

    def test_falls_back_to_directory_name(self, tmp_path):
        chapter = tmp_path / "Setup Guide"
        chapter.mkdir()

        assert MetadataResolver.resolve_chapter_name(str(chapter) + "/", 'readme') == "Setup Guide"

    def test_uses_supplied_metadata(self, tmp_path):
        chapter = tmp_path / "intro"
        chapter.mkdir()

        name = MetadataResolver.resolve_chapter_name(
            str(chapter), 'dir', EntityMetadata(name="Given")
        )

        assert name == "Given"
