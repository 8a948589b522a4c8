"""Tests for configuration loading and frontmatter summaries."""

import pytest

from vault_query.config import EngineConfig, load_config
from vault_query.core.frontmatter import (
    count_words,
    parse_frontmatter,
    split_frontmatter,
    strip_frontmatter,
    summarize_frontmatter,
)


class TestEngineConfig:
    """Tests for EngineConfig."""

    def test_defaults(self):
        config = EngineConfig()
        assert config.snippet_length == 100
        assert config.max_results == 100
        assert config.max_suggestions == 5
        assert config.token_length == 22
        assert config.markdown_extensions == [".md"]

    def test_extensions_normalized(self):
        config = EngineConfig(markdown_extensions=["MD", ".markdown"])
        assert config.markdown_extensions == [".md", ".markdown"]
        assert config.is_markdown("Notes/Readme.MD")
        assert config.is_markdown("x.markdown")
        assert not config.is_markdown("x.txt")

    @pytest.mark.parametrize("key", ["snippet_length", "max_results", "token_length"])
    def test_rejects_non_positive(self, key):
        with pytest.raises(ValueError):
            EngineConfig(**{key: 0})

    def test_unknown_keys_rejected(self):
        with pytest.raises(ValueError, match="max_result"):
            EngineConfig.from_dict({"max_result": 3})


class TestLoadConfig:
    """Tests for load_config."""

    def test_top_level_settings(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("max_results: 7\nsnippet_length: 40\n")

        config = load_config(config_file)
        assert config.max_results == 7
        assert config.snippet_length == 40
        assert config.max_suggestions == 5

    def test_engine_section(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("engine:\n  max_suggestions: 2\n  markdown_extensions: [md, mdx]\n")

        config = load_config(config_file)
        assert config.max_suggestions == 2
        assert config.markdown_extensions == [".md", ".mdx"]

    def test_empty_file_gives_defaults(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("")
        assert load_config(config_file) == EngineConfig()

    def test_non_mapping_rejected(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("- just\n- a list\n")
        with pytest.raises(ValueError):
            load_config(config_file)


class TestFrontmatter:
    """Tests for frontmatter parsing and summaries."""

    def test_split(self):
        assert split_frontmatter("---\ntitle: A\n---\nbody") == "title: A\n"
        assert split_frontmatter("no frontmatter") is None
        assert split_frontmatter("---\nunterminated") is None

    def test_parse(self):
        content = "---\ntitle: Test\ntags: [a, b]\n---\nbody"
        assert parse_frontmatter(content) == {"title": "Test", "tags": ["a", "b"]}

    def test_invalid_yaml_gives_empty(self):
        assert parse_frontmatter("---\ntitle: [unclosed\n---\nbody", "bad.md") == {}

    def test_scalar_frontmatter_gives_empty(self):
        assert parse_frontmatter("---\njust a string\n---\n") == {}

    def test_summary_normalizes_lists(self):
        summary = summarize_frontmatter({"title": "T", "tags": "one", "aliases": ["x", "y"]})
        assert summary == {"title": "T", "tags": ["one"], "aliases": ["x", "y"]}

    def test_summary_keeps_other_keys_and_drops_position(self):
        frontmatter = parse_frontmatter("---\ndate: 2024-01-02\nstatus: draft\nposition: 3\n---\n")
        assert summarize_frontmatter(frontmatter) == {"date": "2024-01-02", "status": "draft"}

    def test_strip_frontmatter(self):
        assert strip_frontmatter("---\ntitle: A\n---\nbody\n") == "body\n"
        assert strip_frontmatter("no frontmatter") == "no frontmatter"


class TestCountWords:
    """Tests for count_words."""

    def test_plain_text(self):
        assert count_words("one two\nthree\t four") == 4

    def test_frontmatter_excluded(self):
        assert count_words("---\ntitle: Many words here\n---\nJust two") == 2

    def test_comments_excluded(self):
        content = "visible %% hidden inline %% text\n%%\nhidden\nblock\n%%\nend"
        assert count_words(content) == 3

    def test_empty(self):
        assert count_words("") == 0
