"""Tests for LinkValidator."""

import pytest

from conftest import FakeLinkOracle
from vault_query.core.models import LinkValidation
from vault_query.core.validation import LinkValidator, summarize
from vault_query.stores.memory import InMemoryStore
from vault_query.stores.oracle import SimpleLinkOracle

SOURCE = "\n".join([
    "[[Note]]",
    "[[Note#Intro]]",
    "[[Note#Missing]]",
    "[[Ghost]]",
    "[[Ghost#Intro]]",
    "[[#Local]]",
    "# Local",
])


class TestLinkValidator:
    """Tests for link classification."""

    @pytest.fixture
    def store(self):
        return InMemoryStore({
            "Note.md": "# Intro\n## Details\ntext",
            "src.md": SOURCE,
        })

    @pytest.fixture
    def validator(self, store):
        return LinkValidator(store, SimpleLinkOracle(store))

    def test_classification(self, validator):
        result = validator.validate(SOURCE, "src.md")

        assert result.valid == ["[[Note]]", "[[Note#Intro]]", "[[#Local]]"]
        assert [(b.link, b.line) for b in result.broken_notes] == [
            ("[[Ghost]]", 4),
            ("[[Ghost#Intro]]", 5),
        ]
        assert [(b.link, b.line, b.note) for b in result.broken_headings] == [
            ("[[Note#Missing]]", 3, "Note.md"),
        ]

    def test_missing_heading_is_never_a_broken_note(self, validator):
        result = validator.validate("[[Note#Heading]]", "src.md")
        assert result.broken_notes == []
        assert len(result.broken_headings) == 1

    def test_heading_comparison_ignores_case_and_whitespace(self, validator):
        result = validator.validate("[[Note# details ]]", "src.md")
        assert result.valid == ["[[Note# details ]]"]

    def test_context_is_source_line(self, validator):
        result = validator.validate("first\nsee [[Ghost]] now", "src.md")
        assert result.broken_notes[0].context == "see [[Ghost]] now"

    def test_summary(self, validator):
        result = validator.validate(SOURCE, "src.md")
        assert result.summary == "6 links: 3 valid, 2 broken notes, 1 broken heading"

    def test_no_links(self, validator):
        assert validator.validate("plain text", "src.md").summary == "No links found"

    def test_uses_oracle_headings(self, store):
        oracle = FakeLinkOracle(
            store,
            targets={"Note": "Note.md"},
            headings={"Note.md": ["Cached Heading"]},
        )
        result = LinkValidator(store, oracle).validate(
            "[[Note#Cached Heading]] [[Note#Intro]]", "src.md"
        )
        assert result.valid == ["[[Note#Cached Heading]]"]
        assert [b.link for b in result.broken_headings] == ["[[Note#Intro]]"]

    def test_same_note_heading_in_unsaved_note(self, validator):
        result = validator.validate("# Intro\nsee [[#Intro]]\n", "new.md")
        assert result.valid == ["[[#Intro]]"]
        assert result.broken_notes == []

    def test_same_note_heading_comes_from_new_content(self):
        store = InMemoryStore({"a.md": "# Old\n"})
        validator = LinkValidator(store, SimpleLinkOracle(store))

        result = validator.validate("# New\n[[#New]] [[#Old]]\n", "a.md")

        assert result.valid == ["[[#New]]"]
        assert [(b.link, b.note) for b in result.broken_headings] == [("[[#Old]]", "a.md")]

    def test_block_references_need_only_the_note(self, validator):
        result = validator.validate("[[Note#^abc123]] [[#^local]] [[Ghost#^abc]]", "src.md")
        assert result.valid == ["[[Note#^abc123]]", "[[#^local]]"]
        assert [b.link for b in result.broken_notes] == ["[[Ghost#^abc]]"]
        assert result.broken_headings == []

    def test_resolve_all(self, validator):
        resolved, unresolved = validator.resolve_all("[[Note|n]]\n[[Nte]]", "src.md")

        assert [(r.text, r.target, r.alias) for r in resolved] == [("[[Note|n]]", "Note.md", "n")]
        assert unresolved[0].text == "[[Nte]]"
        assert unresolved[0].line == 2
        assert unresolved[0].suggestions[0] == "Note.md"


class TestSummarize:
    """Tests for the summary line."""

    def test_singular_forms(self):
        validation = LinkValidation(valid=["[[a]]"])
        assert summarize(validation) == "1 link: 1 valid, 0 broken notes, 0 broken headings"
