"""Tests for BacklinkIndexer."""

import pytest

from conftest import FakeLinkOracle, FlakyStore
from vault_query.core.backlinks import BacklinkIndexer, centered_snippet
from vault_query.core.models import NotFound
from vault_query.stores.memory import InMemoryStore
from vault_query.stores.oracle import SimpleLinkOracle


VAULT = {
    "Target.md": "# Target\nThe Target note mentions itself.\n",
    "a.md": "Intro\nSee [[Target]] here\nand [[target|again]] plus [[Other]]\n",
    "b.md": "Mention of target in text\n[[Other]]\n",
    "c.md": "targeted shooting\n",
    "Other.md": "nothing\n",
}


class TestCenteredSnippet:
    """Tests for backlink snippet extraction."""

    def test_short_line_unchanged(self):
        assert centered_snippet("short [[Target]] line", 6, 16) == "short [[Target]] line"

    def test_both_ends_truncated(self):
        line = "x" * 200 + " Target " + "y" * 200
        snippet = centered_snippet(line, 201, 207)
        assert len(snippet) == 100
        assert snippet.startswith("...")
        assert snippet.endswith("...")
        assert "Target" in snippet

    def test_match_near_start(self):
        line = "Target " + "y" * 200
        snippet = centered_snippet(line, 0, 6)
        assert len(snippet) == 100
        assert snippet.startswith("Target")
        assert snippet.endswith("...")

    def test_match_near_end(self):
        line = "y" * 200 + " Target"
        snippet = centered_snippet(line, 201, 207)
        assert len(snippet) == 100
        assert snippet.startswith("...")
        assert snippet.endswith("Target")


class TestBacklinkIndexer:
    """Tests for linked and unlinked backlinks."""

    @pytest.fixture
    def store(self):
        return InMemoryStore(VAULT)

    @pytest.fixture
    def indexer(self, store):
        return BacklinkIndexer(store, SimpleLinkOracle(store))

    def test_linked_backlinks(self, indexer):
        backlinks = indexer.get_backlinks("Target.md")

        assert len(backlinks) == 1
        backlink = backlinks[0]
        assert backlink.source_path == "a.md"
        assert backlink.type == "linked"
        assert [o.line for o in backlink.occurrences] == [2, 3]
        assert backlink.occurrences[0].snippet == "See [[Target]] here"

    def test_unlinked_mentions(self, indexer):
        backlinks = indexer.get_backlinks("Target.md", include_unlinked=True)

        by_source = {(b.source_path, b.type): b for b in backlinks}
        assert ("a.md", "linked") in by_source
        assert ("b.md", "unlinked") in by_source
        assert [o.line for o in by_source[("b.md", "unlinked")].occurrences] == [1]

    def test_unlinked_skips_target_and_linked_sources(self, indexer):
        backlinks = indexer.get_backlinks("Target.md", include_unlinked=True)
        sources = [b.source_path for b in backlinks]
        assert "Target.md" not in sources
        assert sources.count("a.md") == 1

    def test_unlinked_requires_whole_word(self, indexer):
        backlinks = indexer.get_backlinks("Target.md", include_unlinked=True)
        assert "c.md" not in {b.source_path for b in backlinks}

    def test_linked_only_by_default(self, indexer):
        backlinks = indexer.get_backlinks("Target.md")
        assert all(b.type == "linked" for b in backlinks)

    def test_missing_target(self, indexer):
        with pytest.raises(NotFound):
            indexer.get_backlinks("Nope.md")

    def test_every_resolving_link_gets_a_backlink(self, indexer):
        backlinks = indexer.get_backlinks("Other.md")
        assert {b.source_path for b in backlinks} == {"a.md", "b.md"}

    def test_stale_link_map_is_reconfirmed(self, store):
        oracle = FakeLinkOracle(
            store,
            targets={"Target": "Other.md"},
            link_map={"a.md": {"Target.md": 1}},
        )
        indexer = BacklinkIndexer(store, oracle)
        assert indexer.get_backlinks("Target.md") == []

    def test_only_shortlisted_sources_are_read(self, store):
        oracle = FakeLinkOracle(
            store,
            targets={"Target": "Target.md", "Other": "Other.md"},
            link_map={"a.md": {"Target.md": 2}, "b.md": {"Other.md": 1}},
        )
        BacklinkIndexer(store, oracle).get_backlinks("Target.md")
        assert {source for source, _ in oracle.resolve_calls} == {"a.md"}

    def test_unreadable_source_skipped(self):
        store = FlakyStore(VAULT, unreadable=["a.md"])
        indexer = BacklinkIndexer(store, SimpleLinkOracle(store))

        backlinks = indexer.get_backlinks("Other.md", include_unlinked=True)
        assert "a.md" not in {b.source_path for b in backlinks}
        assert "b.md" in {b.source_path for b in backlinks}

    def test_to_dict(self, indexer):
        data = indexer.get_backlinks("Target.md")[0].to_dict()
        assert data["sourcePath"] == "a.md"
        assert data["type"] == "linked"
        assert data["occurrences"][0] == {"line": 2, "snippet": "See [[Target]] here"}
