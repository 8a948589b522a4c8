"""Tests for VersionOracle."""

import re

import pytest

from vault_query.core.models import Document, FileStat, VersionConflict
from vault_query.core.versioning import VersionOracle


class TestVersionOracle:
    """Tests for version token generation and checks."""

    @pytest.fixture
    def oracle(self):
        return VersionOracle()

    @pytest.fixture
    def document(self):
        return Document(path="note.md", size=120, mtime=1700000000000, ctime=1690000000000)

    def test_token_shape(self, oracle, document):
        token = oracle.token_for(document)
        assert re.fullmatch(r"[A-Za-z0-9_-]{22}", token)

    def test_token_is_pure(self, oracle, document):
        assert oracle.token_for(document) == oracle.token_for(document)
        same = Document(path="other.md", size=120, mtime=1700000000000)
        assert oracle.token_for(same) == oracle.token_for(document)

    def test_token_ignores_ctime(self, oracle, document):
        other = Document(path="note.md", size=120, mtime=1700000000000, ctime=1)
        assert oracle.token_for(other) == oracle.token_for(document)

    def test_token_changes_with_size_or_mtime(self, oracle, document):
        bigger = Document(path="note.md", size=121, mtime=1700000000000)
        newer = Document(path="note.md", size=120, mtime=1700000000001)
        tokens = {oracle.token_for(d) for d in (document, bigger, newer)}
        assert len(tokens) == 3

    def test_integral_float_mtime_matches_int(self, oracle):
        assert oracle.token_for(FileStat(mtime=1700000000000.0, size=5)) == \
            oracle.token_for(FileStat(mtime=1700000000000, size=5))

    def test_custom_length(self, document):
        assert len(VersionOracle(token_length=10).token_for(document)) == 10

    def test_validate(self, oracle, document):
        token = oracle.token_for(document)
        assert oracle.validate(document, token) is True
        assert oracle.validate(document, "stale-token") is False
        assert oracle.validate(document, None) is False

    def test_ensure_returns_current(self, oracle, document):
        token = oracle.token_for(document)
        assert oracle.ensure("note.md", document, token) == token

    def test_ensure_raises_conflict_with_both_tokens(self, oracle, document):
        old_token = oracle.token_for(document)
        changed = Document(path="note.md", size=200, mtime=1700000005000)

        with pytest.raises(VersionConflict) as exc_info:
            oracle.ensure("note.md", changed, old_token)

        conflict = exc_info.value
        assert conflict.status == 412
        assert conflict.provided == old_token
        assert conflict.current == oracle.token_for(changed)
        assert conflict.to_dict()["providedVersion"] == old_token
