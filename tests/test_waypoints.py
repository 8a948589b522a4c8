"""Tests for waypoint extraction and folder-note detection."""

import pytest

from vault_query.core.models import Document
from vault_query.core.waypoints import (
    WaypointScanner,
    extract_waypoint_block,
    has_waypoint_marker,
)
from vault_query.stores.memory import InMemoryStore

WAYPOINT_NOTE = (
    "intro\n"
    "%% Begin Waypoint %%\n"
    "- [[A]]\n"
    "- [[B|b]]\n"
    "%% End Waypoint %%\n"
    "outro"
)


class TestExtractWaypointBlock:
    """Tests for extract_waypoint_block."""

    def test_block_found(self):
        block = extract_waypoint_block(WAYPOINT_NOTE)
        assert block.has_waypoint is True
        assert (block.start, block.end) == (2, 5)
        assert block.links == ["A", "B|b"]
        assert block.raw_content == "- [[A]]\n- [[B|b]]"

    def test_unclosed_block(self):
        block = extract_waypoint_block("%% Begin Waypoint %%\n- [[A]]\n")
        assert block.has_waypoint is False
        assert block.links == []

    def test_no_block(self):
        assert extract_waypoint_block("plain").has_waypoint is False

    def test_has_marker(self):
        assert has_waypoint_marker(WAYPOINT_NOTE) is True
        assert has_waypoint_marker("%% Begin Waypoint %%") is False


class TestWaypointScanner:
    """Tests for vault-wide waypoint search and folder notes."""

    @pytest.fixture
    def store(self):
        return InMemoryStore({
            "Projects/Projects.md": "just a folder note",
            "Areas/index.md": WAYPOINT_NOTE,
            "Areas/Areas.md": WAYPOINT_NOTE,
            "loose.md": "nothing",
        })

    @pytest.fixture
    def scanner(self, store):
        return WaypointScanner(store)

    def test_search_all(self, scanner):
        results = scanner.search()
        assert sorted(r.path for r in results) == ["Areas/Areas.md", "Areas/index.md"]
        assert results[0].to_dict()["waypointRange"] == {"start": 2, "end": 5}

    def test_search_in_folder(self, scanner):
        assert scanner.search("Projects") == []

    @pytest.mark.parametrize("path,reason", [
        ("Projects/Projects.md", "basename_match"),
        ("Areas/index.md", "waypoint_marker"),
        ("Areas/Areas.md", "both"),
        ("loose.md", "none"),
    ])
    def test_is_folder_note(self, store, scanner, path, reason):
        info = scanner.is_folder_note(store.get(path))
        assert info.reason == reason
        assert info.is_folder_note is (reason != "none")

    def test_folder_path(self, store, scanner):
        assert scanner.is_folder_note(store.get("Projects/Projects.md")).folder_path == "Projects"
        assert scanner.is_folder_note(store.get("loose.md")).folder_path is None

    def test_unreadable_note_falls_back_to_name(self, scanner):
        info = scanner.is_folder_note(Document(path="Ghost/Ghost.md"))
        assert info.reason == "basename_match"
