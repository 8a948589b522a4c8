"""Shared fixtures and fakes for the test suite."""

from vault_query.stores.memory import InMemoryStore


class FakeLinkOracle:
    """Link oracle driven by explicit tables instead of a metadata cache."""

    def __init__(self, store, targets=None, headings=None, link_map=None):
        self.store = store
        self.targets = {k.lower(): v for k, v in (targets or {}).items()}
        self.headings = headings or {}
        self.link_map = link_map or {}
        self.resolve_calls = []

    def resolve(self, source_path, link_text):
        self.resolve_calls.append((source_path, link_text))
        key = link_text.split('#', 1)[0].strip().lower()
        path = self.targets.get(key)
        return self.store.get(path) if path else None

    def headings_of(self, document):
        return list(self.headings.get(document.path, []))

    def resolved_link_map(self):
        return self.link_map


class FlakyStore(InMemoryStore):
    """In-memory store that fails to read selected paths."""

    def __init__(self, files=None, unreadable=()):
        super().__init__(files)
        self.unreadable = set(unreadable)

    def read(self, path):
        if path in self.unreadable:
            raise PermissionError(f"Permission denied: {path}")
        return super().read(path)
