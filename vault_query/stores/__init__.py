"""Reference collaborators for running the engine without a host application."""

from vault_query.stores.filesystem import FileSystemStore
from vault_query.stores.memory import InMemoryStore
from vault_query.stores.oracle import SimpleLinkOracle

__all__ = [
    "FileSystemStore",
    "InMemoryStore",
    "SimpleLinkOracle",
]
