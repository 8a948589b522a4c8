"""The engine facade: every read-side vault operation behind one object."""

import logging
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from vault_query.config import EngineConfig, load_config
from vault_query.core.backlinks import BacklinkIndexer
from vault_query.core.frontmatter import count_words, split_frontmatter, strip_frontmatter
from vault_query.core.frontmatter import parse_frontmatter as parse_yaml_frontmatter
from vault_query.core.links import LinkResolver
from vault_query.core.listing import ListOptions, PaginatedLister
from vault_query.core.models import (
    Backlink,
    Document,
    FolderNoteInfo,
    LinkValidation,
    ListResult,
    NoteContent,
    NotFound,
    SearchResult,
    VaultInfo,
    WaypointBlock,
    WaypointMatch,
)
from vault_query.core.paths import require_valid_path
from vault_query.core.ports import ContentStore, LinkOracle
from vault_query.core.search import ContentSearchEngine, SearchOptions
from vault_query.core.validation import LinkValidator
from vault_query.core.versioning import VersionOracle
from vault_query.core.waypoints import WaypointScanner, extract_waypoint_block
from vault_query.stores.filesystem import FileSystemStore
from vault_query.stores.oracle import SimpleLinkOracle

logger = logging.getLogger(__name__)


class VaultQueryEngine:
    """Search, listing, link-graph and version operations over one vault.

    The engine holds no document state of its own; every call reads
    through the content store and link oracle it was built with, so
    several engines can serve different vaults side by side.
    """

    def __init__(
        self,
        store: ContentStore,
        oracle: Optional[LinkOracle] = None,
        config: Optional[EngineConfig] = None,
        name: Optional[str] = None,
    ):
        """Initialize VaultQueryEngine.

        Args:
            store: Content store to read documents from
            oracle: Link oracle (default: SimpleLinkOracle over the store)
            config: Engine defaults
            name: Vault name reported by vault_info
        """
        if oracle is None:
            oracle = SimpleLinkOracle(store, config)

        self.store = store
        self.oracle = oracle
        self.name = name
        self.config = config or EngineConfig()

        self.resolver = LinkResolver(store, oracle, self.config)
        self.searcher = ContentSearchEngine(store, self.config)
        self.lister = PaginatedLister(store, self.config)
        self.backlinks = BacklinkIndexer(store, oracle, self.resolver, self.config)
        self.validator = LinkValidator(store, oracle, self.resolver, self.config)
        self.versions = VersionOracle(self.config.token_length)
        self.waypoints = WaypointScanner(store, self.config)

    @classmethod
    def from_vault(
        cls,
        vault_path: Union[str, Path],
        config_path: Optional[Union[str, Path]] = None,
    ) -> "VaultQueryEngine":
        """Build an engine over a vault directory on disk."""
        config = load_config(config_path) if config_path else EngineConfig()
        vault_path = Path(vault_path)
        return cls(FileSystemStore(vault_path), config=config, name=vault_path.name)

    def _require_file(self, path: str) -> Document:
        normalized = require_valid_path(path)
        doc = self.store.get(normalized)
        if doc is None or not doc.is_file:
            raise NotFound(normalized)
        return doc

    # Search

    def search(self, query: str, options: Optional[SearchOptions] = None, **kwargs: Any) -> SearchResult:
        """Search note contents and names.

        Keyword arguments build SearchOptions, or override fields of
        ``options`` when both are given.
        """
        options = replace(options, **kwargs) if options is not None else SearchOptions(**kwargs)
        if options.folder:
            options = replace(options, folder=require_valid_path(options.folder))
        return self.searcher.search(query, options)

    def search_waypoints(self, folder: Optional[str] = None) -> List[WaypointMatch]:
        if folder:
            folder = require_valid_path(folder)
        return self.waypoints.search(folder)

    # Reading

    def read_note(
        self,
        path: str,
        with_frontmatter: bool = True,
        with_content: bool = True,
        parse_frontmatter: bool = False,
    ) -> NoteContent:
        """Read a note with its version token and word count.

        Args:
            path: Note path
            with_frontmatter: Include the raw and parsed frontmatter (when parsing)
            with_content: Include the full text, its word count and, when
                parsing, the body without frontmatter
            parse_frontmatter: Split the frontmatter out of the text

        Returns:
            NoteContent for the note

        Raises:
            NotFound: If the note does not exist or is a folder
        """
        doc = self._require_file(path)
        content = self.store.read(doc.path)
        note = NoteContent(path=doc.path, version=self.versions.token_for(self.store.stat(doc.path)))

        if with_content:
            note.content = content
            note.word_count = count_words(content)

        if parse_frontmatter:
            raw = split_frontmatter(content)
            note.has_frontmatter = raw is not None
            if raw is not None:
                if with_frontmatter:
                    note.frontmatter = raw
                    note.parsed_frontmatter = parse_yaml_frontmatter(content, doc.path)
                if with_content:
                    note.content_without_frontmatter = strip_frontmatter(content)

        return note

    def vault_info(self) -> VaultInfo:
        """Count files, folders and Markdown notes, and sum file sizes."""
        info = VaultInfo(name=self.name)
        for doc in self.store.list_all():
            if doc.is_directory:
                info.total_folders += 1
                continue
            info.total_files += 1
            info.total_size += doc.size
            if self.config.is_markdown(doc.path):
                info.markdown_files += 1
        return info

    # Listing

    def list(self, path: Optional[str] = None, options: Optional[ListOptions] = None, **kwargs: Any) -> ListResult:
        """List a folder; keyword arguments build ListOptions or override ``options``."""
        if options is None:
            options = ListOptions(path=path, **kwargs)
        else:
            if path is not None:
                kwargs["path"] = path
            options = replace(options, **kwargs)
        return self.lister.list_folder(options)

    def stat(self, path: str) -> Dict[str, Any]:
        normalized = require_valid_path(path)
        doc = self.store.get(normalized)
        if doc is None:
            return {"path": normalized, "exists": False}
        return {"path": normalized, "exists": True, "kind": doc.kind, "metadata": doc.to_dict()}

    def exists(self, path: str) -> Dict[str, Any]:
        normalized = require_valid_path(path)
        doc = self.store.get(normalized)
        if doc is None:
            return {"path": normalized, "exists": False}
        return {"path": normalized, "exists": True, "kind": doc.kind}

    # Links

    def resolve_link(self, source_path: str, link_text: str) -> Optional[Document]:
        return self.resolver.resolve(require_valid_path(source_path), link_text)

    def resolve_wikilink(self, source_path: str, link_text: str) -> Dict[str, Any]:
        """Resolve link text from a source note, with suggestions when it fails.

        Raises:
            NotFound: If the source note does not exist
        """
        source = self._require_file(source_path)
        target = self.resolver.resolve(source.path, link_text)

        result: Dict[str, Any] = {
            "sourcePath": source.path,
            "linkText": link_text,
            "resolved": target is not None,
        }
        if target is not None:
            result["targetPath"] = target.path
        else:
            result["suggestions"] = self.resolver.suggest(link_text)
        return result

    def get_backlinks(
        self,
        path: str,
        include_unlinked: bool = False,
        include_snippets: bool = True,
    ) -> List[Backlink]:
        backlinks = self.backlinks.get_backlinks(require_valid_path(path), include_unlinked)
        if not include_snippets:
            for backlink in backlinks:
                for occurrence in backlink.occurrences:
                    occurrence.snippet = ""
        return backlinks

    def validate_links(self, path: str) -> LinkValidation:
        """Classify the wikilinks of a stored note as valid, broken note or broken heading."""
        doc = self._require_file(path)
        return self.validator.validate(self.store.read(doc.path), doc.path)

    def validate_content(self, content: str, source_path: str) -> LinkValidation:
        """Classify the wikilinks of content about to be written to ``source_path``.

        Same-note links such as ``[[#Heading]]`` are checked against
        ``content`` itself, so ``source_path`` need not exist yet.
        """
        return self.validator.validate(content, require_valid_path(source_path))

    def validate_wikilinks(self, path: str) -> Dict[str, Any]:
        """Report resolved and unresolved wikilinks of a note, with suggestions."""
        doc = self._require_file(path)
        resolved, unresolved = self.validator.resolve_all(self.store.read(doc.path), doc.path)
        return {
            "path": doc.path,
            "totalLinks": len(resolved) + len(unresolved),
            "resolvedLinks": [link.to_dict() for link in resolved],
            "unresolvedLinks": [link.to_dict() for link in unresolved],
        }

    def get_folder_waypoint(self, path: str) -> WaypointBlock:
        doc = self._require_file(path)
        return extract_waypoint_block(self.store.read(doc.path))

    def is_folder_note(self, path: str) -> FolderNoteInfo:
        return self.waypoints.is_folder_note(self._require_file(path))

    # Versions

    def version_of(self, path: str) -> str:
        """Current version token of a note."""
        doc = self._require_file(path)
        return self.versions.token_for(self.store.stat(doc.path))

    def check_version(self, path: str, version: str) -> str:
        """Confirm ``version`` is still current before a write.

        Returns:
            The current token

        Raises:
            NotFound: If the note does not exist
            VersionConflict: If the note changed since ``version`` was issued
        """
        doc = self._require_file(path)
        current = self.versions.ensure(doc.path, self.store.stat(doc.path), version)
        logger.debug("Version %s confirmed for %s", current, doc.path)
        return current
