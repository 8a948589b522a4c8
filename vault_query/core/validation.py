"""Classification of a document's wikilinks into valid and broken links."""

from typing import List, Optional

from vault_query.config import EngineConfig
from vault_query.core.links import LinkResolver, extract_headings, parse_wikilinks, split_target
from vault_query.core.models import (
    BrokenHeadingLink,
    BrokenNoteLink,
    LinkValidation,
    ResolvedLink,
    UnresolvedLink,
)
from vault_query.core.ports import ContentStore, LinkOracle


def _plural(count: int, singular: str, plural: str) -> str:
    return f"{count} {singular if count == 1 else plural}"


def summarize(validation: LinkValidation) -> str:
    """One-line count breakdown, e.g. ``3 links: 1 valid, 1 broken note, 1 broken heading``."""
    total = len(validation.valid) + len(validation.broken_notes) + len(validation.broken_headings)
    if total == 0:
        return "No links found"
    return ", ".join([
        _plural(total, "link", "links") + f": {len(validation.valid)} valid",
        _plural(len(validation.broken_notes), "broken note", "broken notes"),
        _plural(len(validation.broken_headings), "broken heading", "broken headings"),
    ])


class LinkValidator:
    """Checks that every wikilink in a document points at an existing note and heading."""

    def __init__(
        self,
        store: ContentStore,
        oracle: LinkOracle,
        resolver: Optional[LinkResolver] = None,
        config: Optional[EngineConfig] = None,
    ):
        self.store = store
        self.oracle = oracle
        self.config = config or EngineConfig()
        self.resolver = resolver or LinkResolver(store, oracle, self.config)

    def validate(self, content: str, source_path: str) -> LinkValidation:
        """Classify each wikilink in ``content``.

        Links with a ``#heading`` resolve the note part first and then look
        the heading up. An empty note part refers to ``content`` itself, so
        its headings are read from ``content`` rather than the store; the
        document need not be saved yet. Block references (``#^id``) only
        require the note to resolve.

        Args:
            content: Text of the document
            source_path: Path the content belongs to, used for resolution

        Returns:
            LinkValidation with valid links, broken notes and broken headings
        """
        result = LinkValidation()
        lines = content.split('\n')
        own_headings = None

        for link in parse_wikilinks(content):
            context = lines[link.line - 1]
            note_part, heading = split_target(link.target)

            if not note_part and heading is not None:
                if own_headings is None:
                    own_headings = {h.strip().lower() for h in extract_headings(content)}
                if heading.startswith('^') or heading.lower() in own_headings:
                    result.valid.append(link.raw)
                else:
                    result.broken_headings.append(
                        BrokenHeadingLink(link.raw, link.line, context, note=source_path)
                    )
                continue

            target = link.target if heading is None else note_part
            resolved = self.resolver.resolve(source_path, target)
            if resolved is None:
                result.broken_notes.append(BrokenNoteLink(link.raw, link.line, context))
                continue
            if heading is None or heading.startswith('^'):
                result.valid.append(link.raw)
                continue

            headings = {h.strip().lower() for h in self.oracle.headings_of(resolved)}
            if heading.lower() in headings:
                result.valid.append(link.raw)
            else:
                result.broken_headings.append(
                    BrokenHeadingLink(link.raw, link.line, context, note=resolved.path)
                )

        result.summary = summarize(result)
        return result

    def resolve_all(self, content: str, source_path: str) -> tuple[List[ResolvedLink], List[UnresolvedLink]]:
        """Split wikilinks into resolved targets and unresolved links with suggestions."""
        resolved_links = []
        unresolved_links = []

        for link in parse_wikilinks(content):
            target = self.resolver.resolve(source_path, link.target)
            if target is not None:
                resolved_links.append(ResolvedLink(text=link.raw, target=target.path, alias=link.alias))
            else:
                unresolved_links.append(UnresolvedLink(
                    text=link.raw,
                    line=link.line,
                    suggestions=self.resolver.suggest(link.target),
                ))

        return resolved_links, unresolved_links
