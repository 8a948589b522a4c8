"""Engine configuration defaults and YAML loading."""

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml


@dataclass
class EngineConfig:
    """Defaults applied when a caller leaves an option unset.

    Attributes:
        snippet_length: Width of search snippets in characters
        max_results: Global cap on search matches
        max_suggestions: Number of fuzzy suggestions for unresolved links
        backlink_snippet_length: Maximum width of backlink snippets
        token_length: Number of characters kept from a version digest
        markdown_extensions: File extensions treated as searchable notes
    """
    snippet_length: int = 100
    max_results: int = 100
    max_suggestions: int = 5
    backlink_snippet_length: int = 100
    token_length: int = 22
    markdown_extensions: List[str] = field(default_factory=lambda: [".md"])

    def __post_init__(self):
        for name in ("snippet_length", "max_results", "backlink_snippet_length", "token_length"):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be at least 1")
        if self.max_suggestions < 0:
            raise ValueError("max_suggestions must not be negative")
        self.markdown_extensions = [
            ext if ext.startswith('.') else f".{ext}"
            for ext in (e.lower() for e in self.markdown_extensions)
        ]

    def is_markdown(self, path: str) -> bool:
        lowered = path.lower()
        return any(lowered.endswith(ext) for ext in self.markdown_extensions)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EngineConfig":
        """Build a config from a mapping, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(sorted(unknown))}")
        return cls(**data)


def load_config(config_path: Union[str, Path]) -> EngineConfig:
    """Load engine configuration from a YAML file.

    The file may hold the settings at the top level or under an
    ``engine`` key. An empty file yields the defaults.

    Args:
        config_path: Path to the YAML file

    Returns:
        EngineConfig with file values applied over the defaults
    """
    with open(config_path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping: {config_path}")

    if 'engine' in data:
        data = data['engine'] or {}
        if not isinstance(data, dict):
            raise ValueError(f"'engine' section must be a mapping: {config_path}")

    return EngineConfig.from_dict(data)
