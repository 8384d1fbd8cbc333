"""Base interface for context search clients."""
from __future__ import annotations

from typing import List, Protocol

DEFAULT_TOP_K = 5


class ContextSearchClient(Protocol):
    """Protocol for pluggable context (code snippet) lookups."""

    name: str
    description: str

    def search(self, query: str, top_k: int = DEFAULT_TOP_K) -> List[str]:
        """Return at most *top_k* snippets ordered by relevance."""
        ...
