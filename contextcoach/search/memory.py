"""Deterministic in-memory context search used when no vector store is running."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

from .base import DEFAULT_TOP_K

logger = logging.getLogger(__name__)

_PLACEHOLDER_SNIPPETS = (
    "public class UserService {\n"
    "    public User findUserById(String userId) {\n"
    "        return userRepository.findById(userId);\n"
    "    }\n"
    "}",
    "public interface UserRepository {\n"
    "    User findById(String id);\n"
    "    List<User> findByRole(String role);\n"
    "}",
    "public class AuthenticationService {\n"
    "    public boolean authenticate(String username, String password) {\n"
    "        User user = userRepository.findByUsername(username);\n"
    "        return user != null && passwordEncoder.matches(password, user.getPassword());\n"
    "    }\n"
    "}",
)


@dataclass
class InMemoryContextSearch:
    """Returns up to three placeholder snippets that quote the query."""

    name: str = "memory"
    description: str = "Placeholder code snippets; no vector store required."

    def search(self, query: str, top_k: int = DEFAULT_TOP_K) -> List[str]:
        logger.info("Searching placeholder snippets related to: %s", query)
        count = max(0, min(top_k, len(_PLACEHOLDER_SNIPPETS)))
        results = [
            f"// Dummy code snippet {index} relevant to: {query}\n{snippet}"
            for index, snippet in enumerate(_PLACEHOLDER_SNIPPETS[:count], start=1)
        ]
        logger.debug("Returning %d placeholder snippets", len(results))
        return results
