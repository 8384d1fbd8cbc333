"""Context search backed by a remote vector database HTTP service."""
from __future__ import annotations

import logging
import shlex
import subprocess
import time
from typing import Callable, List, Mapping, Optional

import requests

from ..config import DEFAULT_VECTOR_DB_API_URL
from .base import DEFAULT_TOP_K

logger = logging.getLogger(__name__)

HEALTH_TIMEOUT = (5, 5)
QUERY_TIMEOUT = (5, 30)
LAUNCH_WAIT_SECONDS = 5.0


class RemoteContextSearch:
    """Query a vector database service over ``POST /query``.

    The service is probed on ``GET /health`` when the client is created. If the
    probe fails and a launch command is configured, the command is started as a
    companion process and the probe is retried once after a fixed delay.
    Search failures never propagate: they degrade to an empty result list.
    """

    name = "remote"
    description = "Similarity search against a vector database HTTP service."

    def __init__(
        self,
        base_url: str | None = None,
        *,
        launch_command: str | None = None,
        session: requests.Session | None = None,
        launch_wait: float = LAUNCH_WAIT_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
        check_on_start: bool = True,
    ) -> None:
        self.base_url = (base_url or DEFAULT_VECTOR_DB_API_URL).rstrip("/")
        self.launch_command = launch_command
        self.session = session or requests.Session()
        self.launch_wait = launch_wait
        self._sleep = sleep
        self._process: Optional[subprocess.Popen] = None
        logger.info("Remote context search initialised with API URL: %s", self.base_url)
        if check_on_start:
            self.ensure_available()

    def check_health(self) -> bool:
        try:
            response = self.session.get(f"{self.base_url}/health", timeout=HEALTH_TIMEOUT)
        except requests.RequestException as exc:
            logger.warning("Error connecting to vector database API: %s", exc)
            return False
        if response.status_code != 200:
            logger.warning("Vector database API returned status code: %s", response.status_code)
            return False
        logger.info("Vector database API is accessible at %s", self.base_url)
        return True

    def ensure_available(self) -> bool:
        """Probe the service, starting the companion process if configured."""
        if self.check_health():
            return True
        if not self.launch_command:
            logger.warning(
                "Vector database API is not accessible at %s and no launch command is set",
                self.base_url,
            )
            return False
        logger.warning("Vector database API is not accessible at %s; starting it", self.base_url)
        try:
            self._process = subprocess.Popen(
                shlex.split(self.launch_command),
                stdout=subprocess.DEVNULL,
                stderr=subprocess.STDOUT,
            )
        except OSError as exc:
            logger.error("Error starting vector database API server: %s", exc)
            return False
        self._sleep(self.launch_wait)
        if self.check_health():
            logger.info("Vector database API server started successfully")
            return True
        logger.error("Failed to start vector database API server")
        return False

    def search(self, query: str, top_k: int = DEFAULT_TOP_K) -> List[str]:
        logger.info("Searching vector database for snippets related to: %s", query)
        try:
            response = self.session.post(
                f"{self.base_url}/query",
                json={"query_text": query, "top_k": top_k},
                timeout=QUERY_TIMEOUT,
            )
            response.raise_for_status()
            results = response.json()["results"]
            snippets = [_format_result(item) for item in results]
        except (requests.RequestException, ValueError, KeyError, TypeError) as exc:
            logger.error("Error searching vector database: %s", exc)
            return []
        logger.info("Found %d code snippets", len(snippets))
        return snippets


def _format_result(item: Mapping[str, object]) -> str:
    path = item["path"]
    score = float(item["score"])  # type: ignore[arg-type]
    content = item["content"]
    return f"// File: {path} (Similarity: {score:.2f})\n{content}"
