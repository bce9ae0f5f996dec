"""Document loaders for schema and data JSON files."""

import json
from pathlib import Path
from typing import Any

import httpx

from dbkit.config import settings
from dbkit.database.interfaces import DocumentLoader
from dbkit.exceptions import DocumentLoadError
from dbkit.log import get_logger

logger = get_logger(__name__)


class HttpDocumentLoader(DocumentLoader):
    """Loads JSON documents over HTTP(S)."""

    def __init__(self, timeout: float | None = None, base_url: str = "") -> None:
        """Initialize HTTP loader.

        Args:
            timeout: Request timeout in seconds (defaults to settings)
            base_url: Prefix joined to relative locators
        """
        self.timeout = timeout if timeout is not None else settings.loader_timeout
        self.base_url = base_url

    async def load(self, locator: str) -> Any:
        """Fetch and parse the JSON document at ``locator``.

        Raises:
            DocumentLoadError: If the request fails or the body is not JSON
        """
        url = self.base_url + locator
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(url)
                response.raise_for_status()
        except httpx.RequestError as e:
            logger.error(f"Database: failed to read JSON at URL `{url}`")
            raise DocumentLoadError(f"Network error fetching {url}: {e}") from e
        except httpx.HTTPStatusError as e:
            logger.error(f"Database: failed to read JSON at URL `{url}`")
            raise DocumentLoadError(f"HTTP error fetching {url}: {e}") from e

        try:
            return response.json()
        except ValueError as e:
            logger.error(f"JSON request error: {e}")
            raise DocumentLoadError(f"Invalid JSON at {url}: {e}") from e


class FileDocumentLoader(DocumentLoader):
    """Loads JSON documents from the local filesystem."""

    def __init__(self, base_dir: Path | None = None) -> None:
        """Initialize file loader.

        Args:
            base_dir: Directory relative locators are resolved against
        """
        self.base_dir = base_dir

    async def load(self, locator: str) -> Any:
        """Read and parse the JSON file at ``locator``.

        Raises:
            DocumentLoadError: If the file cannot be read or is not JSON
        """
        path = Path(locator)
        if self.base_dir is not None and not path.is_absolute():
            path = self.base_dir / path

        try:
            content = path.read_text(encoding="utf-8")
        except OSError as e:
            logger.error(f"Database: failed to read JSON file `{path}`")
            raise DocumentLoadError(f"Cannot read {path}: {e}") from e

        try:
            return json.loads(content)
        except json.JSONDecodeError as e:
            logger.error(f"JSON parse error in {path}: {e}")
            raise DocumentLoadError(f"Invalid JSON in {path}: {e}") from e
