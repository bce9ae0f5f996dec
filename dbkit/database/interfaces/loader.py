"""Document loader interface."""

from abc import ABC, abstractmethod
from typing import Any


class DocumentLoader(ABC):
    """Asynchronously loads a structured (JSON) document."""

    @abstractmethod
    async def load(self, locator: str) -> Any:
        """Load and parse the document at ``locator``.

        Args:
            locator: URL or path of the document

        Returns:
            Parsed JSON value

        Raises:
            DocumentLoadError: If the document cannot be fetched or parsed
        """
        pass
