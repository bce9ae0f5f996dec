"""Database version tracking."""

from dbkit.database.document import parse_schema_document
from dbkit.database.interfaces import DocumentLoader, HostConnection, HostTransaction
from dbkit.database.schema import SchemaPlan, TableDefinition
from dbkit.database.synchronizer import SchemaSynchronizer, load_document
from dbkit.database.transaction import prepare
from dbkit.log import get_logger

logger = get_logger(__name__)


class VersionManager:
    """Keeps a cached copy of the host's database version.

    The cache only moves after the host confirms the version change.
    """

    def __init__(
        self, connection: HostConnection, synchronizer: SchemaSynchronizer
    ) -> None:
        self.connection = connection
        self.synchronizer = synchronizer
        self._current_version = connection.version

    def get_version(self) -> str:
        """Return the cached version without contacting the host."""
        return self._current_version

    async def change_version(self, new_version: str) -> str:
        """Move the database to ``new_version`` with an empty upgrade.

        Returns:
            The new version

        Raises:
            HostExecutionError: If the host refuses; the cache is unchanged
        """
        await self.connection.change_version(self._current_version, new_version)
        return self._confirm(new_version)

    async def change_version_with_schema(
        self, new_version: str, plan: SchemaPlan
    ) -> str:
        """Move to ``new_version`` while applying the plan's structure statements.

        Rows in the plan are not inserted here; insert them once the version
        change has been confirmed.

        Returns:
            The new version
        """
        statements = [
            prepare(statement)
            for statement in self.synchronizer.structure_statements(plan)
        ]
        if any(isinstance(item, TableDefinition) and item.rows for item in plan):
            logger.warning(
                "Row data is ignored during a version change; insert it afterwards"
            )

        async def upgrade(transaction: HostTransaction) -> None:
            await self.synchronizer.runner.execute_all(transaction, statements)

        await self.connection.change_version(
            self._current_version, new_version, upgrade
        )
        return self._confirm(new_version)

    async def change_version_with_schema_from_source(
        self, new_version: str, loader: DocumentLoader, locator: str
    ) -> str:
        """Load a schema document and apply it during a version change."""
        payload = await load_document(loader, locator)
        return await self.change_version_with_schema(
            new_version, parse_schema_document(payload)
        )

    def _confirm(self, new_version: str) -> str:
        logger.info(
            f"Database version updated: {self._current_version!r} -> {new_version!r}"
        )
        self._current_version = new_version
        return new_version
