#!/usr/bin/env python3
"""Demonstration of schema-driven database setup with dbkit."""

import asyncio

from dbkit import CallbackOptions, Database, DatabaseError, settings
from dbkit.log import configure_logging, get_logger

SCHEMA = [
    {
        "table": "entries",
        "columns": [
            {"column": "entry_id", "type": "INTEGER", "constraints": ["PRIMARY KEY"]},
            {"column": "title", "type": "TEXT", "constraints": ["NOT NULL"]},
            {"column": "body", "type": "TEXT"},
        ],
        "data": [
            {"entry_id": 1, "title": "My first entry", "body": "Hello"},
            {"entry_id": 2, "title": "My second entry", "body": None},
        ],
    }
]

UPGRADE = [
    "CREATE INDEX IF NOT EXISTS idx_entries_title ON entries (title)",
    {
        "table": "tags",
        "columns": [
            {"column": "entry_id", "type": "INTEGER", "constraints": ["NOT NULL"]},
            {"column": "tag", "type": "TEXT", "constraints": ["NOT NULL"]},
        ],
    },
]


async def main() -> None:
    """Demonstrate the database facade."""
    configure_logging(settings)
    logger = get_logger(__name__)

    def report(error: DatabaseError) -> None:
        logger.error(f"Demo step failed ({error.code}): {error.message}")

    options = CallbackOptions(on_error=report)

    async with Database("ext:dbkit_demo", version="1", debug=True) as db:
        logger.info(f"Opened database at version {db.get_version()!r}")

        # Demo 1: schema with inline data
        logger.info("=== Demo 1: Schema ===")
        await db.set_schema(SCHEMA, options)

        rows = await db.query(db.build_select("entries", order_by=["entry_id"]))
        for row in rows or []:
            logger.info(f"  - {row['entry_id']}: {row['title']}")

        # Demo 2: versioned upgrade
        logger.info("=== Demo 2: Version change ===")
        if db.get_version() == "1":
            await db.change_version_with_schema("2", UPGRADE, options)
        await db.insert_data(
            {"table": "tags", "data": {"entry_id": 1, "tag": "demo"}}, options
        )
        logger.info(f"Database now at version {db.get_version()!r}")

        # Demo 3: a failing batch is rolled back as a whole
        logger.info("=== Demo 3: Atomic batch ===")
        await db.queries(
            [
                db.build_update("entries", {"body": "changed"}, {"entry_id": 1}),
                "INSERT INTO missing_table VALUES (1)",
            ],
            options,
        )
        rows = await db.query(db.build_select("entries", ["body"], {"entry_id": 1}))
        logger.info(f"Body after failed batch: {rows}")

    location = settings.database_location("ext:dbkit_demo")
    logger.info(f"Database file saved at: {location}")


if __name__ == "__main__":
    asyncio.run(main())
