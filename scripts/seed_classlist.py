"""
Seed ClassList Templates

Loads the shared grade templates schools provision their classes from:
classes 1-10 without a stream, and classes 11-12 once per stream
(science, arts, commerce). Existing codes are left untouched, so the
script can be re-run safely.

Usage:
    pip install -e .
    python scripts/seed_classlist.py
"""

import asyncio
import logging

from sqlalchemy import select

from schoolbase.core.config import settings
from schoolbase.core.database import Database
from schoolbase.modules.curriculum.models import ClassList, Stream

logger = logging.getLogger("seed_classlist")

STREAM_CLASSES = (11, 12)


def classlist_templates() -> list[dict]:
    """Every template row, in class_number then stream order."""
    templates = [
        {"class_name": f"Class {number}", "class_number": number, "stream": None, "code": str(number)}
        for number in range(1, 11)
    ]
    for number in STREAM_CLASSES:
        for stream in Stream:
            templates.append(
                {
                    "class_name": f"Class {number} {stream.value.title()}",
                    "class_number": number,
                    "stream": stream,
                    "code": f"{number}-{stream.value.upper()}",
                }
            )
    return templates


async def seed_classlist(database: Database) -> int:
    """
    Insert missing templates.

    Returns:
        Number of rows inserted
    """
    async with database.session() as db:
        result = await db.execute(select(ClassList.code))
        existing = set(result.scalars().all())

        missing = [row for row in classlist_templates() if row["code"] not in existing]
        db.add_all(ClassList(**row) for row in missing)
        await db.commit()

    for row in missing:
        logger.info(f"Added template {row['code']} ({row['class_name']})")
    return len(missing)


async def main() -> None:
    logging.basicConfig(level=settings.log_level.upper(), format="%(levelname)s %(message)s")

    database = Database(settings.database_url)
    await database.connect()
    try:
        inserted = await seed_classlist(database)
    finally:
        await database.dispose()

    if inserted:
        logger.info(f"ClassList seeded: {inserted} new template(s)")
    else:
        logger.info("ClassList already up to date")


if __name__ == "__main__":
    asyncio.run(main())
