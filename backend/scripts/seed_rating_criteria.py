#!/usr/bin/env python3
"""
Seed the five fixed rating criteria and create the core indexes.

Usage: MONGO_URL=... DB_NAME=... python scripts/seed_rating_criteria.py
"""

import os
import sys
import asyncio

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from facultyfeedback.config import logger, RATING_CRITERIA_COUNT
from facultyfeedback.database import client, db, ensure_indexes
from facultyfeedback.services.catalog import RatingCatalog, seed_default_criteria


async def main():
    await ensure_indexes(db)
    await seed_default_criteria(db)

    criteria = await RatingCatalog(db).list_active_criteria()
    logger.info(f"Verified: exactly {RATING_CRITERIA_COUNT} rating criteria in the database")
    for c in criteria:
        print(f"  {c.order}. {c.criterion_id}: {c.question_text}")


if __name__ == "__main__":
    try:
        asyncio.run(main())
    finally:
        client.close()
