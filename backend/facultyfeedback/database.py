"""
Database connection - MongoDB async (Motor) and the index set the core relies on.
"""

from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import ASCENDING

from facultyfeedback.config import logger, MONGO_URL, DB_NAME

client = AsyncIOMotorClient(MONGO_URL)
db = client[DB_NAME]


async def ensure_indexes(database):
    """
    Create the unique indexes that make claims and folds race-free.
    Safe to call repeatedly; Mongo ignores identical index specs.
    """
    await database.rating_criteria.create_index(
        [("criterion_id", ASCENDING)], unique=True
    )
    # One running cell per (assignment, criterion)
    await database.aggregated_ratings.create_index(
        [("assignment_id", ASCENDING), ("criterion_id", ASCENDING)], unique=True
    )
    # The submission ledger: one claim per (student, assignment)
    await database.feedback_submissions.create_index(
        [("student_id", ASCENDING), ("assignment_id", ASCENDING)], unique=True
    )
    await database.teaching_assignments.create_index(
        [
            ("faculty_id", ASCENDING),
            ("subject_id", ASCENDING),
            ("class_id", ASCENDING),
            ("feedback_period_id", ASCENDING),
        ],
        unique=True,
    )
    await database.teaching_assignments.create_index(
        [("class_id", ASCENDING), ("feedback_period_id", ASCENDING)]
    )
    await database.student_profiles.create_index([("user_id", ASCENDING)], unique=True)
    await database.student_profiles.create_index(
        [
            ("branch", ASCENDING),
            ("semester", ASCENDING),
            ("section", ASCENDING),
            ("pending_mapping", ASCENDING),
        ]
    )
    logger.info("✅ MongoDB indexes ensured")
