"""
Submission ledger - the idempotency gate.

A claim is a single insert against the unique (student_id, assignment_id)
index. Concurrent claims for the same pair race inside MongoDB and exactly
one insert wins; there is no read-before-write here.
"""

from enum import Enum
from datetime import datetime, timezone
from typing import Iterable, Set

from pymongo.errors import DuplicateKeyError

from facultyfeedback.config import logger


class ClaimResult(str, Enum):
    CLAIMED = "claimed"
    ALREADY_CLAIMED = "already_claimed"


class SubmissionLedger:
    def __init__(self, db):
        self.collection = db.feedback_submissions

    async def try_claim(self, student_id: str, assignment_id: str) -> ClaimResult:
        try:
            await self.collection.insert_one({
                "student_id": student_id,
                "assignment_id": assignment_id,
                "submitted_at": datetime.now(timezone.utc).replace(tzinfo=None),
            })
        except DuplicateKeyError:
            logger.info(f"Duplicate feedback claim rejected for assignment {assignment_id}")
            return ClaimResult.ALREADY_CLAIMED
        return ClaimResult.CLAIMED

    async def has_claimed(self, student_id: str, assignment_id: str) -> bool:
        doc = await self.collection.find_one(
            {"student_id": student_id, "assignment_id": assignment_id},
            {"_id": 0, "assignment_id": 1}
        )
        return doc is not None

    async def claimed_assignment_ids(self, student_id: str, assignment_ids: Iterable[str]) -> Set[str]:
        """Subset of `assignment_ids` this student has already submitted."""
        assignment_ids = list(assignment_ids)
        if not assignment_ids:
            return set()
        docs = await self.collection.find(
            {"student_id": student_id, "assignment_id": {"$in": assignment_ids}},
            {"_id": 0, "assignment_id": 1}
        ).to_list(len(assignment_ids))
        return {d["assignment_id"] for d in docs}
