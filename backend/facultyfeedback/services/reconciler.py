"""
Class reconciler - resolves students registered before their class existed.

A pending student copies the class of any already-mapped peer with the same
(branch, semester, section). It runs at login rather than on a schedule, and
is idempotent: with no peer it changes nothing, and once resolved it never
runs the copy again.

The peer's class is trusted as-is; a wrong early mapping spreads to every
later student of that cohort.
"""

from enum import Enum
from typing import Optional

from facultyfeedback.config import logger
from facultyfeedback.models.assignment import StudentClassLink


class ReconcileOutcome(str, Enum):
    ALREADY_RESOLVED = "already_resolved"
    RESOLVED = "resolved"
    STILL_PENDING = "still_pending"
    INCONSISTENT = "inconsistent"
    NOT_FOUND = "not_found"


class ClassReconciler:
    def __init__(self, db):
        self.collection = db.student_profiles

    async def find_resolved_peer(self, link: StudentClassLink) -> Optional[StudentClassLink]:
        """Earliest-created mapped student of the same cohort."""
        doc = await self.collection.find_one(
            {
                "user_id": {"$ne": link.user_id},
                "branch": link.branch,
                "semester": link.semester,
                "section": link.section,
                "pending_mapping": False,
                "class_id": {"$ne": None},
            },
            {"_id": 0},
            sort=[("created_at", 1), ("user_id", 1)],
        )
        return StudentClassLink(**doc) if doc else None

    async def reconcile(self, student_id: str) -> ReconcileOutcome:
        doc = await self.collection.find_one({"user_id": student_id}, {"_id": 0})
        if not doc:
            return ReconcileOutcome.NOT_FOUND

        link = StudentClassLink(**doc)
        if link.is_resolved:
            return ReconcileOutcome.ALREADY_RESOLVED
        if not link.pending_mapping:
            logger.warning(f"Student {student_id} is marked mapped but has no class_id; leaving record as-is")
            return ReconcileOutcome.INCONSISTENT

        peer = await self.find_resolved_peer(link)
        if peer is None:
            logger.info(
                f"No mapped peer yet for {link.branch}/{link.semester}/{link.section}; "
                f"student {student_id} stays pending"
            )
            return ReconcileOutcome.STILL_PENDING

        # Filter on pending_mapping so a concurrent run resolves only once
        result = await self.collection.update_one(
            {"user_id": student_id, "pending_mapping": True},
            {"$set": {"class_id": peer.class_id, "pending_mapping": False}}
        )
        if result.modified_count == 0:
            return ReconcileOutcome.ALREADY_RESOLVED

        logger.info(f"Student {student_id} mapped to class {peer.class_id} via peer {peer.user_id}")
        return ReconcileOutcome.RESOLVED
