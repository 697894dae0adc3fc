"""Pending student-to-class reconciliation."""
import asyncio
from datetime import datetime, timedelta, timezone

from conftest import add_student, interleave
from facultyfeedback.services.reconciler import ClassReconciler, ReconcileOutcome

T0 = datetime(2024, 7, 1, tzinfo=timezone.utc)


async def profile(db, user_id):
    return await db.student_profiles.find_one({"user_id": user_id}, {"_id": 0})


async def test_no_peer_is_a_no_op(db):
    await add_student(db, "stu_new")
    reconciler = ClassReconciler(db)
    assert await reconciler.reconcile("stu_new") == ReconcileOutcome.STILL_PENDING
    doc = await profile(db, "stu_new")
    assert doc["pending_mapping"] is True
    assert doc["class_id"] is None


async def test_converges_once_a_peer_exists(db):
    await add_student(db, "stu_new")
    reconciler = ClassReconciler(db)
    assert await reconciler.reconcile("stu_new") == ReconcileOutcome.STILL_PENDING

    await add_student(db, "stu_old", class_id="class_cs3a")
    assert await reconciler.reconcile("stu_new") == ReconcileOutcome.RESOLVED
    doc = await profile(db, "stu_new")
    assert doc["pending_mapping"] is False
    assert doc["class_id"] == "class_cs3a"

    assert await reconciler.reconcile("stu_new") == ReconcileOutcome.ALREADY_RESOLVED
    assert (await profile(db, "stu_new"))["class_id"] == "class_cs3a"


async def test_peer_must_match_whole_cohort(db):
    await add_student(db, "stu_new", branch="CSE", semester=3, section="A")
    await add_student(db, "other_section", class_id="class_cs3b", branch="CSE", semester=3, section="B")
    await add_student(db, "other_sem", class_id="class_cs5a", branch="CSE", semester=5, section="A")
    await add_student(db, "other_branch", class_id="class_ec3a", branch="ECE", semester=3, section="A")
    await add_student(db, "also_pending", branch="CSE", semester=3, section="A")
    assert await ClassReconciler(db).reconcile("stu_new") == ReconcileOutcome.STILL_PENDING


async def test_earliest_mapped_peer_wins(db):
    await add_student(db, "stu_late", class_id="class_late", created_at=T0 + timedelta(days=10))
    await add_student(db, "stu_early", class_id="class_early", created_at=T0)
    await add_student(db, "stu_new", created_at=T0 + timedelta(days=20))
    assert await ClassReconciler(db).reconcile("stu_new") == ReconcileOutcome.RESOLVED
    assert (await profile(db, "stu_new"))["class_id"] == "class_early"


async def test_unknown_student(db):
    assert await ClassReconciler(db).reconcile("nobody") == ReconcileOutcome.NOT_FOUND


async def test_concurrent_runs_resolve_once(db):
    await add_student(db, "stu_old", class_id="class_cs3a")
    await add_student(db, "stu_new")
    reconciler = ClassReconciler(db)
    interleave(reconciler)
    outcomes = await asyncio.gather(*[reconciler.reconcile("stu_new") for _ in range(5)])
    assert outcomes.count(ReconcileOutcome.RESOLVED) == 1
    assert set(outcomes) <= {ReconcileOutcome.RESOLVED, ReconcileOutcome.ALREADY_RESOLVED}


async def test_mapped_without_class_is_inconsistent(db):
    await add_student(db, "stu_old", class_id="class_cs3a")
    await add_student(db, "stu_broken")
    await db.student_profiles.update_one({"user_id": "stu_broken"}, {"$set": {"pending_mapping": False}})

    assert await ClassReconciler(db).reconcile("stu_broken") == ReconcileOutcome.INCONSISTENT
    doc = await profile(db, "stu_broken")
    assert doc["pending_mapping"] is False
    assert doc["class_id"] is None
