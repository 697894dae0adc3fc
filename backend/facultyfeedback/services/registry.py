"""
Lookups into records owned by other parts of the system: teaching
assignments, student profiles, periods, and the display data joined onto
read paths (subjects, classes, users).
"""

from typing import Dict, List, Optional

from facultyfeedback.models.assignment import TeachingAssignment, StudentClassLink
from facultyfeedback.models.period import FeedbackPeriod


async def resolve_assignment(db, assignment_id: str) -> Optional[TeachingAssignment]:
    doc = await db.teaching_assignments.find_one({"assignment_id": assignment_id}, {"_id": 0})
    return TeachingAssignment(**doc) if doc else None


async def resolve_student_class(db, student_id: str) -> Optional[StudentClassLink]:
    doc = await db.student_profiles.find_one({"user_id": student_id}, {"_id": 0})
    return StudentClassLink(**doc) if doc else None


async def get_period(db, period_id: str) -> Optional[FeedbackPeriod]:
    doc = await db.feedback_periods.find_one({"period_id": period_id}, {"_id": 0})
    return FeedbackPeriod(**doc) if doc else None


async def list_assignments_for_class_and_period(db, class_id: str, period_id: str) -> List[TeachingAssignment]:
    docs = await db.teaching_assignments.find(
        {"class_id": class_id, "feedback_period_id": period_id},
        {"_id": 0}
    ).sort("assignment_id", 1).to_list(None)
    return [TeachingAssignment(**d) for d in docs]


async def list_assignments_for_faculty(db, faculty_id: str, period_id: str) -> List[TeachingAssignment]:
    docs = await db.teaching_assignments.find(
        {"faculty_id": faculty_id, "feedback_period_id": period_id},
        {"_id": 0}
    ).sort("assignment_id", 1).to_list(None)
    return [TeachingAssignment(**d) for d in docs]


async def get_faculty(db, faculty_id: str) -> Optional[dict]:
    return await db.users.find_one(
        {"user_id": faculty_id, "role": "faculty"},
        {"_id": 0, "user_id": 1, "name": 1}
    )


async def describe_assignments(db, assignments: List[TeachingAssignment]) -> Dict[str, dict]:
    """Display data per assignment id: faculty name, subject and class summaries."""
    subject_ids = list({a.subject_id for a in assignments})
    class_ids = list({a.class_id for a in assignments})
    faculty_ids = list({a.faculty_id for a in assignments})

    subjects = await db.subjects.find(
        {"subject_id": {"$in": subject_ids}}, {"_id": 0}
    ).to_list(len(subject_ids) or 1)
    classes = await db.classes.find(
        {"class_id": {"$in": class_ids}}, {"_id": 0}
    ).to_list(len(class_ids) or 1)
    faculty = await db.users.find(
        {"user_id": {"$in": faculty_ids}}, {"_id": 0, "user_id": 1, "name": 1}
    ).to_list(len(faculty_ids) or 1)

    subjects_by_id = {s["subject_id"]: s for s in subjects}
    classes_by_id = {c["class_id"]: c for c in classes}
    faculty_by_id = {f["user_id"]: f for f in faculty}

    described = {}
    for a in assignments:
        subj = subjects_by_id.get(a.subject_id, {})
        cls = classes_by_id.get(a.class_id, {})
        described[a.assignment_id] = {
            "faculty": {
                "id": a.faculty_id,
                "name": faculty_by_id.get(a.faculty_id, {}).get("name", "Unknown"),
            },
            "subject": {
                "id": a.subject_id,
                "code": subj.get("subject_code"),
                "name": subj.get("subject_name", "Unknown"),
                "branch": subj.get("branch"),
                "semester": subj.get("semester"),
            },
            "class": {
                "id": a.class_id,
                "name": cls.get("name", "Unknown"),
                "branch": cls.get("branch"),
                "semester": cls.get("semester"),
            },
        }
    return described
