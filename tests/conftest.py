"""
Faculty Feedback - test configuration and fixtures.

Every test gets a fresh in-memory Motor database with the production
indexes and the five default rating criteria.
"""
import asyncio
import os
from datetime import datetime, timedelta, timezone

import pytest
from httpx import AsyncClient, ASGITransport
from mongomock_motor import AsyncMongoMockClient

os.environ['JWT_SECRET_KEY'] = 'test-jwt-secret-key-for-testing'
os.environ.setdefault('MONGO_URL', 'mongodb://localhost:27017')
os.environ.setdefault('DB_NAME', 'faculty_feedback_test')

from main import app
from facultyfeedback.database import ensure_indexes
from facultyfeedback.deps import get_db
from facultyfeedback.services.catalog import seed_default_criteria, DEFAULT_CRITERIA
from facultyfeedback.services.period_clock import to_storage
from facultyfeedback.utils.auth import create_access_token

CRITERIA_IDS = [criterion_id for criterion_id, _ in DEFAULT_CRITERIA]


class InterleavingCollection:
    """
    Collection wrapper that records each async call and yields to the event
    loop before running it. The in-memory client never suspends on its own,
    so without this, gathered coroutines would run one after another and a
    read-then-write race could not show up.
    """
    ASYNC_METHODS = {
        "find_one", "find_one_and_update", "insert_one", "update_one", "replace_one", "count_documents",
    }

    def __init__(self, collection):
        self._collection = collection
        self.calls = []

    def __getattr__(self, name):
        attr = getattr(self._collection, name)
        if name not in self.ASYNC_METHODS:
            return attr

        async def call(*args, **kwargs):
            self.calls.append((name, args, kwargs))
            await asyncio.sleep(0)
            return await attr(*args, **kwargs)
        return call

    def call_names(self):
        return [name for name, _, _ in self.calls]


def interleave(service):
    """Swap a service's collection for an InterleavingCollection and return it"""
    service.collection = InterleavingCollection(service.collection)
    return service.collection


@pytest.fixture
async def db():
    """Fresh database per test"""
    database = AsyncMongoMockClient()["faculty_feedback_test"]
    await ensure_indexes(database)
    await seed_default_criteria(database)
    return database


@pytest.fixture
def now() -> datetime:
    return datetime(2025, 3, 10, 12, 0, tzinfo=timezone.utc)


async def add_period(db, period_id, start, end, is_active=True, name=None):
    await db.feedback_periods.insert_one({
        "period_id": period_id,
        "name": name or f"Feedback {period_id}",
        "semester": 1,
        "year": 2025,
        "start_date": to_storage(start),
        "end_date": to_storage(end),
        "is_active": is_active,
    })


async def add_user(db, user_id, role, name=None, **extra):
    await db.users.insert_one({
        "user_id": user_id,
        "name": name or user_id.title(),
        "email": f"{user_id}@college.edu",
        "role": role,
        "is_active": True,
        **extra,
    })


async def add_student(db, user_id, class_id=None, branch="CSE", semester=3, section="A", created_at=None):
    await add_user(db, user_id, "student")
    await db.student_profiles.insert_one({
        "user_id": user_id,
        "branch": branch,
        "semester": semester,
        "section": section,
        "class_id": class_id,
        "pending_mapping": class_id is None,
        "created_at": to_storage(created_at or datetime.now(timezone.utc)),
    })


async def add_assignment(db, assignment_id, faculty_id, subject_id, class_id, period_id):
    await db.teaching_assignments.insert_one({
        "assignment_id": assignment_id,
        "faculty_id": faculty_id,
        "subject_id": subject_id,
        "class_id": class_id,
        "feedback_period_id": period_id,
    })


@pytest.fixture
async def campus(db, now):
    """
    One open period, two classes, two faculty members and three assignments:
    A1 and A2 for class_cs3a, A3 for class_ec2b.
    """
    await add_period(db, "period_open", now - timedelta(days=5), now + timedelta(days=5))
    await db.classes.insert_many([
        {"class_id": "class_cs3a", "name": "CS301", "branch": "CSE", "semester": "3"},
        {"class_id": "class_ec2b", "name": "EC201", "branch": "ECE", "semester": "2"},
    ])
    await db.subjects.insert_many([
        {"subject_id": "subj_ds", "subject_code": "CS301", "subject_name": "Data Structures",
         "branch": "CSE", "semester": 3},
        {"subject_id": "subj_os", "subject_code": "CS302", "subject_name": "Operating Systems",
         "branch": "CSE", "semester": 3},
        {"subject_id": "subj_sig", "subject_code": "EC201", "subject_name": "Signals",
         "branch": "ECE", "semester": 2},
    ])
    await add_user(db, "fac_rao", "faculty", name="Dr. Rao")
    await add_user(db, "fac_iyer", "faculty", name="Dr. Iyer")
    await add_assignment(db, "A1", "fac_rao", "subj_ds", "class_cs3a", "period_open")
    await add_assignment(db, "A2", "fac_iyer", "subj_os", "class_cs3a", "period_open")
    await add_assignment(db, "A3", "fac_rao", "subj_sig", "class_ec2b", "period_open")
    await add_student(db, "stu_x", class_id="class_cs3a")
    await add_student(db, "stu_y", class_id="class_cs3a")
    await add_student(db, "stu_e", class_id="class_ec2b", branch="ECE", semester=2, section="B")
    return db


def ratings_payload(values):
    """[{"criterion_id", "value"}, ...] in catalog order from five values"""
    return [{"criterion_id": cid, "value": v} for cid, v in zip(CRITERIA_IDS, values)]


@pytest.fixture
async def client(db):
    """Test client with the database dependency overridden"""
    app.dependency_overrides[get_db] = lambda: db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac
    app.dependency_overrides.clear()


def auth_headers(user_id: str, role: str) -> dict:
    token = create_access_token({"user_id": user_id, "role": role})
    return {'Authorization': f'Bearer {token}'}
