"""
FastAPI dependencies - database handle, current user, role gates.
"""

from fastapi import Request, HTTPException, Depends

from .database import db
from .models.user import User
from .services.orchestrator import FeedbackOrchestrator
from .utils.auth import decode_token


def get_db():
    """Database handle; overridden in tests."""
    return db


async def get_current_user(request: Request, database=Depends(get_db)) -> User:
    """Resolve the bearer token to an active user"""
    token = None
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        token = auth_header.split(" ", 1)[1]

    if not token:
        raise HTTPException(status_code=401, detail="Not authenticated")

    payload = decode_token(token)
    if not payload:
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    user_id = payload.get("user_id")
    if not user_id:
        raise HTTPException(status_code=401, detail="Invalid token")

    user = await database.users.find_one({"user_id": user_id}, {"_id": 0})
    if not user:
        raise HTTPException(status_code=401, detail="User not found")
    if not user.get("is_active", True):
        raise HTTPException(status_code=403, detail="Account disabled. Contact support.")

    return User(**user)


def require_role(*roles: str):
    """Dependency factory restricting a route to the given roles"""
    async def checker(user: User = Depends(get_current_user)) -> User:
        if user.role not in roles:
            raise HTTPException(
                status_code=403,
                detail=f"Only {' or '.join(roles)} users can access this"
            )
        return user
    return checker


get_student_user = require_role("student")
get_faculty_user = require_role("faculty")
get_admin_user = require_role("admin")


def get_orchestrator(request: Request, database=Depends(get_db)) -> FeedbackOrchestrator:
    """One orchestrator per request, sharing the app-wide catalog when it is loaded."""
    catalog = getattr(request.app.state, "rating_catalog", None)
    if catalog is not None and catalog.db is not database:
        catalog = None
    return FeedbackOrchestrator(database, catalog=catalog)
