"""Authentication routes - login and current user.

Login is also where pending student-to-class mappings get reconciled.
"""

from fastapi import APIRouter, Depends, HTTPException

from facultyfeedback.config import logger
from facultyfeedback.deps import get_current_user, get_db
from facultyfeedback.models.user import User, LoginRequest
from facultyfeedback.services.reconciler import ClassReconciler
from facultyfeedback.utils.auth import verify_password, create_access_token

router = APIRouter(tags=["auth"])


@router.post("/auth/login")
async def login(credentials: LoginRequest, db=Depends(get_db)):
    """Exchange a user id and password for a bearer token"""
    user = await db.users.find_one({"user_id": credentials.user_id}, {"_id": 0})
    if not user or not user.get("is_active", True):
        raise HTTPException(status_code=401, detail="Invalid credentials or inactive user")

    password_hash = user.get("password_hash")
    if not password_hash or not verify_password(credentials.password, password_hash):
        raise HTTPException(status_code=401, detail="Invalid credentials")

    mapping = None
    if user.get("role") == "student":
        outcome = await ClassReconciler(db).reconcile(user["user_id"])
        mapping = outcome.value

    token = create_access_token({"user_id": user["user_id"], "role": user["role"]})
    logger.info(f"User {user['user_id']} logged in")

    return {
        "message": "Login successful!",
        "token": token,
        "user": User(**user).model_dump(),
        "class_mapping": mapping,
    }


@router.get("/auth/me")
async def get_me(user: User = Depends(get_current_user)):
    """Current user"""
    return user.model_dump()
