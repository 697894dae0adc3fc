"""
Configuration - env vars, constants, logging setup.
"""

import os
import logging
from pathlib import Path
from dotenv import load_dotenv

ROOT_DIR = Path(__file__).parent.parent
load_dotenv(ROOT_DIR / '.env')

# Logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger("facultyfeedback")

# Database
MONGO_URL = os.environ.get("MONGO_URL", "mongodb://localhost:27017")
DB_NAME = os.environ.get("DB_NAME", "faculty_feedback")

# Auth tokens (issued by the login route, decoded by deps.get_current_user)
JWT_SECRET_KEY = os.environ.get("JWT_SECRET_KEY")
JWT_ALGORITHM = os.environ.get("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.environ.get("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))

if not JWT_SECRET_KEY:
    logger.warning("⚠️ No JWT_SECRET_KEY found - using an insecure development key")
    JWT_SECRET_KEY = "dev-insecure-secret"

# Rating catalog shape. Changing these requires a data migration.
RATING_CRITERIA_COUNT = 5
MIN_RATING_VALUE = 1
MAX_RATING_VALUE = 5


def get_cors_origins():
    """Allowed CORS origins from CORS_ORIGINS, defaulting to the local frontend."""
    cors_origins_env = os.environ.get("CORS_ORIGINS")
    if cors_origins_env:
        return [origin.strip() for origin in cors_origins_env.split(",")]
    return ["http://localhost:3000", "http://127.0.0.1:3000"]


def get_version_info():
    """Get deployment version information."""
    git_commit = os.environ.get("GIT_COMMIT_SHA")
    if not git_commit:
        try:
            if os.path.exists(".git_commit"):
                with open(".git_commit", "r") as f:
                    git_commit = f.read().strip()
        except OSError as e:
            logger.warning(f"Could not read .git_commit: {e}")

    if not git_commit:
        git_commit = "unknown"

    build_time = os.environ.get("BUILD_TIME", "unknown")
    env = os.environ.get("ENV", os.environ.get("ENVIRONMENT", "development"))

    return {
        "git_commit": git_commit,
        "build_time": build_time,
        "environment": env
    }
