"""
Faculty Feedback API — main entry point.
Creates FastAPI app, sets up lifespan (indexes, rating catalog), CORS,
error handling, registers all routes.
"""

from fastapi import FastAPI, APIRouter, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from facultyfeedback.config import logger, get_version_info, get_cors_origins
from facultyfeedback.database import client, db, ensure_indexes
from facultyfeedback.errors import FeedbackError
from facultyfeedback.routes import register_all_routes
from facultyfeedback.services.catalog import RatingCatalog


async def lifespan(app: FastAPI):
    """Application lifespan manager - indexes and catalog on startup"""
    logger.info("🚀 FastAPI app starting up...")
    await ensure_indexes(db)

    catalog = RatingCatalog(db)
    try:
        criteria = await catalog.list_active_criteria()
        app.state.rating_catalog = catalog
        logger.info(f"✅ Rating catalog loaded: {[c.criterion_id for c in criteria]}")
    except FeedbackError as e:
        app.state.rating_catalog = None
        logger.error(f"❌ {e.detail}. Run scripts/seed_rating_criteria.py")
    logger.info("=" * 60)

    yield

    logger.info("🛑 FastAPI app shutting down...")
    client.close()


# Create the main app with lifespan
app = FastAPI(title="Faculty Feedback API", lifespan=lifespan)

# Create a router with the /api prefix
api_router = APIRouter(prefix="/api")


@api_router.get("/version")
async def get_version():
    """Public version endpoint for deployment verification"""
    return get_version_info()


# Register all route modules on the api_router
register_all_routes(api_router)

# Include the api_router on the app
app.include_router(api_router)


@app.get("/health")
async def root_health_check():
    """Health check for liveness/readiness probes"""
    return {"status": "healthy", "service": "Faculty Feedback API"}


# ============== ERRORS ==============

@app.exception_handler(FeedbackError)
async def feedback_error_handler(request: Request, exc: FeedbackError):
    """Rejections carry one reason plus a machine-readable code"""
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "error_code": exc.error_code, **exc.extra},
    )


# ============== CORS ==============

app.add_middleware(
    CORSMiddleware,
    allow_credentials=True,
    allow_origins=get_cors_origins(),
    allow_methods=["*"],
    allow_headers=["*"],
)
