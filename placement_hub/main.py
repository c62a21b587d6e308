"""
Placement Hub - Main Application

FastAPI backend with:
- In-memory store as the live working set (single writer)
- SQLAlchemy snapshot persistence (SQLite by default)
- JWT actor identity issued by an external authenticator

Run: uvicorn placement_hub.main:app --reload
"""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from placement_hub.api.routes import api_router
from placement_hub.core.config import get_settings
from placement_hub.core.errors import PlacementError
from placement_hub.db.database import get_db_session, init_db, test_database_connection
from placement_hub.services.placement_service import get_placement_service

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Placement Hub",
    description="""
    Internship placement marketplace.

    ## Features
    - **Students**: Browse eligible internships, apply (max 3 active), accept one offer
    - **Companies**: Post internships (max 5 active), review applications
    - **Career Center Staff**: Approve reps and postings, decide withdrawal requests

    ## Rules
    - Accepting an offer withdraws every other active application
    - Approved withdrawal of an accepted placement frees its slot
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS middleware (allow all for development)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_router, prefix="/api")


@app.exception_handler(PlacementError)
async def placement_error_handler(request: Request, exc: PlacementError):
    """Domain refusals become JSON with their own status code."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "code": exc.code, "context": exc.context},
    )


# Startup event
@app.on_event("startup")
async def startup_event():
    """Restore the last snapshot when configured to."""
    if not settings.load_on_startup:
        return
    init_db()
    with get_db_session() as db:
        counts = get_placement_service().load(db)
    logger.info("Loaded snapshot on startup: %s", counts)


@app.on_event("shutdown")
async def shutdown_event():
    if not settings.persist_on_shutdown:
        return
    init_db()
    with get_db_session() as db:
        counts = get_placement_service().save(db)
    logger.info("Saved snapshot on shutdown: %s", counts)


@app.get("/", tags=["Health"])
async def root():
    return {"status": "healthy", "app": "Placement Hub"}


@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check."""
    return {
        "status": "healthy",
        "database": "connected" if test_database_connection() else "disconnected",
        "store": get_placement_service().store.counts(),
    }
