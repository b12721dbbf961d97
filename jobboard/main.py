"""
Job Board API - Main Application

FastAPI backend with:
- PostgreSQL through the SQLAlchemy ORM
- JWT authentication with ADMIN / HR / APPLICANT roles
- Jobs, applications, applicant profiles, notifications and messaging

Run: uvicorn jobboard.main:app --reload
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from jobboard import __version__
from jobboard.api.routes import api_router
from jobboard.core.config import get_settings
from jobboard.core.http import register_exception_handlers
from jobboard.core.logging import configure_logging
from jobboard.db.database import check_database_connection, init_db

settings = get_settings()
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    init_db()
    logger.info("application_started", version=__version__)
    yield
    logger.info("application_stopped")


app = FastAPI(
    title="Job Board API",
    description="""
    A role-scoped job board.

    ## Features
    - **Authentication**: signup with email verification, JWT login
    - **Applicants**: profile, education, experience, skills, job applications
    - **HR / Admin**: job postings, categories, application review, dashboard
    - **Messaging**: applicant-organization conversations with read receipts
    - **Notifications**: application status updates
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include API routes
app.include_router(api_router, prefix="/api")


@app.get("/health", tags=["Health"])
async def health_check():
    """Liveness plus database reachability."""
    database_up = check_database_connection()
    return {
        "status": "healthy" if database_up else "degraded",
        "database": "connected" if database_up else "disconnected",
    }
