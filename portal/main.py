"""
Study Abroad Portal - Main Application

FastAPI backend with:
- PostgreSQL (SQLAlchemy ORM) for users, profiles, programs, applications,
  documents, tasks and commissions
- Bearer session tokens
- Role-dependent dashboards (student / agent / university / admin)

Run: uvicorn portal.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from portal.api.routes import api_router
from portal.core.config import get_settings
from portal.core.logging_config import setup_logging
from portal.db.database import init_schema, check_database_connection

settings = get_settings()
setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create missing tables on startup."""
    init_schema()
    logger.info("Database schema ready")
    yield


# Create FastAPI app
app = FastAPI(
    title="Study Abroad Portal",
    description="""
    Multi-role study-abroad application portal.

    ## Features
    - **Authentication**: session tokens, role switching
    - **Profiles**: student, agent and university profiles
    - **Universities**: program catalogue and search by country, field and budget
    - **Applications**: create and track applications through their statuses
    - **Documents & Tasks**: per-user document registry and to-do list
    - **Commissions**: agent earnings per application
    - **Statistics**: role-dependent dashboard counters
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Every error body is {"message": ...}
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"loc": [str(part) for part in err.get("loc", ())], "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]
    logger.info("Rejected %s %s: %s", request.method, request.url.path, errors)
    return JSONResponse(status_code=400, content={"message": "Invalid request", "errors": errors})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


# Include API routes
app.include_router(api_router, prefix="/api")


@app.get("/health", tags=["Health"])
def health_check():
    """Detailed health check."""
    return {
        "status": "healthy",
        "database": "connected" if check_database_connection() else "disconnected",
    }
