"""
InternHub API - Main Application

FastAPI backend with:
- MongoDB for projects, internships, applications and profiles
- In-memory fallback when MongoDB is not configured or unreachable
- Skill-overlap recommendations
- Deduplicating sync of externally sourced internships

Run: uvicorn app.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app import __version__
from app.api.routes import api_router
from app.core.config import get_settings
from app.core.errors import NotFoundError, ValidationError
from app.core.logging import configure_logging
from app.db.mongodb import close_mongo_client
from app.services.opportunity_service import get_opportunity_service
from app.services.store import get_store_provider
from app.schemas.schemas import HealthResponse, MessageResponse

settings = get_settings()
configure_logging(settings.log_level)
logger = logging.getLogger("internhub.api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Pick the store on startup, release the Mongo client on shutdown."""
    provider = get_store_provider()
    logger.info("InternHub API started on the %s store", provider.active.name)
    yield
    close_mongo_client()


# Create FastAPI app
app = FastAPI(
    title="InternHub API",
    description="""
    Student collaboration platform backend.

    ## Features
    - **Projects**: List, filter, create and request to join
    - **Internships**: List, filter, post, apply and sync from aggregators
    - **Recommendations**: Rank listings by skill overlap
    - **Profiles**: Upsert user profiles

    ## Storage
    - MongoDB when MONGODB_URI is set and reachable
    - In-memory data otherwise (non-durable, single process)
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    debug=settings.debug,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Domain errors -> HTTP
@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=400, content={"error": exc.message})


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"error": exc.message})


@app.exception_handler(Exception)
async def internal_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "internal"})


# Include API routes
app.include_router(api_router)


@app.get("/", response_model=MessageResponse, tags=["Health"])
def root():
    return MessageResponse(message="Welcome to InternHub API", version=__version__)


@app.get("/health", response_model=HealthResponse, tags=["Health"])
def health_check():
    """Which store is active and whether MongoDB is connected."""
    return get_opportunity_service().health()
