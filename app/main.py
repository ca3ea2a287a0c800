# /studio-backend/app/main.py

# --- Core FastAPI Imports ---
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# --- Configuration, Logging and Errors ---
from .core.config import get_settings
from .core.exceptions import StudioError, studio_exception_handler
from .core.logging import setup_logging

# --- Persistence ---
from .db.base import Base
from .db.database import engine

# --- Application-specific Router Imports ---
from .routers import classes_router, sessions_router, students_router

settings = get_settings()
logger = logging.getLogger(__name__)


# --- Application Lifecycle Management ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    # This code runs ONCE when the application starts up.
    setup_logging(settings)
    if settings.create_tables:
        Base.metadata.create_all(bind=engine)
    logger.info(f"Studio backend {settings.app_version} started ({settings.environment})")
    yield
    # This code runs ONCE when the application shuts down.
    engine.dispose()


# --- FastAPI Application Instance Creation ---
app = FastAPI(
    title="Studio Registration API",
    description="Classes, sessions and capacity-checked registrations for a yoga studio.",
    version=settings.app_version,
    lifespan=lifespan
)

# --- Middleware Configuration ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Error Handling ---
app.add_exception_handler(StudioError, studio_exception_handler)

# --- API Router Inclusion ---
app.include_router(sessions_router.router, prefix="/api/sessions", tags=["Sessions"])
app.include_router(classes_router.router, prefix="/api/classes", tags=["Classes"])
app.include_router(students_router.router, prefix="/api/students", tags=["Students"])


# --- Root / Health Check Endpoint ---
@app.get("/", tags=["Health Check"])
async def read_root():
    """A simple health check endpoint to confirm the API is online."""
    return {"status": "Studio backend is running!", "version": app.version}
