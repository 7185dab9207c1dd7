"""Main FastAPI application."""
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api import admin, auth, pricing, profiles, suggestions, updates, user
from app.config import settings
from app.database import init_db
from app.services.suggestions import SuggestionService
from app.utils.cache import TTLCache
from app.utils.exceptions import register_exception_handlers
from app.utils.logger import logger

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables (when enabled) and the shared suggestion service."""
    if settings.auto_create_tables:
        init_db()
    app.state.suggestion_service = SuggestionService(
        settings,
        TTLCache(settings.suggestion_cache_ttl_seconds),
    )
    logger.info(f"Opticon API started ({settings.environment})")
    yield
    logger.info("Opticon API shutting down")


app = FastAPI(
    title="Opticon API",
    description="Backend API for Opticon business monitoring subscriptions",
    version=VERSION,
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include routers
app.include_router(auth.router)
app.include_router(pricing.router)
app.include_router(profiles.router)
app.include_router(user.router)
app.include_router(updates.router)
app.include_router(suggestions.router)
app.include_router(admin.router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Opticon API",
        "version": VERSION,
        "docs": "/docs",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


if __name__ == "__main__":
    uvicorn.run("app.main:app", host=settings.api_host, port=settings.api_port)
