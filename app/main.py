"""Main FastAPI application."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.api import auth_router, users_router
from app.api.errors import install_error_handlers
from app.config import get_settings
from app.database import dispose_engine
from app.middleware import install_middleware

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info("Starting CRM identity service...")

    yield

    # Runs after the server has drained in-flight requests
    logger.info("Shutting down...")
    await dispose_engine()
    logger.info("Database pool closed")


app = FastAPI(
    title="CRM API",
    description="""
## Authentication and user administration for the CRM backend

- **Auth**: username/password login issuing short-lived access tokens and
  longer-lived refresh tokens (HS256 JWT)
- **Users**: self-service profile, admin-only user CRUD and bulk delete

Send the access token as `Authorization: Bearer <token>`.
    """,
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

install_error_handlers(app)
install_middleware(app, request_timeout=settings.request_timeout_seconds)

# Include routers
app.include_router(auth_router)
app.include_router(users_router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "environment": settings.environment,
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=settings.server_port,
        timeout_graceful_shutdown=settings.shutdown_timeout_seconds,
    )
