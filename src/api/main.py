"""FastAPI application entry point."""

import os
import sys
import logging
import tomllib
from contextlib import asynccontextmanager
from pathlib import Path
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

# Load environment variables from .env file
# Must be called before importing modules that read env vars (cookie and database settings)
load_dotenv()

# main.py is at src/api/main.py, src is two levels up
_src_path = Path(__file__).parent.parent
sys.path.insert(0, str(_src_path))

from api.errors import register_error_handlers
from api.gql.schema import create_graphql_router
from api.routes import auth, health, tasks
from adapter.sql.connection import Database
from adapter.sql.session_store import SqlSessionStore
from services.session_service import purge_expired_sessions
from utils.logging import setup_structured_logging

# Set up structured JSON logging
setup_structured_logging()

logger = logging.getLogger(__name__)

# Read version from pyproject.toml (single source of truth)
_project_root = _src_path.parent
with open(_project_root / "pyproject.toml", "rb") as f:
    VERSION = tomllib.load(f)["project"]["version"]

SERVICE_NAME = "Taskdesk API"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: the database handle lives exactly as long as the process."""
    db = Database()
    db.create_all()
    purge_expired_sessions(SqlSessionStore(db))
    app.state.db = db
    logger.info("Database ready", extra={"dialect": db.engine.dialect.name})

    yield  # App runs here

    app.state.db = None
    db.dispose()
    logger.info("Database connections closed")


# Create FastAPI app
app = FastAPI(
    title=SERVICE_NAME,
    description="Session-authenticated task management over REST and GraphQL",
    version=VERSION,
    lifespan=lifespan,
)

# The session travels in a cookie, so credentials must be allowed for real origins.
# Browsers refuse credentials with a wildcard origin.
cors_origins_env = os.getenv("CORS_ORIGINS", "http://localhost:3000")

if cors_origins_env == "*":
    cors_origins = ["*"]
    allow_credentials = False
    logger.warning(
        "CORS configured with wildcard origin ('*'); session cookies will not be sent cross-origin. "
        "Set CORS_ORIGINS to specific domains (e.g., 'https://app.example.com')"
    )
else:
    cors_origins = [origin.strip() for origin in cors_origins_env.split(",")]
    allow_credentials = True
    logger.info(f"CORS configured with specific origins: {cors_origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=allow_credentials,
    allow_methods=["*"],
    allow_headers=["Content-Type", "Authorization"],
)

register_error_handlers(app)

# Register routes
app.include_router(auth.router)
app.include_router(tasks.router)
app.include_router(health.router)
app.include_router(create_graphql_router(), prefix="/graphql")


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": SERVICE_NAME,
        "version": VERSION,
        "status": "running"
    }


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 8000))
    # Application logs go through structured logging; uvicorn's access log would duplicate them
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=port,
        access_log=False
    )
