import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from jobboard.core.config import settings
from jobboard.core.database import Database
from jobboard.core.exceptions import register_exception_handlers
from jobboard.core.logging_config import setup_logging
from jobboard.core.storage import create_storage
from jobboard.api.endpoints import applications, dashboard, health, jobs

setup_logging(settings.LOG_LEVEL, json_logs=settings.JSON_LOGS)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.

    The database and upload storage are created here and kept on
    ``app.state``. Anything already placed there (tests do this) is reused
    and left for its owner to dispose.
    """
    # Startup
    logger.info(f"Starting up {settings.PROJECT_NAME} ({settings.ENVIRONMENT})...")

    owns_database = getattr(app.state, "database", None) is None
    if owns_database:
        app.state.database = Database(settings.DATABASE_URL)
        if settings.AUTO_CREATE_TABLES:
            logger.info("Creating database tables...")
            app.state.database.create_tables()

    if getattr(app.state, "storage", None) is None:
        app.state.storage = create_storage()
    logger.info(f"Storing CV uploads in {app.state.storage.base_dir}")

    yield

    # Shutdown
    logger.info(f"Shutting down {settings.PROJECT_NAME}...")
    if owns_database:
        app.state.database.dispose()
        app.state.database = None


app = FastAPI(
    title=settings.PROJECT_NAME,
    version="1.0.0",
    description="Job listings, applications with CV upload, and an employer dashboard",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include routers
app.include_router(jobs.router, prefix=settings.API_PREFIX)
app.include_router(applications.router, prefix=settings.API_PREFIX)
app.include_router(dashboard.router, prefix=settings.API_PREFIX)
app.include_router(health.router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.is_development,
        log_level=settings.LOG_LEVEL.lower()
    )
