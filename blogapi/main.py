"""FastAPI application entry point."""
import threading
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from blogapi.config import settings
from blogapi.database import init_db
from blogapi.logging_config import setup_logging, get_logger
from blogapi.services.seed_admin import seed_admin_user
from blogapi.middleware.errors import register_exception_handlers
from blogapi.middleware.logging_middleware import LoggingMiddleware
from blogapi.routes import (
    health,
    auth,
    users,
    posts,
    comments,
    events,
    books,
)


logger = get_logger("blogapi.main")


def _run_startup() -> None:
    """Run DB init and admin seed in background (allows app to accept connections immediately)."""
    try:
        init_db()
        logger.info("Database initialized")
        Path(settings.upload_dir).mkdir(parents=True, exist_ok=True)
        try:
            if seed_admin_user():
                logger.info("Admin user seeded")
        except Exception as e:
            logger.warning("Admin seed failed (non-fatal): %s", e)
    except Exception as e:
        logger.exception("Startup failed: %s", e)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger.info("Starting %s (%s)", settings.app_name, settings.environment)
    # Uvicorn does not accept connections until lifespan yields.
    thread = threading.Thread(target=_run_startup, daemon=True)
    thread.start()
    yield
    logger.info("Shutting down")


app = FastAPI(
    title=settings.app_name,
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(LoggingMiddleware)
origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
register_exception_handlers(app)

app.include_router(health.router, prefix=settings.api_prefix)
app.include_router(auth.router, prefix=settings.api_prefix)
app.include_router(users.router, prefix=settings.api_prefix)
app.include_router(posts.router, prefix=settings.api_prefix)
app.include_router(comments.router, prefix=settings.api_prefix)
app.include_router(events.router, prefix=settings.api_prefix)
app.include_router(books.router, prefix=settings.api_prefix)


@app.get("/")
async def root():
    """Root endpoint."""
    return {"message": settings.app_name, "docs": "/docs"}
