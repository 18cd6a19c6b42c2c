"""
Main FastAPI application.

This is the entry point for the API server.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from talentflow.core.config import settings
from talentflow.core.logging import setup_logging
from talentflow.errors import register_error_handlers
from talentflow.pipeline.transitions import CandidateWriteLocks
from talentflow.routers import apply, health, jobs, pipeline

# UI routes
from talentflow.ui.routes import apply as ui_apply
from talentflow.ui.routes import jobs as ui_jobs
from talentflow.ui.routes import pipeline as ui_pipeline


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for the FastAPI app.

    On startup logging is configured and the shared per-candidate write locks
    are created.
    """
    setup_logging()
    app.state.write_locks = CandidateWriteLocks()
    logger.info("Starting %s...", settings.APP_NAME)

    yield

    logger.info("Shutting down %s...", settings.APP_NAME)


def create_app() -> FastAPI:
    application = FastAPI(
        title=settings.APP_NAME,
        description="Recruiting pipeline: jobs, candidates and the hiring board",
        version="0.1.0",
        lifespan=lifespan,
    )
    # Also set here so the app works when the lifespan is not run
    application.state.write_locks = CandidateWriteLocks()

    register_error_handlers(application)

    # Include routers (API endpoints)
    application.include_router(health.router, tags=["Health"])
    application.include_router(pipeline.router)
    application.include_router(jobs.router)
    application.include_router(apply.router)

    # UI routes
    application.include_router(ui_pipeline.router)
    application.include_router(ui_jobs.router)
    application.include_router(ui_apply.router)

    @application.get("/", include_in_schema=False)
    async def root():
        """Root endpoint - redirects to the pipeline board."""
        return RedirectResponse(url="/ui/pipeline", status_code=303)

    return application


app = create_app()
