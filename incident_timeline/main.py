"""FastAPI application entry point."""

import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from incident_timeline.config import settings
from incident_timeline.routes import admin, auth, files, pages, submissions, timeline
from incident_timeline.services.auth import auth_events

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Incident Timeline",
    description="Moderated public timeline of an incident, with evidence submissions",
    version="0.1.0",
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(timeline.router)
app.include_router(submissions.router)
app.include_router(auth.router)
app.include_router(admin.router)
app.include_router(pages.router)

# Session-change subscription, registered at startup
_unsubscribe_auth = None


def log_auth_change(event: str, session) -> None:
    """Record moderator sign-ins and sign-outs."""
    logger.info(f"Auth state changed: {event} for {session.email} (session {session.session_id})")


def run_migrations() -> None:
    """Create the schema with Alembic unless the tables already exist."""
    import sqlalchemy

    from incident_timeline.database import engine

    try:
        table_exists = sqlalchemy.inspect(engine).has_table("evidence")

        if table_exists:
            logger.info("Database tables already exist, skipping migrations")
        else:
            logger.info("Running database migrations...")
            from alembic import command
            from alembic.config import Config

            alembic_cfg = Config(os.path.join(os.path.dirname(os.path.dirname(__file__)), "alembic.ini"))
            command.upgrade(alembic_cfg, "head")
            logger.info("Database migrations completed successfully")
    except Exception as e:
        logger.error(f"Startup database check/migration error: {e}")
        logger.info("Continuing startup - assuming database is ready")


def bootstrap_moderator() -> None:
    """Create the moderator account named in settings, if any."""
    if not (settings.ADMIN_EMAIL and settings.ADMIN_PASSWORD):
        return

    from sqlalchemy.exc import SQLAlchemyError

    from incident_timeline.database import SessionLocal
    from incident_timeline.services.auth import ensure_moderator

    db = SessionLocal()
    try:
        ensure_moderator(db, settings.ADMIN_EMAIL, settings.ADMIN_PASSWORD)
    except SQLAlchemyError as e:
        logger.error(f"Could not create moderator {settings.ADMIN_EMAIL}: {e}")
    finally:
        db.close()


@app.on_event("startup")
async def startup_event():
    """Prepare the database and subscribe to session changes."""
    global _unsubscribe_auth
    logger.info("Starting application...")

    run_migrations()
    bootstrap_moderator()

    _unsubscribe_auth = auth_events.subscribe(log_auth_change)
    logger.info("Subscribed to auth state changes")


@app.on_event("shutdown")
async def shutdown_event():
    """Tear down the session-change subscription."""
    global _unsubscribe_auth
    logger.info("Shutting down application...")

    if _unsubscribe_auth is not None:
        _unsubscribe_auth()
        _unsubscribe_auth = None
        logger.info("Unsubscribed from auth state changes")


@app.get("/health")
def health():
    """Health check endpoint."""
    return {"status": "healthy"}


# Serve uploaded evidence files unless they live on another origin
if settings.PUBLIC_BASE_URL.startswith("/"):
    app.include_router(files.router)
