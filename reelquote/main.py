from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging
import os

from .config import settings
from .database import engine, Base
from .routers import export, projects, quote, templates

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("reelquote")

# Create tables (handles new tables but won't add columns to existing ones)
Base.metadata.create_all(bind=engine)

BASE_REVISION = "5c1f0a9b7d21"


def _run_migrations():
    """Run pending Alembic migrations on startup.

    Databases created by Base.metadata.create_all() before Alembic tracked
    them get the base migration stamped first, so it isn't replayed.
    """
    try:
        from alembic.config import Config
        from alembic import command
        from sqlalchemy import inspect

        alembic_ini = os.path.join(os.path.dirname(__file__), "..", "alembic.ini")
        if not os.path.exists(alembic_ini):
            logger.info("alembic.ini not found, skipping migrations")
            return

        alembic_cfg = Config(alembic_ini)
        alembic_cfg.set_main_option("sqlalchemy.url", settings.DATABASE_URL)

        insp = inspect(engine)
        has_alembic = "alembic_version" in insp.get_table_names()
        has_projects = "projects" in insp.get_table_names()

        if not has_alembic and has_projects:
            logger.info("Stamping base migration %s (tables already exist)", BASE_REVISION)
            command.stamp(alembic_cfg, BASE_REVISION)

        logger.info("Running pending Alembic migrations...")
        command.upgrade(alembic_cfg, "head")
        logger.info("Migrations complete")

    except Exception as e:
        # Never let migration errors prevent app startup
        logger.warning(f"Alembic migration warning: {e}")


app = FastAPI(
    title="ReelQuote",
    description="Quoting tool for video production projects",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API routes
app.include_router(quote.router, prefix="/api")
app.include_router(projects.router, prefix="/api")
app.include_router(export.router, prefix="/api")
app.include_router(templates.router, prefix="/api")


@app.get("/health")
def health():
    return {"status": "ok", "app": "reelquote"}


@app.on_event("startup")
def auto_migrate():
    """Run pending Alembic migrations on startup."""
    _run_migrations()
