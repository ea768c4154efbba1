"""
FastAPI application factory for the bed assignment API.
"""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from bedassign.api.sessions import SessionManager
from bedassign.api.routers import assignment, colonies, settings
from bedassign.core.config import AssignmentConfig

# Load .env from the project root first, then CWD
_project_root = Path(__file__).resolve().parents[3]  # src/bedassign/api/app.py → project root
load_dotenv(_project_root / ".env")
load_dotenv(Path.cwd() / ".env")

logger = logging.getLogger(__name__)


def _load_default_config() -> AssignmentConfig:
    """Read BEDASSIGN_SETTINGS_PATH if set; fall back to defaults."""
    path = os.environ.get("BEDASSIGN_SETTINGS_PATH")
    if not path:
        return AssignmentConfig()
    try:
        return AssignmentConfig.from_json(Path(path).read_text(encoding="utf-8"))
    except (OSError, ValueError, TypeError):
        logger.warning("Could not load settings from %s, using defaults", path, exc_info=True)
        return AssignmentConfig()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    application = FastAPI(
        title="Bed Assign API",
        description="REST API for the bed assignment engine",
        version="0.1.0",
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.state.session_manager = SessionManager(default_config=_load_default_config())

    application.include_router(colonies.router, prefix="/api/colonies", tags=["colonies"])
    application.include_router(settings.router, prefix="/api/settings", tags=["settings"])
    application.include_router(assignment.router, prefix="/api/assignment", tags=["assignment"])

    @application.get("/api/health")
    def health_check():
        return {"status": "ok"}

    return application


app = create_app()
