"""
Portfolio Content API

Public endpoints for the portfolio page and API-key protected admin endpoints
for managing sections, site settings and backups.
"""
import os
import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, APIRouter, Body, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from apps.shared.database import get_db, Base, engine, SessionLocal, check_db_connection
from apps.shared.auth import get_api_key
from apps.shared.cors import setup_cors
from apps.shared.errors import error_response, register_error_handlers
from apps.shared.security_headers import setup_security_headers
from apps.portfolio.backup import export_snapshot, import_snapshot, EXPORT_FILENAME
from apps.portfolio.exceptions import PortfolioError, CorruptData, StorageError
from apps.portfolio.ordering import reorder, compact
from apps.portfolio.rendering import render_page
from apps.portfolio.repository import SectionRepository, SiteSettingsRepository
from apps.portfolio.schemas import (
    SectionCreate,
    SectionUpdate,
    SectionResponse,
    ReorderRequest,
    ReorderResponse,
    MessageResponse,
    ImportResponse,
)
from apps.portfolio.seed import seed_defaults

logger = logging.getLogger(__name__)
logging.basicConfig(level=logging.INFO)

SEED_DEFAULTS = os.getenv("SEED_DEFAULTS", "true").lower() not in ("0", "false", "no")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create tables
    Base.metadata.create_all(bind=engine)
    if SEED_DEFAULTS:
        db = SessionLocal()
        try:
            seed_defaults(db)
        finally:
            db.close()
    yield


app = FastAPI(
    title="Portfolio Content API",
    version="1.0.0",
    description="Ordered portfolio sections, site settings and backup/restore",
    docs_url="/api/content/docs",
    openapi_url="/api/content/openapi.json",
    lifespan=lifespan,
)

setup_cors(app)
setup_security_headers(app)
register_error_handlers(app)


@app.exception_handler(PortfolioError)
async def portfolio_exception_handler(request: Request, exc: PortfolioError):
    if isinstance(exc, (CorruptData, StorageError)):
        logger.error("%s on %s: %s", type(exc).__name__, request.url.path, exc.message)
    return error_response(
        message=exc.message,
        category=exc.category,
        status_code=exc.status_code,
    )


router = APIRouter(prefix="/api/content", tags=["content"])


# ──────────────────────────────────────────────────────────────────────────────
# Public endpoints (no auth required)
# ──────────────────────────────────────────────────────────────────────────────

@router.get("/health")
def health():
    """Health check endpoint."""
    db_connected = check_db_connection()
    return {
        "status": "ok" if db_connected else "degraded",
        "service": "portfolio",
        "database": "connected" if db_connected else "disconnected",
    }


@router.get("/sections", response_model=list[SectionResponse])
def list_public_sections(db: Session = Depends(get_db)):
    """List visible sections in page order."""
    return SectionRepository(db).list_public()


@router.get("/sections/{section_id}", response_model=SectionResponse)
def get_section(section_id: int, db: Session = Depends(get_db)):
    """Get a single section by id."""
    return SectionRepository(db).get(section_id)


@router.get("/settings", response_model=dict[str, Any])
def get_settings(db: Session = Depends(get_db)):
    """Get all site settings as a {key: value} map."""
    return SiteSettingsRepository(db).get_all()


@router.get("/page")
def get_page(db: Session = Depends(get_db)):
    """Settings plus rendered visible sections, ready for the public page."""
    return render_page(db)


# ──────────────────────────────────────────────────────────────────────────────
# Admin endpoints (API key required)
# ──────────────────────────────────────────────────────────────────────────────

@router.get("/admin/sections", response_model=list[SectionResponse])
def list_all_sections(
    api_key: str = Depends(get_api_key),
    db: Session = Depends(get_db),
):
    """List all sections including hidden ones (admin only)."""
    return SectionRepository(db).list_all()


@router.post("/admin/sections", response_model=SectionResponse, status_code=201)
def create_section(
    section_data: SectionCreate,
    api_key: str = Depends(get_api_key),
    db: Session = Depends(get_db),
):
    """Create a new section, appended at the end of the page."""
    return SectionRepository(db).create(**section_data.model_dump())


@router.put("/admin/sections/reorder", response_model=ReorderResponse)
def reorder_sections(
    order: ReorderRequest,
    api_key: str = Depends(get_api_key),
    db: Session = Depends(get_db),
):
    """Set the page order from the full top-to-bottom id sequence."""
    count = reorder(db, order.section_ids)
    return {"message": "Section order updated successfully", "count": count}


@router.post("/admin/sections/compact", response_model=ReorderResponse)
def compact_sections(
    api_key: str = Depends(get_api_key),
    db: Session = Depends(get_db),
):
    """Renumber sections to 1..N, closing gaps left by deletes."""
    count = compact(db)
    return {"message": "Section order compacted", "count": count}


@router.put("/admin/sections/{section_id}", response_model=SectionResponse)
def update_section(
    section_id: int,
    section_data: SectionUpdate,
    api_key: str = Depends(get_api_key),
    db: Session = Depends(get_db),
):
    """Update an existing section. Only provided fields change."""
    update_data = section_data.model_dump(exclude_unset=True)
    return SectionRepository(db).update(section_id, **update_data)


@router.delete("/admin/sections/{section_id}", response_model=MessageResponse)
def delete_section(
    section_id: int,
    api_key: str = Depends(get_api_key),
    db: Session = Depends(get_db),
):
    """Delete a section."""
    SectionRepository(db).delete(section_id)
    return {"message": "Section deleted successfully"}


@router.put("/admin/settings", response_model=dict[str, Any])
def update_settings(
    values: dict[str, Any] = Body(...),
    api_key: str = Depends(get_api_key),
    db: Session = Depends(get_db),
):
    """Upsert site settings; returns the full settings map."""
    return SiteSettingsRepository(db).update(values)


@router.get("/admin/export")
def export_data(
    api_key: str = Depends(get_api_key),
    db: Session = Depends(get_db),
):
    """Download a backup of all sections and settings."""
    return JSONResponse(
        content=export_snapshot(db),
        headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'},
    )


@router.post("/admin/import", response_model=ImportResponse)
def import_data(
    snapshot: Any = Body(...),
    api_key: str = Depends(get_api_key),
    db: Session = Depends(get_db),
):
    """Replace ALL sections and settings with a backup snapshot."""
    counts = import_snapshot(db, snapshot)
    return {"message": "Data imported successfully", **counts}


app.include_router(router)
