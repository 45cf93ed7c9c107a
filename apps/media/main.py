"""
Media API

Admin-only file uploads for images and assets referenced from section content.
Files are written to MEDIA_DIR and served back under MEDIA_BASE_URL.
"""
import os
import logging
from contextlib import asynccontextmanager
from uuid import uuid4

import aiofiles
import aiofiles.os
from fastapi import FastAPI, APIRouter, Depends, HTTPException, UploadFile, File
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from apps.shared.database import get_db, Base, engine
from apps.shared.auth import get_api_key
from apps.shared.cors import setup_cors
from apps.shared.errors import log_and_sanitize_error, register_error_handlers
from apps.shared.security_headers import setup_security_headers
from apps.media.models import Media

logger = logging.getLogger(__name__)

# Upload configuration
MEDIA_DIR = os.getenv("MEDIA_DIR", "./uploads")
ALLOWED_TYPES = {
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/gif",
    "image/webp",
    "image/svg+xml",
    "application/pdf",
    "text/plain",
    "text/css",
    "text/javascript",
    "application/javascript",
}
MAX_FILE_SIZE = 10 * 1024 * 1024  # 10 MB


class MediaResponse(BaseModel):
    id: int
    filename: str
    original_name: str
    mime_type: str
    size: int
    url: str
    created_at: str | None = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    Base.metadata.create_all(bind=engine)
    yield


app = FastAPI(
    title="Media API",
    version="1.0.0",
    description="File uploads for portfolio content",
    docs_url="/media/docs",
    openapi_url="/media/openapi.json",
    lifespan=lifespan,
)

setup_cors(app)
setup_security_headers(app)
register_error_handlers(app)

router = APIRouter(prefix="/media", tags=["media"])


def stored_filename(original_name: str) -> str:
    """Unique on-disk name that keeps the original extension."""
    _, ext = os.path.splitext(os.path.basename(original_name or ""))
    ext = ext.lower() if ext[1:].isalnum() else ""
    return f"{uuid4().hex}{ext}"


@router.post("/upload", response_model=MediaResponse, status_code=201)
async def upload_file(
    file: UploadFile = File(...),
    api_key: str = Depends(get_api_key),
    db: Session = Depends(get_db),
):
    """
    Upload a single file.
    Returns the stored record including the public URL to put in section content.
    """
    # Validate file type
    if file.content_type not in ALLOWED_TYPES:
        raise HTTPException(
            status_code=400,
            detail=f"File type {file.content_type} is not allowed",
        )

    # Read file and check size
    contents = await file.read()
    if not contents:
        raise HTTPException(status_code=400, detail="No file uploaded")
    if len(contents) > MAX_FILE_SIZE:
        raise HTTPException(
            status_code=400,
            detail=f"File too large. Max size: {MAX_FILE_SIZE // (1024*1024)} MB",
        )

    filename = stored_filename(file.filename)
    filepath = os.path.join(MEDIA_DIR, filename)

    # Ensure upload directory exists
    os.makedirs(MEDIA_DIR, exist_ok=True)

    async with aiofiles.open(filepath, "wb") as f:
        await f.write(contents)

    media = Media(
        filename=filename,
        original_name=file.filename or filename,
        mime_type=file.content_type,
        size=len(contents),
        path=filepath,
    )
    try:
        db.add(media)
        db.commit()
        db.refresh(media)
    except SQLAlchemyError as e:
        db.rollback()
        # Don't leave orphaned files behind
        await aiofiles.os.remove(filepath)
        sanitized_msg, _ = log_and_sanitize_error(e, "File upload", "Failed to upload file.")
        raise HTTPException(status_code=500, detail=sanitized_msg)

    logger.info(f"Uploaded file: {filename} ({media.mime_type}, {media.size} bytes)")
    return media.to_dict()


@router.get("/files", response_model=list[MediaResponse])
def list_files(
    api_key: str = Depends(get_api_key),
    db: Session = Depends(get_db),
):
    """List uploaded files, newest first."""
    files = db.query(Media).order_by(Media.created_at.desc(), Media.id.desc()).all()
    return [media.to_dict() for media in files]


@router.delete("/files/{media_id}")
async def delete_file(
    media_id: int,
    api_key: str = Depends(get_api_key),
    db: Session = Depends(get_db),
):
    """Delete an uploaded file and its record."""
    media = db.query(Media).filter(Media.id == media_id).first()
    if not media:
        raise HTTPException(status_code=404, detail="File not found")

    path = media.path
    try:
        db.delete(media)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        # Record still points at the file, so leave it on disk
        sanitized_msg, _ = log_and_sanitize_error(e, "File delete", "Failed to delete file.")
        raise HTTPException(status_code=500, detail=sanitized_msg)

    if os.path.exists(path):
        await aiofiles.os.remove(path)
    else:
        logger.warning(f"File for media {media_id} was already missing: {path}")

    return {"message": "File deleted successfully"}


app.include_router(router)

os.makedirs(MEDIA_DIR, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=MEDIA_DIR), name="uploads")
